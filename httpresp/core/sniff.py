"""
Content-type detection from a body prefix.

Reads a bounded look-ahead window from a stream, matches it against the
filetype signature database, and hands back a reader that replays the
look-ahead bytes so downstream consumers see the original stream.
"""

from __future__ import annotations

import inspect
import logging
from typing import NamedTuple

import filetype

from httpresp.core.protocol import BodyStream

logger = logging.getLogger(__name__)

# Longest prefix any filetype matcher inspects
HEADER_SIZE = 261

DEFAULT_CONTENT_TYPE = "application/octet-stream"


async def read_chunk(stream: BodyStream, size: int = -1) -> bytes:
    """Read from a sync or async byte stream."""
    data = stream.read(size)
    if inspect.isawaitable(data):
        data = await data
    return data


class PeekableReader:
    """
    Stream view that serves buffered look-ahead bytes before the source.

    Args:
        head: Bytes already consumed from ``stream``
        stream: The source stream, positioned right after ``head``
    """

    def __init__(self, head: bytes, stream: BodyStream) -> None:
        self._head = head
        self._stream = stream

    @property
    def head(self) -> bytes:
        """Look-ahead bytes not yet handed out."""
        return self._head

    async def read(self, size: int = -1) -> bytes:
        if self._head:
            if size is None or size < 0:
                data = self._head + await read_chunk(self._stream, -1)
                self._head = b""
                return data
            data, self._head = self._head[:size], self._head[size:]
            return data
        return await read_chunk(self._stream, size)


class SniffResult(NamedTuple):
    """Outcome of detect_content_type()."""

    reader: PeekableReader
    content_type: str
    error: Exception | None = None


async def _read_head(stream: BodyStream) -> tuple[bytes, Exception | None]:
    """Read up to HEADER_SIZE bytes. A stream ending early is not an error."""
    buf = bytearray()
    while len(buf) < HEADER_SIZE:
        try:
            chunk = await read_chunk(stream, HEADER_SIZE - len(buf))
        except (OSError, ValueError) as e:
            return bytes(buf), e
        if not chunk:
            break
        buf += chunk
    return bytes(buf), None


def match_content_type(head: bytes) -> str:
    """
    Match a byte prefix against known file signatures.

    Args:
        head: Leading bytes of the body

    Returns:
        The matched MIME type, or DEFAULT_CONTENT_TYPE when nothing matches
    """
    if not head:
        return DEFAULT_CONTENT_TYPE
    kind = filetype.guess(head)
    if kind is None or not kind.mime:
        return DEFAULT_CONTENT_TYPE
    return kind.mime


async def detect_content_type(stream: BodyStream) -> SniffResult:
    """
    Guess the MIME type of a stream without losing any of its bytes.

    Args:
        stream: Readable byte stream (sync or async)

    Returns:
        SniffResult whose reader yields the full original content. When
        the look-ahead read fails, ``error`` holds the exception and the
        content type is DEFAULT_CONTENT_TYPE.
    """
    head, error = await _read_head(stream)
    reader = PeekableReader(head, stream)
    if error is not None:
        logger.warning("Content sniffing read failed after %d bytes: %s", len(head), error)
        return SniffResult(reader, DEFAULT_CONTENT_TYPE, error)
    return SniffResult(reader, match_content_type(head))
