"""
Response writer: maps application outcomes onto an HTTP response sink.

Every write operation is terminal. Failures detected while preparing a
response (missing files, unserialisable values, unreadable streams) are
written through the error policy instead of being raised to the caller.
"""

from __future__ import annotations

import json
import logging
import os
from email.utils import formatdate
from http import HTTPStatus
from io import BytesIO
from typing import Any, MutableMapping

import aiofiles
import aiofiles.os
from pydantic_core import to_jsonable_python

from httpresp.core.config import Settings, get_settings
from httpresp.core.errors import get_default_error_handler
from httpresp.core.protocol import BodyStream, ErrorHandler, ResponseSink
from httpresp.core.sniff import detect_content_type, read_chunk

logger = logging.getLogger(__name__)

CORS_ALLOW_ORIGIN = "*"
CORS_ALLOW_HEADERS = "Origin, X-Requested-With, Content-Type, Accept"

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


class ResponseWriter:
    """
    Per-response writer bound to a single sink.

    Create one per request and drop it once the response is written;
    instances are not safe to share between concurrent requests.

    Args:
        sink: Transport-side response to write into
        error_handler: Policy for write_error(); None uses the
            process-wide default at call time
        cors: Attach permissive CORS headers; None takes the configured default
        settings: Settings override, mainly for tests
    """

    def __init__(
        self,
        sink: ResponseSink,
        *,
        error_handler: ErrorHandler | None = None,
        cors: bool | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._sink = sink
        self._error_handler = error_handler
        self._cors = settings.cors_enabled if cors is None else cors
        self._chunk_size = settings.copy_chunk_size

    @property
    def headers(self) -> MutableMapping[str, str]:
        """Headers of the underlying sink."""
        return self._sink.headers

    @property
    def cors(self) -> bool:
        return self._cors

    def set_error_handler(self, handler: ErrorHandler | None) -> None:
        """Replace the error policy for this writer only."""
        self._error_handler = handler

    def set_cors(self, enabled: bool) -> None:
        """Toggle CORS headers for subsequent writes."""
        self._cors = enabled

    def _set_cors_headers(self) -> None:
        if self._cors:
            self.headers["Access-Control-Allow-Origin"] = CORS_ALLOW_ORIGIN
            self.headers["Access-Control-Allow-Headers"] = CORS_ALLOW_HEADERS

    async def write_error(self, exc: BaseException) -> None:
        """Write an error response through the active error policy."""
        self._set_cors_headers()
        handler = self._error_handler or get_default_error_handler()
        await handler(self._sink, exc)

    async def write_unauthorized(self, realm: str) -> None:
        """Write a 401 challenging for HTTP Basic credentials."""
        self._set_cors_headers()
        body = HTTPStatus.UNAUTHORIZED.phrase.encode("utf-8")
        self.headers["WWW-Authenticate"] = f'Basic realm="{realm}"'
        self.headers["Content-Type"] = TEXT_CONTENT_TYPE
        self.headers["Content-Length"] = str(len(body))
        await self._sink.write_header(HTTPStatus.UNAUTHORIZED.value)
        await self._sink.write(body)

    async def write_file(self, status_code: int, path: str | os.PathLike[str]) -> None:
        """
        Stream a file from disk.

        Sets Last-Modified and Content-Length from the file's metadata.
        Open and stat failures are written as error responses.

        Args:
            status_code: HTTP status for a successful read
            path: Filesystem path
        """
        try:
            f = await aiofiles.open(path, mode="rb")
        except OSError as e:
            await self.write_error(e)
            return

        try:
            try:
                st = await aiofiles.os.stat(f.fileno())
            except OSError as e:
                await self.write_error(e)
                return

            self.headers["Last-Modified"] = formatdate(st.st_mtime, usegmt=True)
            self.headers["Content-Length"] = str(st.st_size)
            await self.copy(status_code, f)
        finally:
            await f.close()

    async def write_bytes(self, status_code: int, body: bytes) -> None:
        """Write an in-memory body; Content-Type is sniffed unless already set."""
        self.headers["Content-Length"] = str(len(body))
        await self.copy(status_code, BytesIO(body))

    async def write_json(self, status_code: int, value: Any) -> None:
        """
        Write a value as indented JSON.

        Values the json module cannot encode directly (pydantic models,
        dataclasses, datetimes, ...) go through pydantic's converter.
        Serialisation failures are written as error responses.

        Args:
            status_code: HTTP status code
            value: JSON-serialisable value
        """
        try:
            body = json.dumps(
                value,
                indent=2,
                ensure_ascii=False,
                allow_nan=False,
                default=to_jsonable_python,
            ).encode("utf-8")
        except (TypeError, ValueError) as e:
            logger.warning("Failed to serialize JSON response: %s", e)
            await self.write_error(e)
            return

        self.headers["Content-Type"] = JSON_CONTENT_TYPE
        self.headers["X-Content-Type-Options"] = "nosniff"
        self.headers["Content-Length"] = str(len(body))
        await self.copy(status_code, BytesIO(body))

    async def write_text(self, status_code: int, text: str) -> None:
        """Write a UTF-8 plain-text body."""
        body = text.encode("utf-8")
        self.headers["Content-Type"] = TEXT_CONTENT_TYPE
        self.headers["X-Content-Type-Options"] = "nosniff"
        self.headers["Content-Length"] = str(len(body))
        await self.copy(status_code, BytesIO(body))

    async def copy(self, status_code: int, body: BodyStream) -> None:
        """
        Write the status line, then stream ``body`` to the sink.

        When no Content-Type is set, the body's prefix is sniffed first.
        Only the sniff window is held in memory.

        Args:
            status_code: HTTP status code
            body: Readable byte stream, sync or async
        """
        self._set_cors_headers()

        if not self.headers.get("Content-Type"):
            result = await detect_content_type(body)
            if result.error is not None:
                await self.write_error(result.error)
                return
            body = result.reader
            self.headers["Content-Type"] = result.content_type

        await self._sink.write_header(status_code)
        while True:
            chunk = await read_chunk(body, self._chunk_size)
            if not chunk:
                break
            await self._sink.write(chunk)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# One-shot helpers using a default writer
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


async def write_error(sink: ResponseSink, exc: BaseException) -> None:
    await ResponseWriter(sink).write_error(exc)


async def write_unauthorized(sink: ResponseSink, realm: str) -> None:
    await ResponseWriter(sink).write_unauthorized(realm)


async def write_file(sink: ResponseSink, status_code: int, path: str | os.PathLike[str]) -> None:
    await ResponseWriter(sink).write_file(status_code, path)


async def write_bytes(sink: ResponseSink, status_code: int, body: bytes) -> None:
    await ResponseWriter(sink).write_bytes(status_code, body)


async def write_json(sink: ResponseSink, status_code: int, value: Any) -> None:
    await ResponseWriter(sink).write_json(status_code, value)


async def write_text(sink: ResponseSink, status_code: int, text: str) -> None:
    await ResponseWriter(sink).write_text(status_code, text)


async def copy(sink: ResponseSink, status_code: int, body: BodyStream) -> None:
    await ResponseWriter(sink).copy(status_code, body)
