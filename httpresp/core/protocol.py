"""Protocols for the collaborators a response writer talks to."""

from __future__ import annotations

from typing import Awaitable, MutableMapping, Protocol, Union, runtime_checkable


@runtime_checkable
class ResponseSink(Protocol):
    """
    Outbound side of an HTTP response. Supplied by the transport.

    Headers may be mutated until write_header() is called; the status is
    written once, then body bytes follow.
    """

    @property
    def headers(self) -> MutableMapping[str, str]:
        ...

    async def write_header(self, status_code: int) -> None:
        ...

    async def write(self, data: bytes) -> None:
        ...


class ErrorHandler(Protocol):
    """Error policy: writes a complete response for an exception."""

    def __call__(self, sink: ResponseSink, exc: BaseException) -> Awaitable[None]:
        ...


class BodyStream(Protocol):
    """Readable byte source. read() may return bytes or an awaitable of bytes."""

    def read(self, size: int = -1) -> Union[bytes, Awaitable[bytes]]:
        ...
