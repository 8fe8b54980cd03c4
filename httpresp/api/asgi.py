"""
ASGI adapter for the response writer.

ASGIResponseSink turns an ASGI ``send`` callable into a ResponseSink.
WriterEndpoint wraps a handler of the form ``async (request, writer)``
into an ASGI app that Starlette and FastAPI accept as a route endpoint.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from starlette.datastructures import MutableHeaders
from starlette.requests import Request
from starlette.types import Receive, Scope, Send

from httpresp.core.protocol import ErrorHandler
from httpresp.core.writer import ResponseWriter

logger = logging.getLogger(__name__)

WriterHandler = Callable[[Request, ResponseWriter], Awaitable[None]]


class ASGIResponseSink:
    """
    ResponseSink over an ASGI ``send`` callable.

    The status line is sent once. Header changes made after that are not
    transmitted.
    """

    def __init__(self, send: Send) -> None:
        self._send = send
        self._headers = MutableHeaders()
        self._status_code: int | None = None
        self._finished = False

    @property
    def headers(self) -> MutableHeaders:
        return self._headers

    @property
    def status_code(self) -> int | None:
        """Status sent to the client, or None before write_header()."""
        return self._status_code

    @property
    def started(self) -> bool:
        return self._status_code is not None

    async def write_header(self, status_code: int) -> None:
        if self._status_code is not None:
            logger.warning(
                "Superfluous write_header(%d): status %d already sent",
                status_code,
                self._status_code,
            )
            return
        self._status_code = status_code
        await self._send(
            {
                "type": "http.response.start",
                "status": status_code,
                "headers": self._headers.raw,
            }
        )

    async def write(self, data: bytes) -> None:
        if self._status_code is None:
            await self.write_header(200)
        if data:
            await self._send(
                {"type": "http.response.body", "body": data, "more_body": True}
            )

    async def finish(self) -> None:
        """Terminate the response body. Sends a bare 200 if nothing was written."""
        if self._finished:
            return
        if self._status_code is None:
            await self.write_header(200)
        self._finished = True
        await self._send({"type": "http.response.body", "body": b"", "more_body": False})


class WriterEndpoint:
    """
    ASGI app that hands each request a fresh ResponseWriter.

    Usage:
        async def download(request: Request, resp: ResponseWriter) -> None:
            await resp.write_file(200, request.path_params["name"])

        app.add_route("/files/{name}", WriterEndpoint(download))

    Exceptions escaping the handler are written through the writer's error
    policy when no status has been sent yet; otherwise they propagate.

    Args:
        handler: Coroutine function receiving the request and the writer
        cors: CORS toggle for each writer; None takes the configured default
        error_handler: Error policy for each writer; None uses the default
    """

    def __init__(
        self,
        handler: WriterHandler,
        *,
        cors: bool | None = None,
        error_handler: ErrorHandler | None = None,
    ) -> None:
        self.handler = handler
        self.cors = cors
        self.error_handler = error_handler

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        assert scope["type"] == "http"
        request = Request(scope, receive)
        sink = ASGIResponseSink(send)
        resp = ResponseWriter(sink, error_handler=self.error_handler, cors=self.cors)

        try:
            await self.handler(request, resp)
        except Exception as e:
            if sink.started:
                raise
            logger.debug("Handler for %s raised %s", request.url.path, type(e).__name__)
            await resp.write_error(e)

        await sink.finish()


def writer_endpoint(
    handler: WriterHandler | None = None,
    *,
    cors: bool | None = None,
    error_handler: ErrorHandler | None = None,
) -> WriterEndpoint | Callable[[WriterHandler], WriterEndpoint]:
    """
    Decorator form of WriterEndpoint.

    Usage:
        @writer_endpoint(cors=True)
        async def status(request: Request, resp: ResponseWriter) -> None:
            await resp.write_json(200, {"ok": True})
    """

    def decorate(func: WriterHandler) -> WriterEndpoint:
        return WriterEndpoint(func, cors=cors, error_handler=error_handler)

    if handler is not None:
        return decorate(handler)
    return decorate
