"""
Exception handlers for FastAPI applications.

Lets regular FastAPI endpoints raise ResponseError or filesystem errors and
get the same status codes and plain-text bodies the response writer uses.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from httpresp.core.errors import HTTP_500, detect_status_code, error_message
from httpresp.models.errors import ResponseError

logger = logging.getLogger(__name__)


async def response_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """
    Return the classified status with the error message as body.

    Args:
        request: The incoming HTTP request
        exc: The raised exception

    Returns:
        PlainTextResponse mirroring handle_error()
    """
    status_code = detect_status_code(exc)
    if status_code >= HTTP_500:
        logger.error("%s %s: %s: %s", request.method, request.url.path, type(exc).__name__, exc)
    else:
        logger.warning("%s %s: %d %s", request.method, request.url.path, status_code, exc)

    return PlainTextResponse(
        error_message(exc) + "\n",
        status_code=status_code,
        headers={"X-Content-Type-Options": "nosniff"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers on the FastAPI app.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(ResponseError, response_error_handler)
    app.add_exception_handler(FileNotFoundError, response_error_handler)
    app.add_exception_handler(PermissionError, response_error_handler)
