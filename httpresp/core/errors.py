"""
Error classification and the default error policy.

Maps exceptions to HTTP status codes and writes plain-text error
responses. The process-wide default policy can be replaced; individual
writers may also carry their own.
"""

from __future__ import annotations

import logging

from httpresp.core.protocol import ErrorHandler, ResponseSink
from httpresp.models.errors import ErrorKind, kind_of

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_401 = 401
HTTP_403 = 403
HTTP_404 = 404
HTTP_500 = 500

_KIND_STATUS: dict[ErrorKind, int] = {
    ErrorKind.INTERNAL: HTTP_500,
    ErrorKind.INVALID: HTTP_400,
    ErrorKind.NOT_EXIST: HTTP_404,
    ErrorKind.PERMISSION: HTTP_403,
    ErrorKind.UNAUTHORIZED: HTTP_401,
}


def detect_status_code(exc: BaseException) -> int:
    """
    Pick the HTTP status code for an exception.

    Filesystem errors are checked first, then the ErrorKind tag; anything
    unrecognised is a 500.

    Args:
        exc: The exception to classify

    Returns:
        HTTP status code
    """
    if isinstance(exc, FileNotFoundError):
        return HTTP_404

    if isinstance(exc, PermissionError):
        return HTTP_403

    kind = kind_of(exc)
    if kind is not None:
        return _KIND_STATUS.get(kind, HTTP_500)

    return HTTP_500


def error_message(exc: BaseException) -> str:
    """Text written as the error body."""
    return str(exc) or type(exc).__name__


async def handle_error(sink: ResponseSink, exc: BaseException) -> None:
    """
    Default error policy: status from detect_status_code(), message as body.

    Args:
        sink: The response to write into
        exc: The error being reported
    """
    status_code = detect_status_code(exc)
    if status_code >= HTTP_500:
        logger.error("Responding %d: %s: %s", status_code, type(exc).__name__, exc, exc_info=exc)
    else:
        logger.warning("Responding %d: %s", status_code, error_message(exc))

    body = (error_message(exc) + "\n").encode("utf-8")
    sink.headers["Content-Type"] = "text/plain; charset=utf-8"
    sink.headers["X-Content-Type-Options"] = "nosniff"
    sink.headers["Content-Length"] = str(len(body))
    await sink.write_header(status_code)
    await sink.write(body)


_default_error_handler: ErrorHandler = handle_error


def get_default_error_handler() -> ErrorHandler:
    """Return the process-wide error policy."""
    return _default_error_handler


def set_default_error_handler(handler: ErrorHandler | None) -> None:
    """
    Replace the process-wide error policy.

    Args:
        handler: New policy, or None to restore handle_error
    """
    global _default_error_handler
    _default_error_handler = handler if handler is not None else handle_error
