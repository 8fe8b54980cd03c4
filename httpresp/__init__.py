"""
httpresp: response-writing helpers for ASGI applications.

Maps errors, files, byte buffers, JSON and text onto HTTP status codes,
headers and bodies, sniffing the Content-Type when none is set.
"""

from httpresp.core.errors import (
    detect_status_code,
    get_default_error_handler,
    handle_error,
    set_default_error_handler,
)
from httpresp.core.protocol import ErrorHandler, ResponseSink
from httpresp.core.sniff import DEFAULT_CONTENT_TYPE, HEADER_SIZE, detect_content_type
from httpresp.core.writer import (
    ResponseWriter,
    copy,
    write_bytes,
    write_error,
    write_file,
    write_json,
    write_text,
    write_unauthorized,
)
from httpresp.models.errors import ErrorKind, ResponseError, kind_of

__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "HEADER_SIZE",
    "ErrorHandler",
    "ErrorKind",
    "ResponseError",
    "ResponseSink",
    "ResponseWriter",
    "copy",
    "detect_content_type",
    "detect_status_code",
    "get_default_error_handler",
    "handle_error",
    "kind_of",
    "set_default_error_handler",
    "write_bytes",
    "write_error",
    "write_file",
    "write_json",
    "write_text",
    "write_unauthorized",
]
