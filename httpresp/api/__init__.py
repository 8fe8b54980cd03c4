"""
ASGI integration package.

Provides the ASGI response sink, the per-request writer endpoint, and
FastAPI exception handlers built on the same error classification.
"""

from httpresp.api.asgi import ASGIResponseSink, WriterEndpoint, writer_endpoint
from httpresp.api.errors import register_exception_handlers, response_error_handler

__all__ = [
    "ASGIResponseSink",
    "WriterEndpoint",
    "register_exception_handlers",
    "response_error_handler",
    "writer_endpoint",
]
