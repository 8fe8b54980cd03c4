"""
Semantic error kinds for HTTP responses.

Application code raises ResponseError (or attaches a ``kind`` attribute to
its own exceptions) so the writer can pick a status code without knowing
the concrete exception type.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Semantic tags understood by the default error classifier."""

    INTERNAL = "INTERNAL"
    INVALID = "INVALID"
    NOT_EXIST = "NOT_EXIST"
    PERMISSION = "PERMISSION"
    UNAUTHORIZED = "UNAUTHORIZED"


class ResponseError(Exception):
    """
    Exception tagged with an ErrorKind.

    Attributes:
        message: Human-readable error message, written as the response body
        kind: Semantic tag used to select the HTTP status code
    """

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.INTERNAL) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind

    def __repr__(self) -> str:
        return f"ResponseError({self.message!r}, kind={self.kind.value})"


def kind_of(exc: BaseException | None) -> ErrorKind | None:
    """
    Return the first ErrorKind found on an exception or its causes.

    Any exception exposing a ``kind`` attribute holding an ErrorKind counts
    as tagged. Explicit causes (``raise ... from ...``) are followed, so a
    tagged error wrapped by another exception keeps its kind.

    Args:
        exc: The exception to inspect

    Returns:
        The ErrorKind, or None for untagged errors
    """
    seen: set[int] = set()
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        kind = getattr(exc, "kind", None)
        if isinstance(kind, ErrorKind):
            return kind
        exc = exc.__cause__
    return None


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Predefined Error Factories
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def internal_error(message: str = "internal error") -> ResponseError:
    """Create error for server-side failures."""
    return ResponseError(message, ErrorKind.INTERNAL)


def invalid_error(message: str) -> ResponseError:
    """Create error for malformed or rejected input."""
    return ResponseError(message, ErrorKind.INVALID)


def not_exist_error(message: str = "not found") -> ResponseError:
    """Create error for a missing resource."""
    return ResponseError(message, ErrorKind.NOT_EXIST)


def permission_error(message: str = "permission denied") -> ResponseError:
    """Create error for a forbidden operation."""
    return ResponseError(message, ErrorKind.PERMISSION)


def unauthorized_error(message: str = "unauthorized") -> ResponseError:
    """Create error for missing or invalid credentials."""
    return ResponseError(message, ErrorKind.UNAUTHORIZED)
