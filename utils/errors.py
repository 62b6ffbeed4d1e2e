"""
Error taxonomy shared by the token core, the storage layer and the API.

A single exception type carries an ErrorKind; handlers dispatch on the kind,
never on the exception class.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    INTERNAL = 500

    @property
    def status(self) -> int:
        return self.value


class ApiError(Exception):
    """Failure raised by the core; mapped 1:1 to an HTTP status at the boundary."""

    def __init__(self, kind: ErrorKind, message: str = ""):
        super().__init__(message or kind.name)
        self.kind = kind
        self.message = message or kind.name.replace("_", " ").capitalize()

    @property
    def status(self) -> int:
        return self.kind.status

    def __repr__(self):
        return f"<ApiError {self.kind.name}: {self.message}>"


def bad_request(message: str = "Bad request") -> ApiError:
    return ApiError(ErrorKind.BAD_REQUEST, message)


def unauthorized(message: str = "Unauthorized") -> ApiError:
    return ApiError(ErrorKind.UNAUTHORIZED, message)


def forbidden(message: str = "Forbidden") -> ApiError:
    return ApiError(ErrorKind.FORBIDDEN, message)


def not_found(message: str = "Resource not found") -> ApiError:
    return ApiError(ErrorKind.NOT_FOUND, message)


def conflict(message: str = "Conflict") -> ApiError:
    return ApiError(ErrorKind.CONFLICT, message)


def internal(message: str = "An unexpected error occurred") -> ApiError:
    return ApiError(ErrorKind.INTERNAL, message)
