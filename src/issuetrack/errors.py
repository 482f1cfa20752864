"""
Error taxonomy for issuetrack.

Every failure the service reports is an ``AppError`` carrying one of a
closed set of kinds. The HTTP layer maps a kind to its status code with
``status_code_for``; nothing else in the code base knows about status codes.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Machine-readable error kinds exposed in the ``error`` field."""

    NOT_FOUND = "NotFoundError"
    VALIDATION = "ValidationError"
    UNAUTHORIZED = "UnauthorizedError"
    FORBIDDEN = "ForbiddenError"
    CONFLICT = "ConflictError"
    INTERNAL = "InternalServerError"


_STATUS_CODES = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INTERNAL: 500,
}


def status_code_for(kind: ErrorKind) -> int:
    """Return the HTTP status code for an error kind."""
    return _STATUS_CODES[kind]


class AppError(Exception):
    """
    A typed application error.

    Attributes:
        kind: Error category
        message: Human readable message
        details: Optional per-field messages, e.g. ``{"title": ["Required"]}``
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: Optional[dict[str, list[str]]] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details

    @property
    def status_code(self) -> int:
        return status_code_for(self.kind)

    def to_dict(self) -> dict:
        """Render the error envelope returned to API clients."""
        body = {
            "error": self.kind.value,
            "message": self.message,
            "statusCode": self.status_code,
        }
        if self.details:
            body["details"] = self.details
        return body

    def __repr__(self) -> str:
        return f"<AppError(kind={self.kind.value}, message='{self.message}')>"


def not_found(resource: str) -> AppError:
    return AppError(ErrorKind.NOT_FOUND, f"{resource} not found")


def validation_error(
    message: str, details: Optional[dict[str, list[str]]] = None
) -> AppError:
    return AppError(ErrorKind.VALIDATION, message, details)


def unauthorized(message: str = "Unauthorized") -> AppError:
    return AppError(ErrorKind.UNAUTHORIZED, message)


def forbidden(message: str = "Forbidden") -> AppError:
    return AppError(ErrorKind.FORBIDDEN, message)


def conflict(message: str) -> AppError:
    return AppError(ErrorKind.CONFLICT, message)


def internal_error(message: str = "Internal server error") -> AppError:
    return AppError(ErrorKind.INTERNAL, message)
