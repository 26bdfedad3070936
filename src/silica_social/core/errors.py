"""Error taxonomy shared by the services and the HTTP layer.

Every error carries a human-readable message that is safe to show to the
caller and the HTTP status it maps to. Internal details (driver messages,
stack traces) are logged where the error is raised, never attached here.
"""

from __future__ import annotations

from fastapi import status

__all__ = [
    "SilicaError",
    "ValidationError",
    "AuthError",
    "ConflictError",
    "NotFoundError",
    "StorageError",
]


class SilicaError(Exception):
    """Base class for all application errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(SilicaError):
    """Malformed or missing required input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthError(SilicaError):
    """Bad credentials or missing session."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class ConflictError(SilicaError):
    """Uniqueness violation."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Conflict"


class NotFoundError(SilicaError):
    """Unknown file or post identifier."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class StorageError(SilicaError):
    """Underlying database or filesystem failure."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Storage error"
