"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import ErrorResponse, MediaListResponse, RedirectResponseBody, SuccessResponse
from .feed import CommentOut, FeedResponse, FileOut, PostOut
from .user import (
    CurrentUserResponse,
    GenerateKeyRequest,
    GenerateKeyResponse,
    LoginRequest,
)

__all__ = [
    "ErrorResponse", "MediaListResponse", "RedirectResponseBody", "SuccessResponse",
    "CommentOut", "FeedResponse", "FileOut", "PostOut",
    "CurrentUserResponse", "GenerateKeyRequest", "GenerateKeyResponse", "LoginRequest",
]
