"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Body returned for every handled error."""

    error: str = Field(..., description="Human-readable error message")


class SuccessResponse(BaseModel):
    """Acknowledgement for write operations."""

    success: bool = True
    post_id: int | None = Field(None, alias="postId")
    comment_id: int | None = Field(None, alias="commentId")

    model_config = ConfigDict(populate_by_name=True)


class RedirectResponseBody(BaseModel):
    """Acknowledgement telling a browser client where to go next."""

    success: bool = True
    redirect: str


class MediaListResponse(BaseModel):
    """Listing of the static GIF media folder."""

    success: bool = True
    gifs: list[str]
