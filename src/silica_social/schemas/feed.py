"""Schemas for the paginated post feed."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class FileOut(BaseModel):
    """File reference; the bytes are fetched from ``/files/{id}``."""

    id: int
    file_name: str
    mime_type: str

    model_config = ConfigDict(from_attributes=True)


class CommentOut(BaseModel):
    """Comment with its author handle and attachments."""

    id: int
    post_id: int
    content: str
    timestamp: datetime
    moniker: str
    public_key: str
    files: list[FileOut] = Field(default_factory=list)


class PostOut(BaseModel):
    """Post with its topic, attachments and comments, oldest comment first."""

    id: int
    content: str
    timestamp: datetime
    moniker: str
    public_key: str
    topic: str | None = None
    topics: list[str] = Field(default_factory=list)
    files: list[FileOut] = Field(default_factory=list)
    comments: list[CommentOut] = Field(default_factory=list)


class FeedResponse(BaseModel):
    """One page of the feed plus pagination totals."""

    posts: list[PostOut]
    total: int
    total_pages: int = Field(..., alias="totalPages")

    model_config = ConfigDict(populate_by_name=True)
