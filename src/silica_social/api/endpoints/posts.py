# src/silica_social/api/endpoints/posts.py
"""Feed, post and comment endpoints."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, File, Form, Query, UploadFile

from silica_social.api.dependencies import (
    AttachmentManagerDep,
    ContentRepoDep,
    CurrentContextDep,
)
from silica_social.core.errors import SilicaError
from silica_social.core.settings import settings
from silica_social.schemas.common import SuccessResponse
from silica_social.schemas.feed import FeedResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["posts"])

UploadsField = Annotated[list[UploadFile] | None, File(description="Up to five attachments")]


@router.get("/posts", response_model=FeedResponse)
async def list_posts(
    repo: ContentRepoDep,
    page: int = Query(1, description="1-based page number"),
    per_page: int = Query(settings.default_per_page, alias="perPage", description="Posts per page"),
    topic: str | None = Query(None, description="Exact topic name to filter by"),
) -> FeedResponse:
    """Return one page of posts, newest first, with nested comments and files."""
    return repo.list_feed(page, per_page, topic)


# Upload handlers are sync so blob writes run in the threadpool.
@router.post("/post", response_model=SuccessResponse, response_model_exclude_none=True)
def create_post(
    ctx: CurrentContextDep,
    repo: ContentRepoDep,
    attachments: AttachmentManagerDep,
    content: Annotated[str | None, Form()] = None,
    topic: Annotated[str | None, Form()] = None,
    files: UploadsField = None,
) -> SuccessResponse:
    """Create a post with an optional topic and attachments.

    The post row, topic link and file rows are committed together.
    """
    try:
        post = repo.create_post(ctx, content, topic)
        stored = attachments.accept_uploads(files)
        repo.attach_files("post", post.id, stored)
        repo.commit()
    except SilicaError:
        repo.rollback()
        raise

    logger.info("Post %d created by user %d with %d file(s)", post.id, ctx.user_id, len(stored))
    return SuccessResponse(post_id=post.id)


@router.post("/comment", response_model=SuccessResponse, response_model_exclude_none=True)
def create_comment(
    ctx: CurrentContextDep,
    repo: ContentRepoDep,
    attachments: AttachmentManagerDep,
    post_id: Annotated[str | None, Form(alias="postId")] = None,
    content: Annotated[str | None, Form()] = None,
    files: UploadsField = None,
) -> SuccessResponse:
    """Add a comment with optional attachments to an existing post."""
    try:
        comment = repo.create_comment(ctx, post_id, content)
        stored = attachments.accept_uploads(files)
        repo.attach_files("comment", comment.id, stored)
        repo.commit()
    except SilicaError:
        repo.rollback()
        raise

    logger.info("Comment %d created for post %d", comment.id, comment.post_id)
    return SuccessResponse(comment_id=comment.id)
