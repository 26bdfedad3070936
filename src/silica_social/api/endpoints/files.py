# src/silica_social/api/endpoints/files.py
"""Attachment download and static media listing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import FileResponse

from silica_social.api.dependencies import AttachmentManagerDep, ContentRepoDep
from silica_social.core.errors import NotFoundError
from silica_social.repositories.content_repo import MAX_ROW_ID
from silica_social.schemas.common import MediaListResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["files"])


@router.get("/files/{file_id}", response_class=FileResponse)
async def serve_file(
    file_id: str,
    repo: ContentRepoDep,
    attachments: AttachmentManagerDep,
) -> FileResponse:
    """Stream an attachment.

    Images are rendered inline; everything else downloads under the name it
    was uploaded with rather than the generated storage name.
    """
    if not (file_id.isascii() and file_id.isdigit()) or int(file_id) > MAX_ROW_ID:
        raise NotFoundError("File not found")

    served = attachments.serve_file(repo, int(file_id))
    logger.debug("Serving file %s from %s", file_id, served.path)
    if served.inline:
        return FileResponse(
            served.path,
            media_type=served.mime_type,
            headers={"Content-Disposition": "inline"},
        )
    return FileResponse(
        served.path,
        media_type=served.mime_type,
        filename=served.file_name,
    )


@router.get("/api/media/gifs", response_model=MediaListResponse)
async def list_media_gifs(attachments: AttachmentManagerDep) -> MediaListResponse:
    """List the GIFs available in the static media folder."""
    return MediaListResponse(gifs=attachments.list_media_gifs())
