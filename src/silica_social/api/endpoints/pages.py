# src/silica_social/api/endpoints/pages.py
"""HTML entry points; the pages themselves are static shells."""

from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import FileResponse, RedirectResponse

from silica_social.api.dependencies import OptionalContextDep, PageContextDep
from silica_social.core.errors import NotFoundError
from silica_social.core.settings import settings

router = APIRouter(tags=["pages"], include_in_schema=False)


def _view(name: str) -> FileResponse:
    path = settings.views_dir / name
    if not path.is_file():
        raise NotFoundError("Page not found")
    return FileResponse(path, media_type="text/html")


@router.get("/", response_model=None)
async def entry_page(ctx: OptionalContextDep) -> FileResponse | RedirectResponse:
    """Send logged-in users to the board, everyone else to the key form."""
    if ctx is not None:
        return RedirectResponse("/board", status_code=status.HTTP_302_FOUND)
    return _view("auth.html")


@router.get("/board", response_model=None)
async def board_page(ctx: PageContextDep) -> FileResponse:
    return _view("index.html")
