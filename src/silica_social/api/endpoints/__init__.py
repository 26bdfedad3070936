# src/silica_social/api/endpoints/__init__.py
"""API endpoint modules."""

from .auth import router as auth_router
from .files import router as files_router
from .pages import router as pages_router
from .posts import router as posts_router

__all__ = [
    "auth_router",
    "files_router",
    "pages_router",
    "posts_router",
]
