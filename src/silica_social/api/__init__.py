# src/silica_social/api/__init__.py
"""HTTP API routers."""

from .endpoints import auth_router, files_router, pages_router, posts_router

__all__ = [
    "auth_router",
    "files_router",
    "pages_router",
    "posts_router",
]
