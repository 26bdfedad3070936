# src/silica_social/main.py
"""Main entry point for the Silica Social application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from silica_social.api import auth_router, files_router, pages_router, posts_router
from silica_social.api.dependencies import LoginRedirect
from silica_social.core.errors import SilicaError
from silica_social.core.logging_setup import configure_logging
from silica_social.core.settings import settings
from silica_social.db.session import create_tables

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Silica Social API",
    description="Anonymous key-based message board",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)


@app.exception_handler(SilicaError)
async def silica_error_handler(request: Request, exc: SilicaError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
        message = f"Invalid {field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


@app.exception_handler(LoginRedirect)
async def login_redirect_handler(request: Request, exc: LoginRedirect) -> RedirectResponse:
    return RedirectResponse(exc.location, status_code=status.HTTP_302_FOUND)


# Include API routers
app.include_router(auth_router)
app.include_router(posts_router)
app.include_router(files_router)
app.include_router(pages_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


# Static assets go last so they never shadow an API route.
if settings.public_dir.is_dir():
    app.mount("/", StaticFiles(directory=settings.public_dir), name="static")


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    for directory in (settings.data_dir, settings.uploads_dir, settings.media_dir):
        directory.mkdir(parents=True, exist_ok=True)
    create_tables()
    logger.info("%s %s started", settings.app_name, settings.app_version)


def run(argv: list[str] | None = None) -> None:
    """Console entry point: serve the app with uvicorn.

    Passing ``local`` binds every interface so other machines on the LAN can
    reach the board; otherwise the configured host is used.
    """
    import argparse

    import uvicorn

    parser = argparse.ArgumentParser(prog="silica-social", description=settings.app_name)
    parser.add_argument("mode", nargs="?", choices=["local"], help="bind 0.0.0.0")
    parser.add_argument("--port", type=int, default=settings.port)
    args = parser.parse_args(argv)

    host = "0.0.0.0" if args.mode == "local" else settings.host
    uvicorn.run(
        "silica_social.main:app",
        host=host,
        port=args.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
