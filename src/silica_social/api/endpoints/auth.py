# src/silica_social/api/endpoints/auth.py
"""Registration, login and session endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Response, status

from silica_social.api.dependencies import (
    CredentialStoreDep,
    CurrentContextDep,
    create_session_token,
)
from silica_social.core.errors import ConflictError
from silica_social.core.settings import settings
from silica_social.schemas.common import RedirectResponseBody
from silica_social.schemas.user import (
    CurrentUserResponse,
    GenerateKeyRequest,
    GenerateKeyResponse,
    LoginRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["authentication"])

BOARD_PATH = "/board"
ENTRY_PATH = "/"


@router.post(
    "/generate-key",
    summary="Register a moniker and issue a key pair",
    response_model=GenerateKeyResponse,
)
def generate_key(
    payload: GenerateKeyRequest,
    store: CredentialStoreDep,
) -> GenerateKeyResponse:
    """Create an identity and return its private key exactly once.

    Public keys are short, so a collision with an existing user is possible;
    generation is retried a bounded number of times before giving up. Runs in
    the threadpool since hashing the key is CPU bound.
    """
    conflict = ConflictError()
    for attempt in range(1, settings.public_key_attempts + 1):
        try:
            identity = store.register_identity(payload.moniker)
        except ConflictError as err:
            logger.warning("Public key conflict on attempt %d", attempt)
            conflict = err
            continue
        return GenerateKeyResponse(
            moniker=identity.user.moniker,
            public_key=identity.user.public_key,
            private_key=identity.private_key,
        )

    raise conflict


@router.post(
    "/login",
    summary="Authenticate with a private key",
    status_code=status.HTTP_200_OK,
    response_model=RedirectResponseBody,
)
async def login(
    payload: LoginRequest,
    response: Response,
    store: CredentialStoreDep,
) -> RedirectResponseBody:
    """Start a session for the user owning the submitted private key."""
    user = await store.authenticate(payload.private_key)
    token = create_session_token(user.id)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return RedirectResponseBody(redirect=BOARD_PATH)


@router.post(
    "/logout",
    summary="End the current session",
    response_model=RedirectResponseBody,
)
async def logout(ctx: CurrentContextDep, response: Response) -> RedirectResponseBody:
    """Clear the session cookie."""
    response.delete_cookie(settings.session_cookie_name)
    logger.info("User %d logged out", ctx.user_id)
    return RedirectResponseBody(redirect=ENTRY_PATH)


@router.get(
    "/user",
    summary="Return the logged-in identity",
    response_model=CurrentUserResponse,
)
async def current_user(ctx: CurrentContextDep) -> CurrentUserResponse:
    return CurrentUserResponse(moniker=ctx.moniker, public_key=ctx.public_key)
