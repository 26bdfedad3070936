"""Shared API dependencies: the session gate and service factories."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from silica_social.core.context import SessionContext
from silica_social.core.errors import AuthError
from silica_social.core.settings import settings
from silica_social.db.session import get_db
from silica_social.models import User
from silica_social.repositories.content_repo import ContentRepository
from silica_social.services.attachments import AttachmentManager
from silica_social.services.credentials import CredentialStore

logger = logging.getLogger(__name__)

# Programmatic clients may send the session token as a bearer header.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


class LoginRedirect(Exception):
    """Raised by page routes to send unauthenticated browsers to the entry page."""

    def __init__(self, location: str = "/") -> None:
        self.location = location
        super().__init__(location)


def create_session_token(user_id: int) -> str:
    """Create a signed session token for a user."""
    expire = datetime.now(UTC) + timedelta(minutes=settings.session_expire_minutes)
    to_encode: dict[str, object] = {"sub": str(user_id), "exp": expire}
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_session_token(token: str) -> int:
    """Return the user id carried by a session token.

    Raises:
        AuthError: If the token is malformed, expired or has no subject.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as err:
        raise AuthError("Could not validate credentials") from err

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError) as err:
        raise AuthError("Could not validate credentials") from err


def _extract_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
) -> str | None:
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token
    if credentials is not None:
        return credentials.credentials
    return None


def get_optional_context(
    request: Request,
    db: SessionDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> SessionContext | None:
    """Resolve the caller's session, or None when absent or invalid."""
    token = _extract_token(request, credentials)
    if not token:
        return None
    try:
        user_id = decode_session_token(token)
    except AuthError:
        logger.info("Rejected invalid session token")
        return None

    user = db.get(User, user_id)
    if user is None:
        logger.info("Session refers to unknown user id %d", user_id)
        return None
    return SessionContext.from_user(user)


OptionalContextDep = Annotated[SessionContext | None, Depends(get_optional_context)]


def require_api_auth(ctx: OptionalContextDep) -> SessionContext:
    """Gate for JSON routes: fail with 401 instead of redirecting."""
    if ctx is None:
        raise AuthError("Authentication required")
    return ctx


def require_page_auth(ctx: OptionalContextDep) -> SessionContext:
    """Gate for HTML routes: redirect unauthenticated callers to ``/``."""
    if ctx is None:
        logger.info("Unauthenticated page request, redirecting to /")
        raise LoginRedirect("/")
    return ctx


CurrentContextDep = Annotated[SessionContext, Depends(require_api_auth)]
PageContextDep = Annotated[SessionContext, Depends(require_page_auth)]


def get_content_repo(db: SessionDep) -> ContentRepository:
    return ContentRepository(db)


def get_credential_store(db: SessionDep) -> CredentialStore:
    return CredentialStore(db)


def get_attachment_manager() -> AttachmentManager:
    return AttachmentManager()


ContentRepoDep = Annotated[ContentRepository, Depends(get_content_repo)]
CredentialStoreDep = Annotated[CredentialStore, Depends(get_credential_store)]
AttachmentManagerDep = Annotated[AttachmentManager, Depends(get_attachment_manager)]
