# tests/conftest.py
from __future__ import annotations

import os
import tempfile
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

_TMP_ROOT = Path(tempfile.mkdtemp(prefix="silica-tests-"))
_REPO_ROOT = Path(__file__).resolve().parents[1]

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["DATA_DIR"] = str(_TMP_ROOT / "db")
os.environ["UPLOADS_DIR"] = str(_TMP_ROOT / "db" / "uploads")
os.environ["MEDIA_DIR"] = str(_TMP_ROOT / "media")
os.environ["PUBLIC_DIR"] = str(_TMP_ROOT / "no-public")
os.environ["VIEWS_DIR"] = str(_REPO_ROOT / "views")

from silica_social.api.dependencies import create_session_token, get_attachment_manager
from silica_social.core.context import SessionContext
from silica_social.db.session import Base, build_engine
from silica_social.db.session import get_db as app_get_session
from silica_social.main import app as fastapi_app
from silica_social.models import User
from silica_social.repositories.content_repo import ContentRepository
from silica_social.services.attachments import AttachmentManager
from silica_social.services.credentials import CredentialStore, RegisteredIdentity

TEST_DB_URL = "sqlite://"


@pytest.fixture(scope="session")
def engine() -> Iterator[Engine]:
    engine = build_engine(TEST_DB_URL, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    """Session whose commits only release savepoints of an outer transaction."""
    connection = engine.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        join_transaction_mode="create_savepoint",
        expire_on_commit=False,
    )
    try:
        yield session
    finally:
        session.close()
        if transaction.is_active:
            transaction.rollback()
        connection.close()


@pytest.fixture()
def uploads_dir(tmp_path: Path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture()
def media_dir(tmp_path: Path) -> Path:
    path = tmp_path / "media"
    path.mkdir()
    return path


@pytest.fixture()
def attachments(uploads_dir: Path, media_dir: Path) -> AttachmentManager:
    return AttachmentManager(uploads_dir, media_dir=media_dir)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    attachments: AttachmentManager,
) -> Iterator[None]:
    def _get_session_override() -> Iterator[Session]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_attachment_manager] = lambda: attachments
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_attachment_manager, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def credential_store(db_session: Session) -> CredentialStore:
    return CredentialStore(db_session, rounds=4)


@pytest.fixture()
def repo(db_session: Session) -> ContentRepository:
    return ContentRepository(db_session)


@pytest.fixture()
def registered(credential_store: CredentialStore) -> RegisteredIdentity:
    """A persisted identity together with its one-time private key."""
    return credential_store.register_identity("Test User")


@pytest.fixture()
def test_user(registered: RegisteredIdentity) -> User:
    return registered.user


@pytest.fixture()
def other_user(credential_store: CredentialStore) -> User:
    return credential_store.register_identity("Other User").user


@pytest.fixture()
def ctx(test_user: User) -> SessionContext:
    return SessionContext.from_user(test_user)


@pytest.fixture()
def other_ctx(other_user: User) -> SessionContext:
    return SessionContext.from_user(other_user)


@pytest.fixture()
def auth_headers(test_user: User) -> dict[str, str]:
    """Return bearer headers carrying a session token for the test user."""
    return {"Authorization": f"Bearer {create_session_token(test_user.id)}"}
