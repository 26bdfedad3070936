# src/silica_social/services/credentials.py
"""Key generation and verification for anonymous identities.

A user is identified publicly by a short generated handle (the "public key")
and authenticates with a high-entropy bearer secret (the "private key").
Only a bcrypt hash of the secret is stored, so login cannot look the secret
up by index: every stored hash is checked against the candidate. That scan
is linear in the number of users and is only acceptable while the user
population stays small.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
from dataclasses import dataclass

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from silica_social.core.errors import AuthError, ConflictError, StorageError, ValidationError
from silica_social.core.settings import settings
from silica_social.models import User

logger = logging.getLogger(__name__)

PUBLIC_KEY_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
PUBLIC_KEY_LENGTH = 9
PUBLIC_KEY_GROUP = 3
PRIVATE_KEY_BYTES = 32


@dataclass(frozen=True)
class RegisteredIdentity:
    """Result of a registration; ``private_key`` is shown to the user once."""

    user: User
    private_key: str


def generate_public_key() -> str:
    """Return a handle shaped like ``XXX-XXX-XXX`` over ``A-Z0-9``."""
    chars = [secrets.choice(PUBLIC_KEY_ALPHABET) for _ in range(PUBLIC_KEY_LENGTH)]
    groups = [
        "".join(chars[i : i + PUBLIC_KEY_GROUP])
        for i in range(0, PUBLIC_KEY_LENGTH, PUBLIC_KEY_GROUP)
    ]
    return "-".join(groups)


def generate_private_key() -> str:
    """Return 32 random bytes as unpadded URL-safe base64."""
    return secrets.token_urlsafe(PRIVATE_KEY_BYTES)


def hash_private_key(private_key: str, rounds: int | None = None) -> str:
    """Return a salted bcrypt hash of the private key."""
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(private_key.encode("utf-8"), salt).decode("utf-8")


def verify_private_key(private_key: str, private_key_hash: str) -> bool:
    """Return True if ``private_key`` matches the stored bcrypt hash."""
    return bcrypt.checkpw(private_key.encode("utf-8"), private_key_hash.encode("utf-8"))


class CredentialStore:
    """Registers identities and authenticates bearer private keys."""

    def __init__(self, db: Session, *, rounds: int | None = None) -> None:
        self.db = db
        self.rounds = rounds or settings.bcrypt_rounds

    def register_identity(self, moniker: str | None) -> RegisteredIdentity:
        """Create a user with a fresh key pair.

        Raises:
            ValidationError: If the moniker is empty after trimming.
            ConflictError: If the generated public key is already taken. The
                caller may retry; a new key is generated on every call.
            StorageError: On any other database failure.
        """
        cleaned = (moniker or "").strip()
        if not cleaned:
            raise ValidationError("Moniker is required")

        public_key = generate_public_key()
        private_key = generate_private_key()
        user = User(
            moniker=cleaned,
            public_key=public_key,
            private_key_hash=hash_private_key(private_key, self.rounds),
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as err:
            self.db.rollback()
            logger.warning("Public key collision on %s: %s", public_key, err.orig)
            raise ConflictError("Public key conflict (try again)") from err
        except SQLAlchemyError as err:
            self.db.rollback()
            logger.exception("Database error during user insertion")
            raise StorageError("Database error") from err

        self.db.refresh(user)
        logger.info("Registered identity %s (user id %d)", public_key, user.id)
        return RegisteredIdentity(user=user, private_key=private_key)

    async def authenticate(self, candidate: str | None) -> User:
        """Return the user whose stored hash matches ``candidate``.

        Database reads and hash comparisons run in worker threads, the
        comparisons concurrently. If more than one stored hash matches, the
        first in iteration order wins.

        Raises:
            ValidationError: If the candidate is empty after trimming.
            AuthError: If no stored hash matches.
        """
        cleaned = (candidate or "").strip()
        if not cleaned:
            raise ValidationError("Private key is required")

        records = await asyncio.to_thread(self._load_hashes)

        if not records:
            logger.info("Login attempted with no registered users")
            raise AuthError("Invalid private key")

        results = await asyncio.gather(
            *(
                asyncio.to_thread(self._compare, cleaned, record.private_key_hash, record.id)
                for record in records
            )
        )
        for record, matched in zip(records, results):
            if matched:
                user = await asyncio.to_thread(self.db.get, User, record.id)
                if user is not None:
                    logger.info("Private key matched for user id %d", user.id)
                    return user

        logger.info("No matching private key found")
        raise AuthError("Invalid private key")

    def _load_hashes(self) -> list:
        try:
            return list(self.db.execute(select(User.id, User.private_key_hash)).all())
        except SQLAlchemyError as err:
            logger.exception("Database error fetching users")
            raise StorageError("Database error") from err

    def get_user(self, user_id: int) -> User | None:
        """Return a user by primary key."""
        return self.db.get(User, user_id)

    @staticmethod
    def _compare(candidate: str, private_key_hash: str, user_id: int) -> bool:
        try:
            return verify_private_key(candidate, private_key_hash)
        except ValueError as err:
            logger.error("Error comparing key for user id %d: %s", user_id, err)
            return False
