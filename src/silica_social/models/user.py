# src/silica_social/models/user.py
"""SQLAlchemy model for key-based user identities."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from silica_social.db.session import Base
from silica_social.db.time import utcnow


class User(Base):
    """Identity addressed by a displayable public key.

    The private key is a bearer secret; only its bcrypt hash is stored.
    Rows are never updated or deleted after registration.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    moniker: Mapped[str] = mapped_column(Text, nullable=False)
    public_key: Mapped[str] = mapped_column(String(11), unique=True, nullable=False)
    private_key_hash: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
