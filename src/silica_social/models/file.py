# src/silica_social/models/file.py
"""SQLAlchemy model for uploaded file metadata."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from silica_social.db.session import Base
from silica_social.db.time import utcnow


class FileAttachment(Base):
    """File row owned by exactly one post or one comment.

    ``file_name`` is the name supplied by the uploader and is only used for
    display and download; ``file_path`` is the generated blob name relative to
    the uploads directory.
    """

    __tablename__ = "files"
    __table_args__ = (
        CheckConstraint(
            "(post_id IS NULL) <> (comment_id IS NULL)",
            name="ck_files_single_owner",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("posts.id"),
        nullable=True,
        index=True,
    )
    comment_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("comments.id"),
        nullable=True,
        index=True,
    )
    file_name: Mapped[str] = mapped_column(Text, nullable=False)
    file_path: Mapped[str] = mapped_column(Text, nullable=False)
    mime_type: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    @property
    def is_image(self) -> bool:
        """Return True when the file should be rendered inline."""
        return self.mime_type.startswith("image/")
