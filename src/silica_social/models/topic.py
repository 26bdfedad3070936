# src/silica_social/models/topic.py
"""SQLAlchemy models for topics and the post-topic link."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from silica_social.db.session import Base
from silica_social.db.time import utcnow


class Topic(Base):
    """Free-text tag, unique by exact (case-sensitive) name."""

    __tablename__ = "topics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )


class PostTopic(Base):
    """Join table linking a post to its single topic."""

    __tablename__ = "post_topics"
    # A post carries at most one topic.
    __table_args__ = (UniqueConstraint("post_id", name="uq_post_topics_post_id"),)

    post_id: Mapped[int] = mapped_column(Integer, ForeignKey("posts.id"), primary_key=True)
    topic_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("topics.id"),
        primary_key=True,
        index=True,
    )
