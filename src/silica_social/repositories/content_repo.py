"""Data access for posts, comments, files and topics."""
from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from typing import Literal

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from silica_social.core.context import SessionContext
from silica_social.core.errors import (
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from silica_social.models import Comment, FileAttachment, Post, PostTopic, Topic, User
from silica_social.schemas.feed import CommentOut, FeedResponse, FileOut, PostOut
from silica_social.services.attachments import StoredUpload

__all__ = ["MAX_ROW_ID", "ContentRepository", "OwnerKind", "parse_post_id"]

logger = logging.getLogger(__name__)

OwnerKind = Literal["post", "comment"]

# Largest value a 64-bit signed INTEGER primary key can hold.
MAX_ROW_ID = 2**63 - 1


def parse_post_id(value: int | str | None) -> int:
    """Return ``value`` as a positive integer post id.

    Raises:
        ValidationError: If the value is missing, non-numeric or not positive.
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError("Valid post ID is required")
    text = str(value).strip()
    if not (text.isascii() and text.isdigit()):
        raise ValidationError("Valid post ID is required")
    post_id = int(text)
    if not 1 <= post_id <= MAX_ROW_ID:
        raise ValidationError("Valid post ID is required")
    return post_id


class ContentRepository:
    """Reads and writes board content within a single SQLAlchemy session.

    Write methods only flush; the caller decides when the unit of work is
    committed with :meth:`commit`, so a post, its topic link and its file rows
    land in one transaction.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def commit(self) -> None:
        """Commit the current unit of work."""
        try:
            self.session.commit()
        except SQLAlchemyError as err:
            self.session.rollback()
            logger.exception("Database error during commit")
            raise StorageError("Database error") from err

    def rollback(self) -> None:
        self.session.rollback()

    # -- posts ------------------------------------------------------------

    def get_post(self, post_id: int) -> Post | None:
        """Return a post by identifier."""
        return self.session.get(Post, post_id)

    def create_post(
        self,
        ctx: SessionContext,
        content: str | None,
        topic_name: str | None = None,
    ) -> Post:
        """Insert a post for the caller and link its topic, if any.

        Raises:
            ValidationError: If the content is empty after trimming.
            ConflictError: If the post already carries a topic.
        """
        cleaned = (content or "").strip()
        if not cleaned:
            raise ValidationError("Post content is required")

        post = Post(user_id=ctx.user_id, content=cleaned)
        self.session.add(post)
        try:
            self.session.flush()
        except SQLAlchemyError as err:
            logger.exception("Database error creating post")
            raise StorageError("Database error creating post") from err
        logger.info("Post created with ID %d by user %d", post.id, ctx.user_id)

        if topic_name and topic_name.strip():
            self.attach_topic(post.id, topic_name)
        return post

    # -- topics -----------------------------------------------------------

    def get_topic_name(self, post_id: int) -> str | None:
        """Return the name of the topic linked to a post."""
        return self.session.scalar(
            select(Topic.name)
            .join(PostTopic, PostTopic.topic_id == Topic.id)
            .where(PostTopic.post_id == post_id)
        )

    def find_or_create_topic(self, name: str) -> Topic:
        """Return the topic with this exact name, creating it on first use.

        The insert runs in a SAVEPOINT; if a concurrent request created the
        same name first, the unique constraint fires and the existing row is
        returned instead.
        """
        stmt = select(Topic).where(Topic.name == name)
        topic = self.session.scalar(stmt)
        if topic is not None:
            return topic

        try:
            with self.session.begin_nested():
                topic = Topic(name=name)
                self.session.add(topic)
        except IntegrityError:
            logger.info("Topic %r created concurrently; reusing it", name)
            topic = self.session.scalar(stmt)
            if topic is None:
                raise StorageError("Topic not found after insertion") from None
        return topic

    def attach_topic(self, post_id: int, topic_name: str) -> Topic:
        """Link a post to the named topic.

        Raises:
            ValidationError: If the name is empty after trimming.
            ConflictError: If the post already has a topic. The existing link
                is left untouched.
        """
        name = topic_name.strip()
        if not name:
            raise ValidationError("Topic name is required")

        topic = self.find_or_create_topic(name)

        existing = self.session.scalar(
            select(PostTopic.topic_id).where(PostTopic.post_id == post_id)
        )
        if existing is not None:
            raise ConflictError("Post already has a topic assigned")

        try:
            with self.session.begin_nested():
                self.session.add(PostTopic(post_id=post_id, topic_id=topic.id))
        except IntegrityError as err:
            raise ConflictError("Post already has a topic assigned") from err
        return topic

    # -- comments ---------------------------------------------------------

    def create_comment(
        self,
        ctx: SessionContext,
        post_id: int | str | None,
        content: str | None,
    ) -> Comment:
        """Insert a comment under an existing post.

        Raises:
            ValidationError: On empty content or a malformed post id.
            NotFoundError: If the post does not exist.
        """
        cleaned = (content or "").strip()
        if not cleaned:
            raise ValidationError("Comment content is required")
        parsed_id = parse_post_id(post_id)

        if self.get_post(parsed_id) is None:
            raise NotFoundError("Post not found")

        comment = Comment(post_id=parsed_id, user_id=ctx.user_id, content=cleaned)
        self.session.add(comment)
        try:
            self.session.flush()
        except SQLAlchemyError as err:
            logger.exception("Database error creating comment")
            raise StorageError("Database error creating comment") from err
        logger.info("Comment created with ID %d on post %d", comment.id, parsed_id)
        return comment

    # -- files ------------------------------------------------------------

    def get_file(self, file_id: int) -> FileAttachment | None:
        """Return file metadata by identifier."""
        return self.session.get(FileAttachment, file_id)

    def attach_files(
        self,
        owner_kind: OwnerKind,
        owner_id: int,
        uploads: Sequence[StoredUpload],
    ) -> list[FileAttachment]:
        """Insert one file row per stored upload for a post or comment.

        Raises:
            StorageError: If any row fails to insert; no row is kept.
        """
        if owner_kind not in ("post", "comment"):
            raise ValidationError(f"Unknown file owner kind: {owner_kind}")

        rows = [
            FileAttachment(
                post_id=owner_id if owner_kind == "post" else None,
                comment_id=owner_id if owner_kind == "comment" else None,
                file_name=upload.original_name,
                file_path=upload.generated_path,
                mime_type=upload.mime_type,
            )
            for upload in uploads
        ]
        if not rows:
            return rows

        try:
            with self.session.begin_nested():
                self.session.add_all(rows)
        except SQLAlchemyError as err:
            logger.exception("Database error saving files for %s %d", owner_kind, owner_id)
            raise StorageError("Database error saving files") from err
        logger.info("Attached %d file(s) to %s %d", len(rows), owner_kind, owner_id)
        return rows

    # -- feed -------------------------------------------------------------

    def count_posts(self, topic: str | None = None) -> int:
        """Return the number of posts, optionally restricted to one topic."""
        stmt = select(func.count(func.distinct(Post.id))).select_from(Post)
        if topic:
            stmt = (
                stmt.join(PostTopic, PostTopic.post_id == Post.id)
                .join(Topic, Topic.id == PostTopic.topic_id)
                .where(Topic.name == topic)
            )
        return self.session.scalar(stmt) or 0

    def list_feed(self, page: int, per_page: int, topic: str | None = None) -> FeedResponse:
        """Return one page of posts with their topic, files and comments.

        Posts are newest first; comments under each post are oldest first.
        Comment and file lookups are scoped to the posts on the page.

        Raises:
            ValidationError: If ``per_page`` is not positive.
        """
        if per_page <= 0:
            raise ValidationError("perPage must be a positive integer")
        page = max(page, 1)

        try:
            total = self.count_posts(topic)
            total_pages = -(-total // per_page)
            offset = (page - 1) * per_page
            if offset >= total:
                return FeedResponse(posts=[], total=total, total_pages=total_pages)

            post_stmt = (
                select(
                    Post.id,
                    Post.content,
                    Post.timestamp,
                    User.moniker,
                    User.public_key,
                    Topic.name.label("topic"),
                )
                .join(User, User.id == Post.user_id)
                .outerjoin(PostTopic, PostTopic.post_id == Post.id)
                .outerjoin(Topic, Topic.id == PostTopic.topic_id)
            )
            if topic:
                post_stmt = post_stmt.where(Topic.name == topic)
            post_stmt = (
                post_stmt.order_by(Post.timestamp.desc(), Post.id.desc())
                .limit(min(per_page, total))
                .offset(offset)
            )
            post_rows = self.session.execute(post_stmt).all()
            if not post_rows:
                return FeedResponse(posts=[], total=total, total_pages=total_pages)

            post_ids = [row.id for row in post_rows]
            comment_rows = self.session.execute(
                select(
                    Comment.id,
                    Comment.post_id,
                    Comment.content,
                    Comment.timestamp,
                    User.moniker,
                    User.public_key,
                )
                .join(User, User.id == Comment.user_id)
                .where(Comment.post_id.in_(post_ids))
                .order_by(Comment.timestamp.asc(), Comment.id.asc())
            ).all()
            comment_ids = [row.id for row in comment_rows]

            owner_filter = FileAttachment.post_id.in_(post_ids)
            if comment_ids:
                owner_filter = or_(owner_filter, FileAttachment.comment_id.in_(comment_ids))
            file_rows = self.session.scalars(
                select(FileAttachment).where(owner_filter).order_by(FileAttachment.id)
            ).all()
        except SQLAlchemyError as err:
            logger.exception("Database error fetching feed")
            raise StorageError("Database error fetching posts") from err

        post_files: dict[int, list[FileOut]] = defaultdict(list)
        comment_files: dict[int, list[FileOut]] = defaultdict(list)
        for record in file_rows:
            out = FileOut.model_validate(record)
            if record.post_id is not None:
                post_files[record.post_id].append(out)
            elif record.comment_id is not None:
                comment_files[record.comment_id].append(out)

        comments_by_post: dict[int, list[CommentOut]] = defaultdict(list)
        for row in comment_rows:
            comments_by_post[row.post_id].append(
                CommentOut(
                    id=row.id,
                    post_id=row.post_id,
                    content=row.content,
                    timestamp=row.timestamp,
                    moniker=row.moniker,
                    public_key=row.public_key,
                    files=comment_files[row.id],
                )
            )

        posts = [
            PostOut(
                id=row.id,
                content=row.content,
                timestamp=row.timestamp,
                moniker=row.moniker,
                public_key=row.public_key,
                topic=row.topic,
                topics=[row.topic] if row.topic else [],
                files=post_files[row.id],
                comments=comments_by_post[row.id],
            )
            for row in post_rows
        ]
        logger.debug("Feed page %d/%d with %d posts", page, total_pages, len(posts))
        return FeedResponse(posts=posts, total=total, total_pages=total_pages)
