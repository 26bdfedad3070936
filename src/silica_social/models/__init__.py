# src/silica_social/models/__init__.py
"""SQLAlchemy models for the Silica Social application."""

from .file import FileAttachment
from .post import Comment, Post
from .topic import PostTopic, Topic
from .user import User

__all__ = [
    "Comment",
    "FileAttachment",
    "Post",
    "PostTopic",
    "Topic",
    "User",
]
