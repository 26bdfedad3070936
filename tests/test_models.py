"""Sanity checks on the ORM mapping and its integrity constraints."""

import pytest
from sqlalchemy.exc import IntegrityError

from silica_social.models import Comment, FileAttachment, Post, PostTopic, Topic, User


def test_table_names():
    """Model classes expose the expected table names."""
    assert User.__tablename__ == "users"
    assert Post.__tablename__ == "posts"
    assert Comment.__tablename__ == "comments"
    assert FileAttachment.__tablename__ == "files"
    assert Topic.__tablename__ == "topics"
    assert PostTopic.__tablename__ == "post_topics"


def test_post_topics_primary_key():
    pk_names = {c.name for c in PostTopic.__table__.primary_key}
    assert pk_names == {"post_id", "topic_id"}


def test_file_requires_exactly_one_owner(db_session, test_user):
    post = Post(user_id=test_user.id, content="owner")
    db_session.add(post)
    db_session.flush()

    with pytest.raises(IntegrityError):
        with db_session.begin_nested():
            db_session.add(FileAttachment(file_name="n", file_path="p", mime_type="text/plain"))

    comment = Comment(post_id=post.id, user_id=test_user.id, content="c")
    db_session.add(comment)
    db_session.flush()
    with pytest.raises(IntegrityError):
        with db_session.begin_nested():
            db_session.add(
                FileAttachment(
                    post_id=post.id,
                    comment_id=comment.id,
                    file_name="n",
                    file_path="p",
                    mime_type="text/plain",
                )
            )


def test_comment_requires_existing_post(db_session, test_user):
    with pytest.raises(IntegrityError):
        with db_session.begin_nested():
            db_session.add(Comment(post_id=31337, user_id=test_user.id, content="dangling"))


def test_post_cannot_link_two_topics(db_session, test_user):
    post = Post(user_id=test_user.id, content="p")
    first, second = Topic(name="one"), Topic(name="two")
    db_session.add_all([post, first, second])
    db_session.flush()
    db_session.add(PostTopic(post_id=post.id, topic_id=first.id))
    db_session.flush()

    with pytest.raises(IntegrityError):
        with db_session.begin_nested():
            db_session.add(PostTopic(post_id=post.id, topic_id=second.id))


def test_file_is_image():
    assert FileAttachment(mime_type="image/png").is_image
    assert not FileAttachment(mime_type="application/pdf").is_image


def test_init_db_creates_storage_dirs(tmp_path, monkeypatch):
    from silica_social import init_db as init_db_module
    from silica_social.core.settings import settings

    monkeypatch.setattr(settings, "data_dir", tmp_path / "data")
    monkeypatch.setattr(settings, "uploads_dir", tmp_path / "data" / "uploads")
    monkeypatch.setattr(settings, "media_dir", tmp_path / "media")
    calls = []
    monkeypatch.setattr(init_db_module, "create_tables", lambda: calls.append(True))

    init_db_module.init_db()

    assert (tmp_path / "data" / "uploads").is_dir()
    assert (tmp_path / "media").is_dir()
    assert calls == [True]
