# tests/test_attachments.py
"""Tests for upload storage and file resolution."""

from __future__ import annotations

import io
import re
from dataclasses import dataclass
from typing import BinaryIO

import pytest

from silica_social.core.errors import NotFoundError, StorageError, ValidationError
from silica_social.repositories.content_repo import ContentRepository
from silica_social.services.attachments import AttachmentManager, generate_storage_name


@dataclass
class FakeUpload:
    filename: str | None
    content_type: str | None
    file: BinaryIO


def _fake(name: str, data: bytes = b"data", mime: str | None = "text/plain") -> FakeUpload:
    return FakeUpload(filename=name, content_type=mime, file=io.BytesIO(data))


def test_storage_name_keeps_extension() -> None:
    name = generate_storage_name("holiday photo.JPG")
    assert re.fullmatch(r"\d+-[0-9a-f]{16}\.JPG", name)
    assert re.fullmatch(r"\d+-[0-9a-f]{16}", generate_storage_name("README"))


def test_storage_names_do_not_collide() -> None:
    names = {generate_storage_name("a.txt") for _ in range(100)}
    assert len(names) == 100


def test_accept_upload_writes_bytes(attachments: AttachmentManager, uploads_dir) -> None:
    payload = b"\x00\x01binary\xff" * 1000
    stored = attachments.accept_upload("../evil name.bin", "application/x-thing", io.BytesIO(payload))

    assert stored.original_name == "../evil name.bin"
    assert stored.mime_type == "application/x-thing"
    assert stored.size_bytes == len(payload)
    assert "/" not in stored.generated_path
    assert (uploads_dir / stored.generated_path).read_bytes() == payload


def test_accept_upload_guesses_missing_mime(attachments: AttachmentManager) -> None:
    assert attachments.accept_upload("pic.png", None, io.BytesIO(b"x")).mime_type == "image/png"
    assert (
        attachments.accept_upload("blob.unknownext", None, io.BytesIO(b"x")).mime_type
        == "application/octet-stream"
    )


def test_accept_upload_rejects_oversized_file(uploads_dir, media_dir) -> None:
    manager = AttachmentManager(uploads_dir, max_upload_bytes=10, media_dir=media_dir)

    with pytest.raises(ValidationError):
        manager.accept_upload("big.txt", "text/plain", io.BytesIO(b"x" * 11))
    assert list(uploads_dir.iterdir()) == []

    stored = manager.accept_upload("fits.txt", "text/plain", io.BytesIO(b"x" * 10))
    assert stored.size_bytes == 10


def test_accept_uploads_rejects_more_than_five(attachments: AttachmentManager, uploads_dir) -> None:
    uploads = [_fake(f"f{i}.txt") for i in range(6)]

    with pytest.raises(ValidationError):
        attachments.accept_uploads(uploads)
    assert list(uploads_dir.iterdir()) == []


def test_accept_uploads_stores_up_to_five(attachments: AttachmentManager, uploads_dir) -> None:
    stored = attachments.accept_uploads([_fake(f"f{i}.txt", f"{i}".encode()) for i in range(5)])

    assert [s.original_name for s in stored] == [f"f{i}.txt" for i in range(5)]
    assert len(list(uploads_dir.iterdir())) == 5


def test_accept_uploads_skips_empty_fields(attachments: AttachmentManager) -> None:
    assert attachments.accept_uploads([_fake(""), FakeUpload(None, None, io.BytesIO())]) == []
    assert attachments.accept_uploads(None) == []


def test_serve_file_round_trip(attachments: AttachmentManager, repo: ContentRepository, ctx) -> None:
    payload = b"%PDF-1.4 original bytes"
    post = repo.create_post(ctx, "with pdf")
    stored = attachments.accept_upload("report.pdf", "application/pdf", io.BytesIO(payload))
    (row,) = repo.attach_files("post", post.id, [stored])
    repo.commit()

    served = attachments.serve_file(repo, row.id)
    assert served.path.read_bytes() == payload
    assert served.file_name == "report.pdf"
    assert served.mime_type == "application/pdf"
    assert served.inline is False


def test_serve_image_is_inline(attachments: AttachmentManager, repo: ContentRepository, ctx) -> None:
    post = repo.create_post(ctx, "with image")
    stored = attachments.accept_upload("cat.gif", "image/gif", io.BytesIO(b"GIF89a"))
    (row,) = repo.attach_files("post", post.id, [stored])

    assert attachments.serve_file(repo, row.id).inline is True


def test_serve_unknown_file(attachments: AttachmentManager, repo: ContentRepository) -> None:
    with pytest.raises(NotFoundError):
        attachments.serve_file(repo, 12345)


def test_serve_missing_blob(attachments: AttachmentManager, repo: ContentRepository, ctx, uploads_dir) -> None:
    post = repo.create_post(ctx, "blob goes away")
    stored = attachments.accept_upload("gone.txt", "text/plain", io.BytesIO(b"bye"))
    (row,) = repo.attach_files("post", post.id, [stored])
    (uploads_dir / stored.generated_path).unlink()

    with pytest.raises(StorageError):
        attachments.serve_file(repo, row.id)


def test_list_media_gifs(attachments: AttachmentManager, media_dir) -> None:
    for name in ("b.gif", "a.GIF", "still.png", "notes.txt"):
        (media_dir / name).write_bytes(b"x")
    (media_dir / "folder.gif").mkdir()

    assert attachments.list_media_gifs() == ["a.GIF", "b.gif"]


def test_list_media_gifs_missing_dir(uploads_dir, tmp_path) -> None:
    manager = AttachmentManager(uploads_dir, media_dir=tmp_path / "absent")
    with pytest.raises(StorageError):
        manager.list_media_gifs()
