# src/silica_social/services/attachments.py
"""Storage and retrieval of uploaded file blobs.

Blobs live in a flat directory keyed by a generated name; the database only
keeps the generated name, the uploader's original file name and the MIME type.
No MIME or extension filtering is applied: any file is accepted as long as it
fits under the size ceiling.
"""

from __future__ import annotations

import logging
import mimetypes
import secrets
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Protocol

from silica_social.core.errors import NotFoundError, StorageError, ValidationError
from silica_social.core.settings import settings
from silica_social.models import FileAttachment

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
DEFAULT_MIME_TYPE = "application/octet-stream"


class UploadLike(Protocol):
    """Subset of ``fastapi.UploadFile`` used by the manager."""

    filename: str | None
    content_type: str | None
    file: BinaryIO


class FileLookup(Protocol):
    def get_file(self, file_id: int) -> FileAttachment | None: ...


@dataclass(frozen=True)
class StoredUpload:
    """A blob persisted to the uploads directory, not yet linked to an owner."""

    generated_path: str
    original_name: str
    mime_type: str
    size_bytes: int


@dataclass(frozen=True)
class ServedFile:
    """Everything the HTTP layer needs to stream a stored file."""

    path: Path
    file_name: str
    mime_type: str
    inline: bool


def generate_storage_name(original_name: str) -> str:
    """Return ``<epoch-ms>-<16 hex><ext>`` keeping the original extension."""
    ext = Path(original_name).suffix
    return f"{int(time.time() * 1000)}-{secrets.token_hex(8)}{ext}"


class AttachmentManager:
    """Accepts uploads into durable storage and resolves them for download."""

    def __init__(
        self,
        uploads_dir: Path | None = None,
        *,
        max_upload_bytes: int | None = None,
        max_files: int | None = None,
        media_dir: Path | None = None,
    ) -> None:
        self.uploads_dir = Path(uploads_dir or settings.uploads_dir)
        self.max_upload_bytes = max_upload_bytes or settings.max_upload_bytes
        self.max_files = max_files or settings.max_files_per_request
        self.media_dir = Path(media_dir or settings.media_dir)

    def accept_upload(
        self,
        file_name: str,
        mime_type: str | None,
        stream: BinaryIO,
    ) -> StoredUpload:
        """Persist one upload under a generated name.

        Raises:
            ValidationError: If the file exceeds the size ceiling. The partial
                blob is removed.
            StorageError: If the blob cannot be written.
        """
        storage_name = generate_storage_name(file_name)
        target = self.uploads_dir / storage_name
        resolved_mime = (
            mime_type
            or mimetypes.guess_type(file_name)[0]
            or DEFAULT_MIME_TYPE
        )

        size = 0
        try:
            self.uploads_dir.mkdir(parents=True, exist_ok=True)
            with target.open("wb") as out:
                while chunk := stream.read(CHUNK_SIZE):
                    size += len(chunk)
                    if size > self.max_upload_bytes:
                        break
                    out.write(chunk)
        except OSError as err:
            logger.exception("Failed to write upload %s", storage_name)
            target.unlink(missing_ok=True)
            raise StorageError("Error saving file") from err

        if size > self.max_upload_bytes:
            target.unlink(missing_ok=True)
            raise ValidationError(
                f"File too large: {file_name} exceeds {self.max_upload_bytes} bytes"
            )

        logger.info("Stored upload %s as %s (%d bytes)", file_name, storage_name, size)
        return StoredUpload(
            generated_path=storage_name,
            original_name=file_name,
            mime_type=resolved_mime,
            size_bytes=size,
        )

    def accept_uploads(self, uploads: Sequence[UploadLike] | None) -> list[StoredUpload]:
        """Persist every non-empty upload of one request.

        More files than the per-request ceiling rejects the whole call before
        anything is written. Blobs written before a later failure are kept.
        """
        present = [upload for upload in uploads or [] if upload.filename]
        if len(present) > self.max_files:
            raise ValidationError(f"Too many files: at most {self.max_files} per request")
        return [
            self.accept_upload(upload.filename or "", upload.content_type, upload.file)
            for upload in present
        ]

    def resolve_path(self, generated_path: str) -> Path:
        """Return the absolute location of a stored blob."""
        return self.uploads_dir / generated_path

    def serve_file(self, lookup: FileLookup, file_id: int) -> ServedFile:
        """Resolve a file id to its blob and download metadata.

        Raises:
            NotFoundError: If no file row has this id.
            StorageError: If the row exists but the blob is missing.
        """
        record = lookup.get_file(file_id)
        if record is None:
            logger.info("File %s not found", file_id)
            raise NotFoundError("File not found")

        path = self.resolve_path(record.file_path)
        if not path.is_file():
            logger.error("Blob missing for file %d at %s", record.id, path)
            raise StorageError("Error serving file")

        return ServedFile(
            path=path,
            file_name=record.file_name,
            mime_type=record.mime_type,
            inline=record.is_image,
        )

    def list_media_gifs(self) -> list[str]:
        """Return the names of GIF files in the static media folder."""
        try:
            entries = sorted(
                entry.name
                for entry in self.media_dir.iterdir()
                if entry.is_file() and entry.name.lower().endswith(".gif")
            )
        except OSError as err:
            logger.error("Error reading media directory %s: %s", self.media_dir, err)
            raise StorageError("Unable to read media directory") from err
        return entries
