"""Service layer: credentials and attachment storage."""

from .attachments import AttachmentManager, ServedFile, StoredUpload
from .credentials import CredentialStore, RegisteredIdentity

__all__ = [
    "AttachmentManager",
    "CredentialStore",
    "RegisteredIdentity",
    "ServedFile",
    "StoredUpload",
]
