"""
Blob Store Port.

Protocol-based interface for binary object storage.
Implementations: Local filesystem (comicstop.adapters.local_storage).
An S3-compatible adapter satisfies the same protocol.

Keys are generated by the store: ``<namespace>/<uuid><ext>``. Callers keep
the key on their records and later use it to delete or presign.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Protocol


@dataclass(frozen=True)
class StoredBlob:
    """Metadata for a stored object."""

    key: str
    url: str
    size_bytes: int
    content_type: str
    original_name: str


class BlobStorePort(Protocol):
    """
    Object storage port interface.

    Best-effort callers wrap delete() in their own error handling; the
    store itself reports failures by raising StorageError.
    """

    def store(
        self,
        data: bytes | BinaryIO,
        namespace: str,
        *,
        filename: str,
        content_type: str,
    ) -> StoredBlob:
        """
        Store a payload under a fresh key in the given namespace.

        Returns:
            StoredBlob with the stable key and a retrievable URL
        """
        ...

    def delete(self, key: str) -> bool:
        """
        Delete object by key.

        Returns:
            True if deleted, False if key didn't exist
        """
        ...

    def presign(self, key: str, ttl_seconds: int) -> str:
        """
        Generate a time-limited access URL.

        Raises:
            KeyNotFoundError: If key doesn't exist
        """
        ...

    def public_url(self, key: str) -> str:
        """Stable (non-expiring) URL for a key, whether or not it exists yet."""
        ...


class StorageError(Exception):
    """Base class for storage errors."""


class KeyExistsError(StorageError):
    """Raised when attempting to write to an existing key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Key already exists: {key}")


class KeyNotFoundError(StorageError):
    """Raised when key doesn't exist."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Key not found: {key}")


class InvalidKeyError(StorageError):
    """Raised when a key would escape the storage root."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Invalid storage key: {key}")
