"""Uploads component port definitions - protocols for dependencies."""

from datetime import datetime
from typing import BinaryIO, Protocol

from comicstop.core.ports.storage import StoredBlob


class BlobStorePort(Protocol):
    """Protocol for the subset of blob storage the uploads component uses."""

    def store(
        self,
        data: bytes | BinaryIO,
        namespace: str,
        *,
        filename: str,
        content_type: str,
    ) -> StoredBlob:
        """Store bytes under a fresh key in namespace."""
        ...

    def delete(self, key: str) -> bool:
        """Delete a stored object."""
        ...

    def public_url(self, key: str) -> str:
        """Stable URL for a key."""
        ...


class ClockPort(Protocol):
    """Protocol for time operations."""

    def now_utc(self) -> datetime:
        """Return current UTC time."""
        ...
