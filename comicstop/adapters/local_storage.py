"""
Local Filesystem Blob Store.

Implements the BlobStorePort interface using the local filesystem.
Used for development and single-server deployments.

Key behaviors:
- Each stored object gets a fresh key: ``<namespace>/<uuid><ext>``
- Object bytes live in ``<base>/<key>``, metadata in ``<base>/<key>.meta.json``
- Presigned URLs carry an expiry and an HMAC-SHA256 signature over
  ``key:expires`` that the serving route verifies
"""

from __future__ import annotations

import hashlib
import hmac
import json
import os
import time
from pathlib import Path, PurePosixPath
from typing import BinaryIO
from urllib.parse import quote, urlencode
from uuid import uuid4

from comicstop.core.ports.storage import (
    InvalidKeyError,
    KeyExistsError,
    KeyNotFoundError,
    StoredBlob,
)


class LocalBlobStore:
    """
    Local filesystem implementation of BlobStorePort.

    Example key: "comics/1b9d...c2.pdf" -> {base_path}/comics/1b9d...c2.pdf
    """

    def __init__(
        self,
        base_path: str | Path,
        *,
        public_base_url: str = "/files",
        signing_key: str = "dev-signing-key",
        create_dirs: bool = True,
    ) -> None:
        """
        Initialize local blob storage.

        Args:
            base_path: Root directory for storage
            public_base_url: URL prefix under which keys are served
            signing_key: Secret used to sign presigned URLs
            create_dirs: Whether to create the root directory
        """
        self.base_path = Path(base_path)
        self.public_base_url = public_base_url.rstrip("/")
        self._signing_key = signing_key.encode()

        if create_dirs:
            self.base_path.mkdir(parents=True, exist_ok=True)

    def _key_to_paths(self, key: str) -> tuple[Path, Path]:
        """Convert storage key to file paths (data and metadata)."""
        parts = PurePosixPath(key).parts
        if not parts or ".." in parts or key.startswith("/"):
            raise InvalidKeyError(key)
        data_path = self.base_path.joinpath(*parts)
        meta_path = data_path.with_name(data_path.name + ".meta.json")
        return data_path, meta_path

    @staticmethod
    def _read_bytes(data: bytes | BinaryIO) -> bytes:
        if isinstance(data, bytes):
            return data

        chunks = []
        while True:
            chunk = data.read(8192)
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)

    def _new_key(self, namespace: str, filename: str) -> str:
        extension = os.path.splitext(filename)[1].lower()
        return f"{namespace.strip('/')}/{uuid4().hex}{extension}"

    def store(
        self,
        data: bytes | BinaryIO,
        namespace: str,
        *,
        filename: str,
        content_type: str,
    ) -> StoredBlob:
        """Store payload bytes under a fresh key."""
        key = self._new_key(namespace, filename)
        data_path, meta_path = self._key_to_paths(key)

        if data_path.exists():
            raise KeyExistsError(key)

        payload = self._read_bytes(data)
        data_path.parent.mkdir(parents=True, exist_ok=True)

        with open(data_path, "wb") as f:
            f.write(payload)

        blob = StoredBlob(
            key=key,
            url=self.public_url(key),
            size_bytes=len(payload),
            content_type=content_type,
            original_name=filename,
        )

        with open(meta_path, "w") as f:
            json.dump(
                {
                    "key": blob.key,
                    "size_bytes": blob.size_bytes,
                    "content_type": blob.content_type,
                    "original_name": blob.original_name,
                    "sha256": hashlib.sha256(payload).hexdigest(),
                },
                f,
            )

        return blob

    def get(self, key: str) -> tuple[bytes, StoredBlob]:
        """Retrieve object bytes by key."""
        data_path, meta_path = self._key_to_paths(key)

        if not data_path.exists():
            raise KeyNotFoundError(key)

        with open(data_path, "rb") as f:
            data = f.read()

        content_type = "application/octet-stream"
        original_name = data_path.name
        if meta_path.exists():
            with open(meta_path) as f:
                meta = json.load(f)
            content_type = meta.get("content_type", content_type)
            original_name = meta.get("original_name", original_name)

        return data, StoredBlob(
            key=key,
            url=self.public_url(key),
            size_bytes=len(data),
            content_type=content_type,
            original_name=original_name,
        )

    def exists(self, key: str) -> bool:
        data_path, _ = self._key_to_paths(key)
        return data_path.exists()

    def delete(self, key: str) -> bool:
        """Delete object by key. Returns False if the key didn't exist."""
        data_path, meta_path = self._key_to_paths(key)

        if not data_path.exists():
            return False

        data_path.unlink()
        if meta_path.exists():
            meta_path.unlink()

        return True

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{quote(key)}"

    def _signature(self, key: str, expires: int) -> str:
        message = f"{key}:{expires}".encode()
        return hmac.new(self._signing_key, message, hashlib.sha256).hexdigest()

    def presign(self, key: str, ttl_seconds: int) -> str:
        """Generate a URL valid for ttl_seconds from now."""
        if not self.exists(key):
            raise KeyNotFoundError(key)

        expires = int(time.time()) + ttl_seconds
        query = urlencode({"expires": expires, "signature": self._signature(key, expires)})
        return f"{self.public_url(key)}?{query}"

    def verify_signature(
        self, key: str, expires: int, signature: str, *, now: float | None = None
    ) -> bool:
        """Check a presigned URL's signature and expiry."""
        current = time.time() if now is None else now
        if expires < current:
            return False
        return hmac.compare_digest(self._signature(key, expires), signature)
