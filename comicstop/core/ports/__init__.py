# comicstop ports (Protocol interfaces)
# Abstract interfaces for adapters; no implementations here

from comicstop.core.ports.db import (
    ComicRepoPort,
    ContributorRepoPort,
    CreatorProfileRepoPort,
    UserRepoPort,
)
from comicstop.core.ports.notify import NotificationKind, NotifierPort, RenderedPayload
from comicstop.core.ports.storage import (
    BlobStorePort,
    InvalidKeyError,
    KeyExistsError,
    KeyNotFoundError,
    StorageError,
    StoredBlob,
)
from comicstop.core.ports.time import TimePort

__all__ = [
    # Persistence
    "ComicRepoPort",
    "ContributorRepoPort",
    "CreatorProfileRepoPort",
    "UserRepoPort",
    # Blob store
    "BlobStorePort",
    "InvalidKeyError",
    "KeyExistsError",
    "KeyNotFoundError",
    "StorageError",
    "StoredBlob",
    # Notifications
    "NotificationKind",
    "NotifierPort",
    "RenderedPayload",
    # Time
    "TimePort",
]
