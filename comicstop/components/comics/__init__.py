"""Comics component - comic content lifecycle."""

from comicstop.components.comics.component import ComicLifecycleComponent
from comicstop.components.comics.models import (
    PATCHABLE_FIELDS,
    ArchiveComicInput,
    CreateComicInput,
    CreateComicOutput,
    DeleteComicInput,
    DeleteComicOutput,
    DraftComicInput,
    DraftPreview,
    DraftPreviewInput,
    DraftPreviewOutput,
    GetComicInput,
    GetComicOutput,
    ListOwnerComicsInput,
    ListOwnerComicsOutput,
    PatchComicInput,
    PatchComicOutput,
    PublishComicInput,
    ScheduleComicInput,
    StatusChangeOutput,
    ThumbnailUpload,
)
from comicstop.components.comics.ports import (
    BlobStorePort,
    ClockPort,
    ComicRepoPort,
    ContributorRepoPort,
)

__all__ = [
    # Component
    "ComicLifecycleComponent",
    # Models
    "PATCHABLE_FIELDS",
    "CreateComicInput",
    "CreateComicOutput",
    "PatchComicInput",
    "PatchComicOutput",
    "PublishComicInput",
    "ScheduleComicInput",
    "DraftComicInput",
    "ArchiveComicInput",
    "StatusChangeOutput",
    "DraftPreviewInput",
    "DraftPreview",
    "DraftPreviewOutput",
    "DeleteComicInput",
    "DeleteComicOutput",
    "GetComicInput",
    "GetComicOutput",
    "ListOwnerComicsInput",
    "ListOwnerComicsOutput",
    "ThumbnailUpload",
    # Ports
    "ComicRepoPort",
    "ContributorRepoPort",
    "BlobStorePort",
    "ClockPort",
]
