"""Comics component models - frozen dataclass inputs and outputs."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from comicstop.domain.entities import Comic, ContributorGroup, PublishStatus
from comicstop.domain.errors import LifecycleError

# Fields a PATCH may touch; anything else in the payload is ignored
PATCHABLE_FIELDS = frozenset(
    {
        "title",
        "subtitle",
        "description",
        "genres",
        "tags",
        "page_order",
        "is_public",
        "age_restricted",
        "series_id",
        "thumbnail_url",
        "contributors",
        "status",
    }
)


@dataclass(frozen=True)
class ThumbnailUpload:
    """An uploaded thumbnail image."""

    data: bytes
    filename: str
    content_type: str


@dataclass(frozen=True)
class CreateComicInput:
    """Input for creating a comic. List fields arrive normalized."""

    owner_id: UUID
    title: str
    upload_agreement: bool = False
    file_id: str | None = None
    page_order: list[str] = field(default_factory=list)
    file_name: str | None = None
    file_size: int | None = None
    file_type: str | None = None
    file_url: str | None = None
    subtitle: str | None = None
    description: str | None = None
    genres: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    contributors: list[ContributorGroup] = field(default_factory=list)
    thumbnail_url: str | None = None
    thumbnail_file: ThumbnailUpload | None = None
    series_id: UUID | None = None
    is_public: bool = True
    age_restricted: bool = False


@dataclass(frozen=True)
class CreateComicOutput:
    comic: Comic | None
    contributors: list[ContributorGroup]
    errors: list[LifecycleError]
    success: bool


@dataclass(frozen=True)
class PatchComicInput:
    """Partial update. Keys outside PATCHABLE_FIELDS are ignored."""

    comic_id: UUID
    owner_id: UUID
    updates: dict[str, Any]
    thumbnail_file: ThumbnailUpload | None = None


@dataclass(frozen=True)
class PatchComicOutput:
    comic: Comic | None
    contributors: list[ContributorGroup]
    errors: list[LifecycleError]
    success: bool


@dataclass(frozen=True)
class PublishComicInput:
    comic_id: UUID
    owner_id: UUID


@dataclass(frozen=True)
class ScheduleComicInput:
    comic_id: UUID
    owner_id: UUID
    at_datetime: datetime


@dataclass(frozen=True)
class DraftComicInput:
    comic_id: UUID
    owner_id: UUID


@dataclass(frozen=True)
class ArchiveComicInput:
    comic_id: UUID
    owner_id: UUID


@dataclass(frozen=True)
class StatusChangeOutput:
    """Output for publish, schedule, draft and archive."""

    comic: Comic | None
    errors: list[LifecycleError]
    success: bool


@dataclass(frozen=True)
class DraftPreviewInput:
    comic_id: UUID
    owner_id: UUID


@dataclass(frozen=True)
class DraftPreview:
    """Read-only projection of a draft. Not the full record."""

    id: UUID
    title: str
    subtitle: str | None
    description: str | None
    page_order: list[str]
    thumbnail_url: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class DraftPreviewOutput:
    preview: DraftPreview | None
    errors: list[LifecycleError]
    success: bool


@dataclass(frozen=True)
class DeleteComicInput:
    comic_id: UUID
    owner_id: UUID


@dataclass(frozen=True)
class DeleteComicOutput:
    errors: list[LifecycleError]
    success: bool


@dataclass(frozen=True)
class GetComicInput:
    comic_id: UUID
    viewer_id: UUID | None = None


@dataclass(frozen=True)
class GetComicOutput:
    comic: Comic | None
    contributors: list[ContributorGroup]
    file_url: str | None
    errors: list[LifecycleError]
    success: bool


@dataclass(frozen=True)
class ListOwnerComicsInput:
    owner_id: UUID
    publish_status: PublishStatus | None = None
    limit: int = 20
    offset: int = 0


@dataclass(frozen=True)
class ListOwnerComicsOutput:
    items: list[Comic]
    total: int
    errors: list[LifecycleError]
    success: bool
