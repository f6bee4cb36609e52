from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator
from pydantic.alias_generators import to_camel

from comicstop.domain.entities import (
    Comic,
    ComicStatus,
    ContributorGroup,
    FileReference,
    LinkageMode,
    PublishStatus,
    Thumbnail,
    User,
)


class RequestModel(BaseModel):
    """Accepts both snake_case and camelCase keys; strings are stripped before length checks."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True
    )


# --- Comics: requests ---
class ComicCreateRequest(RequestModel):
    title: str = Field(min_length=1, max_length=255)
    subtitle: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    upload_agreement: bool = False

    file_id: str | None = None
    # Lists arrive as JSON strings, comma text or real lists
    page_order: Any = None
    file_name: str | None = None
    file_size: int | None = Field(default=None, ge=0)
    file_type: str | None = None
    file_url: str | None = None

    genres: Any = None
    tags: Any = None
    contributors: Any = None

    thumbnail_url: str | None = None
    series_id: UUID | None = None
    is_public: bool = True
    age_restricted: bool = False


class ComicPatchRequest(RequestModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    subtitle: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    genres: Any = None
    tags: Any = None
    page_order: Any = None
    is_public: bool | None = None
    age_restricted: bool | None = None
    series_id: UUID | None = None
    thumbnail_url: str | None = None
    contributors: Any = None
    status: ComicStatus | None = None

    @field_validator("title", "status", mode="before")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        # Omitted means unchanged; an explicit null is rejected
        if value is None:
            raise ValueError("must not be null")
        return value


class ScheduleRequest(RequestModel):
    scheduled_at: datetime


# --- Comics: responses ---
class ComicResponse(BaseModel):
    id: UUID
    title: str
    subtitle: str | None = None
    description: str | None = None
    genres: list[str] = []
    tags: list[str] = []
    linkage_mode: LinkageMode
    primary_file: FileReference
    page_order: list[str] = []
    thumbnail: Thumbnail | None = None
    status: ComicStatus
    publish_status: PublishStatus
    published_at: datetime | None = None
    scheduled_at: datetime | None = None
    owner_id: UUID
    series_id: UUID | None = None
    is_public: bool
    age_restricted: bool
    created_at: datetime
    updated_at: datetime
    contributors: list[ContributorGroup] = []
    file_url: str | None = None

    @classmethod
    def from_comic(
        cls,
        comic: Comic,
        contributors: list[ContributorGroup] | None = None,
        file_url: str | None = None,
    ) -> "ComicResponse":
        return cls(
            **comic.model_dump(exclude={"is_active"}),
            contributors=contributors or [],
            file_url=file_url,
        )


class ComicListResponse(BaseModel):
    items: list[ComicResponse]
    total: int
    limit: int
    offset: int


class DraftPreviewResponse(BaseModel):
    id: UUID
    title: str
    subtitle: str | None = None
    description: str | None = None
    page_order: list[str] = []
    thumbnail_url: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# --- Uploads ---
class UploadedFileResponse(BaseModel):
    key: str
    url: str
    name: str
    size: int
    content_type: str


class UploadedImageResponse(UploadedFileResponse):
    position: int

    model_config = ConfigDict(from_attributes=True)


class UploadResponse(BaseModel):
    mode: LinkageMode
    file: UploadedFileResponse | None = None
    upload_id: str | None = None
    page_order: list[str] = []
    uploads: list[UploadedImageResponse] = []


# --- CreatorHub ---
class CreatorHubToggleRequest(BaseModel):
    enabled: StrictBool


class CreatorModeRequest(BaseModel):
    enable: Any = None


class CreatorUserResponse(BaseModel):
    id: UUID
    username: str
    email: str | None = None
    is_creator_enabled: bool
    is_creator: bool
    creator_disabled_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> "CreatorUserResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            is_creator_enabled=user.is_creator_enabled,
            is_creator=user.is_creator,
            creator_disabled_at=user.creator_disabled_at,
        )


class CreatorHubResponse(BaseModel):
    success: Literal[True] = True
    message: str
    user: CreatorUserResponse
    notified: bool


class CleanupResponse(BaseModel):
    success: Literal[True] = True
    message: str
    deleted_count: int
    scanned_count: int
