from datetime import UTC, datetime
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

# --- Enums / Literals ---
RoleType = Literal["user", "admin"]
# Coarse and fine lifecycle fields are kept side by side; callers pick one.
ComicStatus = Literal["draft", "published"]
PublishStatus = Literal["draft", "scheduled", "published", "archived"]
LinkageMode = Literal["single_file", "multi_page"]
ThumbnailSource = Literal["external", "stored"]


def utc_now() -> datetime:
    return datetime.now(UTC)


# --- Users & Creators ---

class User(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    username: str
    email: str | None = None
    roles: list[RoleType] = Field(default_factory=lambda: ["user"])
    is_creator_enabled: bool = False
    # Legacy mirror of is_creator_enabled for older clients
    is_creator: bool = False
    creator_disabled_at: datetime | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class CreatorProfile(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    display_name: str | None = None
    bio: str | None = None
    social_links: dict[str, str] = Field(default_factory=dict)
    website_url: str | None = None
    accept_donations: bool = False
    allow_comments: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


# --- Comics ---

class FileReference(BaseModel):
    key: str
    url: str = ""
    name: str
    size: int = 0
    content_type: str = "application/octet-stream"
    # Placeholder key for page-only uploads; nothing is stored under it
    synthetic: bool = False


class Thumbnail(BaseModel):
    source: ThumbnailSource
    url: str
    key: str | None = None


class ContributorGroup(BaseModel):
    role: str
    names: list[str] = Field(default_factory=list)


class Comic(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    title: str
    subtitle: str | None = None
    description: str | None = None
    genres: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    linkage_mode: LinkageMode
    primary_file: FileReference
    page_order: list[str] = Field(default_factory=list)

    thumbnail: Thumbnail | None = None

    status: ComicStatus = "draft"
    publish_status: PublishStatus = "draft"
    published_at: datetime | None = None
    scheduled_at: datetime | None = None

    owner_id: UUID
    series_id: UUID | None = None

    is_public: bool = True
    age_restricted: bool = False
    is_active: bool = True

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def is_owned_by(self, user_id: UUID) -> bool:
        return self.is_active and self.owner_id == user_id
