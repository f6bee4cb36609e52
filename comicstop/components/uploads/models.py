"""Uploads component models - frozen dataclass inputs and outputs."""

from dataclasses import dataclass, field
from uuid import UUID

from comicstop.domain.entities import FileReference, LinkageMode
from comicstop.domain.errors import LifecycleError


@dataclass(frozen=True)
class ResolveUploadInput:
    """Upload fields of a create payload, already normalized."""

    file_id: str | None = None
    page_order: list[str] = field(default_factory=list)
    # Declared metadata for file_id; trusted as provided
    file_name: str | None = None
    file_size: int | None = None
    file_type: str | None = None
    file_url: str | None = None


@dataclass(frozen=True)
class UploadLinkage:
    """How a comic points at its stored content."""

    primary: FileReference
    page_order: list[str]
    mode: LinkageMode


@dataclass(frozen=True)
class ResolveUploadOutput:
    linkage: UploadLinkage | None
    errors: list[LifecycleError]
    success: bool


@dataclass(frozen=True)
class UploadFileInput:
    """A single comic file (PDF, CBZ, ...)."""

    owner_id: UUID
    data: bytes
    filename: str
    content_type: str


@dataclass(frozen=True)
class UploadFileOutput:
    file: FileReference | None
    errors: list[LifecycleError]
    success: bool


@dataclass(frozen=True)
class ImageFile:
    data: bytes
    filename: str
    content_type: str


@dataclass(frozen=True)
class UploadImagesInput:
    """A batch of page images in any order."""

    owner_id: UUID
    files: list[ImageFile]


@dataclass(frozen=True)
class UploadedImage:
    key: str
    url: str
    name: str
    size: int
    content_type: str
    position: int


@dataclass(frozen=True)
class UploadImagesOutput:
    upload_id: str | None
    page_order: list[str]
    images: list[UploadedImage]
    errors: list[LifecycleError]
    success: bool
