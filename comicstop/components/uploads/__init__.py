"""Uploads component - raw uploads and upload-reference resolution."""

from comicstop.components.uploads.component import (
    UploadComponent,
    natural_sort_key,
    resolve_upload_reference,
)
from comicstop.components.uploads.models import (
    ImageFile,
    ResolveUploadInput,
    ResolveUploadOutput,
    UploadedImage,
    UploadFileInput,
    UploadFileOutput,
    UploadImagesInput,
    UploadImagesOutput,
    UploadLinkage,
)
from comicstop.components.uploads.ports import BlobStorePort, ClockPort

__all__ = [
    # Entry points
    "resolve_upload_reference",
    "natural_sort_key",
    # Component
    "UploadComponent",
    # Models
    "ResolveUploadInput",
    "ResolveUploadOutput",
    "UploadLinkage",
    "UploadFileInput",
    "UploadFileOutput",
    "ImageFile",
    "UploadImagesInput",
    "UploadImagesOutput",
    "UploadedImage",
    # Ports
    "BlobStorePort",
    "ClockPort",
]
