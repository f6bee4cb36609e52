"""
Uploads component - stores raw comic files and page images and reconciles
upload references on comic payloads.

A comic points at its content either through one stored file (``file_id``)
or through an ordered list of stored page images (``page_order``). Page-only
comics get a synthetic primary key: unique, but nothing is stored under it.
"""

from __future__ import annotations

import logging
import os
import re
import secrets
from uuid import uuid4

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
from comicstop.core.ports.storage import StorageError
from comicstop.domain.entities import FileReference
from comicstop.domain.errors import ErrorKind, LifecycleError
from comicstop.rules.models import Rules

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

UploadInput = ResolveUploadInput | UploadFileInput | UploadImagesInput
UploadOutput = ResolveUploadOutput | UploadFileOutput | UploadImagesOutput

_DIGITS = re.compile(r"(\d+)")


def natural_sort_key(name: str) -> list[tuple[int, int | str]]:
    """Sort key that orders "page-2" before "page-10"."""
    key: list[tuple[int, int | str]] = []
    for part in _DIGITS.split(name.lower()):
        if not part:
            continue
        if part.isdigit():
            key.append((0, int(part)))
        else:
            key.append((1, part))
    return key


def synthetic_key(clock: ClockPort, namespace: str = "imagesets") -> str:
    """A unique placeholder key for a page-only comic."""
    stamp = clock.now_utc().strftime("%Y%m%dT%H%M%S%fZ")
    return f"{namespace}/{stamp}-{secrets.token_hex(8)}"


def resolve_upload_reference(
    input_data: ResolveUploadInput,
    store: BlobStorePort,
    clock: ClockPort,
    *,
    imagesets_namespace: str = "imagesets",
) -> ResolveUploadOutput:
    """Turn file_id / page_order into a single UploadLinkage."""
    file_id = (input_data.file_id or "").strip()
    pages = list(input_data.page_order)

    if not file_id and not pages:
        return ResolveUploadOutput(
            linkage=None,
            errors=[
                LifecycleError(
                    kind=ErrorKind.MISSING_UPLOAD_REFERENCE,
                    message="Either a file_id or a page_order is required",
                    field="file_id",
                )
            ],
            success=False,
        )

    if file_id:
        primary = FileReference(
            key=file_id,
            url=input_data.file_url or store.public_url(file_id),
            name=input_data.file_name or file_id.rsplit("/", 1)[-1],
            size=input_data.file_size or 0,
            content_type=input_data.file_type or DEFAULT_CONTENT_TYPE,
        )
        # An explicit file wins; any page order sent alongside it is dropped
        return ResolveUploadOutput(
            linkage=UploadLinkage(primary=primary, page_order=[], mode="single_file"),
            errors=[],
            success=True,
        )

    key = synthetic_key(clock, imagesets_namespace)
    primary = FileReference(
        key=key,
        url="",
        name=key.rsplit("/", 1)[-1],
        size=0,
        content_type=DEFAULT_CONTENT_TYPE,
        synthetic=True,
    )
    return ResolveUploadOutput(
        linkage=UploadLinkage(primary=primary, page_order=pages, mode="multi_page"),
        errors=[],
        success=True,
    )


class UploadComponent:
    """Component for raw uploads and upload-reference resolution."""

    def __init__(self, store: BlobStorePort, clock: ClockPort, rules: Rules) -> None:
        self._store = store
        self._clock = clock
        self._rules = rules

    def run(self, input_data: UploadInput) -> UploadOutput:
        """Main dispatcher - routes to appropriate handler based on input type."""
        if isinstance(input_data, ResolveUploadInput):
            return self.run_resolve(input_data)
        elif isinstance(input_data, UploadFileInput):
            return self.run_upload_file(input_data)
        elif isinstance(input_data, UploadImagesInput):
            return self.run_upload_images(input_data)
        else:
            raise TypeError(f"Unknown input type: {type(input_data)}")

    def run_resolve(self, input_data: ResolveUploadInput) -> ResolveUploadOutput:
        return resolve_upload_reference(
            input_data,
            self._store,
            self._clock,
            imagesets_namespace=self._rules.storage.namespaces.imagesets,
        )

    # --- Validation ---

    def _validate_file(
        self,
        filename: str,
        content_type: str,
        size: int,
        *,
        allowed_types: list[str],
        max_bytes: int,
        field: str,
    ) -> LifecycleError | None:
        if size == 0:
            return LifecycleError(
                kind=ErrorKind.UNSUPPORTED_UPLOAD,
                message=f"{filename or 'File'} is empty",
                field=field,
            )

        if size > max_bytes:
            return LifecycleError(
                kind=ErrorKind.UPLOAD_TOO_LARGE,
                message=f"{filename} exceeds the {max_bytes} byte limit",
                field=field,
            )

        extension = os.path.splitext(filename)[1].lower()
        if extension not in self._rules.uploads.allowlist_extensions:
            return LifecycleError(
                kind=ErrorKind.UNSUPPORTED_UPLOAD,
                message=f"File extension '{extension or '(none)'}' is not allowed",
                field=field,
            )

        if content_type not in allowed_types:
            return LifecycleError(
                kind=ErrorKind.UNSUPPORTED_UPLOAD,
                message=f"Content type '{content_type}' is not allowed",
                field=field,
            )

        return None

    # --- Handlers ---

    def run_upload_file(self, input_data: UploadFileInput) -> UploadFileOutput:
        """Store a single comic file under the comics namespace."""
        limits = self._rules.uploads
        error = self._validate_file(
            input_data.filename,
            input_data.content_type,
            len(input_data.data),
            allowed_types=limits.allowlist_mime_types,
            max_bytes=limits.max_upload_bytes,
            field="comic",
        )
        if error:
            return UploadFileOutput(file=None, errors=[error], success=False)

        blob = self._store.store(
            input_data.data,
            self._rules.storage.namespaces.comics,
            filename=input_data.filename,
            content_type=input_data.content_type,
        )
        logger.info("Stored comic file %s for %s", blob.key, input_data.owner_id)

        return UploadFileOutput(
            file=FileReference(
                key=blob.key,
                url=blob.url,
                name=blob.original_name,
                size=blob.size_bytes,
                content_type=blob.content_type,
            ),
            errors=[],
            success=True,
        )

    def run_upload_images(self, input_data: UploadImagesInput) -> UploadImagesOutput:
        """
        Store a batch of page images.

        Images are validated up front, then stored in natural filename order,
        so the returned page_order is the reading order.
        """
        limits = self._rules.uploads
        files = list(input_data.files)

        if not files:
            return UploadImagesOutput(
                upload_id=None,
                page_order=[],
                images=[],
                errors=[
                    LifecycleError(
                        kind=ErrorKind.MISSING_UPLOAD_REFERENCE,
                        message="No images were uploaded",
                        field="files",
                    )
                ],
                success=False,
            )

        if len(files) > limits.max_batch_files:
            return UploadImagesOutput(
                upload_id=None,
                page_order=[],
                images=[],
                errors=[
                    LifecycleError(
                        kind=ErrorKind.UPLOAD_TOO_LARGE,
                        message=f"At most {limits.max_batch_files} images per upload",
                        field="files",
                    )
                ],
                success=False,
            )

        errors: list[LifecycleError] = []
        for index, image in enumerate(files):
            error = self._validate_file(
                image.filename,
                image.content_type,
                len(image.data),
                allowed_types=limits.image_mime_types,
                max_bytes=limits.max_image_bytes,
                field=f"files[{index}]",
            )
            if error:
                errors.append(error)

        if errors:
            return UploadImagesOutput(
                upload_id=None, page_order=[], images=[], errors=errors, success=False
            )

        ordered = sorted(files, key=lambda f: natural_sort_key(f.filename))
        stored = self._store_batch(ordered)
        upload_id = uuid4().hex

        logger.info(
            "Stored %d page images for %s (upload %s)", len(stored), input_data.owner_id, upload_id
        )

        return UploadImagesOutput(
            upload_id=upload_id,
            page_order=[image.key for image in stored],
            images=stored,
            errors=[],
            success=True,
        )

    def _store_batch(self, ordered: list[ImageFile]) -> list[UploadedImage]:
        stored: list[UploadedImage] = []
        namespace = self._rules.storage.namespaces.pages
        try:
            for position, image in enumerate(ordered):
                blob = self._store.store(
                    image.data,
                    namespace,
                    filename=image.filename,
                    content_type=image.content_type,
                )
                stored.append(
                    UploadedImage(
                        key=blob.key,
                        url=blob.url,
                        name=blob.original_name,
                        size=blob.size_bytes,
                        content_type=blob.content_type,
                        position=position,
                    )
                )
        except StorageError:
            # Partial batches are not kept
            for image in stored:
                try:
                    self._store.delete(image.key)
                except (StorageError, OSError) as e:
                    logger.warning("Could not remove partial upload %s: %s", image.key, e)
            raise
        return stored
