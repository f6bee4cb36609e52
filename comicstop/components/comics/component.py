"""
Comic lifecycle component.

Owns creation, partial updates, publish-status moves, draft preview and
soft delete of comics. Expected failures are returned as LifecycleError
values; blob cleanup is best-effort and never fails an operation.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

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
from comicstop.components.uploads import ResolveUploadInput, resolve_upload_reference
from comicstop.core.ports.storage import StorageError
from comicstop.domain.entities import Comic, ContributorGroup, PublishStatus, Thumbnail
from comicstop.domain.errors import ErrorKind, LifecycleError, not_found_or_forbidden
from comicstop.domain.normalize import (
    coerce_bool,
    normalize_page_order,
    normalize_tags,
    parse_contributor_groups,
)
from comicstop.domain.retention import ensure_utc
from comicstop.domain.state import transition
from comicstop.rules.models import Rules

logger = logging.getLogger(__name__)

ComicInput = (
    CreateComicInput
    | PatchComicInput
    | PublishComicInput
    | ScheduleComicInput
    | DraftComicInput
    | ArchiveComicInput
    | DraftPreviewInput
    | DeleteComicInput
    | GetComicInput
    | ListOwnerComicsInput
)
ComicOutput = (
    CreateComicOutput
    | PatchComicOutput
    | StatusChangeOutput
    | DraftPreviewOutput
    | DeleteComicOutput
    | GetComicOutput
    | ListOwnerComicsOutput
)

MAX_PAGE_SIZE = 100


class ComicLifecycleComponent:
    """Component for the comic content lifecycle."""

    def __init__(
        self,
        comics: ComicRepoPort,
        contributors: ContributorRepoPort,
        store: BlobStorePort,
        clock: ClockPort,
        rules: Rules,
    ) -> None:
        self._comics = comics
        self._contributors = contributors
        self._store = store
        self._clock = clock
        self._rules = rules

    def run(self, input_data: ComicInput) -> ComicOutput:
        """Main dispatcher - routes to appropriate handler based on input type."""
        if isinstance(input_data, CreateComicInput):
            return self.run_create(input_data)
        elif isinstance(input_data, PatchComicInput):
            return self.run_patch(input_data)
        elif isinstance(input_data, PublishComicInput):
            return self.run_publish(input_data)
        elif isinstance(input_data, ScheduleComicInput):
            return self.run_schedule(input_data)
        elif isinstance(input_data, DraftComicInput):
            return self.run_draft(input_data)
        elif isinstance(input_data, ArchiveComicInput):
            return self.run_archive(input_data)
        elif isinstance(input_data, DraftPreviewInput):
            return self.run_draft_preview(input_data)
        elif isinstance(input_data, DeleteComicInput):
            return self.run_delete(input_data)
        elif isinstance(input_data, GetComicInput):
            return self.run_get(input_data)
        elif isinstance(input_data, ListOwnerComicsInput):
            return self.run_list_for_owner(input_data)
        else:
            raise TypeError(f"Unknown input type: {type(input_data)}")

    # --- Helpers ---

    def _get_owned(self, comic_id: UUID, owner_id: UUID) -> Comic | None:
        comic = self._comics.get_by_id(comic_id)
        if comic is None or not comic.is_owned_by(owner_id):
            return None
        return comic

    def _delete_blob_best_effort(self, key: str, what: str) -> None:
        try:
            self._store.delete(key)
        except (StorageError, OSError) as e:
            logger.warning("Failed to delete %s %s: %s", what, key, e)

    def _validate_thumbnail(self, upload: ThumbnailUpload) -> LifecycleError | None:
        limits = self._rules.uploads
        if not upload.data:
            return LifecycleError(
                kind=ErrorKind.UNSUPPORTED_UPLOAD,
                message="Thumbnail is empty",
                field="thumbnailUpload",
            )
        if len(upload.data) > limits.max_image_bytes:
            return LifecycleError(
                kind=ErrorKind.UPLOAD_TOO_LARGE,
                message=f"Thumbnail exceeds the {limits.max_image_bytes} byte limit",
                field="thumbnailUpload",
            )
        if upload.content_type not in limits.image_mime_types:
            return LifecycleError(
                kind=ErrorKind.UNSUPPORTED_UPLOAD,
                message=f"Thumbnail type '{upload.content_type}' is not an image",
                field="thumbnailUpload",
            )
        return None

    def _store_thumbnail(self, upload: ThumbnailUpload) -> Thumbnail:
        blob = self._store.store(
            upload.data,
            self._rules.storage.namespaces.thumbnails,
            filename=upload.filename,
            content_type=upload.content_type,
        )
        return Thumbnail(source="stored", url=blob.url, key=blob.key)

    def _replace_contributors(self, comic_id: UUID, groups: list[ContributorGroup]) -> None:
        self._contributors.delete_for_comic(comic_id)
        for group in groups:
            self._contributors.add(comic_id, group)

    def _save_or_drop_thumbnail(self, comic: Comic, stored: Thumbnail | None) -> None:
        """Save the comic; a thumbnail stored for this save is removed if the save fails."""
        try:
            self._comics.save(comic)
        except Exception:
            if stored is not None and stored.key:
                self._delete_blob_best_effort(stored.key, "unsaved thumbnail")
            raise

    @staticmethod
    def _status_error(message: str) -> LifecycleError:
        return LifecycleError(kind=ErrorKind.INVALID_VALUE, message=message, field="status")

    def _title_error(self, title: Any) -> LifecycleError | None:
        limits = self._rules.comics.title
        if isinstance(title, str) and limits.min <= len(title.strip()) <= limits.max:
            return None
        return LifecycleError(
            kind=ErrorKind.INVALID_VALUE,
            message=f"Title must be {limits.min}-{limits.max} characters",
            field="title",
        )

    @staticmethod
    def _page_order_error(comic: Comic, pages: list[str]) -> LifecycleError | None:
        if comic.linkage_mode == "single_file" and pages:
            return LifecycleError(
                kind=ErrorKind.INVALID_VALUE,
                message="A single-file comic has no page order",
                field="page_order",
            )
        if comic.linkage_mode == "multi_page" and not pages:
            return LifecycleError(
                kind=ErrorKind.MISSING_UPLOAD_REFERENCE,
                message="A page-batch comic needs at least one page",
                field="page_order",
            )
        return None

    # --- Handlers ---

    def run_create(self, input_data: CreateComicInput) -> CreateComicOutput:
        """Create a draft comic from an upload reference and metadata."""
        if not input_data.upload_agreement:
            return CreateComicOutput(
                comic=None,
                contributors=[],
                errors=[
                    LifecycleError(
                        kind=ErrorKind.AGREEMENT_REQUIRED,
                        message="You must accept the upload agreement",
                        field="upload_agreement",
                    )
                ],
                success=False,
            )

        title_error = self._title_error(input_data.title)
        if title_error:
            return CreateComicOutput(
                comic=None, contributors=[], errors=[title_error], success=False
            )

        resolved = resolve_upload_reference(
            ResolveUploadInput(
                file_id=input_data.file_id,
                page_order=normalize_page_order(input_data.page_order),
                file_name=input_data.file_name,
                file_size=input_data.file_size,
                file_type=input_data.file_type,
                file_url=input_data.file_url,
            ),
            self._store,
            self._clock,
            imagesets_namespace=self._rules.storage.namespaces.imagesets,
        )
        if not resolved.success or resolved.linkage is None:
            return CreateComicOutput(
                comic=None, contributors=[], errors=resolved.errors, success=False
            )
        linkage = resolved.linkage

        if input_data.thumbnail_file is not None:
            error = self._validate_thumbnail(input_data.thumbnail_file)
            if error:
                return CreateComicOutput(comic=None, contributors=[], errors=[error], success=False)

        thumbnail: Thumbnail | None = None
        stored: Thumbnail | None = None
        if input_data.thumbnail_file is not None:
            stored = thumbnail = self._store_thumbnail(input_data.thumbnail_file)
        elif input_data.thumbnail_url:
            thumbnail = Thumbnail(source="external", url=input_data.thumbnail_url)

        now = self._clock.now_utc()
        comic = Comic(
            title=input_data.title.strip(),
            subtitle=input_data.subtitle,
            description=input_data.description,
            genres=normalize_tags(input_data.genres),
            tags=normalize_tags(input_data.tags),
            linkage_mode=linkage.mode,
            primary_file=linkage.primary,
            page_order=linkage.page_order,
            thumbnail=thumbnail,
            status="draft",
            publish_status="draft",
            owner_id=input_data.owner_id,
            series_id=input_data.series_id,
            is_public=input_data.is_public,
            age_restricted=input_data.age_restricted,
            created_at=now,
            updated_at=now,
        )
        self._save_or_drop_thumbnail(comic, stored)

        contributors = list(input_data.contributors)
        for group in contributors:
            self._contributors.add(comic.id, group)

        logger.info("Created comic %s (%s) for %s", comic.id, linkage.mode, comic.owner_id)
        return CreateComicOutput(comic=comic, contributors=contributors, errors=[], success=True)

    def run_patch(self, input_data: PatchComicInput) -> PatchComicOutput:
        """Apply whitelisted field updates to an owned, active comic."""
        comic = self._get_owned(input_data.comic_id, input_data.owner_id)
        if comic is None:
            return PatchComicOutput(
                comic=None, contributors=[], errors=[not_found_or_forbidden()], success=False
            )

        raw = {k: v for k, v in input_data.updates.items() if k in PATCHABLE_FIELDS}
        now = self._clock.now_utc()
        changes: dict[str, Any] = {}

        def failed(error: LifecycleError) -> PatchComicOutput:
            return PatchComicOutput(comic=None, contributors=[], errors=[error], success=False)

        if "title" in raw:
            title_error = self._title_error(raw["title"])
            if title_error:
                return failed(title_error)
            changes["title"] = raw["title"].strip()
        for name in ("subtitle", "description"):
            if name in raw:
                changes[name] = raw[name]
        if "genres" in raw:
            changes["genres"] = normalize_tags(raw["genres"])
        if "tags" in raw:
            changes["tags"] = normalize_tags(raw["tags"])
        if "page_order" in raw:
            pages = normalize_page_order(raw["page_order"])
            page_error = self._page_order_error(comic, pages)
            if page_error:
                return failed(page_error)
            changes["page_order"] = pages
        for name in ("is_public", "age_restricted"):
            if name in raw and raw[name] is not None:
                changes[name] = coerce_bool(raw[name])
        if "series_id" in raw:
            series_id = raw["series_id"]
            changes["series_id"] = UUID(str(series_id)) if series_id else None

        new_contributors: list[ContributorGroup] | None = None
        if "contributors" in raw:
            new_contributors, errors = parse_contributor_groups(raw["contributors"])
            if errors:
                return PatchComicOutput(comic=None, contributors=[], errors=errors, success=False)

        if "status" in raw:
            status = raw["status"]
            if status not in ("draft", "published"):
                return failed(self._status_error(f"Unknown status: {status}"))
            if status == "published":
                moved = transition(comic, "published", now)
                changes["publish_status"] = moved.publish_status
                changes["published_at"] = moved.published_at
            changes["status"] = status

        if input_data.thumbnail_file is not None:
            error = self._validate_thumbnail(input_data.thumbnail_file)
            if error:
                return failed(error)

        previous = comic.thumbnail
        stored: Thumbnail | None = None
        if input_data.thumbnail_file is not None:
            stored = self._store_thumbnail(input_data.thumbnail_file)
            changes["thumbnail"] = stored
        elif "thumbnail_url" in raw:
            url = raw["thumbnail_url"]
            changes["thumbnail"] = Thumbnail(source="external", url=url) if url else None

        changes["updated_at"] = now
        updated = comic.model_copy(update=changes)
        self._save_or_drop_thumbnail(updated, stored)

        if "thumbnail" in changes and previous is not None and previous.source == "stored":
            if previous.key and previous != changes["thumbnail"]:
                self._delete_blob_best_effort(previous.key, "thumbnail")

        if new_contributors is not None:
            self._replace_contributors(updated.id, new_contributors)
            contributors = new_contributors
        else:
            contributors = self._contributors.list_for_comic(updated.id)

        return PatchComicOutput(comic=updated, contributors=contributors, errors=[], success=True)

    def _change_status(
        self,
        comic_id: UUID,
        owner_id: UUID,
        target: PublishStatus,
        scheduled_at: datetime | None = None,
    ) -> StatusChangeOutput:
        comic = self._get_owned(comic_id, owner_id)
        if comic is None:
            return StatusChangeOutput(comic=None, errors=[not_found_or_forbidden()], success=False)

        try:
            updated = transition(comic, target, self._clock.now_utc(), scheduled_at)
        except ValueError as e:
            return StatusChangeOutput(
                comic=None, errors=[self._status_error(str(e))], success=False
            )

        self._comics.save(updated)
        logger.info("Comic %s: %s -> %s", comic.id, comic.publish_status, target)
        return StatusChangeOutput(comic=updated, errors=[], success=True)

    def run_publish(self, input_data: PublishComicInput) -> StatusChangeOutput:
        return self._change_status(input_data.comic_id, input_data.owner_id, "published")

    def run_schedule(self, input_data: ScheduleComicInput) -> StatusChangeOutput:
        return self._change_status(
            input_data.comic_id,
            input_data.owner_id,
            "scheduled",
            scheduled_at=ensure_utc(input_data.at_datetime),
        )

    def run_draft(self, input_data: DraftComicInput) -> StatusChangeOutput:
        return self._change_status(input_data.comic_id, input_data.owner_id, "draft")

    def run_archive(self, input_data: ArchiveComicInput) -> StatusChangeOutput:
        return self._change_status(input_data.comic_id, input_data.owner_id, "archived")

    def run_draft_preview(self, input_data: DraftPreviewInput) -> DraftPreviewOutput:
        """Owner-only projection of a comic that is still a draft."""
        comic = self._get_owned(input_data.comic_id, input_data.owner_id)
        if comic is None:
            return DraftPreviewOutput(
                preview=None, errors=[not_found_or_forbidden()], success=False
            )

        if comic.status != "draft":
            return DraftPreviewOutput(
                preview=None,
                errors=[
                    LifecycleError(
                        kind=ErrorKind.PREVIEW_UNAVAILABLE,
                        message="Preview is only available for drafts",
                        field="status",
                    )
                ],
                success=False,
            )

        preview = DraftPreview(
            id=comic.id,
            title=comic.title,
            subtitle=comic.subtitle,
            description=comic.description,
            page_order=list(comic.page_order),
            thumbnail_url=comic.thumbnail.url if comic.thumbnail else None,
            created_at=comic.created_at,
            updated_at=comic.updated_at,
        )
        return DraftPreviewOutput(preview=preview, errors=[], success=True)

    def run_delete(self, input_data: DeleteComicInput) -> DeleteComicOutput:
        """Remove stored blobs (best-effort) then soft-delete the record."""
        comic = self._get_owned(input_data.comic_id, input_data.owner_id)
        if comic is None:
            return DeleteComicOutput(errors=[not_found_or_forbidden()], success=False)

        if not comic.primary_file.synthetic:
            self._delete_blob_best_effort(comic.primary_file.key, "comic file")

        thumbnail = comic.thumbnail
        if thumbnail is not None and thumbnail.source == "stored" and thumbnail.key:
            self._delete_blob_best_effort(thumbnail.key, "thumbnail")

        self._comics.save(
            comic.model_copy(update={"is_active": False, "updated_at": self._clock.now_utc()})
        )
        logger.info("Comic %s deleted by %s", comic.id, input_data.owner_id)
        return DeleteComicOutput(errors=[], success=True)

    def run_get(self, input_data: GetComicInput) -> GetComicOutput:
        """
        Read one comic.

        Owners see their own comics in any state. Everyone else only sees
        public, published comics; anything hidden looks like a missing one.
        """
        comic = self._comics.get_by_id(input_data.comic_id)
        visible = False
        if comic is not None and comic.is_active:
            if input_data.viewer_id is not None and comic.owner_id == input_data.viewer_id:
                visible = True
            else:
                visible = comic.is_public and comic.publish_status == "published"

        if comic is None or not visible:
            return GetComicOutput(
                comic=None,
                contributors=[],
                file_url=None,
                errors=[not_found_or_forbidden()],
                success=False,
            )

        file_url: str | None = None
        if not comic.primary_file.synthetic:
            try:
                file_url = self._store.presign(
                    comic.primary_file.key, self._rules.storage.presign_ttl_seconds
                )
            except StorageError as e:
                logger.warning("Could not presign %s: %s", comic.primary_file.key, e)
                file_url = comic.primary_file.url or None

        return GetComicOutput(
            comic=comic,
            contributors=self._contributors.list_for_comic(comic.id),
            file_url=file_url,
            errors=[],
            success=True,
        )

    def run_list_for_owner(self, input_data: ListOwnerComicsInput) -> ListOwnerComicsOutput:
        """Creator dashboard listing, newest first."""
        limit = max(1, min(input_data.limit, MAX_PAGE_SIZE))
        offset = max(0, input_data.offset)
        items, total = self._comics.list_by_owner(
            input_data.owner_id,
            publish_status=input_data.publish_status,
            limit=limit,
            offset=offset,
        )
        return ListOwnerComicsOutput(items=items, total=total, errors=[], success=True)
