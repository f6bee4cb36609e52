"""
Comics API routes.

Create and patch accept either a JSON body or a multipart form; a form may
carry a ``thumbnailUpload`` file. List-shaped fields are normalized before
they reach the lifecycle component.
"""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile
from pydantic import ValidationError

from comicstop.api.deps import (
    get_comic_component,
    get_current_user,
    get_optional_user,
    get_upload_component,
    raise_for_errors,
)
from comicstop.api.schemas import (
    ComicCreateRequest,
    ComicListResponse,
    ComicPatchRequest,
    ComicResponse,
    DraftPreviewResponse,
    ScheduleRequest,
    UploadedFileResponse,
    UploadedImageResponse,
    UploadResponse,
)
from comicstop.components.comics import (
    ArchiveComicInput,
    ComicLifecycleComponent,
    CreateComicInput,
    DeleteComicInput,
    DraftComicInput,
    DraftPreviewInput,
    GetComicInput,
    ListOwnerComicsInput,
    PatchComicInput,
    PublishComicInput,
    ScheduleComicInput,
    StatusChangeOutput,
    ThumbnailUpload,
)
from comicstop.components.uploads import (
    ImageFile,
    UploadComponent,
    UploadFileInput,
    UploadImagesInput,
)
from comicstop.domain.entities import PublishStatus, User
from comicstop.domain.normalize import (
    normalize_page_order,
    normalize_tags,
    parse_contributor_groups,
)

router = APIRouter()

THUMBNAIL_FIELD = "thumbnailUpload"
FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _bad_request(message: str, field: str | None = None) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={"code": "validation_error", "message": message, "field": field},
    )


def _validation_error(e: ValidationError) -> HTTPException:
    first = e.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or None
    return _bad_request(first.get("msg", "Invalid request"), field)


async def _read_payload(request: Request) -> tuple[dict[str, Any], ThumbnailUpload | None]:
    """Read a JSON body or form into a dict plus an optional thumbnail upload."""
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        data: dict[str, Any] = {}
        thumbnail: ThumbnailUpload | None = None
        for raw_key, value in form.multi_items():
            if not isinstance(value, str):
                if raw_key == THUMBNAIL_FIELD:
                    thumbnail = ThumbnailUpload(
                        data=await value.read(),
                        filename=value.filename or "thumbnail",
                        content_type=value.content_type or "application/octet-stream",
                    )
                continue
            # Repeated keys (pageOrder=a&pageOrder=b or pageOrder[]) become lists
            key = raw_key[:-2] if raw_key.endswith("[]") else raw_key
            if key in data:
                existing = data[key]
                data[key] = [*existing, value] if isinstance(existing, list) else [existing, value]
            elif raw_key.endswith("[]"):
                data[key] = [value]
            else:
                data[key] = value
        return data, thumbnail

    try:
        body = await request.json()
    except ValueError as e:
        raise _bad_request("Request body must be JSON or a form") from e
    if not isinstance(body, dict):
        raise _bad_request("Request body must be an object")
    return body, None


def _comic_or_raise(result: StatusChangeOutput) -> ComicResponse:
    if not result.success or result.comic is None:
        raise_for_errors(result.errors)
    return ComicResponse.from_comic(result.comic)


# --- Uploads ---


@router.post("/upload", response_model=UploadResponse)
def upload(
    comic: UploadFile | None = File(None),
    files: list[UploadFile] | None = File(None),
    current_user: User = Depends(get_current_user),
    component: UploadComponent = Depends(get_upload_component),
) -> UploadResponse:
    """Upload a single comic file (``comic``) or a batch of page images (``files``)."""
    if comic is not None:
        result = component.run_upload_file(
            UploadFileInput(
                owner_id=current_user.id,
                data=comic.file.read(),
                filename=comic.filename or "unnamed",
                content_type=comic.content_type or "application/octet-stream",
            )
        )
        if not result.success or result.file is None:
            raise_for_errors(result.errors)
        stored = result.file
        return UploadResponse(
            mode="single_file",
            file=UploadedFileResponse(
                key=stored.key,
                url=stored.url,
                name=stored.name,
                size=stored.size,
                content_type=stored.content_type,
            ),
        )

    images = [
        ImageFile(
            data=f.file.read(),
            filename=f.filename or "unnamed",
            content_type=f.content_type or "application/octet-stream",
        )
        for f in files or []
    ]
    batch = component.run_upload_images(UploadImagesInput(owner_id=current_user.id, files=images))
    if not batch.success:
        raise_for_errors(batch.errors)

    return UploadResponse(
        mode="multi_page",
        upload_id=batch.upload_id,
        page_order=batch.page_order,
        uploads=[UploadedImageResponse.model_validate(image) for image in batch.images],
    )


# --- Create / patch ---


@router.post("", response_model=ComicResponse, status_code=201)
async def create_comic(
    request: Request,
    current_user: User = Depends(get_current_user),
    component: ComicLifecycleComponent = Depends(get_comic_component),
) -> ComicResponse:
    data, thumbnail = await _read_payload(request)
    try:
        req = ComicCreateRequest.model_validate(data)
    except ValidationError as e:
        raise _validation_error(e) from e

    contributors, errors = parse_contributor_groups(req.contributors)
    # A missing upload agreement is reported ahead of row errors
    if errors and req.upload_agreement:
        raise_for_errors(errors)

    result = component.run_create(
        CreateComicInput(
            owner_id=current_user.id,
            title=req.title,
            upload_agreement=req.upload_agreement,
            file_id=req.file_id,
            page_order=normalize_page_order(req.page_order),
            file_name=req.file_name,
            file_size=req.file_size,
            file_type=req.file_type,
            file_url=req.file_url,
            subtitle=req.subtitle,
            description=req.description,
            genres=normalize_tags(req.genres),
            tags=normalize_tags(req.tags),
            contributors=contributors,
            thumbnail_url=req.thumbnail_url,
            thumbnail_file=thumbnail,
            series_id=req.series_id,
            is_public=req.is_public,
            age_restricted=req.age_restricted,
        )
    )
    if not result.success or result.comic is None:
        raise_for_errors(result.errors)
    return ComicResponse.from_comic(result.comic, result.contributors)


@router.patch("/{comic_id}", response_model=ComicResponse)
async def patch_comic(
    comic_id: UUID,
    request: Request,
    current_user: User = Depends(get_current_user),
    component: ComicLifecycleComponent = Depends(get_comic_component),
) -> ComicResponse:
    data, thumbnail = await _read_payload(request)
    try:
        req = ComicPatchRequest.model_validate(data)
    except ValidationError as e:
        raise _validation_error(e) from e

    result = component.run_patch(
        PatchComicInput(
            comic_id=comic_id,
            owner_id=current_user.id,
            updates=req.model_dump(exclude_unset=True),
            thumbnail_file=thumbnail,
        )
    )
    if not result.success or result.comic is None:
        raise_for_errors(result.errors)
    return ComicResponse.from_comic(result.comic, result.contributors)


# --- Reads ---


@router.get("/mine", response_model=ComicListResponse)
def list_my_comics(
    publish_status: PublishStatus | None = Query(None, alias="publishStatus"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    component: ComicLifecycleComponent = Depends(get_comic_component),
) -> ComicListResponse:
    result = component.run_list_for_owner(
        ListOwnerComicsInput(
            owner_id=current_user.id, publish_status=publish_status, limit=limit, offset=offset
        )
    )
    return ComicListResponse(
        items=[ComicResponse.from_comic(c) for c in result.items],
        total=result.total,
        limit=limit,
        offset=offset,
    )


@router.get("/{comic_id}/preview", response_model=DraftPreviewResponse)
def get_draft_preview(
    comic_id: UUID,
    current_user: User = Depends(get_current_user),
    component: ComicLifecycleComponent = Depends(get_comic_component),
) -> DraftPreviewResponse:
    result = component.run_draft_preview(
        DraftPreviewInput(comic_id=comic_id, owner_id=current_user.id)
    )
    if not result.success or result.preview is None:
        raise_for_errors(result.errors)
    return DraftPreviewResponse.model_validate(result.preview)


@router.get("/{comic_id}", response_model=ComicResponse)
def get_comic(
    comic_id: UUID,
    viewer: User | None = Depends(get_optional_user),
    component: ComicLifecycleComponent = Depends(get_comic_component),
) -> ComicResponse:
    result = component.run_get(
        GetComicInput(comic_id=comic_id, viewer_id=viewer.id if viewer else None)
    )
    if not result.success or result.comic is None:
        raise_for_errors(result.errors)
    return ComicResponse.from_comic(result.comic, result.contributors, result.file_url)


# --- Publish status ---


@router.post("/{comic_id}/publish", response_model=ComicResponse)
def publish_comic(
    comic_id: UUID,
    current_user: User = Depends(get_current_user),
    component: ComicLifecycleComponent = Depends(get_comic_component),
) -> ComicResponse:
    return _comic_or_raise(
        component.run_publish(PublishComicInput(comic_id=comic_id, owner_id=current_user.id))
    )


@router.post("/{comic_id}/schedule", response_model=ComicResponse)
def schedule_comic(
    comic_id: UUID,
    body: ScheduleRequest,
    current_user: User = Depends(get_current_user),
    component: ComicLifecycleComponent = Depends(get_comic_component),
) -> ComicResponse:
    return _comic_or_raise(
        component.run_schedule(
            ScheduleComicInput(
                comic_id=comic_id, owner_id=current_user.id, at_datetime=body.scheduled_at
            )
        )
    )


@router.post("/{comic_id}/draft", response_model=ComicResponse)
def draft_comic(
    comic_id: UUID,
    current_user: User = Depends(get_current_user),
    component: ComicLifecycleComponent = Depends(get_comic_component),
) -> ComicResponse:
    return _comic_or_raise(
        component.run_draft(DraftComicInput(comic_id=comic_id, owner_id=current_user.id))
    )


@router.post("/{comic_id}/archive", response_model=ComicResponse)
def archive_comic(
    comic_id: UUID,
    current_user: User = Depends(get_current_user),
    component: ComicLifecycleComponent = Depends(get_comic_component),
) -> ComicResponse:
    return _comic_or_raise(
        component.run_archive(ArchiveComicInput(comic_id=comic_id, owner_id=current_user.id))
    )


# --- Delete ---


@router.delete("/{comic_id}")
def delete_comic(
    comic_id: UUID,
    current_user: User = Depends(get_current_user),
    component: ComicLifecycleComponent = Depends(get_comic_component),
) -> dict[str, Any]:
    result = component.run_delete(DeleteComicInput(comic_id=comic_id, owner_id=current_user.id))
    if not result.success:
        raise_for_errors(result.errors)
    return {"success": True, "message": "Comic deleted successfully"}

