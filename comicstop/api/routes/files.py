"""
Blob serving for the local blob store.

Comic files are only served through presigned URLs. Page images and
thumbnails are served by their stable URL.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from comicstop.adapters.local_storage import LocalBlobStore
from comicstop.api.deps import get_blob_store, get_rules
from comicstop.core.ports.storage import InvalidKeyError, KeyNotFoundError
from comicstop.rules.models import Rules

router = APIRouter()


@router.get("/{key:path}")
def get_file(
    key: str,
    expires: int | None = Query(None),
    signature: str | None = Query(None),
    store: LocalBlobStore = Depends(get_blob_store),
    rules: Rules = Depends(get_rules),
) -> Response:
    signed_only = key.startswith(f"{rules.storage.namespaces.comics}/")
    if signed_only or signature is not None:
        if expires is None or signature is None:
            raise HTTPException(status_code=403, detail="Signed URL required")
        if not store.verify_signature(key, expires, signature):
            raise HTTPException(status_code=403, detail="Invalid or expired signature")

    try:
        data, blob = store.get(key)
    except (KeyNotFoundError, InvalidKeyError) as e:
        raise HTTPException(status_code=404, detail="File not found") from e

    return Response(
        content=data,
        media_type=blob.content_type,
        headers={"Content-Disposition": f'inline; filename="{blob.original_name}"'},
    )
