"""
CreatorHub API routes (mounted under /api/auth).

The toggle body is ``{"enabled": <bool>}``; anything else is a 400. The
legacy creator-mode endpoint takes ``{"enable": ...}`` and treats every
value except ``false`` as "on".
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError

from comicstop.api.deps import (
    get_creator_hub_component,
    get_current_user,
    raise_for_errors,
    require_admin,
)
from comicstop.api.schemas import (
    CleanupResponse,
    CreatorHubResponse,
    CreatorHubToggleRequest,
    CreatorModeRequest,
    CreatorUserResponse,
)
from comicstop.components.creator_hub import (
    CleanupInput,
    CreatorHubComponent,
    SetCreatorHubInput,
)
from comicstop.domain.entities import User

router = APIRouter()


def _toggle(
    component: CreatorHubComponent, user: User, enabled: bool
) -> CreatorHubResponse:
    result = component.run_set_creator_hub(SetCreatorHubInput(user_id=user.id, enabled=enabled))
    if not result.success or result.user is None:
        raise_for_errors(result.errors)

    if enabled:
        message = "CreatorHub enabled successfully"
    else:
        message = (
            "CreatorHub disabled. Data will be retained for "
            f"{component.retention_months} months."
        )
    return CreatorHubResponse(
        message=message,
        user=CreatorUserResponse.from_user(result.user),
        notified=result.notified,
    )


@router.post("/creator-hub", response_model=CreatorHubResponse)
def set_creator_hub(
    body: Any = Body(None),
    current_user: User = Depends(get_current_user),
    component: CreatorHubComponent = Depends(get_creator_hub_component),
) -> CreatorHubResponse:
    if not isinstance(body, dict) or "enabled" not in body:
        raise HTTPException(
            status_code=400,
            detail={
                "code": "validation_error",
                "message": "enabled parameter is required",
                "field": "enabled",
            },
        )
    try:
        req = CreatorHubToggleRequest.model_validate(body)
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail={
                "code": "validation_error",
                "message": "enabled parameter must be a boolean",
                "field": "enabled",
            },
        ) from e

    return _toggle(component, current_user, req.enabled)


@router.post("/creator-mode", response_model=CreatorHubResponse)
def set_creator_mode(
    body: CreatorModeRequest | None = Body(None),
    current_user: User = Depends(get_current_user),
    component: CreatorHubComponent = Depends(get_creator_hub_component),
) -> CreatorHubResponse:
    """Legacy toggle kept for older clients."""
    enable = body.enable if body is not None else None
    return _toggle(component, current_user, enable is not False)


@router.post("/cleanup-expired-creator-data", response_model=CleanupResponse)
def cleanup_expired_creator_data(
    admin: User = Depends(require_admin),
    component: CreatorHubComponent = Depends(get_creator_hub_component),
) -> CleanupResponse:
    result = component.run_cleanup(CleanupInput())
    return CleanupResponse(
        message=f"Cleaned up {result.deleted_count} expired creator profiles",
        deleted_count=result.deleted_count,
        scanned_count=result.scanned_count,
    )
