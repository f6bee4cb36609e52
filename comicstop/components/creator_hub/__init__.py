"""CreatorHub component - creator mode toggle and retention sweep."""

from comicstop.components.creator_hub.component import CreatorHubComponent
from comicstop.components.creator_hub.models import (
    CleanupInput,
    CleanupOutput,
    SetCreatorHubInput,
    SetCreatorHubOutput,
)
from comicstop.components.creator_hub.ports import (
    ClockPort,
    CreatorProfileRepoPort,
    NotifierPort,
    UserRepoPort,
)
from comicstop.components.creator_hub.templates import render_disabled, render_enabled

__all__ = [
    # Component
    "CreatorHubComponent",
    # Models
    "SetCreatorHubInput",
    "SetCreatorHubOutput",
    "CleanupInput",
    "CleanupOutput",
    # Templates
    "render_enabled",
    "render_disabled",
    # Ports
    "UserRepoPort",
    "CreatorProfileRepoPort",
    "NotifierPort",
    "ClockPort",
]
