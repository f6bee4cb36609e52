"""CreatorHub component models - frozen dataclass inputs and outputs."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from comicstop.domain.entities import User
from comicstop.domain.errors import LifecycleError


@dataclass(frozen=True)
class SetCreatorHubInput:
    """Turn creator mode on or off for a user."""

    user_id: UUID
    enabled: bool


@dataclass(frozen=True)
class SetCreatorHubOutput:
    user: User | None
    # Whether the notifier accepted the toggle notification
    notified: bool
    errors: list[LifecycleError]
    success: bool


@dataclass(frozen=True)
class CleanupInput:
    """Sweep input. ``now`` defaults to the component clock."""

    now: datetime | None = None


@dataclass(frozen=True)
class CleanupOutput:
    deleted_count: int
    scanned_count: int
    errors: list[LifecycleError]
    success: bool
