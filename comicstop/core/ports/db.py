"""
Persistence Port.

Protocol-based interfaces for repository operations, one per entity.
Implementations: SQLite (comicstop.adapters.sqlite.repos).

Updates are plain upserts (last write wins); nothing here locks.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from comicstop.domain.entities import Comic, ContributorGroup, CreatorProfile, PublishStatus, User

# -----------------------------------------------------------------------------
# Users
# -----------------------------------------------------------------------------


class UserRepoPort(Protocol):
    """Repository for users (creator-relevant fields)."""

    def get_by_id(self, user_id: UUID) -> User | None:
        """Get user by ID."""
        ...

    def save(self, user: User) -> User:
        """Save or update user (upsert)."""
        ...

    def list_disabled_creators_before(self, cutoff: datetime) -> list[User]:
        """
        List users with creator mode off whose disable stamp is older than cutoff.

        Users with a null stamp never match.
        """
        ...


# -----------------------------------------------------------------------------
# Creator profiles
# -----------------------------------------------------------------------------


class CreatorProfileRepoPort(Protocol):
    """Repository for extended creator profiles (one per user)."""

    def get_by_user_id(self, user_id: UUID) -> CreatorProfile | None:
        ...

    def save(self, profile: CreatorProfile) -> CreatorProfile:
        ...

    def delete(self, profile_id: UUID) -> None:
        ...


# -----------------------------------------------------------------------------
# Comics
# -----------------------------------------------------------------------------


class ComicRepoPort(Protocol):
    """Repository for comics. Soft-deleted rows stay readable by ID."""

    def get_by_id(self, comic_id: UUID) -> Comic | None:
        ...

    def save(self, comic: Comic) -> Comic:
        """Save or update comic (upsert)."""
        ...

    def list_by_owner(
        self,
        owner_id: UUID,
        *,
        publish_status: PublishStatus | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Comic], int]:
        """List active comics of an owner, newest first. Returns (items, total)."""
        ...


class ContributorRepoPort(Protocol):
    """Contributor groups per comic, stored as a replaceable set."""

    def list_for_comic(self, comic_id: UUID) -> list[ContributorGroup]:
        ...

    def add(self, comic_id: UUID, group: ContributorGroup) -> None:
        ...

    def delete_for_comic(self, comic_id: UUID) -> int:
        """Delete every group of the comic. Returns number removed."""
        ...
