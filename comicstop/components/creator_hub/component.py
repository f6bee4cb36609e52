"""
CreatorHub component - creator mode toggle and retention sweep.

Disabling CreatorHub stamps ``creator_disabled_at``. The profile survives
for the retention window; a scheduled sweep deletes profiles of users whose
stamp fell out of the window and clears the stamp. The sweep is not
transactional across users: a persistence failure aborts it and the users
already processed stay processed.
"""

from __future__ import annotations

import logging

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
from comicstop.core.ports.notify import NotificationKind, RenderedPayload
from comicstop.domain.entities import User
from comicstop.domain.errors import not_found_or_forbidden
from comicstop.domain.retention import ensure_utc, is_expired, purge_date, retention_cutoff
from comicstop.rules.models import Rules

logger = logging.getLogger(__name__)

CreatorHubInput = SetCreatorHubInput | CleanupInput
CreatorHubOutput = SetCreatorHubOutput | CleanupOutput


class CreatorHubComponent:
    """Component for CreatorHub state and data retention."""

    def __init__(
        self,
        users: UserRepoPort,
        profiles: CreatorProfileRepoPort,
        notifier: NotifierPort,
        clock: ClockPort,
        rules: Rules,
    ) -> None:
        self._users = users
        self._profiles = profiles
        self._notifier = notifier
        self._clock = clock
        self._rules = rules

    @property
    def retention_months(self) -> int:
        return self._rules.creator_hub.retention_months

    def run(self, input_data: CreatorHubInput) -> CreatorHubOutput:
        """Main dispatcher - routes to appropriate handler based on input type."""
        if isinstance(input_data, SetCreatorHubInput):
            return self.run_set_creator_hub(input_data)
        elif isinstance(input_data, CleanupInput):
            return self.run_cleanup(input_data)
        else:
            raise TypeError(f"Unknown input type: {type(input_data)}")

    def _notify(self, kind: NotificationKind, user: User, payload: RenderedPayload) -> bool:
        """Best-effort send; failures are logged, never raised."""
        try:
            delivered = self._notifier.send(kind, user.email or "", payload)
        except Exception as e:
            logger.warning("Notifier raised for %s to user %s: %s", kind.value, user.id, e)
            return False

        if not delivered:
            logger.warning("%s notification not delivered to user %s", kind.value, user.id)
        return delivered

    def run_set_creator_hub(self, input_data: SetCreatorHubInput) -> SetCreatorHubOutput:
        user = self._users.get_by_id(input_data.user_id)
        if user is None:
            return SetCreatorHubOutput(
                user=None,
                notified=False,
                errors=[not_found_or_forbidden("User")],
                success=False,
            )

        now = self._clock.now_utc()
        notify_config = self._rules.notifications

        if input_data.enabled:
            updated = user.model_copy(
                update={
                    "is_creator_enabled": True,
                    "is_creator": True,
                    "creator_disabled_at": None,
                    "updated_at": now,
                }
            )
            self._users.save(updated)
            logger.info("CreatorHub enabled for user %s", user.id)
            notified = self._notify(
                NotificationKind.CREATOR_HUB_ENABLED,
                updated,
                render_enabled(updated, notify_config),
            )
        else:
            updated = user.model_copy(
                update={
                    "is_creator_enabled": False,
                    "is_creator": False,
                    "creator_disabled_at": now,
                    "updated_at": now,
                }
            )
            self._users.save(updated)
            logger.info("CreatorHub disabled for user %s", user.id)
            notified = self._notify(
                NotificationKind.CREATOR_HUB_DISABLED,
                updated,
                render_disabled(
                    updated,
                    notify_config,
                    disabled_at=now,
                    purge_at=purge_date(now, self.retention_months),
                    retention_months=self.retention_months,
                ),
            )

        return SetCreatorHubOutput(user=updated, notified=notified, errors=[], success=True)

    def run_cleanup(self, input_data: CleanupInput) -> CleanupOutput:
        """Delete creator profiles whose retention window has passed."""
        now = ensure_utc(input_data.now) if input_data.now else self._clock.now_utc()
        months = self.retention_months
        cutoff = retention_cutoff(now, months)

        candidates = [
            user
            for user in self._users.list_disabled_creators_before(cutoff)
            if not user.is_creator_enabled and is_expired(user.creator_disabled_at, now, months)
        ]

        deleted = 0
        for user in candidates:
            profile = self._profiles.get_by_user_id(user.id)
            if profile is not None:
                self._profiles.delete(profile.id)
                deleted += 1
            # Cleared even without a profile, so each disable is swept once
            self._users.save(
                user.model_copy(update={"creator_disabled_at": None, "updated_at": now})
            )

        logger.info(
            "Creator data cleanup: scanned=%d deleted=%d cutoff=%s",
            len(candidates),
            deleted,
            cutoff.isoformat(),
        )
        return CleanupOutput(
            deleted_count=deleted,
            scanned_count=len(candidates),
            errors=[],
            success=True,
        )
