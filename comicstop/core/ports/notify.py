"""
Notifier Port.

Protocol-based interface for outbound user notifications (email today).
Used by the CreatorHub component when a user toggles creator mode.

Key requirements:
- send() never raises; delivery failure is reported as False
- payloads arrive fully rendered; the transport does no templating
- delivery is best-effort, callers never roll back on failure

Implementations:
1. DevNotifier: logs notifications and keeps them in memory (dev/test)
2. An SMTP or provider-backed notifier satisfies the same protocol
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol


class NotificationKind(Enum):
    """Event kinds the core emits."""

    CREATOR_HUB_ENABLED = "creator_hub_enabled"
    CREATOR_HUB_DISABLED = "creator_hub_disabled"


@dataclass(frozen=True)
class RenderedPayload:
    """
    A notification ready to deliver.

    ``data`` carries the structured values the body was rendered from, so a
    transport can re-render in its own format.
    """

    subject: str
    body_html: str
    body_text: str
    data: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.subject:
            raise ValueError("Subject is required")
        if not self.body_html and not self.body_text:
            raise ValueError("At least one of body_html or body_text is required")


class NotifierPort(Protocol):
    """Outbound notification interface."""

    def send(
        self,
        kind: NotificationKind,
        recipient: str,
        payload: RenderedPayload,
    ) -> bool:
        """
        Send a notification.

        Returns:
            True if delivered (or accepted for delivery), False otherwise.

        Notes:
            - Must not raise exceptions; return False instead
        """
        ...
