"""
Dev Notifier Adapter.

Logs notifications instead of sending them.
Used for local development and testing.

Production uses a real transport (SMTP or a provider API); this gives safe
testing without sending actual email.

Key behaviors:
- Logs notification details
- Returns True (accepted) unless the recipient is missing
- Stores notifications in memory for test assertions
- Supports configurable verbosity
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from comicstop.core.ports.notify import NotificationKind, RenderedPayload

logger = logging.getLogger(__name__)


@dataclass
class SentNotification:
    """Record of a logged notification for test assertions."""

    id: str
    kind: NotificationKind
    recipient: str
    subject: str
    body_html: str
    body_text: str
    data: dict[str, Any]
    logged_at: datetime


@dataclass
class DevNotifier:
    """
    Notifier that logs instead of sending.

    Notifications are logged and stored in memory for test assertions.
    Implements NotifierPort.
    """

    sent: list[SentNotification] = field(default_factory=list)

    sender: str = "noreply@comicstop.com"
    log_level: int = logging.INFO
    log_body: bool = True
    body_preview_length: int = 200

    def send(
        self,
        kind: NotificationKind,
        recipient: str,
        payload: RenderedPayload,
    ) -> bool:
        """Log a notification instead of sending it."""
        if not recipient:
            logger.warning("No recipient address for %s notification", kind.value)
            return False

        message_id = f"dev-{uuid4().hex[:12]}"

        self.sent.append(
            SentNotification(
                id=message_id,
                kind=kind,
                recipient=recipient,
                subject=payload.subject,
                body_html=payload.body_html,
                body_text=payload.body_text,
                data=dict(payload.data),
                logged_at=datetime.now(UTC),
            )
        )

        parts = [
            f"NOTIFY (dev): To={recipient}",
            f"From={self.sender}",
            f"Kind={kind.value}",
            f"Subject={payload.subject}",
        ]

        if self.log_body and payload.body_text:
            preview = payload.body_text[: self.body_preview_length]
            if len(payload.body_text) > self.body_preview_length:
                preview += "..."
            parts.append(f"Body={preview}")

        parts.append(f"MessageID={message_id}")
        logger.log(self.log_level, ", ".join(parts))
        return True

    # --- Test Helper Methods ---

    def get_last(self) -> SentNotification | None:
        return self.sent[-1] if self.sent else None

    def get_sent_to(self, recipient: str) -> list[SentNotification]:
        return [n for n in self.sent if n.recipient == recipient]

    def get_by_kind(self, kind: NotificationKind) -> list[SentNotification]:
        return [n for n in self.sent if n.kind == kind]

    def clear(self) -> None:
        self.sent.clear()

    @property
    def count(self) -> int:
        return len(self.sent)
