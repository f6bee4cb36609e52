"""CreatorHub component port definitions - protocols for dependencies."""

from datetime import datetime
from typing import Protocol

from comicstop.core.ports.db import CreatorProfileRepoPort, UserRepoPort
from comicstop.core.ports.notify import NotifierPort


class ClockPort(Protocol):
    """Protocol for time operations."""

    def now_utc(self) -> datetime:
        """Return current UTC time."""
        ...


__all__ = [
    "ClockPort",
    "CreatorProfileRepoPort",
    "NotifierPort",
    "UserRepoPort",
]
