from __future__ import annotations

from datetime import datetime
from typing import Protocol


class TimePort(Protocol):
    """
    Time source for the components.

    All timestamps are stored in UTC; components never read the system
    clock directly so tests can pin and advance time.
    """

    def now_utc(self) -> datetime:
        """Get current UTC time (timezone-aware)."""
        ...
