"""Clock abstraction used for expiration checks."""

from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    """Supplies the current instant."""

    def now(self) -> datetime:
        """Return the current timezone-aware instant."""


class SystemClock(Clock):
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(tz=UTC)
