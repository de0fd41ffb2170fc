"""Cache entry value object."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Self

from table_cache.domain.clock import Clock, SystemClock


@dataclass(eq=False)
class CacheEntry:
    """One cache slot as seen by callers.

    ``present`` records whether the backend returned a row. Hit status is
    derived from it and the expiration on every access, so an entry read just
    before its expiration can turn into a miss while the caller holds it.
    """

    key: str
    present: bool = False
    value: object = None
    expires_at: datetime | None = None
    clock: Clock | None = None

    def __post_init__(self) -> None:
        if self.clock is None:
            self.clock = SystemClock()
        self.expires_at = _aware(self.expires_at)

    @classmethod
    def miss(cls, key: str, clock: Clock) -> "CacheEntry":
        """Return an entry for a key with no stored row."""
        return cls(key=key, clock=clock)

    @property
    def is_hit(self) -> bool:
        if not self.present:
            return False
        if self.expires_at is None:
            return True
        return self.expires_at > self.clock.now()

    def get(self) -> object:
        """Return the stored value; only meaningful when ``is_hit`` is true."""
        return self.value

    def set(self, value: object) -> Self:
        self.value = value
        return self

    def expire_at(self, when: datetime | None) -> Self:
        """Expire the entry at an absolute instant, or never for ``None``."""
        self.expires_at = _aware(when)
        return self

    def expire_after(self, ttl: int | float | timedelta | None) -> Self:
        """Expire the entry after ``ttl`` seconds from the clock's now."""
        if ttl is None:
            self.expires_at = None
            return self
        if not isinstance(ttl, timedelta):
            ttl = timedelta(seconds=ttl)
        self.expires_at = self.clock.now() + ttl
        return self


def _aware(value: datetime | None) -> datetime | None:
    # Naive datetimes are treated as UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
