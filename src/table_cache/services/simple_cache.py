"""Plain key/value facade over a cache pool."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import timedelta

from table_cache.domain.entries import CacheEntry
from table_cache.services.pool import CachePool

Ttl = int | float | timedelta | None


@dataclass
class SimpleCache:
    """Get/set style cache API built on ``CachePool``.

    Writes go straight to the backend and never touch the pool's deferred
    buffer.
    """

    pool: CachePool

    def get(self, key: str, default: object = None) -> object:
        """Return the cached value, or ``default`` on a miss."""
        entry = self.pool.get_item(key)
        return entry.get() if entry.is_hit else default

    def set(self, key: str, value: object, ttl: Ttl = None) -> bool:
        """Store a value, optionally expiring after ``ttl``.

        A zero or negative ``ttl`` deletes the key instead.
        """
        if _expired(ttl):
            return self.pool.delete_item(key)
        return self.pool.save(self._entry(key, value, ttl))

    def delete(self, key: str) -> bool:
        return self.pool.delete_item(key)

    def clear(self) -> bool:
        return self.pool.clear()

    def has(self, key: str) -> bool:
        return self.pool.has_item(key)

    def get_many(
        self, keys: Iterable[str], default: object = None
    ) -> dict[str, object]:
        """Return a mapping of every requested key to its value or ``default``."""
        return {
            entry.key: entry.get() if entry.is_hit else default
            for entry in self.pool.get_items(keys)
        }

    def set_many(self, values: Mapping[str, object], ttl: Ttl = None) -> bool:
        """Store many values; ``False`` if any single write failed."""
        if _expired(ttl):
            return self.pool.delete_items(values.keys())
        results = [
            self.pool.save(self._entry(key, value, ttl))
            for key, value in values.items()
        ]
        return all(results)

    def delete_many(self, keys: Iterable[str]) -> bool:
        return self.pool.delete_items(keys)

    def _entry(self, key: str, value: object, ttl: Ttl) -> CacheEntry:
        entry = CacheEntry(key=key, clock=self.pool.clock).set(value)
        return entry.expire_after(ttl)


def _expired(ttl: Ttl) -> bool:
    if ttl is None:
        return False
    if isinstance(ttl, timedelta):
        return ttl <= timedelta(0)
    return ttl <= 0
