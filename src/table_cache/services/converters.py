"""Adapters that turn caller-supplied entries into cache entries."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol, cast, runtime_checkable

from table_cache.domain.entries import CacheEntry
from table_cache.domain.errors import UnsupportedEntryTypeError
from table_cache.domain.clock import Clock, SystemClock


@runtime_checkable
class CacheItem(Protocol):
    """Generic cache item capability set."""

    @property
    def key(self) -> str: ...

    @property
    def is_hit(self) -> bool: ...

    @property
    def expires_at(self) -> datetime | None: ...

    def get(self) -> object: ...


class EntryAdapter(Protocol):
    """Converts one shape of entry into a ``CacheEntry``."""

    def supports(self, item: object) -> bool:
        """Return whether this adapter can convert the item."""

    def convert(self, item: object, clock: Clock) -> CacheEntry:
        """Return the cache entry for the item."""


class NativeEntryAdapter(EntryAdapter):
    """Passes ``CacheEntry`` instances through unchanged."""

    def supports(self, item: object) -> bool:
        return isinstance(item, CacheEntry)

    def convert(self, item: object, clock: Clock) -> CacheEntry:
        return cast(CacheEntry, item)


class CacheItemAdapter(EntryAdapter):
    """Copies any ``CacheItem`` implementation into a ``CacheEntry``."""

    def supports(self, item: object) -> bool:
        return isinstance(item, CacheItem)

    def convert(self, item: object, clock: Clock) -> CacheEntry:
        item = cast(CacheItem, item)
        return CacheEntry(
            key=item.key,
            present=item.is_hit,
            value=item.get(),
            expires_at=item.expires_at,
            clock=clock,
        )


def _default_adapters() -> list[EntryAdapter]:
    return [NativeEntryAdapter(), CacheItemAdapter()]


@dataclass
class EntryConverterRegistry:
    """Ordered adapter chain; the first adapter that supports an item wins."""

    adapters: list[EntryAdapter] = field(default_factory=_default_adapters)
    clock: Clock = field(default_factory=SystemClock)

    def register(self, adapter: EntryAdapter, *, first: bool = False) -> None:
        """Add an adapter to the end of the chain, or to the front."""
        if first:
            self.adapters.insert(0, adapter)
        else:
            self.adapters.append(adapter)

    def convert(self, item: object) -> CacheEntry:
        """Convert an item or raise ``UnsupportedEntryTypeError``."""
        for adapter in self.adapters:
            if adapter.supports(item):
                return adapter.convert(item, self.clock)
        raise UnsupportedEntryTypeError(item)
