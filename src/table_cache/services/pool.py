"""Cache item pool backed by a remote key-value table."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from itertools import count

from table_cache.domain.clock import Clock, SystemClock
from table_cache.domain.entries import CacheEntry
from table_cache.domain.errors import (
    BackendError,
    InvalidKeyError,
    SerializationError,
    TableNotFoundError,
)
from table_cache.services.backend import BackendSchema, KeyValueBackend, Row
from table_cache.services.converters import EntryConverterRegistry
from table_cache.services.serializers import JsonSerializer, ValueSerializer

RESERVED_CHARACTERS = "{}()/\\@:"

_logger = logging.getLogger(__name__)


@dataclass
class CachePool:
    """Get/has/save/delete/commit contract over a ``KeyValueBackend``.

    Reads raise on unexpected backend failures, except a missing table which
    reads as a miss. Writes and deletes report backend failures as ``False``.

    The deferred buffer is not synchronized. Callers sharing a pool between
    threads must serialize ``save_deferred`` and ``commit`` themselves.
    """

    backend: KeyValueBackend
    schema: BackendSchema = field(default_factory=BackendSchema)
    clock: Clock = field(default_factory=SystemClock)
    converter: EntryConverterRegistry | None = None
    serializer: ValueSerializer = field(default_factory=JsonSerializer)
    _deferred: dict[int, CacheEntry] = field(default_factory=dict, init=False)
    _slots: count = field(default_factory=count, init=False)

    def __post_init__(self) -> None:
        if self.converter is None:
            self.converter = EntryConverterRegistry(clock=self.clock)

    @property
    def pending(self) -> list[CacheEntry]:
        """Entries waiting for the next commit, in insertion order."""
        return list(self._deferred.values())

    def get_item(self, key: str) -> CacheEntry:
        """Return the entry for a key, a miss if no live row exists."""
        _validate_key(key)
        try:
            row = self.backend.get(key)
        except TableNotFoundError:
            _logger.warning("Cache table missing, reading %s as a miss", key)
            return CacheEntry.miss(key, self.clock)
        if row is None:
            return CacheEntry.miss(key, self.clock)
        return self._entry_from_row(row, key=key)

    def get_items(self, keys: Iterable[str]) -> list[CacheEntry]:
        """Return exactly one entry per distinct requested key."""
        requested = list(dict.fromkeys(keys))
        for key in requested:
            _validate_key(key)
        if not requested:
            return []

        try:
            response = self.backend.batch_get(requested)
        except TableNotFoundError:
            _logger.warning(
                "Cache table missing, reading %s keys as misses", len(requested)
            )
            return [CacheEntry.miss(key, self.clock) for key in requested]

        wanted = set(requested)
        entries: dict[str, CacheEntry] = {}
        for row in response.rows:
            entry = self._entry_from_row(row)
            if entry.key in wanted:
                entries[entry.key] = entry
        for key in response.unprocessed_keys:
            if key in wanted:
                entries.setdefault(key, CacheEntry.miss(key, self.clock))

        if len(entries) != len(requested):
            _logger.debug(
                "Batch read returned %s of %s keys", len(entries), len(requested)
            )
        return [
            entries.get(key) or CacheEntry.miss(key, self.clock) for key in requested
        ]

    def has_item(self, key: str) -> bool:
        return self.get_item(key).is_hit

    def clear(self) -> bool:
        """Full-table truncation is not supported; always ``False``."""
        return False

    def delete_item(self, key: str | CacheEntry) -> bool:
        """Delete a key or entry; deleting a missing key succeeds."""
        if isinstance(key, CacheEntry):
            key = key.key
        _validate_key(key)
        try:
            self.backend.delete(key)
        except BackendError as exc:
            _logger.warning("Cache delete failed for %s: %s", key, exc)
            return False
        return True

    def delete_items(self, keys: Iterable[str]) -> bool:
        """Delete many keys in one batch.

        A partial backend failure is reported the same way as a total one.
        """
        requested = list(dict.fromkeys(keys))
        for key in requested:
            _validate_key(key)
        if not requested:
            return True
        try:
            self.backend.batch_delete(requested)
        except BackendError as exc:
            _logger.warning(
                "Cache batch delete failed for %s keys: %s", len(requested), exc
            )
            return False
        return True

    def save(self, item: object) -> bool:
        """Write an entry to the backend, overwriting any existing row.

        Values the serializer rejects are reported as ``False`` like backend
        failures.
        """
        entry = self.converter.convert(item)
        _validate_key(entry.key)
        try:
            self.backend.put(self._row_from_entry(entry))
        except (BackendError, SerializationError) as exc:
            _logger.warning("Cache save failed for %s: %s", entry.key, exc)
            return False
        return True

    def save_deferred(self, item: object) -> bool:
        """Buffer an entry until the next ``commit``.

        Raises ``SerializationError`` for values the serializer rejects, so
        they never enter the buffer.
        """
        entry = self.converter.convert(item)
        _validate_key(entry.key)
        self.serializer.dumps(entry.get())
        self._deferred[next(self._slots)] = entry
        return True

    def commit(self) -> bool:
        """Save every buffered entry, keeping the ones that failed."""
        result = True
        for slot, entry in list(self._deferred.items()):
            saved = self.save(entry)
            if saved:
                del self._deferred[slot]
            result = saved and result
        return result

    def _entry_from_row(self, row: Row, key: str | None = None) -> CacheEntry:
        raw = row.get(self.schema.value_field)
        ttl = row.get(self.schema.ttl_field)
        return CacheEntry(
            key=key if key is not None else str(row[self.schema.primary_field]),
            present=raw is not None,
            value=self.serializer.loads(str(raw)) if raw is not None else None,
            expires_at=(
                datetime.fromtimestamp(int(ttl), tz=UTC) if ttl is not None else None
            ),
            clock=self.clock,
        )

    def _row_from_entry(self, entry: CacheEntry) -> Row:
        row: Row = {
            self.schema.primary_field: entry.key,
            self.schema.value_field: self.serializer.dumps(entry.get()),
        }
        if entry.expires_at is not None:
            row[self.schema.ttl_field] = int(entry.expires_at.timestamp())
        return row


def _validate_key(key: object) -> None:
    if not isinstance(key, str) or any(char in RESERVED_CHARACTERS for char in key):
        raise InvalidKeyError(key, RESERVED_CHARACTERS)
