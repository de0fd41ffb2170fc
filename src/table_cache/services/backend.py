"""Key-value backend contract used by the cache pool."""

from dataclasses import dataclass, field
from typing import Protocol

Row = dict[str, object]


@dataclass(frozen=True)
class BackendSchema:
    """Names of the backend attributes holding the key, ttl and value."""

    primary_field: str = "id"
    ttl_field: str = "ttl"
    value_field: str = "value"

    @property
    def columns(self) -> str:
        return f"{self.primary_field}, {self.value_field}, {self.ttl_field}"


@dataclass
class BatchGetResult:
    """Rows found by a batch read plus the keys the backend did not process."""

    rows: list[Row] = field(default_factory=list)
    unprocessed_keys: list[str] = field(default_factory=list)


class KeyValueBackend(Protocol):
    """Remote table store keyed by a single primary attribute.

    Implementations raise ``BackendError`` on failure and
    ``TableNotFoundError`` when the table itself is missing.
    """

    def get(self, key: str) -> Row | None:
        """Return the row for a key, if present."""

    def batch_get(self, keys: list[str]) -> BatchGetResult:
        """Return the rows for many keys in one call."""

    def put(self, row: Row) -> None:
        """Insert or overwrite a row."""

    def delete(self, key: str) -> None:
        """Delete the row for a key; missing rows are not an error."""

    def batch_delete(self, keys: list[str]) -> None:
        """Delete the rows for many keys in one call."""
