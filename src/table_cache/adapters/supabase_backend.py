"""Supabase-backed key-value backend."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from table_cache.domain.errors import BackendError, TableNotFoundError
from table_cache.services.backend import (
    BackendSchema,
    BatchGetResult,
    KeyValueBackend,
    Row,
)

# PostgREST schema cache miss and Postgres "undefined_table".
_TABLE_NOT_FOUND_CODES = {"PGRST205", "42P01"}


@dataclass
class SupabaseKeyValueBackend(KeyValueBackend):
    """Supabase implementation of the cache table store."""

    client: Client
    table: str = "cache"
    schema: BackendSchema = field(default_factory=BackendSchema)

    def get(self, key: str) -> Row | None:
        """Return the row for a key, if present."""
        with _translate_errors(self.table):
            response = (
                self.client.table(self.table)
                .select(self.schema.columns)
                .eq(self.schema.primary_field, key)
                .limit(1)
                .execute()
            )
        if response.data:
            return response.data[0]
        return None

    def batch_get(self, keys: list[str]) -> BatchGetResult:
        """Return all rows for the keys; PostgREST never leaves keys unprocessed."""
        with _translate_errors(self.table):
            response = (
                self.client.table(self.table)
                .select(self.schema.columns)
                .in_(self.schema.primary_field, keys)
                .execute()
            )
        return BatchGetResult(rows=list(response.data or []))

    def put(self, row: Row) -> None:
        """Upsert a row, clearing the ttl column when the row has none."""
        payload = {self.schema.ttl_field: None, **row}
        with _translate_errors(self.table):
            self.client.table(self.table).upsert(
                payload, on_conflict=self.schema.primary_field
            ).execute()

    def delete(self, key: str) -> None:
        """Delete the row for a key."""
        with _translate_errors(self.table):
            self.client.table(self.table).delete().eq(
                self.schema.primary_field, key
            ).execute()

    def batch_delete(self, keys: list[str]) -> None:
        """Delete the rows for many keys in one request."""
        with _translate_errors(self.table):
            self.client.table(self.table).delete().in_(
                self.schema.primary_field, keys
            ).execute()


@contextmanager
def _translate_errors(table: str) -> Iterator[None]:
    """Map client failures onto backend errors."""
    try:
        yield
    except APIError as exc:
        if exc.code in _TABLE_NOT_FOUND_CODES:
            raise TableNotFoundError(f"Cache table '{table}' not found") from exc
        raise BackendError(f"Supabase request failed: {exc.message}") from exc
    except httpx.HTTPError as exc:
        raise BackendError(f"Supabase request failed: {exc}") from exc
