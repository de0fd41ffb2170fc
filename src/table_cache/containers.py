"""Dependency container wiring for the cache."""

from dataclasses import dataclass

from supabase import Client, create_client

from table_cache.adapters.supabase_backend import SupabaseKeyValueBackend
from table_cache.app_logging import configure_logging
from table_cache.config import Settings, build_schema
from table_cache.services.backend import KeyValueBackend
from table_cache.services.pool import CachePool
from table_cache.services.serializers import serializer_for
from table_cache.services.simple_cache import SimpleCache


@dataclass
class CacheContainer:
    """Holds the configured cache objects."""

    settings: Settings
    backend: KeyValueBackend
    pool: CachePool
    simple_cache: SimpleCache


def build_container(
    settings: Settings | None = None, client: Client | None = None
) -> CacheContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    supabase_client = client or create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    schema = build_schema(resolved_settings)
    backend = SupabaseKeyValueBackend(
        client=supabase_client,
        table=resolved_settings.cache_table,
        schema=schema,
    )
    pool = CachePool(
        backend=backend,
        schema=schema,
        serializer=serializer_for(resolved_settings.cache_serializer),
    )
    return CacheContainer(
        settings=resolved_settings,
        backend=backend,
        pool=pool,
        simple_cache=SimpleCache(pool),
    )
