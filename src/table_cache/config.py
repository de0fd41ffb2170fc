"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from table_cache.services.backend import BackendSchema

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Cache settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    cache_table: str = "cache"
    cache_primary_field: str = "id"
    cache_ttl_field: str = "ttl"
    cache_value_field: str = "value"
    cache_serializer: str = "json"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def build_schema(settings: Settings) -> BackendSchema:
    """Return the backend attribute names configured in settings."""
    return BackendSchema(
        primary_field=settings.cache_primary_field,
        ttl_field=settings.cache_ttl_field,
        value_field=settings.cache_value_field,
    )
