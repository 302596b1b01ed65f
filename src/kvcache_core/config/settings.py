"""Storage settings using pydantic-settings."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from kvcache_core.constants import DEFAULT_DB, DEFAULT_HOST, DEFAULT_PORT, DEFAULT_PREFIX


class StorageSettings(BaseSettings):
    """Central configuration for a cache storage instance."""

    model_config = SettingsConfigDict(env_prefix="KVCACHE_", env_file=".env")

    # --- Server ---
    host: str = Field(
        default=DEFAULT_HOST,
        description="Cache server hostname",
    )
    port: int = Field(
        default=DEFAULT_PORT,
        ge=1,
        le=65535,
        description="Cache server port",
    )
    db: int = Field(
        default=DEFAULT_DB,
        ge=0,
        description="Logical database index on the cache server",
    )
    socket_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Socket timeout in seconds for transport calls (None = block)",
    )

    # --- Keys ---
    prefix: str = Field(
        default=DEFAULT_PREFIX,
        description="Namespace prefix prepended to every cache key",
    )

    # --- Logging ---
    log_level: str = Field(
        default="INFO",
        description="Root log level",
    )
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log renderer: 'json' for production, 'console' for development",
    )
    setup_logging: bool = Field(
        default=False,
        description="Configure structlog and the root logger when a storage is created",
    )


def merge_settings(settings: StorageSettings, overrides: Mapping[str, Any]) -> StorageSettings:
    """Return a new StorageSettings with overrides applied on top of settings.

    Unknown keys are rejected and every value is validated again, so the
    result is always a consistent configuration. The input is not mutated.
    """
    unknown = set(overrides) - set(StorageSettings.model_fields)
    if unknown:
        msg = f"Unknown storage settings: {', '.join(sorted(unknown))}"
        raise ValueError(msg)
    merged = {**settings.model_dump(), **overrides}
    return StorageSettings(**merged)
