"""Integration test fixtures: a real Redis server on localhost."""

from __future__ import annotations

import socket
import time
from collections.abc import Generator

import pytest

from kvcache_core.config.settings import StorageSettings
from kvcache_core.constants import ALL
from kvcache_infra.storage.cache_storage import CacheStorage
from kvcache_infra.storage.factory import create_storage

REDIS_TEST_DB = 15

# ---------------------------------------------------------------------------
# Service health checks
# ---------------------------------------------------------------------------


def _tcp_reachable(
    host: str,
    port: int,
    timeout: float = 1.0,
    retries: int = 3,
    delay: float = 1.0,
) -> bool:
    """Check if a TCP service is reachable, retrying on failure."""
    for attempt in range(retries):
        try:
            with socket.create_connection((host, port), timeout=timeout):
                return True
        except OSError:
            if attempt < retries - 1:
                time.sleep(delay)
    return False


_redis_up = _tcp_reachable("localhost", 6379)

require_redis = pytest.mark.skipif(
    not _redis_up,
    reason="Redis not reachable on localhost:6379",
)


# ---------------------------------------------------------------------------
# Redis fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def redis_settings() -> StorageSettings:
    """Settings pointing at the dedicated test database."""
    return StorageSettings(host="localhost", port=6379, db=REDIS_TEST_DB, prefix="it:")


@pytest.fixture
def redis_storage(redis_settings: StorageSettings) -> Generator[CacheStorage, None, None]:
    """Function-scoped storage on the test DB, flushed before and after each test."""
    if not _redis_up:
        pytest.skip("Redis not available")

    storage = create_storage(redis_settings)
    storage.clean({ALL: True})
    yield storage
    storage.clean({ALL: True})
    storage.close()
