"""Cache storage factory and capability probe."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kvcache_core.exceptions import TransportUnavailableError
from kvcache_core.observability.logging import configure_logging
from kvcache_infra.storage.cache_storage import CacheStorage
from kvcache_infra.transport.redis_transport import RedisTransport

if TYPE_CHECKING:
    from kvcache_core.config.settings import StorageSettings
    from kvcache_core.interfaces.journal import CacheJournal


def is_available() -> bool:
    """Report whether the redis transport library is installed, without connecting."""
    return RedisTransport.is_available()


def create_storage(
    settings: StorageSettings,
    journal: CacheJournal | None = None,
) -> CacheStorage:
    """Create a CacheStorage over Redis based on settings.

    No connection is made here; the first storage operation connects. With
    ``settings.setup_logging`` the process-wide logging is configured first.

    Raises:
        TransportUnavailableError: If the redis library is not installed.
    """
    if not is_available():
        msg = "The 'redis' package is not installed; install kvcache-storage with its dependencies"
        raise TransportUnavailableError(msg)

    if settings.setup_logging:
        configure_logging(settings)

    transport = RedisTransport(
        host=settings.host,
        port=settings.port,
        db=settings.db,
        socket_timeout=settings.socket_timeout,
    )
    return CacheStorage(transport, prefix=settings.prefix, journal=journal)
