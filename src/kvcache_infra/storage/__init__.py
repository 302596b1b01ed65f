"""Cache storage: envelope codec, lazy connection and the storage itself."""

from kvcache_infra.storage.cache_storage import CacheStorage
from kvcache_infra.storage.connection import ConnectionState, LazyConnection
from kvcache_infra.storage.factory import create_storage, is_available

__all__ = [
    "CacheStorage",
    "ConnectionState",
    "LazyConnection",
    "create_storage",
    "is_available",
]
