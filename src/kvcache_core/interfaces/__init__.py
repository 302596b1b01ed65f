"""Public interface re-exports for kvcache_core."""

from kvcache_core.interfaces.journal import CacheJournal
from kvcache_core.interfaces.transport import KeyValueTransport

__all__ = [
    "CacheJournal",
    "KeyValueTransport",
]
