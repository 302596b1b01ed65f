"""Custom exception hierarchy for kvcache-storage."""

from __future__ import annotations


class CacheStorageError(Exception):
    """Base exception for all kvcache-storage errors."""


class CacheConnectionError(CacheStorageError, ConnectionError):
    """Raised when the cache server is unreachable or a transport call fails."""


class UnsupportedDependencyError(CacheStorageError):
    """Raised when a write asks for dependent-item invalidation."""


class JournalMissingError(CacheStorageError):
    """Raised when tags or priority are used without a configured journal."""


class TransportUnavailableError(CacheStorageError):
    """Raised when the transport client library is not installed."""
