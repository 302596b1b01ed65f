"""Cache storage over a key/value transport with journal-backed bulk invalidation."""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

import structlog

from kvcache_core.constants import ALL, DEFAULT_PREFIX, NO_EXPIRATION
from kvcache_core.exceptions import JournalMissingError, UnsupportedDependencyError
from kvcache_core.models.dependencies import Dependencies
from kvcache_core.observability.logging import log_context
from kvcache_infra.storage.codec import (
    CacheEntry,
    EnvelopeDecodeError,
    decode_entry,
    encode_entry,
)
from kvcache_infra.storage.connection import LazyConnection

if TYPE_CHECKING:
    from kvcache_core.interfaces.journal import CacheJournal
    from kvcache_core.interfaces.transport import KeyValueTransport

logger = structlog.get_logger()


class CacheStorage:
    """Stores values under namespaced keys in an external key/value server.

    Supports fixed and sliding expiration, validation callbacks checked on
    every read, and tag/priority invalidation delegated to an optional
    journal. Holds no entry state of its own.
    """

    def __init__(
        self,
        transport: KeyValueTransport,
        prefix: str = DEFAULT_PREFIX,
        journal: CacheJournal | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize with a transport; nothing is connected until first use."""
        self._connection = LazyConnection(transport)
        self._prefix = prefix
        self._journal = journal
        self._clock = clock

    @property
    def prefix(self) -> str:
        """Namespace prefix prepended to every key."""
        return self._prefix

    @property
    def journal(self) -> CacheJournal | None:
        """The configured journal, or None."""
        return self._journal

    @property
    def connection(self) -> LazyConnection:
        """The lazy connection guarding transport access."""
        return self._connection

    def _key(self, key: str) -> str:
        """Generate the namespaced transport key."""
        return f"{self._prefix}{key}"

    @log_context
    def read(self, key: str) -> Any:  # noqa: ANN401
        """Return the value stored at key, or None on miss or failed validation."""
        transport = self._connection.ensure_connected()
        raw_key = self._key(key)
        raw = transport.get(raw_key)
        if not raw:
            logger.debug("cache_miss", key=raw_key)
            return None

        try:
            entry = decode_entry(raw)
        except EnvelopeDecodeError as exc:
            logger.warning("cache_envelope_undecodable", key=raw_key, error=str(exc))
            return None

        if not self._check_callbacks(raw_key, entry):
            transport.delete(raw_key)
            logger.debug("cache_entry_invalidated", key=raw_key)
            return None

        if entry.is_sliding:
            expire_at = int(self._clock()) + entry.delta  # type: ignore[operator]
            transport.replace(raw_key, raw, expire_at=expire_at)
            logger.debug("cache_entry_renewed", key=raw_key, expire_at=expire_at)

        return entry.data

    @log_context
    def write(
        self,
        key: str,
        data: Any,  # noqa: ANN401
        dependencies: Dependencies | Mapping[str, Any] | None = None,
    ) -> None:
        """Store data at key, overwriting any previous entry.

        Raises:
            UnsupportedDependencyError: If dependent items were requested.
            JournalMissingError: If tags or priority are set without a journal.
            CacheConnectionError: If the server is unreachable.
        """
        if Dependencies.requests_items(dependencies):
            msg = "Dependent items are not supported by CacheStorage"
            raise UnsupportedDependencyError(msg)
        dp = Dependencies.from_descriptor(dependencies)
        if dp.is_indexed and self._journal is None:
            msg = "Tags and priority require a cache journal, but none was provided"
            raise JournalMissingError(msg)

        transport = self._connection.ensure_connected()
        raw_key = self._key(key)

        expire = NO_EXPIRATION
        delta: int | None = None
        if dp.expiration is not None:
            expire = dp.expiration
            if dp.sliding and dp.expiration > 0:
                delta = dp.expiration

        callbacks = tuple(dp.callbacks) if dp.callbacks is not None else None
        entry = CacheEntry(data=data, delta=delta, callbacks=callbacks)

        if dp.is_indexed and self._journal is not None:
            self._journal.write(raw_key, dp)

        transport.set(raw_key, encode_entry(entry), expire=expire)
        logger.debug("cache_write", key=raw_key, expire=expire, sliding=delta is not None)

    @log_context
    def remove(self, key: str) -> None:
        """Delete key; the journal is not notified."""
        transport = self._connection.ensure_connected()
        transport.delete(self._key(key))

    @log_context
    def clean(self, conditions: Mapping[str, Any]) -> None:
        """Remove entries matching conditions.

        ``{ALL: True}`` flushes the whole server database, including keys
        written under other prefixes. Otherwise the journal resolves the
        conditions, even empty ones, so it can reconcile its own index;
        without a journal the call does nothing.
        """
        transport = self._connection.ensure_connected()
        if conditions.get(ALL):
            logger.warning("cache_flush_all")
            transport.flush_all()
            return

        if self._journal is None:
            return

        removed = 0
        for raw_key in self._journal.clean(conditions):
            transport.delete(raw_key)
            removed += 1
        logger.debug("cache_journal_clean", removed=removed)

    def close(self) -> None:
        """Close the underlying transport connection."""
        self._connection.close()

    def _check_callbacks(self, raw_key: str, entry: CacheEntry) -> bool:
        """Evaluate validation callbacks; a raising callback counts as invalid."""
        try:
            return entry.is_valid()
        except Exception as exc:
            logger.debug("cache_callback_failed", key=raw_key, error=repr(exc))
            return False
