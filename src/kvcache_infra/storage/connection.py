"""Lazy connection manager for the key/value transport."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from kvcache_core.interfaces.transport import KeyValueTransport

logger = structlog.get_logger()


class ConnectionState(Enum):
    """Connection lifecycle of a LazyConnection."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class LazyConnection:
    """Defers transport.connect() until the first operation needs it.

    A failed connect leaves the state DISCONNECTED and propagates
    CacheConnectionError; the next ensure_connected() call tries again.
    """

    def __init__(self, transport: KeyValueTransport) -> None:
        """Initialize with an unconnected transport."""
        self._transport = transport
        self._state = ConnectionState.DISCONNECTED

    @property
    def state(self) -> ConnectionState:
        """Current connection state."""
        return self._state

    def ensure_connected(self) -> KeyValueTransport:
        """Connect on first use and return the connected transport."""
        if self._state is ConnectionState.DISCONNECTED:
            self._transport.connect()
            self._state = ConnectionState.CONNECTED
            logger.debug("cache_transport_connected")
        return self._transport

    def close(self) -> None:
        """Close the transport if connected."""
        if self._state is ConnectionState.CONNECTED:
            self._transport.close()
            self._state = ConnectionState.DISCONNECTED
