"""Redis-backed implementation of KeyValueTransport."""

from __future__ import annotations

import importlib.util
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog

from kvcache_core.constants import DEFAULT_DB, DEFAULT_HOST, DEFAULT_PORT, NO_EXPIRATION
from kvcache_core.exceptions import CacheConnectionError

if TYPE_CHECKING:
    from redis import Redis

logger = structlog.get_logger()


class RedisTransport:
    """Raw key/value transport over a synchronous redis-py client.

    The client is created on connect() unless one is injected. Every error
    raised by redis-py, including server error replies, surfaces as
    CacheConnectionError.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        db: int = DEFAULT_DB,
        socket_timeout: float | None = None,
        client: Redis | None = None,  # type: ignore[type-arg]
    ) -> None:
        """Initialize with server address, or a pre-built redis client."""
        self._host = host
        self._port = port
        self._db = db
        self._socket_timeout = socket_timeout
        self._client = client

    @staticmethod
    def is_available() -> bool:
        """Check whether the redis client library can be imported."""
        return importlib.util.find_spec("redis") is not None

    @property
    def address(self) -> str:
        """Return host:port/db for log and error messages."""
        return f"{self._host}:{self._port}/{self._db}"

    def connect(self) -> None:
        """Create the client if needed and verify the server answers PING."""
        if self._client is None:
            from redis import Redis

            self._client = Redis(
                host=self._host,
                port=self._port,
                db=self._db,
                socket_timeout=self._socket_timeout,
                socket_connect_timeout=self._socket_timeout,
            )
        with self._translate_errors("connect"):
            self._client.ping()
        logger.debug("redis_connected", address=self.address)

    def get(self, key: str) -> bytes | None:
        """Retrieve the raw value stored at key."""
        with self._translate_errors("get"):
            value = self._require_client().get(key)
        if value is None:
            return None
        return bytes(value)

    def set(self, key: str, value: bytes, expire: int = NO_EXPIRATION) -> None:
        """Store a value; expire is a relative TTL in seconds, 0 for none."""
        ex = expire if expire > 0 else None
        with self._translate_errors("set"):
            self._require_client().set(name=key, value=value, ex=ex)

    def replace(self, key: str, value: bytes, expire_at: int) -> bool:
        """Overwrite an existing key, expiring at the given unix timestamp."""
        with self._translate_errors("replace"):
            result = self._require_client().set(name=key, value=value, exat=expire_at, xx=True)
        return bool(result)

    def delete(self, key: str) -> None:
        """Delete a key from the server."""
        with self._translate_errors("delete"):
            self._require_client().delete(key)

    def flush_all(self) -> None:
        """Flush the whole logical database, not only one key prefix."""
        with self._translate_errors("flush_all"):
            self._require_client().flushdb()

    def close(self) -> None:
        """Close the client and drop it so the next connect() rebuilds it."""
        if self._client is None:
            return
        with self._translate_errors("close"):
            self._client.close()
        self._client = None

    def _require_client(self) -> Redis:  # type: ignore[type-arg]
        if self._client is None:
            msg = f"Redis transport at {self.address} is not connected"
            raise CacheConnectionError(msg)
        return self._client

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        """Re-raise any redis-py error as CacheConnectionError.

        Server replies such as WRONGTYPE on a foreign key or an unsupported
        EXAT option (Redis < 6.2) are transport failures too.
        """
        from redis.exceptions import RedisError

        try:
            yield
        except RedisError as exc:
            msg = f"Redis {operation} failed at {self.address}: {exc}"
            raise CacheConnectionError(msg) from exc
