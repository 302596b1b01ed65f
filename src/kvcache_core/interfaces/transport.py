"""Abstract key/value transport interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueTransport(Protocol):
    """Raw key/value operations against a cache server.

    Implementations raise CacheConnectionError for any transport failure.
    """

    def connect(self) -> None:
        """Establish the connection to the server."""
        ...

    def get(self, key: str) -> bytes | None:
        """Retrieve the raw value stored at key, or None if not found."""
        ...

    def set(self, key: str, value: bytes, expire: int = 0) -> None:
        """Store a value with a relative TTL in seconds (0 = no expiry)."""
        ...

    def replace(self, key: str, value: bytes, expire_at: int) -> bool:
        """Overwrite an existing key with an absolute unix expiry time.

        Returns False when the key no longer exists.
        """
        ...

    def delete(self, key: str) -> None:
        """Delete a key; deleting a missing key is a no-op."""
        ...

    def flush_all(self) -> None:
        """Remove every key on the server database."""
        ...

    def close(self) -> None:
        """Release the underlying connection."""
        ...
