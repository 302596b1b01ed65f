"""Entry codec: builds and parses the metadata envelope stored at each key.

Envelope layout (a pickled dict)::

    {
        "data": <stored value>,
        "delta": <sliding window in seconds>,        # optional
        "callbacks": [ValidationCallback, ...],      # optional
    }

Optional fields are omitted rather than stored as None, so presence of a
field is meaningful on read.
"""

from __future__ import annotations

import pickle
from dataclasses import dataclass
from typing import Any

from kvcache_core.constants import META_CALLBACKS, META_DATA, META_DELTA
from kvcache_core.models.dependencies import ValidationCallback


class EnvelopeDecodeError(ValueError):
    """Raised when a raw value is not a valid cache envelope."""


@dataclass(frozen=True)
class CacheEntry:
    """Decoded envelope."""

    data: Any
    delta: int | None = None
    callbacks: tuple[ValidationCallback, ...] | None = None

    @property
    def is_sliding(self) -> bool:
        """Whether reads must renew the expiration window."""
        return self.delta is not None and self.delta > 0

    def is_valid(self) -> bool:
        """Run every validation callback; an empty or missing list is valid."""
        if self.callbacks is None:
            return True
        return all(callback.is_valid() for callback in self.callbacks)


def encode_entry(entry: CacheEntry) -> bytes:
    """Serialize an entry into its wire envelope."""
    meta: dict[str, Any] = {META_DATA: entry.data}
    if entry.delta is not None:
        meta[META_DELTA] = entry.delta
    if entry.callbacks is not None:
        meta[META_CALLBACKS] = list(entry.callbacks)
    return pickle.dumps(meta, protocol=pickle.HIGHEST_PROTOCOL)


def decode_entry(raw: bytes) -> CacheEntry:
    """Parse a wire envelope back into a CacheEntry.

    Raises:
        EnvelopeDecodeError: If raw is not a pickled envelope with a data field.
    """
    try:
        meta = pickle.loads(raw)  # noqa: S301
    except (
        pickle.UnpicklingError,
        EOFError,
        AttributeError,
        ImportError,
        IndexError,
        KeyError,
        TypeError,
        ValueError,
    ) as exc:
        msg = f"Cannot unpickle cache envelope: {exc}"
        raise EnvelopeDecodeError(msg) from exc

    if not isinstance(meta, dict) or META_DATA not in meta:
        msg = f"Cache envelope has unexpected shape: {type(meta).__name__}"
        raise EnvelopeDecodeError(msg)

    delta = meta.get(META_DELTA)
    callbacks = meta.get(META_CALLBACKS)
    return CacheEntry(
        data=meta[META_DATA],
        delta=int(delta) if delta is not None else None,
        callbacks=tuple(callbacks) if callbacks is not None else None,
    )
