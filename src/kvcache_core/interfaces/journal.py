"""Abstract cache journal interface."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from kvcache_core.models.dependencies import Dependencies


@runtime_checkable
class CacheJournal(Protocol):
    """Index of tags and priorities per key, used for bulk invalidation."""

    def write(self, key: str, dependencies: Dependencies) -> None:
        """Record the tags/priority of a namespaced key."""
        ...

    def clean(self, conditions: Mapping[str, Any]) -> Iterable[str]:
        """Resolve conditions into the namespaced keys that must be deleted."""
        ...
