"""Domain models for kvcache-storage."""

from kvcache_core.models.dependencies import Dependencies, ValidationCallback

__all__ = [
    "Dependencies",
    "ValidationCallback",
]
