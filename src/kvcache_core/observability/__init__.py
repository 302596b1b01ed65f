"""Observability: structured logging."""

from kvcache_core.observability.logging import configure_logging, log_context

__all__ = [
    "configure_logging",
    "log_context",
]
