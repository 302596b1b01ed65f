"""Structured logging for cache storage: structlog setup and per-operation context."""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, Concatenate, Protocol

import structlog
from structlog.contextvars import bound_contextvars, merge_contextvars

if TYPE_CHECKING:
    from kvcache_core.config.settings import StorageSettings

# Loggers of the transport library, held at WARNING unless the app asks for more
TRANSPORT_LOGGERS = ("redis", "redis.connection")


class _HasPrefix(Protocol):
    @property
    def prefix(self) -> str: ...


def configure_logging(settings: StorageSettings) -> None:
    """Route stdlib and structlog output through one JSON or console handler.

    Cache events carry ``cache_prefix`` and ``cache_op`` from contextvars,
    so they are merged ahead of the renderer for both log sources.
    """
    processors = _pre_chain()
    level = _resolve_level(settings.log_level)

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(settings.log_format),
            ],
            foreign_pre_chain=processors,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def log_context[S: _HasPrefix, **P, R](
    method: Callable[Concatenate[S, P], R],
) -> Callable[Concatenate[S, P], R]:
    """Bind the storage prefix and operation name while a storage method runs.

    Nested bindings from the transport (e.g. the connect event) inherit both.
    """

    @wraps(method)
    def wrapper(self: S, *args: P.args, **kwargs: P.kwargs) -> R:
        with bound_contextvars(cache_prefix=self.prefix, cache_op=method.__name__):
            return method(self, *args, **kwargs)

    return wrapper


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def _resolve_level(level_name: str) -> int:
    """Convert a level name string to a logging level int, defaulting to INFO."""
    return logging.getLevelNamesMapping().get(level_name.upper(), logging.INFO)
