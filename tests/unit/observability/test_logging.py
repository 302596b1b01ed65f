"""Tests for observability/logging.py."""

from __future__ import annotations

import io
import logging

import pytest
import structlog

from kvcache_core.observability.logging import _resolve_level, configure_logging, log_context


def _make_settings(**overrides: object) -> object:
    """Create a minimal mock settings object."""
    from types import SimpleNamespace

    defaults: dict[str, object] = {"log_format": "console", "log_level": "INFO"}
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_configure_logging_console_mode(self) -> None:
        """Console mode configures without error."""
        configure_logging(_make_settings(log_format="console"))  # type: ignore[arg-type]
        assert structlog.get_logger() is not None

    def test_configure_logging_json_mode(self) -> None:
        """JSON mode renders stdlib records through the structlog formatter."""
        configure_logging(_make_settings(log_format="json"))  # type: ignore[arg-type]

        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.getLogger().handlers[0].formatter)
        log = logging.getLogger("test_json_mode")
        log.addHandler(handler)
        log.setLevel(logging.INFO)
        log.info("cache_flush_all")
        log.removeHandler(handler)

        output = stream.getvalue()
        assert '"event": "cache_flush_all"' in output

    def test_configure_logging_sets_level(self) -> None:
        """Log level is applied to root logger."""
        configure_logging(_make_settings(log_level="WARNING"))  # type: ignore[arg-type]
        assert logging.getLogger().level == logging.WARNING

    def test_redis_logger_quieted(self) -> None:
        """redis-py chatter is held at WARNING or above."""
        configure_logging(_make_settings(log_level="DEBUG"))  # type: ignore[arg-type]
        assert logging.getLogger("redis").level == logging.WARNING


class _Prefixed:
    def __init__(self, prefix: str) -> None:
        self.prefix = prefix

    @log_context
    def lookup(self, key: str) -> dict[str, object]:
        return {"key": key, **structlog.contextvars.get_contextvars()}


@pytest.mark.unit
class TestLogContext:
    """Tests for the log_context decorator."""

    def test_binds_prefix_and_operation(self) -> None:
        """The prefix and method name are bound for the duration of the call."""
        result = _Prefixed("app:").lookup("k")
        assert result == {"key": "k", "cache_prefix": "app:", "cache_op": "lookup"}

    def test_unbinds_after_call(self) -> None:
        """Nothing leaks into the caller's context."""
        _Prefixed("app:").lookup("k")
        assert structlog.contextvars.get_contextvars() == {}

    def test_keeps_method_name(self) -> None:
        """The wrapper reports the wrapped method's name."""
        assert _Prefixed.lookup.__name__ == "lookup"


@pytest.mark.unit
class TestResolveLevel:
    """Tests for _resolve_level."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("DEBUG", logging.DEBUG),
            ("INFO", logging.INFO),
            ("WARNING", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("CRITICAL", logging.CRITICAL),
            ("debug", logging.DEBUG),
            ("unknown", logging.INFO),
        ],
    )
    def test_resolve_level(self, name: str, expected: int) -> None:
        """Level names resolve to correct logging constants."""
        assert _resolve_level(name) == expected
