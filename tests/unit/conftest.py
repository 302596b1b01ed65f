"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

import logging
from collections.abc import Generator

import pytest
import structlog

from kvcache_infra.storage.cache_storage import CacheStorage
from tests.mocks import mock_callbacks
from tests.mocks.mock_journal import FakeJournal
from tests.mocks.mock_transport import FakeClock, FakeTransport


@pytest.fixture
def clock() -> FakeClock:
    """Return a clock fixed at a known timestamp."""
    return FakeClock()


@pytest.fixture
def transport(clock: FakeClock) -> FakeTransport:
    """Return an empty in-memory transport sharing the test clock."""
    return FakeTransport(clock)


@pytest.fixture
def journal() -> FakeJournal:
    """Return a recording journal."""
    return FakeJournal()


@pytest.fixture
def storage(transport: FakeTransport, clock: FakeClock) -> CacheStorage:
    """Return a storage with prefix 'app:' and no journal."""
    return CacheStorage(transport, prefix="app:", clock=clock)


@pytest.fixture
def journaled_storage(
    transport: FakeTransport, journal: FakeJournal, clock: FakeClock
) -> CacheStorage:
    """Return a storage with prefix 'app:' and a recording journal."""
    return CacheStorage(transport, prefix="app:", journal=journal, clock=clock)


@pytest.fixture(autouse=True)
def reset_callback_flags() -> Generator[None, None, None]:
    """Clear validation flags between tests."""
    mock_callbacks.FLAGS.clear()
    yield
    mock_callbacks.FLAGS.clear()


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Save and restore root logger handlers and structlog config.

    Logging tests call configure_logging(), which replaces root logger
    handlers; stale StreamHandlers would otherwise write to closed streams.
    """
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.level = original_level
    structlog.reset_defaults()
