"""Test configuration and fixtures."""

from datetime import datetime, timezone

import pytest

from tests.fakes import FakeClock
from warmpool.config import get_settings
from warmpool.services.warm_pool import DynamicWarmPoolManager

# Half past the hour so hour-truncated windows are easy to reason about
NOW = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture
def manager(clock: FakeClock) -> DynamicWarmPoolManager:
    return DynamicWarmPoolManager(0, clock=clock)


@pytest.fixture
def clean_settings(tmp_path, monkeypatch):
    """Isolate get_settings() from local config files and env."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("WARMPOOL_CONFIG_FILE", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
