"""
Shared pytest fixtures and configuration for outcome-feed tests.

Provides fake API payloads, mock HTTP sessions and a mock Redis client.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import yaml

from outcome_feed.ingestion.indices import Index
from outcome_feed.ingestion.normalize import RawQuote
from outcome_feed.publishing.redis_queue import RedisQueue
from tests.test_data_generators import generate_quote_page, mock_response


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------

def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast unit tests")
    config.addinivalue_line("markers", "integration: tests that wire several modules together")


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def api_settings():
    """API settings with pacing disabled so tests never sleep."""
    return {
        "base_url": "https://testnet.example/api/v1",
        "timeout": 5,
        "min_request_interval": 0,
    }


@pytest.fixture
def settings(api_settings):
    return {
        "api": api_settings,
        "fetch": {"index": "BTC", "granularity": "minute", "lookback_hours": 1},
        "publish": {"redis_url": "redis://localhost:6379/0", "queue": "outcomes"},
    }


@pytest.fixture
def settings_file(tmp_path, settings):
    """settings.yaml on disk, for CLI tests."""
    path = tmp_path / "settings.yaml"
    path.write_text(yaml.safe_dump(settings))
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep a developer's REDIS_URL / BITMEX_API_BASE out of the tests."""
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.delenv("BITMEX_API_BASE", raising=False)


# ---------------------------------------------------------------------------
# Quote fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_quote():
    return RawQuote(timestamp=datetime(2023, 1, 1, tzinfo=timezone.utc), price=16999.6)


@pytest.fixture
def quote_page():
    """Three rows, newest first."""
    return generate_quote_page(n=3)


# ---------------------------------------------------------------------------
# Mock collaborators
# ---------------------------------------------------------------------------

@pytest.fixture
def http_session(quote_page):
    """requests.Session stand-in returning `quote_page` for every GET."""
    session = MagicMock()
    session.get.return_value = mock_response(quote_page)
    return session


@pytest.fixture
def redis_client():
    client = MagicMock()
    client.rpush.return_value = 3
    return client


@pytest.fixture
def queue(redis_client):
    return RedisQueue(redis_client, "outcomes")


@pytest.fixture
def btc():
    return Index.BTC
