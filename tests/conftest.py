"""
Shared fixtures for RSS Discord tests.

Provides common test fixtures for use across all test modules.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from rss_discord.pacing import NoDelayPacer
from rss_discord.selector import FeedItem
from rss_discord.storage import TimestampStore


# Path to test fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"

WEBHOOK_URL = "https://discord.com/api/webhooks/123456/secret-token"
FEED_URL = "https://example.com/feed.xml"


def utc(*args: int) -> datetime:
    """Build an aware UTC datetime."""
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def sample_rss_content(fixtures_dir: Path) -> str:
    """Return contents of sample RSS feed."""
    return (fixtures_dir / "sample_rss.xml").read_text()


@pytest.fixture
def sample_atom_content(fixtures_dir: Path) -> str:
    """Return contents of sample Atom feed."""
    return (fixtures_dir / "sample_atom.xml").read_text()


@pytest.fixture
def sample_latin1_bytes(fixtures_dir: Path) -> bytes:
    """Return raw bytes of an ISO-8859-1 encoded RSS feed."""
    return (fixtures_dir / "sample_latin1.xml").read_bytes()


@pytest.fixture
def sample_config_path(fixtures_dir: Path) -> Path:
    """Return path to sample TOML config file."""
    return fixtures_dir / "sample_config.toml"


@pytest.fixture
def sample_yaml_config_path(fixtures_dir: Path) -> Path:
    """Return path to sample YAML config file."""
    return fixtures_dir / "sample_config.yaml"


@pytest.fixture
def minimal_config_dict(tmp_path: Path) -> dict[str, Any]:
    """
    Create a minimal valid configuration dictionary.

    Returns
    -------
    dict
        Configuration dictionary that can be used to create AppConfig.
    """
    return {
        "discord": {"webhook_url": WEBHOOK_URL},
        "rss": {"feed_url": FEED_URL},
        "timestamp_file": str(tmp_path / "last_post.txt"),
    }


@pytest.fixture
def sample_items() -> list[FeedItem]:
    """
    Feed entries around the 2024-01-01T00:00:00Z boundary, newest first.

    Returns
    -------
    list[FeedItem]
        Entries after, at, before the boundary plus one undated entry.
    """
    return [
        FeedItem(
            title="Fourth Post",
            link="https://example.com/posts/4",
            published=utc(2024, 1, 2, 10, 0, 0),
            guid="4",
        ),
        FeedItem(
            title="Third Post",
            link="https://example.com/posts/3",
            published=utc(2024, 1, 1, 0, 0, 0),
            guid="3",
        ),
        FeedItem(
            title="Second Post",
            link="https://example.com/posts/2",
            published=utc(2023, 12, 31, 23, 0, 0),
            guid="2",
        ),
        FeedItem(
            title="Undated Post",
            link="https://example.com/posts/undated",
            published=None,
            guid="undated",
        ),
    ]


@pytest.fixture
def timestamp_store(tmp_path: Path) -> TimestampStore:
    """Create a store backed by a file in a temporary directory."""
    return TimestampStore(tmp_path / "state" / "last_post.txt")


@pytest.fixture
def mock_fetcher() -> MagicMock:
    """
    Create a mock feed fetcher.

    Returns
    -------
    MagicMock
        A fetcher returning no entries by default.
    """
    fetcher = MagicMock()
    fetcher.fetch_feed = AsyncMock(return_value=[])
    fetcher.close = AsyncMock()
    return fetcher


@pytest.fixture
def mock_notifier() -> MagicMock:
    """
    Create a mock notifier.

    Returns
    -------
    MagicMock
        A notifier whose deliveries succeed by default.
    """
    notifier = MagicMock()
    notifier.notify = AsyncMock(return_value=None)
    notifier.close = AsyncMock()
    return notifier


@pytest.fixture
def no_delay_pacer() -> NoDelayPacer:
    """Pacer that does not sleep."""
    return NoDelayPacer()
