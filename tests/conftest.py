"""
Shared fixtures for rssd tests.

Provides common test fixtures for use across all test modules.
"""

from pathlib import Path

import pytest

from rssd.config import Configuration, WatchedFeed
from rssd.models import FeedDocument, FeedEntry
from rssd.store import ConfigStore


# Path to test fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"


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
def empty_rss_content(fixtures_dir: Path) -> str:
    """Return contents of an RSS feed without items."""
    return (fixtures_dir / "empty_rss.xml").read_text()


@pytest.fixture
def not_a_feed_content(fixtures_dir: Path) -> str:
    """Return contents of an HTML page."""
    return (fixtures_dir / "not_a_feed.html").read_text()


@pytest.fixture
def sample_entry() -> FeedEntry:
    """
    Create a sample feed entry for testing.

    Returns
    -------
    FeedEntry
        A fully populated entry instance.
    """
    return FeedEntry(
        title="Test Entry Title",
        link="https://example.com/test-entry",
        published="Mon, 01 Jan 2024 12:00:00 GMT",
        description="This is the test entry description.",
        author_name="Test Author",
        author_email="author@example.com",
        guid="urn:test:1",
    )


@pytest.fixture
def sample_document(sample_entry: FeedEntry) -> FeedDocument:
    """Create a sample feed document whose newest entry is sample_entry."""
    return FeedDocument(
        title="Test Feed",
        description="A feed for tests",
        language="en",
        entries=[
            sample_entry,
            FeedEntry(title="Older Entry", link="https://example.com/older"),
        ],
    )


@pytest.fixture
def sample_config() -> Configuration:
    """Create a configuration with a template and two feeds."""
    return Configuration(
        command_template="echo '&item_title' >> out.txt",
        feeds=[
            WatchedFeed(url="https://example.com/feed.xml"),
            WatchedFeed(
                url="https://other.example.com/atom.xml",
                last_seen_id="https://other.example.com/entries/1",
            ),
        ],
    )


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Return a configuration path inside a not yet existing directory."""
    return tmp_path / "rssd" / "config.yaml"


@pytest.fixture
def store(config_path: Path) -> ConfigStore:
    """Create a bootstrapped store in a temporary directory."""
    store = ConfigStore(config_path)
    store.bootstrap()
    return store
