"""
Unit tests for the configuration module.

Tests cover Pydantic model validation, watch-list editing,
and default path resolution.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from rssd.config import Configuration, WatchedFeed, default_config_path
from rssd.errors import ConfigError, DuplicateFeedError, FeedNotWatchedError


class TestWatchedFeed:
    """Tests for WatchedFeed Pydantic model."""

    def test_default_watermark_empty(self) -> None:
        """Test that a new feed has never been synchronized."""
        feed = WatchedFeed(url="https://example.com/feed.xml")

        assert feed.url == "https://example.com/feed.xml"
        assert feed.last_seen_id == ""

    def test_empty_url_rejected(self) -> None:
        """Test that empty URL raises validation error."""
        with pytest.raises(ValidationError) as exc_info:
            WatchedFeed(url="   ")

        assert "cannot be empty" in str(exc_info.value)

    def test_missing_url_rejected(self) -> None:
        """Test that url is required."""
        with pytest.raises(ValidationError):
            WatchedFeed.model_validate({"last_seen_id": "x"})


class TestConfiguration:
    """Tests for the Configuration root model."""

    def test_default_values(self) -> None:
        """Test that Configuration defaults to an empty template and watch-list."""
        config = Configuration()

        assert config.command_template == ""
        assert config.feeds == []

    def test_duplicate_urls_rejected(self) -> None:
        """Test that a watch-list with duplicate URLs is invalid."""
        with pytest.raises(ValidationError) as exc_info:
            Configuration.model_validate(
                {
                    "feeds": [
                        {"url": "https://example.com/feed.xml"},
                        {"url": "https://example.com/feed.xml"},
                    ]
                }
            )

        assert "Duplicate feed URL" in str(exc_info.value)

    def test_add_feed_appends(self, sample_config: Configuration) -> None:
        """Test add_feed appends with an empty watermark."""
        feed = sample_config.add_feed("https://new.example.com/rss")

        assert sample_config.feeds[-1] is feed
        assert feed.last_seen_id == ""
        assert len(sample_config.feeds) == 3

    def test_add_feed_duplicate(self, sample_config: Configuration) -> None:
        """Test add_feed rejects a URL already watched."""
        with pytest.raises(DuplicateFeedError):
            sample_config.add_feed("https://example.com/feed.xml")

        assert len(sample_config.feeds) == 2

    def test_find_feed(self, sample_config: Configuration) -> None:
        """Test find_feed by URL."""
        feed = sample_config.find_feed("https://other.example.com/atom.xml")

        assert feed is not None
        assert feed.last_seen_id == "https://other.example.com/entries/1"
        assert sample_config.find_feed("https://missing.example.com") is None

    def test_remove_feed(self, sample_config: Configuration) -> None:
        """Test remove_feed keeps the order of remaining feeds."""
        sample_config.add_feed("https://third.example.com/rss")

        sample_config.remove_feed("https://other.example.com/atom.xml")

        assert [f.url for f in sample_config.feeds] == [
            "https://example.com/feed.xml",
            "https://third.example.com/rss",
        ]

    def test_remove_unknown_feed(self, sample_config: Configuration) -> None:
        """Test remove_feed raises for a URL not watched."""
        with pytest.raises(FeedNotWatchedError):
            sample_config.remove_feed("https://missing.example.com")


class TestDefaultConfigPath:
    """Tests for default configuration path resolution."""

    def test_xdg_config_home(self) -> None:
        """Test XDG_CONFIG_HOME takes precedence."""
        path = default_config_path({"XDG_CONFIG_HOME": "/xdg", "HOME": "/home/user"})

        assert path == Path("/xdg/rssd/config.yaml")

    def test_home_fallback(self) -> None:
        """Test fallback to ~/.config when XDG_CONFIG_HOME is unset."""
        path = default_config_path({"HOME": "/home/user"})

        assert path == Path("/home/user/.config/rssd/config.yaml")

    def test_empty_xdg_uses_home(self) -> None:
        """Test an empty XDG_CONFIG_HOME is ignored."""
        path = default_config_path({"XDG_CONFIG_HOME": "", "HOME": "/home/user"})

        assert path == Path("/home/user/.config/rssd/config.yaml")

    def test_no_home(self) -> None:
        """Test that missing HOME raises ConfigError."""
        with pytest.raises(ConfigError, match="HOME is not set"):
            default_config_path({})

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that os.environ is used by default."""
        monkeypatch.setenv("XDG_CONFIG_HOME", "/from/env")

        assert default_config_path() == Path("/from/env/rssd/config.yaml")
