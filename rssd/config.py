"""
Configuration models for rssd.

The configuration is the only durable state: the command template shared
by all feeds and the ordered watch-list with each feed's watermark.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from rssd.errors import ConfigError, DuplicateFeedError, FeedNotWatchedError

logger = logging.getLogger(__name__)

APP_DIR_NAME = "rssd"
CONFIG_FILE_NAME = "config.yaml"


class WatchedFeed(BaseModel):
    """
    A feed on the watch-list.

    Attributes
    ----------
    url : str
        URL of the RSS/Atom feed. Unique within the watch-list.
    last_seen_id : str
        Identifier of the most recently dispatched entry.
        Empty string means the feed has never been synchronized.
    """

    url: str
    last_seen_id: str = ""

    @field_validator("url")
    @classmethod
    def check_url_not_empty(cls, v: str) -> str:
        """Validate that the feed URL is not empty."""
        if not v or not v.strip():
            raise ValueError("Feed URL cannot be empty")
        return v


class Configuration(BaseModel):
    """
    Root configuration.

    Attributes
    ----------
    command_template : str
        Shell command template run when a feed publishes a new entry.
    feeds : list[WatchedFeed]
        Watched feeds, in polling order.
    """

    command_template: str = ""
    feeds: list[WatchedFeed] = Field(default_factory=list)

    @field_validator("feeds")
    @classmethod
    def check_unique_urls(cls, v: list[WatchedFeed]) -> list[WatchedFeed]:
        """Validate that no feed URL appears twice."""
        seen: set[str] = set()
        for feed in v:
            if feed.url in seen:
                raise ValueError(f"Duplicate feed URL: {feed.url}")
            seen.add(feed.url)
        return v

    def find_feed(self, url: str) -> WatchedFeed | None:
        """Return the watched feed with the given URL, if any."""
        for feed in self.feeds:
            if feed.url == url:
                return feed
        return None

    def add_feed(self, url: str) -> WatchedFeed:
        """
        Append a feed to the watch-list with an empty watermark.

        Parameters
        ----------
        url : str
            URL of the feed to watch.

        Returns
        -------
        WatchedFeed
            The newly added feed.

        Raises
        ------
        DuplicateFeedError
            If the URL is already watched.
        """
        if self.find_feed(url) is not None:
            raise DuplicateFeedError(f"Feed already watched: {url}")
        feed = WatchedFeed(url=url)
        self.feeds.append(feed)
        return feed

    def remove_feed(self, url: str) -> WatchedFeed:
        """
        Remove a feed from the watch-list.

        Raises
        ------
        FeedNotWatchedError
            If the URL is not watched.
        """
        feed = self.find_feed(url)
        if feed is None:
            raise FeedNotWatchedError(f"Feed not watched: {url}")
        self.feeds.remove(feed)
        return feed


def default_config_path(environ: Mapping[str, str] | None = None) -> Path:
    """
    Resolve the default configuration file location.

    Uses ``$XDG_CONFIG_HOME/rssd/config.yaml`` and falls back to
    ``$HOME/.config/rssd/config.yaml``.

    Parameters
    ----------
    environ : Mapping[str, str] | None
        Environment to read from. Defaults to ``os.environ``.

    Returns
    -------
    Path
        Path to the configuration file.

    Raises
    ------
    ConfigError
        If neither XDG_CONFIG_HOME nor HOME is set.
    """
    if environ is None:
        environ = os.environ

    config_home = environ.get("XDG_CONFIG_HOME")
    if not config_home:
        home = environ.get("HOME")
        if not home:
            raise ConfigError("HOME is not set")
        config_home = os.path.join(home, ".config")

    path = Path(config_home) / APP_DIR_NAME / CONFIG_FILE_NAME
    logger.debug("Resolved default configuration path: %s", path)
    return path
