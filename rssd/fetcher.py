"""
RSS/Atom feed fetching module.

Downloads feeds with aiohttp under a per-feed deadline and parses them
with feedparser into FeedDocument instances.
"""

import asyncio
import io
import logging
from typing import Any

import aiohttp
import feedparser

from rssd.errors import FeedParseError, FetchTimeoutError, NetworkError
from rssd.models import FeedDocument

logger = logging.getLogger(__name__)

DEFAULT_DEADLINE = 60.0
DEFAULT_USER_AGENT = "rssd/1.0"


class FeedFetcher:
    """
    Async RSS/Atom feed fetcher.

    Fetches feeds using aiohttp and parses them with feedparser.
    A single HTTP session is reused across fetches until closed.
    """

    def __init__(self, user_agent: str = DEFAULT_USER_AGENT):
        """
        Initialize the feed fetcher.

        Parameters
        ----------
        user_agent : str
            User-Agent header for HTTP requests.
        """
        self.user_agent = user_agent
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the HTTP session."""
        if self._session is None or self._session.closed:
            headers = {"User-Agent": self.user_agent}
            self._session = aiohttp.ClientSession(headers=headers)
        return self._session

    async def fetch(self, url: str, deadline: float = DEFAULT_DEADLINE) -> FeedDocument:
        """
        Fetch and parse an RSS/Atom feed.

        Parameters
        ----------
        url : str
            URL of the feed.
        deadline : float
            Seconds allowed for the whole retrieval. The request is
            cancelled when it elapses.

        Returns
        -------
        FeedDocument
            Parsed feed with at least one entry.

        Raises
        ------
        FetchTimeoutError
            If the feed is not retrieved within the deadline.
        NetworkError
            On transport failure or an HTTP error status.
        FeedParseError
            If the content is not a feed or the feed has no entries.
        """
        logger.debug("Fetching feed %s (deadline %.0fs)", url, deadline)

        try:
            content = await asyncio.wait_for(self._download(url), timeout=deadline)
        except asyncio.TimeoutError as e:
            raise FetchTimeoutError(f"Timed out after {deadline:g}s fetching {url}") from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"Failed to fetch {url}: {e}") from e

        document = self.parse(content, url)
        logger.info("Fetched %d entries from %s", len(document.entries), url)
        return document

    async def _download(self, url: str) -> bytes:
        """Return the raw response body for a URL."""
        session = await self._get_session()
        async with session.get(url) as response:
            response.raise_for_status()
            return await response.read()

    def parse(self, content: bytes | str, url: str = "") -> FeedDocument:
        """
        Parse feed content into a FeedDocument.

        Parameters
        ----------
        content : bytes | str
            Raw feed XML/content.
        url : str
            Feed URL, for logging and error messages.

        Returns
        -------
        FeedDocument
            Parsed document with at least one entry.

        Raises
        ------
        FeedParseError
            If feedparser finds no entries in the content.
        """
        # Strip leading whitespace - some servers return content with
        # leading newlines which breaks XML declaration parsing
        content = content.lstrip()
        # feedparser opens a str or bytes naming a URL or file; a stream is always read as content
        if isinstance(content, str):
            content = content.encode("utf-8")
        parsed: Any = feedparser.parse(io.BytesIO(content))

        if not parsed.entries:
            if parsed.bozo and parsed.bozo_exception:
                raise FeedParseError(
                    f"Content at {url} is not a recognizable feed: {parsed.bozo_exception}"
                )
            raise FeedParseError(f"Feed {url} has no entries")

        if parsed.bozo and parsed.bozo_exception:
            logger.warning(
                "Feed %s has parsing issues: %s",
                url,
                parsed.bozo_exception,
            )

        return FeedDocument.from_feedparser(parsed)

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
            logger.debug("HTTP session closed")

    async def __aenter__(self) -> "FeedFetcher":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
