"""
Feed synchronization.

One run loads the configuration, checks every watched feed in order,
dispatches the command template for each feed whose newest entry differs
from its watermark, and saves the updated watermarks.
"""

import logging
from dataclasses import dataclass, field

from rssd.config import Configuration, WatchedFeed
from rssd.dispatcher import CommandDispatcher
from rssd.errors import PersistenceError
from rssd.fetcher import DEFAULT_DEADLINE, DEFAULT_USER_AGENT, FeedFetcher
from rssd.store import ConfigStore
from rssd.template import TemplateExpander

logger = logging.getLogger(__name__)


@dataclass
class SyncReport:
    """
    Outcome of a synchronization run.

    Attributes
    ----------
    checked : int
        Number of feeds fetched.
    dispatched : list[str]
        URLs of the feeds whose command was run.
    unchanged : list[str]
        URLs of the feeds whose newest entry matched the watermark.
    """

    checked: int = 0
    dispatched: list[str] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)


class Synchronizer:
    """
    Drives one synchronization pass over the watch-list.

    Feeds are processed sequentially. Any error aborts the run; the
    watermarks advanced before the error are saved before it propagates.
    """

    def __init__(
        self,
        fetcher: FeedFetcher,
        expander: TemplateExpander | None = None,
        dispatcher: CommandDispatcher | None = None,
        deadline: float = DEFAULT_DEADLINE,
    ):
        """
        Initialize the synchronizer.

        Parameters
        ----------
        fetcher : FeedFetcher
            Fetcher used to retrieve feeds.
        expander : TemplateExpander | None
            Template expander. Defaults to one reading the process environment.
        dispatcher : CommandDispatcher | None
            Command dispatcher. Defaults to ``/bin/sh``.
        deadline : float
            Per-feed fetch deadline in seconds.
        """
        self.fetcher = fetcher
        self.expander = expander or TemplateExpander()
        self.dispatcher = dispatcher or CommandDispatcher()
        self.deadline = deadline

    async def run(self, store: ConfigStore) -> SyncReport:
        """
        Synchronize every watched feed and persist the watermarks.

        Parameters
        ----------
        store : ConfigStore
            Store holding the configuration.

        Returns
        -------
        SyncReport
            Summary of the run.
        """
        config = store.load()
        report = SyncReport()

        logger.info("Synchronizing %d feed(s)", len(config.feeds))

        try:
            for feed in config.feeds:
                await self._sync_feed(config, feed, report)
        except BaseException:
            self._save_progress(store, config, report)
            raise

        store.save(config)

        logger.info(
            "Synchronization complete: %d checked, %d dispatched",
            report.checked,
            len(report.dispatched),
        )
        return report

    async def _sync_feed(
        self, config: Configuration, feed: WatchedFeed, report: SyncReport
    ) -> None:
        """Check one feed and dispatch the command if its newest entry is new."""
        doc = await self.fetcher.fetch(feed.url, self.deadline)
        report.checked += 1

        newest_id = doc.newest.identifier
        if newest_id == feed.last_seen_id:
            logger.debug("No new entry in %s", feed.url)
            report.unchanged.append(feed.url)
            return

        logger.info("New entry in %s: %s", feed.url, newest_id)

        command = self.expander.expand(config.command_template, doc)
        await self.dispatcher.run(command)

        feed.last_seen_id = newest_id
        report.dispatched.append(feed.url)

    def _save_progress(self, store: ConfigStore, config: Configuration, report: SyncReport) -> None:
        """Persist watermarks of an aborted run without masking the error that aborted it."""
        logger.error(
            "Synchronization aborted after %d feed(s); saving %d updated watermark(s)",
            report.checked,
            len(report.dispatched),
        )
        try:
            store.save(config)
        except PersistenceError as e:
            logger.error("Failed to save watermarks of aborted run: %s", e)


async def run_once(
    store: ConfigStore,
    deadline: float = DEFAULT_DEADLINE,
    user_agent: str = DEFAULT_USER_AGENT,
) -> SyncReport:
    """Run a single synchronization with a fetcher session scoped to the run."""
    async with FeedFetcher(user_agent=user_agent) as fetcher:
        synchronizer = Synchronizer(fetcher, deadline=deadline)
        return await synchronizer.run(store)
