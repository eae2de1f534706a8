"""
Single-run orchestration.

Reads the cursor, fetches the feed, posts every entry published after
the cursor and moves the cursor to the newest attempted entry.
"""

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Protocol

from rss_discord.discord import format_message
from rss_discord.errors import (
    CursorReadError,
    CursorWriteError,
    DeliveryError,
    FeedFetchError,
)
from rss_discord.notifier import Notifier
from rss_discord.pacing import Pacer
from rss_discord.selector import FeedItem, select_new_items
from rss_discord.storage import format_timestamp

logger = logging.getLogger(__name__)

DEFAULT_GRACE_WINDOW = timedelta(hours=2)


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class CursorStore(Protocol):
    def read_cursor(self) -> datetime | None: ...

    def write_cursor(self, t: datetime) -> None: ...


class FeedFetcher(Protocol):
    async def fetch_feed(self, url: str) -> list[FeedItem]: ...

    async def close(self) -> None: ...


class RunOutcome(enum.Enum):
    """Terminal state of a run."""

    COMPLETED_WITH_UPDATE = "completed_with_update"
    COMPLETED_NO_NEW_ITEMS = "completed_no_new_items"
    ABORTED_CONFIG_ERROR = "aborted_config_error"
    ABORTED_CURSOR_ERROR = "aborted_cursor_error"
    ABORTED_FETCH_ERROR = "aborted_fetch_error"

    @property
    def succeeded(self) -> bool:
        return self in (
            RunOutcome.COMPLETED_WITH_UPDATE,
            RunOutcome.COMPLETED_NO_NEW_ITEMS,
        )


@dataclass
class DeliveryFailure:
    """An entry whose message was not accepted by the webhook."""

    item: FeedItem
    error: DeliveryError


@dataclass
class RunResult:
    """
    Summary of one run.

    Attributes
    ----------
    outcome : RunOutcome
        Terminal state.
    previous_cursor : datetime | None
        Cursor the run started from, after applying the grace window.
    cursor : datetime | None
        Newest publish time among attempted entries, if any.
    attempted : int
        Number of entries a delivery was attempted for.
    delivered : int
        Number of entries the webhook accepted.
    failures : list[DeliveryFailure]
        Entries whose delivery failed.
    cursor_written : bool
        Whether the new cursor was persisted.
    """

    outcome: RunOutcome
    previous_cursor: datetime | None = None
    cursor: datetime | None = None
    attempted: int = 0
    delivered: int = 0
    failures: list[DeliveryFailure] = field(default_factory=list)
    cursor_written: bool = False


class FeedRunner:
    """
    Posts new feed entries to a notifier, once.

    Every collaborator is passed in, so tests can substitute any of them.

    A failed delivery does not hold the cursor back: the entry still
    counts toward the new cursor and will not be retried on the next run.
    """

    def __init__(
        self,
        feed_url: str,
        store: CursorStore,
        fetcher: FeedFetcher,
        notifier: Notifier,
        pacer: Pacer,
        grace_window: timedelta = DEFAULT_GRACE_WINDOW,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the runner.

        Parameters
        ----------
        feed_url : str
            URL of the feed to poll.
        store : CursorStore
            Where the cursor is read from and written to.
        fetcher : FeedFetcher
            Returns the feed entries in feed order.
        notifier : Notifier
            Delivers one message per new entry.
        pacer : Pacer
            Awaited before every delivery.
        grace_window : timedelta
            Lookback used when no cursor is stored yet.
        clock : Callable[[], datetime]
            Returns the current aware time.
        """
        self.feed_url = feed_url
        self.store = store
        self.fetcher = fetcher
        self.notifier = notifier
        self.pacer = pacer
        self.grace_window = grace_window
        self.clock = clock

    def _load_cursor(self) -> datetime:
        """Read the stored cursor, falling back to now minus the grace window."""
        cursor = self.store.read_cursor()
        if cursor is None:
            cursor = self.clock() - self.grace_window
            logger.info(
                "No previous run recorded, posting entries newer than %s",
                format_timestamp(cursor),
            )
        return cursor

    async def run(self) -> RunResult:
        """
        Execute one polling run.

        Returns
        -------
        RunResult
            Outcome and counters of the run.
        """
        try:
            cursor = self._load_cursor()
        except CursorReadError as e:
            logger.error("Error reading last run time: %s", e)
            return RunResult(outcome=RunOutcome.ABORTED_CURSOR_ERROR)

        result = RunResult(
            outcome=RunOutcome.COMPLETED_NO_NEW_ITEMS, previous_cursor=cursor
        )

        try:
            items = await self.fetcher.fetch_feed(self.feed_url)
        except FeedFetchError as e:
            logger.error("Error fetching feed: %s", e)
            result.outcome = RunOutcome.ABORTED_FETCH_ERROR
            return result

        newest: datetime | None = None
        for item in select_new_items(items, cursor):
            await self.pacer.wait()
            result.attempted += 1
            try:
                await self.notifier.notify(format_message(item))
            except DeliveryError as e:
                logger.error("Error sending '%s' to Discord: %s", item.title[:50], e)
                result.failures.append(DeliveryFailure(item=item, error=e))
            else:
                result.delivered += 1
                logger.info("Posted: %s", item.link)

            if newest is None or item.published > newest:
                newest = item.published

        if newest is None:
            logger.info("No new entries since %s", format_timestamp(cursor))
            return result

        result.outcome = RunOutcome.COMPLETED_WITH_UPDATE
        result.cursor = newest

        try:
            self.store.write_cursor(newest)
            result.cursor_written = True
        except CursorWriteError as e:
            logger.error("Error saving last post time: %s", e)

        logger.info(
            "Run finished: %d posted, %d failed, cursor %s",
            result.delivered,
            len(result.failures),
            format_timestamp(newest),
        )
        return result

    async def close(self) -> None:
        """Release the HTTP sessions of the fetcher and notifier."""
        await self.fetcher.close()
        await self.notifier.close()

    async def __aenter__(self) -> "FeedRunner":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
