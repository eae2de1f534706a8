"""
Feed entry model and new-entry selection.

An entry is new when its publish time is strictly after the cursor.
"""

import calendar
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger(__name__)


def _struct_to_datetime(value: Any) -> datetime | None:
    """Convert a feedparser UTC struct_time into an aware datetime."""
    if not value:
        return None
    try:
        return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        return None


@dataclass(frozen=True)
class FeedItem:
    """
    Normalized RSS/Atom entry.

    Attributes
    ----------
    title : str
        Entry title.
    link : str
        Entry URL.
    published : datetime | None
        Aware publish time, or None when the feed gives none we can parse.
    guid : str
        Unique identifier for the entry, used in log lines.
    """

    title: str = ""
    link: str = ""
    published: datetime | None = None
    guid: str = ""

    @classmethod
    def from_feedparser(cls, entry: Any) -> "FeedItem":
        """
        Create a FeedItem from a feedparser entry.

        Uses ``published_parsed`` and falls back to ``updated_parsed``
        for Atom feeds that only carry an update time.

        Parameters
        ----------
        entry : Any
            A feedparser entry object.

        Returns
        -------
        FeedItem
            Normalized entry instance.
        """
        published = _struct_to_datetime(entry.get("published_parsed"))
        if published is None:
            published = _struct_to_datetime(entry.get("updated_parsed"))

        link = entry.get("link", "") or ""
        guid = entry.get("id", "") or link

        return cls(
            title=(entry.get("title", "") or "").strip(),
            link=link,
            published=published,
            guid=guid,
        )


def is_new(item: FeedItem, cursor: datetime) -> bool:
    """
    Tell whether an item was published strictly after the cursor.

    Items without a publish time are never new.
    """
    if item.published is None:
        return False
    return item.published > cursor


def select_new_items(items: Iterable[FeedItem], cursor: datetime) -> list[FeedItem]:
    """
    Keep the items published after the cursor, in feed order.

    Parameters
    ----------
    items : Iterable[FeedItem]
        Entries as returned by the feed.
    cursor : datetime
        Aware timestamp of the last processed entry.

    Returns
    -------
    list[FeedItem]
        New entries, preserving the input order.
    """
    selected = []
    total = 0
    for item in items:
        total += 1
        if item.published is None:
            logger.debug("Skipping entry without publish time: %s", item.guid or item.title)
            continue
        if is_new(item, cursor):
            selected.append(item)

    logger.debug("Selected %d of %d entries after %s", len(selected), total, cursor.isoformat())

    return selected
