"""
File storage for the last-run timestamp.

Persists the publish time of the newest processed feed entry so the
next run only posts entries published after it.
"""

import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path

from rss_discord.errors import CursorReadError, CursorWriteError

logger = logging.getLogger(__name__)


def format_timestamp(t: datetime) -> str:
    """
    Serialize an aware datetime as an RFC 3339 string.

    UTC values use the ``Z`` suffix; sub-second precision is kept.

    Raises
    ------
    ValueError
        If the datetime has no timezone.
    """
    if t.tzinfo is None or t.utcoffset() is None:
        raise ValueError("Cannot serialize a naive datetime")

    text = t.isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def parse_timestamp(text: str) -> datetime:
    """
    Parse an RFC 3339 string into an aware datetime.

    Raises
    ------
    ValueError
        If the text is not a timestamp or carries no UTC offset.
    """
    text = text.strip()
    if not text:
        raise ValueError("empty timestamp")

    # fromisoformat only accepts a trailing Z from Python 3.11 onwards
    if text[-1] in "Zz":
        text = text[:-1] + "+00:00"

    value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        raise ValueError(f"timestamp has no UTC offset: {text!r}")
    return value


class TimestampStore:
    """
    Single-value store backed by a text file.

    The file holds exactly one RFC 3339 timestamp. A missing file is a
    valid initial state; an unreadable or corrupt one is an error.
    """

    def __init__(self, path: str | Path):
        """
        Initialize the store.

        Parameters
        ----------
        path : str | Path
            Path to the timestamp file.
        """
        self.path = Path(path)

    def read_cursor(self) -> datetime | None:
        """
        Read the stored timestamp.

        Returns
        -------
        datetime | None
            The stored timestamp, or None if the file does not exist.

        Raises
        ------
        CursorReadError
            If the file exists but cannot be read or parsed.
        """
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("Timestamp file not found: %s", self.path)
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise CursorReadError(f"Cannot read timestamp file {self.path}: {e}") from e

        try:
            cursor = parse_timestamp(content)
        except ValueError as e:
            raise CursorReadError(
                f"Invalid timestamp in {self.path}: {content.strip()[:64]!r}"
            ) from e

        logger.debug("Read cursor %s from %s", format_timestamp(cursor), self.path)
        return cursor

    def write_cursor(self, t: datetime) -> None:
        """
        Replace the stored timestamp.

        The new value is written to a temporary file in the same directory
        and moved over the old one, so readers see either the old or the
        new content.

        Parameters
        ----------
        t : datetime
            Timezone-aware timestamp to store.

        Raises
        ------
        CursorWriteError
            If the file cannot be written.
        ValueError
            If ``t`` is naive.
        """
        content = format_timestamp(t) + "\n"

        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            raise CursorWriteError(f"Cannot write timestamp file {self.path}: {e}") from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.debug("Could not remove temporary file %s", tmp_name)

        logger.debug("Wrote cursor %s to %s", content.strip(), self.path)

