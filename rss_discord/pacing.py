"""
Pacing between webhook posts.

Discord rate-limits webhooks, so the runner waits on a pacer before
every delivery.
"""

import asyncio
from typing import Protocol, runtime_checkable


@runtime_checkable
class Pacer(Protocol):
    """Something the runner awaits before each delivery."""

    async def wait(self) -> None:
        """Block until the next delivery may start."""
        ...


class FixedDelayPacer:
    """Sleep a fixed number of seconds before every delivery."""

    def __init__(self, delay: float = 1.0):
        if delay < 0:
            raise ValueError("delay must not be negative")
        self.delay = delay

    async def wait(self) -> None:
        await asyncio.sleep(self.delay)


class NoDelayPacer:
    """Pacer that never waits."""

    async def wait(self) -> None:
        return None
