"""
Manually driven clock for simulations and tests.

GrantsDAO reads time through a ``Callable[[], int]``. On a host chain that is
the block timestamp; ``ManualClock`` lets a dry-run or a test move time
forward explicitly.
"""

import time
from typing import Optional


class ManualClock:
    """A clock that only moves when told to."""

    def __init__(self, start: Optional[int] = None):
        self._now = int(time.time()) if start is None else int(start)

    def __call__(self) -> int:
        return self._now

    @property
    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        """Move forward by *seconds* and return the new time."""
        if seconds < 0:
            raise ValueError("Clock cannot move backwards")
        self._now += int(seconds)
        return self._now

    def __repr__(self) -> str:
        return f"<ManualClock now={self._now}>"
