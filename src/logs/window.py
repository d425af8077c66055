"""Query window tracking — the ``[last_check, now)`` cursor between checks."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


class QueryWindow:
    """Holds the time of the last completed check.

    Not synchronised: callers must not run overlapping checks against the
    same instance.

    Usage::

        window = QueryWindow.from_lookback(timedelta(minutes=15))
        start, end = window.current_window()
        ...  # fetch
        window.advance(end)
    """

    def __init__(self, last_check: datetime, clock: Clock = utc_now) -> None:
        self._last_check = last_check
        self._clock = clock

    @classmethod
    def from_lookback(cls, lookback: timedelta, clock: Clock = utc_now) -> QueryWindow:
        """Start the cursor *lookback* before the current time."""
        return cls(clock() - lookback, clock=clock)

    @property
    def last_check(self) -> datetime:
        return self._last_check

    def now(self) -> datetime:
        return self._clock()

    def current_window(self) -> tuple[datetime, datetime]:
        """Return ``(last_check, now)``."""
        return self._last_check, self._clock()

    def advance(self, to: datetime) -> None:
        """Move the cursor to *to* unconditionally."""
        self._last_check = to
