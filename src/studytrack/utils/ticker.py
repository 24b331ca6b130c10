"""Periodic tick schedules.

A ticker owns at most one live schedule: ``start`` always cancels the
previous schedule before creating a new one, and ``cancel`` is synchronous
and idempotent, so no callback fires after it returns.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable

TickCallback = Callable[[], None]


class Ticker(ABC):
    """Schedulable periodic task."""

    @abstractmethod
    def start(self, callback: TickCallback, interval: float = 1.0) -> None:
        """Cancel any live schedule, then call *callback* every *interval* seconds."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop the live schedule, if any."""

    @property
    @abstractmethod
    def active(self) -> bool:
        """Whether a schedule is live."""


class AsyncioTicker(Ticker):
    """Ticker driven by event-loop timeouts.

    Deadlines are anchored to the loop clock so callback latency does not
    accumulate. Ticks missed while the loop was blocked are dropped rather
    than fired in a burst.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._callback: TickCallback | None = None
        self._interval = 1.0
        self._deadline = 0.0

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self, callback: TickCallback, interval: float = 1.0) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")

        self.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self._loop = loop
        self._callback = callback
        self._interval = interval
        self._deadline = loop.time() + interval
        self._handle = loop.call_at(self._deadline, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._callback = None

    def _fire(self) -> None:
        callback = self._callback
        if callback is None:
            return

        # Schedule the next tick first so the callback is free to cancel it
        now = self._loop.time()
        self._deadline += self._interval
        if self._deadline <= now:
            self._deadline = now + self._interval
        self._handle = self._loop.call_at(self._deadline, self._fire)

        callback()


class ManualTicker(Ticker):
    """Ticker that only fires when told to.

    Lets synchronous hosts and tests drive time explicitly with ``advance``.
    """

    def __init__(self):
        self._callback: TickCallback | None = None
        self.interval = 1.0
        self.starts = 0
        self.fired = 0

    @property
    def active(self) -> bool:
        return self._callback is not None

    def start(self, callback: TickCallback, interval: float = 1.0) -> None:
        self.cancel()
        self._callback = callback
        self.interval = interval
        self.starts += 1

    def cancel(self) -> None:
        self._callback = None

    def advance(self, ticks: int = 1) -> int:
        """Fire up to *ticks* ticks; stops early if the schedule is cancelled.

        Returns the number of ticks actually fired.
        """
        fired = 0
        for _ in range(ticks):
            if self._callback is None:
                break
            self._callback()
            fired += 1
        self.fired += fired
        return fired
