# storefront/services/scheduling.py
"""Timer scheduler that drives the hero slideshow.

The slideshow only needs two calls, ``call_later`` for one-shot timers and
``call_every`` for recurring ones. Both hand back a handle that can be
cancelled. Delays are expressed in milliseconds.

``VirtualClock`` keeps its own notion of time and only fires callbacks when
``advance`` is called. Streamlit reruns the hero fragment periodically and
advances the clock by the wall-clock time that passed in between, which gives
the slideshow a single-threaded event loop without a background thread.
"""
import heapq
import itertools
from typing import Callable, List, Optional, Tuple


class TimerHandle:
    def __init__(self, callback: Callable[[], None], interval: Optional[float] = None):
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    @property
    def recurring(self) -> bool:
        return self.interval is not None

    def cancel(self):
        self.cancelled = True


class VirtualClock:
    def __init__(self, start: float = 0.0):
        self._now = float(start)
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._sequence = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        """Number of live timers still waiting to fire."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def _push(self, due: float, handle: TimerHandle):
        # The sequence number keeps same-instant timers in scheduling order
        heapq.heappush(self._queue, (due, next(self._sequence), handle))

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        if delay < 0:
            raise ValueError(f"Timer delay must not be negative, got {delay}.")
        handle = TimerHandle(callback)
        self._push(self._now + delay, handle)
        return handle

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        if interval <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval}.")
        handle = TimerHandle(callback, interval)
        self._push(self._now + interval, handle)
        return handle

    def advance(self, delta: float) -> int:
        """
        Moves virtual time forward and fires every timer that falls due.
        :param delta: Milliseconds to advance by.
        :return: The number of callbacks that ran.
        """
        if delta < 0:
            raise ValueError(f"Cannot move the clock backwards by {delta}.")
        target = self._now + delta
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = due
            if handle.recurring:
                self._push(due + handle.interval, handle)
            handle.callback()
            fired += 1
        self._now = target
        return fired
