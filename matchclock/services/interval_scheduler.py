"""
Interval scheduling for the live match clock application.

Every periodic refresh (clock hooks, countdowns, live notifications) goes
through an IntervalScheduler so that hosts can pick how time advances:
an asyncio loop in a long-running consumer, or a cooperative scheduler
pumped by a request-driven host.
"""
import asyncio
import itertools
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..utils import now_ts

logger = logging.getLogger(__name__)

IntervalCallback = Callable[[], None]


class IntervalScheduler(ABC):
    """Abstract repeating timer with set/clear semantics."""

    @abstractmethod
    def set_interval(self, callback: IntervalCallback, seconds: float) -> int:
        """
        Run ``callback`` every ``seconds`` until cleared.

        Returns:
            Handle accepted by clear_interval
        """
        pass

    @abstractmethod
    def clear_interval(self, handle: Optional[int]) -> None:
        """Stop an interval. Unknown or None handles are ignored."""
        pass

    @abstractmethod
    def active_count(self) -> int:
        """Number of intervals currently running."""
        pass

    def now(self) -> float:
        """Epoch seconds that interval callbacks should treat as the present."""
        return now_ts()


def _run_callback(callback: IntervalCallback) -> None:
    try:
        callback()
    except Exception:
        logger.exception("Interval callback %r failed", callback)


@dataclass
class _ManualInterval:
    callback: IntervalCallback
    seconds: float
    next_run: float


class ManualIntervalScheduler(IntervalScheduler):
    """
    Cooperative scheduler driven by its owner.

    Nothing runs until run_pending() or advance() is called, which makes
    it usable inside a request-driven host and fully deterministic.
    """

    def __init__(self, clock: Callable[[], float] = now_ts):
        self._clock = clock
        self._intervals: Dict[int, _ManualInterval] = {}
        self._ids = itertools.count(1)
        self._now: Optional[float] = None

    def now(self) -> float:
        """Current time as seen by this scheduler."""
        return self._now if self._now is not None else self._clock()

    def set_interval(self, callback: IntervalCallback, seconds: float) -> int:
        if seconds <= 0:
            raise ValueError("Interval must be positive")
        handle = next(self._ids)
        self._intervals[handle] = _ManualInterval(callback, seconds, self.now() + seconds)
        return handle

    def clear_interval(self, handle: Optional[int]) -> None:
        if handle is not None:
            self._intervals.pop(handle, None)

    def active_count(self) -> int:
        return len(self._intervals)

    def run_pending(self, now: Optional[float] = None) -> int:
        """
        Fire every interval due at ``now`` once.

        An interval that missed several periods (an idle host) runs a single
        time at ``now`` and is rescheduled from there; the skipped periods
        are dropped since callbacks re-derive everything from the present.

        Args:
            now: Epoch seconds; defaults to the scheduler's clock

        Returns:
            Number of callbacks fired
        """
        target = now if now is not None else self._clock()
        due = sorted(
            (interval.next_run, handle)
            for handle, interval in self._intervals.items()
            if interval.next_run <= target
        )
        fired = 0
        self._now = target
        try:
            for run_at, handle in due:
                interval = self._intervals.get(handle)
                if interval is None:
                    # Cleared by an earlier callback in this pump
                    continue
                skipped = int((target - run_at) // interval.seconds)
                if skipped:
                    logger.debug("Interval %s skipped %d missed periods", handle, skipped)
                interval.next_run = target + interval.seconds
                _run_callback(interval.callback)
                fired += 1
        finally:
            self._now = None
        return fired

    def advance(self, seconds: float) -> int:
        """Fire everything that becomes due ``seconds`` from now."""
        return self.run_pending(self.now() + seconds)


class AsyncioIntervalScheduler(IntervalScheduler):
    """Interval scheduler backed by an asyncio event loop's call_later."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop or asyncio.get_running_loop()
        self._handles: Dict[int, asyncio.TimerHandle] = {}
        self._ids = itertools.count(1)

    def set_interval(self, callback: IntervalCallback, seconds: float) -> int:
        if seconds <= 0:
            raise ValueError("Interval must be positive")
        handle = next(self._ids)

        def _tick() -> None:
            if handle not in self._handles:
                return
            # Reschedule first so a cancel inside the callback wins
            self._handles[handle] = self._loop.call_later(seconds, _tick)
            _run_callback(callback)

        self._handles[handle] = self._loop.call_later(seconds, _tick)
        return handle

    def clear_interval(self, handle: Optional[int]) -> None:
        if handle is None:
            return
        timer = self._handles.pop(handle, None)
        if timer is not None:
            timer.cancel()

    def active_count(self) -> int:
        return len(self._handles)
