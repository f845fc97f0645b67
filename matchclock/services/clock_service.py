"""
Clock hooks for the live match clock application.

A hook owns the displayed clock value for one view. It is mounted once,
fed the latest match data through update(), and unmounted when the view
goes away. Listeners registered with subscribe() are called only when the
exposed value actually changes, which is the re-render signal.

Single-match hooks run one interval per mounted instance. Multi-match hooks
share one interval across the whole list and compare every freshly computed
map with the previous one before notifying.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, Sequence, Tuple, TypeVar

from ..models import MatchSnapshot, MatchTime
from ..utils.constants import (
    ACTIVE_STATUSES, MINUTE_TICK_SECONDS, SECOND_TICK_SECONDS, TICKING_STATUSES,
)
from .interval_scheduler import IntervalScheduler
from .match_time import compute_match_time, compute_minute

logger = logging.getLogger(__name__)

T = TypeVar("T")
Listener = Callable[[Any], None]


class ClockHook(ABC, Generic[T]):
    """Base lifecycle shared by every clock hook."""

    def __init__(self, scheduler: IntervalScheduler):
        self._scheduler = scheduler
        self._listeners: List[Listener] = []
        self._current: Optional[T] = None
        self._handle: Optional[int] = None
        self._mounted = False

    @property
    def current(self) -> Optional[T]:
        """The value the view should render right now."""
        return self._current

    @property
    def is_ticking(self) -> bool:
        """Whether this hook currently owns a running interval."""
        return self._handle is not None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def mount(self) -> "ClockHook[T]":
        if not self._mounted:
            self._mounted = True
            self._run_effect()
        return self

    def unmount(self) -> None:
        self._cleanup()
        self._mounted = False

    def _set_state(self, value: Optional[T]) -> None:
        if value == self._current:
            logger.debug("%s: value unchanged, skipping update", type(self).__name__)
            return
        self._current = value
        for listener in list(self._listeners):
            listener(value)

    def _start_interval(self, seconds: float) -> None:
        self._cleanup()
        self._handle = self._scheduler.set_interval(self._tick, seconds)
        logger.debug("%s: interval started (%ss)", type(self).__name__, seconds)

    def _cleanup(self) -> None:
        if self._handle is not None:
            self._scheduler.clear_interval(self._handle)
            self._handle = None

    def _restart(self) -> None:
        if self._mounted:
            self._cleanup()
            self._run_effect()

    @abstractmethod
    def _run_effect(self) -> None:
        """Compute immediately and start an interval if the input needs one."""
        pass

    @abstractmethod
    def _tick(self) -> None:
        pass


# ----------------------------------------------------------------------
# Single match (detail view)
# ----------------------------------------------------------------------
class SingleMatchClock(ClockHook[T]):
    """
    Clock for one match.

    The interval callback always reads the latest snapshot handed to update(),
    so a score change does not tear down the timer; only a change in the
    fields that drive the derivation restarts it.
    """

    interval_seconds: float = MINUTE_TICK_SECONDS

    def __init__(self, scheduler: IntervalScheduler, match: Optional[MatchSnapshot] = None):
        super().__init__(scheduler)
        self._match = match

    @property
    def match(self) -> Optional[MatchSnapshot]:
        return self._match

    def update(self, match: Optional[MatchSnapshot]) -> None:
        """Hand the hook the latest snapshot for its match."""
        previous = self._match
        self._match = match
        old_key = previous.clock_key() if previous is not None else None
        new_key = match.clock_key() if match is not None else None
        if old_key != new_key:
            self._restart()

    def _run_effect(self) -> None:
        match = self._match
        if match is None:
            self._set_state(None)
            return

        self._set_state(self._compute(match, self._scheduler.now()))

        if match.status in TICKING_STATUSES:
            self._start_interval(self.interval_seconds)

    def _tick(self) -> None:
        match = self._match
        if match is None:
            return
        self._set_state(self._compute(match, self._scheduler.now()))

    @abstractmethod
    def _compute(self, match: MatchSnapshot, now: float) -> Optional[T]:
        pass


class LiveMinuteClock(SingleMatchClock[int]):
    """Minute-only clock; refreshes every 30 seconds while ticking."""

    interval_seconds = MINUTE_TICK_SECONDS

    def _compute(self, match: MatchSnapshot, now: float) -> Optional[int]:
        return compute_minute(match, now)


class LiveMatchTimeClock(SingleMatchClock[MatchTime]):
    """Full M:SS clock; refreshes every second while ticking."""

    interval_seconds = SECOND_TICK_SECONDS

    def _compute(self, match: MatchSnapshot, now: float) -> Optional[MatchTime]:
        return compute_match_time(match, now)


# ----------------------------------------------------------------------
# Many matches (list/home views)
# ----------------------------------------------------------------------
class BatchedMatchClock(ClockHook[Dict[str, T]]):
    """
    One shared interval for an arbitrary list of matches.

    Every tick recomputes the whole map; listeners only hear about it when
    the map differs from the previous one.
    """

    interval_seconds: float = MINUTE_TICK_SECONDS

    def __init__(self, scheduler: IntervalScheduler, matches: Iterable[MatchSnapshot] = ()):
        super().__init__(scheduler)
        self._matches: List[MatchSnapshot] = list(matches)
        self._current = {}

    @property
    def matches(self) -> Sequence[MatchSnapshot]:
        return tuple(self._matches)

    def update(self, matches: Iterable[MatchSnapshot]) -> None:
        """Hand the hook the latest list of matches."""
        matches = list(matches)
        old_keys = self._keys(self._matches)
        self._matches = matches
        if old_keys != self._keys(matches):
            self._restart()

    @staticmethod
    def _keys(matches: Sequence[MatchSnapshot]) -> Tuple[Any, ...]:
        return tuple(match.clock_key() for match in matches)

    def compute(self, now: Optional[float] = None) -> Dict[str, T]:
        """Build the id -> value map for the current list at ``now``."""
        if now is None:
            now = self._scheduler.now()
        result: Dict[str, T] = {}
        for match in self._matches:
            value = self._entry(match, now)
            if value is not None:
                result[match.id] = value
        return result

    def _run_effect(self) -> None:
        now = self._scheduler.now()
        self._set_state(self.compute(now))
        if self._needs_timer(now):
            self._start_interval(self.interval_seconds)

    def _tick(self) -> None:
        now = self._scheduler.now()
        self._set_state(self.compute(now))
        if not self._needs_timer(now):
            logger.debug("%s: nothing left to tick, stopping", type(self).__name__)
            self._cleanup()

    @abstractmethod
    def _entry(self, match: MatchSnapshot, now: float) -> Optional[T]:
        """Value exposed for one match, or None to leave it out of the map."""
        pass

    @abstractmethod
    def _needs_timer(self, now: float) -> bool:
        pass


class MultiMatchClock(BatchedMatchClock[T]):
    """Clock over every active match; ticks only while one is in play."""

    def _needs_timer(self, now: float) -> bool:
        return any(match.status in TICKING_STATUSES for match in self._matches)

    def _entry(self, match: MatchSnapshot, now: float) -> Optional[T]:
        if match.status not in ACTIVE_STATUSES:
            return None
        time = compute_match_time(match, now)
        if time is None:
            return None
        return self._value(time)

    @abstractmethod
    def _value(self, time: MatchTime) -> T:
        pass


class LiveMinutesClock(MultiMatchClock[int]):
    """id -> minute for list views, refreshed every 30 seconds."""

    interval_seconds = MINUTE_TICK_SECONDS

    def _value(self, time: MatchTime) -> int:
        return time.minute


class LiveMatchTimesClock(MultiMatchClock[MatchTime]):
    """id -> MatchTime for list views that show seconds, refreshed every second."""

    interval_seconds = SECOND_TICK_SECONDS

    def _value(self, time: MatchTime) -> MatchTime:
        return time


# ----------------------------------------------------------------------
# Entry points for the view layer
# ----------------------------------------------------------------------
def mount_hook(hook: ClockHook, listener: Optional[Listener]) -> ClockHook:
    if listener is not None:
        hook.subscribe(listener)
    return hook.mount()


def use_live_minute(match: Optional[MatchSnapshot], scheduler: IntervalScheduler,
                    listener: Optional[Listener] = None) -> LiveMinuteClock:
    """Mount a minute clock for one match; read ``.current`` for the minute."""
    return mount_hook(LiveMinuteClock(scheduler, match), listener)


def use_live_match_time(match: Optional[MatchSnapshot], scheduler: IntervalScheduler,
                        listener: Optional[Listener] = None) -> LiveMatchTimeClock:
    """Mount an M:SS clock for one match; read ``.current`` for the MatchTime."""
    return mount_hook(LiveMatchTimeClock(scheduler, match), listener)


def use_live_minutes(matches: Iterable[MatchSnapshot], scheduler: IntervalScheduler,
                     listener: Optional[Listener] = None) -> LiveMinutesClock:
    """Mount one shared minute clock for a list of matches."""
    return mount_hook(LiveMinutesClock(scheduler, matches), listener)


def use_live_match_times(matches: Iterable[MatchSnapshot], scheduler: IntervalScheduler,
                         listener: Optional[Listener] = None) -> LiveMatchTimesClock:
    """Mount one shared M:SS clock for a list of matches."""
    return mount_hook(LiveMatchTimesClock(scheduler, matches), listener)
