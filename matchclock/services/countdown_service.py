"""Kickoff countdowns for scheduled matches."""

from typing import Iterable, Optional

from ..models import MatchSnapshot
from ..utils import fmt_hhmm, to_epoch
from ..utils.constants import COUNTDOWN_TICK_SECONDS, COUNTDOWN_WINDOW_SECONDS, STATUS_SCHEDULED
from .clock_service import BatchedMatchClock, Listener, mount_hook
from .interval_scheduler import IntervalScheduler


def countdown_for(match: MatchSnapshot, now: float) -> Optional[str]:
    """
    Return the HH:MM left until kickoff, or None outside the 24 hour window.

    Example:
        kickoff in 2h 5m 40s -> "02:05"
    """
    if match.status != STATUS_SCHEDULED:
        return None
    kickoff = to_epoch(match.start_time)
    if kickoff is None:
        return None
    remaining = kickoff - now
    if remaining <= 0 or remaining > COUNTDOWN_WINDOW_SECONDS:
        return None
    return fmt_hhmm(remaining)


class CountdownScheduler(BatchedMatchClock[str]):
    """
    id -> "HH:MM" for scheduled matches kicking off within 24 hours.

    The whole map is rebuilt every tick (once a minute by default); matches
    that kicked off or are still outside the window simply drop out of it.
    """

    interval_seconds = COUNTDOWN_TICK_SECONDS

    def __init__(self, scheduler: IntervalScheduler, matches: Iterable[MatchSnapshot] = (),
                 interval_seconds: Optional[float] = None):
        super().__init__(scheduler, matches)
        if interval_seconds is not None:
            self.interval_seconds = interval_seconds

    def _entry(self, match: MatchSnapshot, now: float) -> Optional[str]:
        return countdown_for(match, now)

    def _needs_timer(self, now: float) -> bool:
        # A match beyond the window still needs ticks to enter it
        for match in self._matches:
            if match.status != STATUS_SCHEDULED:
                continue
            kickoff = to_epoch(match.start_time)
            if kickoff is not None and kickoff > now:
                return True
        return False


def use_countdowns(matches: Iterable[MatchSnapshot], scheduler: IntervalScheduler,
                   listener: Optional[Listener] = None,
                   interval_seconds: Optional[float] = None) -> CountdownScheduler:
    """Mount one shared countdown timer for a list of matches."""
    return mount_hook(CountdownScheduler(scheduler, matches, interval_seconds), listener)
