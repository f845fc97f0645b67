"""Time helpers shared by the test modules."""
from datetime import datetime, timezone

from matchclock.services import ManualIntervalScheduler

T0 = 1_700_000_000.0


def iso(ts: float) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat().replace("+00:00", "Z")


class FakeClock:
    def __init__(self, start: float = T0):
        self.t = start

    def __call__(self) -> float:
        return self.t


class Ticker:
    """Moves the fake clock forward and fires whatever became due."""

    def __init__(self, clock: FakeClock, scheduler: ManualIntervalScheduler):
        self.clock = clock
        self.scheduler = scheduler

    def __call__(self, seconds: float) -> int:
        self.clock.t += seconds
        return self.scheduler.run_pending()
