"""
Live Match Clock

Derives a continuously advancing match minute from sparse server timestamps,
batches clock and countdown refreshes for many matches behind shared timers,
and keeps one ongoing, locally refreshed notification per live match.

This package provides a Flask surface and a line-delimited push consumer
on top of the clock and notification services.
"""
from .models import MatchSnapshot, MatchTime, LiveMatchNotificationData
from .services import LiveNotificationRegistry, ServiceFactory, compute_match_time
from .utils import fmt_clock, now_ts

__version__ = "1.0.0"

__all__ = [
    "MatchSnapshot", "MatchTime", "LiveMatchNotificationData",
    "LiveNotificationRegistry", "ServiceFactory", "compute_match_time",
    "fmt_clock", "now_ts"
]
