"""
Utilities package for the live match clock.

This package contains constants and time helpers used throughout the application.
"""
from .time_utils import fmt_clock, fmt_hhmm, now_ts, to_epoch
from .constants import (
    ACTIVE_STATUSES, PAUSED_STATUSES, TICKING_STATUSES,
    NON_TICKING_NOTIFICATION_STATUSES
)

__all__ = [
    "fmt_clock", "fmt_hhmm", "now_ts", "to_epoch",
    "ACTIVE_STATUSES", "PAUSED_STATUSES", "TICKING_STATUSES",
    "NON_TICKING_NOTIFICATION_STATUSES"
]
