"""
Services package for the live match clock.

This package contains the clock derivation, the clock hooks and schedulers,
and the live notification layer.
Includes a factory that wires them from configuration.
"""
from .match_time import compute_match_time, compute_minute
from .interval_scheduler import AsyncioIntervalScheduler, IntervalScheduler, ManualIntervalScheduler
from .clock_service import (
    LiveMatchTimeClock, LiveMatchTimesClock, LiveMinuteClock, LiveMinutesClock,
    use_live_match_time, use_live_match_times, use_live_minute, use_live_minutes
)
from .countdown_service import CountdownScheduler, countdown_for, use_countdowns
from .notification_sinks import (
    HttpNotificationTransport, InMemoryNotificationTray, NotificationBackendError,
    NotificationSink, PlainNotificationSink, RichNotificationSink
)
from .live_notification_service import LiveNotificationRegistry
from .match_api import MatchApiClient, MatchApiError
from .service_factory import ServiceFactory

__all__ = [
    "compute_match_time", "compute_minute", "AsyncioIntervalScheduler",
    "IntervalScheduler", "ManualIntervalScheduler", "LiveMatchTimeClock",
    "LiveMatchTimesClock", "LiveMinuteClock", "LiveMinutesClock",
    "use_live_match_time", "use_live_match_times", "use_live_minute",
    "use_live_minutes", "CountdownScheduler", "countdown_for", "use_countdowns",
    "HttpNotificationTransport", "InMemoryNotificationTray",
    "NotificationBackendError", "NotificationSink", "PlainNotificationSink",
    "RichNotificationSink", "LiveNotificationRegistry", "MatchApiClient",
    "MatchApiError", "ServiceFactory"
]
