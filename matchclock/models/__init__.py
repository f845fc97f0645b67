"""
Models package for the live match clock.

This package contains the core data models used throughout the application.
"""
from .match import MatchSnapshot, MatchTime
from .notification import (
    LiveMatchNotificationData, LiveNotificationState, Notification,
    NotificationChannel, PayloadValidationError
)

__all__ = [
    "MatchSnapshot", "MatchTime", "LiveMatchNotificationData",
    "LiveNotificationState", "Notification", "NotificationChannel",
    "PayloadValidationError"
]
