"""
Utility functions for the live match clock application.

This module contains the time helpers shared by the clock derivations,
the schedulers and the notification layer.
"""
import logging
import time
from datetime import datetime, timezone
from typing import Optional, Union

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

Instant = Union[str, datetime, float, int, None]


def now_ts() -> float:
    """
    Get current timestamp in epoch seconds.

    Returns:
        Current time as floating point epoch seconds
    """
    return time.time()


def to_epoch(value: Instant) -> Optional[float]:
    """
    Convert an ISO-8601 string, datetime or epoch number to epoch seconds.

    Naive values are read as UTC. Unparsable input yields None so callers
    can treat it like a missing timestamp.

    Example:
        >>> to_epoch("1970-01-01T00:01:00Z")
        60.0
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = date_parser.isoparse(str(value))
        except (ValueError, OverflowError):
            logger.warning("Ignoring unparsable timestamp %r", value)
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def fmt_clock(minute: int, seconds: int) -> str:
    """
    Format a match minute and seconds as M:SS.

    Example:
        >>> fmt_clock(3, 5)
        '3:05'
        >>> fmt_clock(112, 40)
        '112:40'
    """
    return f"{minute}:{seconds:02d}"


def fmt_hhmm(seconds: float) -> str:
    """
    Format a positive duration as HH:MM, dropping the seconds.

    Example:
        >>> fmt_hhmm(3 * 3600 + 7 * 60 + 59)
        '03:07'
    """
    total_minutes = int(seconds) // 60
    h = total_minutes // 60
    m = total_minutes % 60
    return f"{h:02d}:{m:02d}"
