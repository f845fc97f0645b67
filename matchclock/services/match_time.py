"""Match time calculator for the live match clock application."""

import math
from typing import Optional

from ..models import MatchSnapshot, MatchTime
from ..utils import fmt_clock, now_ts, to_epoch
from ..utils.constants import (
    EXTRA_TIME_HALFTIME_MINUTE, EXTRA_TIME_START_MINUTE, FIRST_HALF_MINUTES,
    FULL_TIME_MINUTE, LABEL_FULL_TIME, LABEL_HALFTIME, LABEL_PENALTIES,
    PENALTIES_MINUTE, STATUS_EXTRA_TIME, STATUS_EXTRA_TIME_HALFTIME,
    STATUS_FINISHED, STATUS_HALFTIME, STATUS_LIVE, STATUS_PENALTIES,
)


def _elapsed_seconds(anchor: float, now: float) -> int:
    return max(0, math.floor(now - anchor))


def _ticking_time(minute: int, seconds: int) -> MatchTime:
    return MatchTime(
        minute=minute,
        seconds=seconds,
        display=fmt_clock(minute, seconds),
        display_minute=f"{minute}'",
        is_ticking=True,
    )


def fixed_time(minute: int, label: Optional[str] = None) -> MatchTime:
    """Build a non-ticking MatchTime, optionally shown as a label such as HT."""
    text = label or f"{minute}'"
    return MatchTime(
        minute=minute,
        seconds=0,
        display=text,
        display_minute=text,
        is_ticking=False,
    )


def compute_match_time(snapshot: Optional[MatchSnapshot], now: Optional[float] = None) -> Optional[MatchTime]:
    """
    Derive the current match time from a snapshot's phase and anchors.

    Pure apart from reading the wall clock when ``now`` is omitted.

    Args:
        snapshot: Match as published by the backend
        now: Epoch seconds to evaluate at

    Returns:
        The MatchTime, or None when neither an anchor nor a server minute
        is available
    """
    if snapshot is None:
        return None
    if now is None:
        now = now_ts()

    status = snapshot.status

    if status == STATUS_LIVE:
        # Second half restarts from its own anchor, offset by a full first half
        second_half_started_at = to_epoch(snapshot.second_half_started_at)
        if second_half_started_at is not None:
            total = _elapsed_seconds(second_half_started_at, now)
            return _ticking_time(FIRST_HALF_MINUTES + total // 60 + 1, total % 60)
        live_started_at = to_epoch(snapshot.live_started_at)
        if live_started_at is not None:
            total = _elapsed_seconds(live_started_at, now)
            return _ticking_time(total // 60 + 1, total % 60)

    if status == STATUS_EXTRA_TIME:
        updated_at = to_epoch(snapshot.updated_at)
        if updated_at is not None:
            base = snapshot.current_minute or EXTRA_TIME_START_MINUTE
            total = _elapsed_seconds(updated_at, now)
            return _ticking_time(base + total // 60, total % 60)

    if status == STATUS_HALFTIME:
        return fixed_time(FIRST_HALF_MINUTES, LABEL_HALFTIME)
    if status == STATUS_EXTRA_TIME_HALFTIME:
        return fixed_time(EXTRA_TIME_HALFTIME_MINUTE, LABEL_HALFTIME)
    if status == STATUS_PENALTIES:
        return fixed_time(PENALTIES_MINUTE, LABEL_PENALTIES)
    if status == STATUS_FINISHED:
        return fixed_time(snapshot.current_minute or FULL_TIME_MINUTE, LABEL_FULL_TIME)

    # Fall back to the server value
    if snapshot.current_minute:
        return fixed_time(snapshot.current_minute)

    return None


def compute_minute(snapshot: Optional[MatchSnapshot], now: Optional[float] = None) -> Optional[int]:
    """Minute-only view of compute_match_time, falling back to the server minute."""
    time = compute_match_time(snapshot, now)
    if time is not None:
        return time.minute
    return snapshot.current_minute if snapshot is not None else None
