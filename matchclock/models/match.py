"""
Match models for the live match clock application.

This module contains the read-only MatchSnapshot received from the REST API
and the derived, ephemeral MatchTime shown by every clock.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..utils.time_utils import Instant


def _opt_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class MatchSnapshot:
    """
    A match as published by the backend.

    Attributes:
        id: Match identifier
        status: Current phase (scheduled, live, halftime, extra_time,
            extra_time_halftime, penalties, finished)
        start_time: Scheduled kickoff instant
        current_minute: Minute last written by the server, if any
        live_started_at: Anchor set when the first half kicked off
        second_half_started_at: Anchor set when the second half kicked off
        updated_at: Anchor of the last server-side write
    """
    id: str
    status: str
    start_time: Instant = None
    current_minute: Optional[int] = None
    live_started_at: Instant = None
    second_half_started_at: Instant = None
    updated_at: Instant = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "MatchSnapshot":
        """
        Create a snapshot from the API's camelCase match object.

        Extra keys (teams, events, lineups...) are ignored.
        """
        return cls(
            id=str(data.get("id", "")),
            status=str(data.get("status") or ""),
            start_time=data.get("startTime"),
            current_minute=_opt_int(data.get("currentMinute")),
            live_started_at=data.get("liveStartedAt"),
            second_half_started_at=data.get("secondHalfStartedAt"),
            updated_at=data.get("updatedAt"),
        )

    def clock_key(self) -> Tuple[Any, ...]:
        """Fields that change the clock derivation; anything else is cosmetic."""
        return (
            self.id,
            self.status,
            self.current_minute,
            self.live_started_at,
            self.second_half_started_at,
            self.updated_at,
        )


@dataclass(frozen=True)
class MatchTime:
    """Elapsed match time derived from a snapshot at a given instant."""
    minute: int
    seconds: int
    display: str          # "12:34" or a fixed label such as "HT"
    display_minute: str   # "12'" or a fixed label
    is_ticking: bool

    def to_json(self) -> dict:
        return {
            "minute": self.minute,
            "seconds": self.seconds,
            "display": self.display,
            "displayMinute": self.display_minute,
            "isTicking": self.is_ticking,
        }
