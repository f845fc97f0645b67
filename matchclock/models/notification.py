"""
Notification models for the live match clock application.

This module contains the inbound live-update payload, the per-match
bookkeeping held by the notification registry and the platform-neutral
notification description handed to a sink.
"""
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional

from .match import MatchSnapshot
from ..utils.constants import STATUS_HALFTIME, STATUS_LIVE, TYPE_END_HALF

REQUIRED_PAYLOAD_KEYS = ("matchId", "homeTeamName", "awayTeamName")


class PayloadValidationError(ValueError):
    """Raised when an inbound payload lacks the fields needed to render it."""
    pass


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text != "" else None


@dataclass(frozen=True)
class LiveMatchNotificationData:
    """
    Live-update payload for one match, as pushed by the backend.

    Everything except the match id and team names is optional; a payload
    usually carries only what changed.
    """
    match_id: str
    home_team_name: str
    away_team_name: str
    type: Optional[str] = None
    status: Optional[str] = None
    home_score: Optional[str] = None
    away_score: Optional[str] = None
    minute: Optional[str] = None
    home_possession: Optional[str] = None
    away_possession: Optional[str] = None
    competition_name: Optional[str] = None
    home_team_logo: Optional[str] = None
    away_team_logo: Optional[str] = None
    live_started_at: Optional[str] = None
    second_half_started_at: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "LiveMatchNotificationData":
        """
        Build notification data from a raw string-keyed message payload.

        Raises:
            PayloadValidationError: If matchId or either team name is missing
        """
        if not isinstance(payload, dict):
            raise PayloadValidationError("Payload must be a mapping")
        missing = [key for key in REQUIRED_PAYLOAD_KEYS if not _opt_str(payload.get(key))]
        if missing:
            raise PayloadValidationError(f"Payload missing required fields: {', '.join(missing)}")

        return cls(
            match_id=str(payload["matchId"]),
            home_team_name=str(payload["homeTeamName"]),
            away_team_name=str(payload["awayTeamName"]),
            type=_opt_str(payload.get("type")),
            status=_opt_str(payload.get("status")),
            home_score=_opt_str(payload.get("homeScore")),
            away_score=_opt_str(payload.get("awayScore")),
            minute=_opt_str(payload.get("minute")),
            home_possession=_opt_str(payload.get("homePossession")),
            away_possession=_opt_str(payload.get("awayPossession")),
            competition_name=_opt_str(payload.get("competitionName")),
            home_team_logo=_opt_str(payload.get("homeTeamLogo")),
            away_team_logo=_opt_str(payload.get("awayTeamLogo")),
            live_started_at=_opt_str(payload.get("liveStartedAt")),
            second_half_started_at=_opt_str(payload.get("secondHalfStartedAt")),
        )

    def merged_with(self, newer: "LiveMatchNotificationData") -> "LiveMatchNotificationData":
        """
        Overlay a newer payload onto this one.

        Fields the newer payload omits keep their known value; nothing ever
        regresses to None. Conflicting values are taken from the newer
        payload as-is since payloads carry no ordering token.
        """
        updates = {}
        for f in fields(self):
            value = getattr(newer, f.name)
            if value is not None:
                updates[f.name] = value
        return replace(self, **updates)

    def clock_status(self) -> str:
        """Phase used for clock derivation; a payload without status is live."""
        if self.type == TYPE_END_HALF and self.status in (None, STATUS_LIVE):
            return STATUS_HALFTIME
        return self.status or STATUS_LIVE

    def to_snapshot(self, updated_at: Optional[float] = None) -> MatchSnapshot:
        """
        Express this payload as a MatchSnapshot so the calculator applies.

        Args:
            updated_at: Epoch seconds the minute was last reported, used as
                the extra-time anchor
        """
        try:
            current_minute = int(self.minute) if self.minute is not None else None
        except ValueError:
            current_minute = None
        return MatchSnapshot(
            id=self.match_id,
            status=self.clock_status(),
            current_minute=current_minute,
            live_started_at=self.live_started_at,
            second_half_started_at=self.second_half_started_at,
            updated_at=updated_at,
        )


@dataclass
class LiveNotificationState:
    """
    In-memory bookkeeping for one live match notification.

    Attributes:
        data: Payload fields merged across every update so far
        timer_handle: Handle of the local refresh interval, if running
        last_minute: Minute last rendered into the notification
        updated_at: Epoch seconds of the last payload that reported a minute
    """
    data: LiveMatchNotificationData
    timer_handle: Optional[Any] = None
    last_minute: int = 0
    updated_at: Optional[float] = None


@dataclass(frozen=True)
class NotificationChannel:
    """Android-style notification channel definition."""
    id: str
    name: str
    description: str = ""
    importance: str = "default"
    sound: Optional[str] = None
    vibration: bool = True

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "importance": self.importance,
            "sound": self.sound,
            "vibration": self.vibration,
        }


@dataclass
class Notification:
    """
    Platform-neutral description of a notification to display.

    A None id lets the platform generate one (one-shot notifications).
    """
    title: str
    body: str
    data: Dict[str, str] = field(default_factory=dict)
    id: Optional[str] = None
    channel_id: Optional[str] = None
    subtitle: Optional[str] = None
    lines: List[str] = field(default_factory=list)
    ongoing: bool = False
    auto_cancel: bool = True
    only_alert_once: bool = False
    color: Optional[str] = None
    colorized: bool = False
    category: Optional[str] = None
    large_icon: Optional[str] = None
    sound: Optional[str] = None
    timestamp: Optional[float] = None

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "channelId": self.channel_id,
            "title": self.title,
            "body": self.body,
            "subtitle": self.subtitle,
            "data": dict(self.data),
            "lines": list(self.lines),
            "ongoing": self.ongoing,
            "autoCancel": self.auto_cancel,
            "onlyAlertOnce": self.only_alert_once,
            "color": self.color,
            "colorized": self.colorized,
            "category": self.category,
            "largeIcon": self.large_icon,
            "sound": self.sound,
            "timestamp": self.timestamp,
        }
