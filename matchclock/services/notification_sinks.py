"""
Notification backends for live match notifications.

A NotificationSink turns live-match data into platform notifications. Two
sinks exist: a rich one for Android-style platforms (channels, ongoing
colorized cards, inbox lines) and a plain one that flattens the same
information into body text. Either one talks to a NotificationTransport,
which is where notifications actually go.
"""
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import requests

from ..models import LiveMatchNotificationData, Notification, NotificationChannel
from ..utils import now_ts
from ..utils.constants import (
    DATA_TYPE_LIVE_MATCH, DATA_TYPE_MATCH_RESULT, EVENT_CHANNEL_ID,
    EVENT_CHANNEL_NAME, IMPORTANCE_DEFAULT, IMPORTANCE_HIGH, LIVE_CHANNEL_ID,
    LIVE_CHANNEL_NAME, LIVE_COLOR, LIVE_NOTIFICATION_PREFIX, RESULT_COLOR,
    STATUS_EXTRA_TIME, STATUS_EXTRA_TIME_HALFTIME, STATUS_HALFTIME,
    STATUS_PENALTIES, TYPE_END_HALF, TYPE_GOAL, TYPE_HALFTIME,
    TYPE_MATCH_START, TYPE_PENALTY, TYPE_RED_CARD, TYPE_START_HALF,
)

logger = logging.getLogger(__name__)

RESULT_TITLE = "🏁  Full time"

LIVE_CHANNEL = NotificationChannel(
    id=LIVE_CHANNEL_ID,
    name=LIVE_CHANNEL_NAME,
    description="Pinned notifications that follow the clock and the score",
    importance=IMPORTANCE_DEFAULT,
    sound=None,
    vibration=False,
)

EVENT_CHANNEL = NotificationChannel(
    id=EVENT_CHANNEL_ID,
    name=EVENT_CHANNEL_NAME,
    description="Goals, red cards, kick-off and full time",
    importance=IMPORTANCE_HIGH,
    sound="default",
)


class NotificationBackendError(RuntimeError):
    """Raised when the notification platform rejects or cannot take a call."""
    pass


# ----------------------------------------------------------------------
# Content helpers
# ----------------------------------------------------------------------
def live_notification_id(match_id: str) -> str:
    return f"{LIVE_NOTIFICATION_PREFIX}{match_id}"


def status_line(type_: Optional[str], minute: Optional[int], status: Optional[str]) -> str:
    """Human status line for a live notification, first matching rule wins."""
    if status == STATUS_HALFTIME or type_ in (TYPE_END_HALF, TYPE_HALFTIME):
        return "⏸  Half-time break"
    if status == STATUS_EXTRA_TIME_HALFTIME:
        return "⏸  Extra-time break"
    if status == STATUS_PENALTIES:
        return "⚡  Penalty shoot-out"
    if status == STATUS_EXTRA_TIME:
        return f"⚡  Extra time  •  {minute}'"
    if type_ == TYPE_GOAL:
        return f"⚽  GOAL!  •  {minute}'"
    if type_ == TYPE_RED_CARD:
        return f"🟥  Red card  •  {minute}'"
    if type_ == TYPE_PENALTY:
        return f"⚠️  Penalty  •  {minute}'"
    if type_ in (TYPE_MATCH_START, TYPE_START_HALF):
        return "▶️  Kick-off"
    if minute and minute > 0:
        return f"🔴  Live  •  {minute}'"
    return "🔴  Live"


def has_possession(data: LiveMatchNotificationData) -> bool:
    return (
        bool(data.home_possession)
        and bool(data.away_possession)
        and data.home_possession != "0"
        and data.away_possession != "0"
    )


def resolve_logo_url(url: Optional[str], asset_base_url: str) -> Optional[str]:
    """Resolve a server-relative logo path; absolute URLs pass through."""
    if not url:
        return None
    if url.startswith("/"):
        return f"{asset_base_url.rstrip('/')}{url}"
    return url


def _scores(data: LiveMatchNotificationData):
    return data.home_score or "0", data.away_score or "0"


# ----------------------------------------------------------------------
# Transports
# ----------------------------------------------------------------------
class NotificationTransport(ABC):
    """Where rendered notifications are delivered."""

    @abstractmethod
    def create_channel(self, channel: NotificationChannel) -> str:
        pass

    @abstractmethod
    def send(self, notification: Notification) -> str:
        """Display or replace a notification; returns its id."""
        pass

    @abstractmethod
    def dismiss(self, notification_id: str) -> None:
        pass


class InMemoryNotificationTray(NotificationTransport):
    """
    Keeps displayed notifications in process memory.

    Sending with an existing id replaces the notification in place, which
    is how an ongoing card gets updated.
    """

    def __init__(self):
        self._notifications: Dict[str, Notification] = {}
        self._channels: Dict[str, NotificationChannel] = {}
        self._ids = itertools.count(1)

    def create_channel(self, channel: NotificationChannel) -> str:
        self._channels[channel.id] = channel
        return channel.id

    def send(self, notification: Notification) -> str:
        notification_id = notification.id or f"notification-{next(self._ids)}"
        notification.id = notification_id
        self._notifications[notification_id] = notification
        return notification_id

    def dismiss(self, notification_id: str) -> None:
        self._notifications.pop(notification_id, None)

    def notifications(self) -> List[Notification]:
        return list(self._notifications.values())

    def get(self, notification_id: str) -> Optional[Notification]:
        return self._notifications.get(notification_id)

    def channels(self) -> List[NotificationChannel]:
        return list(self._channels.values())


class HttpNotificationTransport(NotificationTransport):
    """Delivers notifications to an HTTP notification gateway."""

    def __init__(self, base_url: str, timeout: int = 10, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": "matchclock/1.0"})

    def _request(self, method: str, path: str, payload: Optional[dict] = None) -> dict:
        url = f"{self.base_url}{path}"
        try:
            r = self._session.request(method, url, json=payload, timeout=self.timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            raise NotificationBackendError(f"{method} {url} failed: {e}") from e
        if not r.content:
            return {}
        try:
            body = r.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    def create_channel(self, channel: NotificationChannel) -> str:
        body = self._request("POST", "/channels", channel.to_json())
        return str(body.get("id") or channel.id)

    def send(self, notification: Notification) -> str:
        body = self._request("POST", "/notifications", notification.to_json())
        notification_id = body.get("id") or notification.id
        if not notification_id:
            raise NotificationBackendError("Gateway did not return a notification id")
        return str(notification_id)

    def dismiss(self, notification_id: str) -> None:
        self._request("DELETE", f"/notifications/{notification_id}")


# ----------------------------------------------------------------------
# Sinks
# ----------------------------------------------------------------------
class NotificationSink(ABC):
    """Capability interface shared by every notification backend."""

    def __init__(self, transport: NotificationTransport, asset_base_url: str = ""):
        self.transport = transport
        self.asset_base_url = asset_base_url

    @abstractmethod
    def show_live(self, data: LiveMatchNotificationData, minute: int,
                  timestamp: Optional[float] = None) -> str:
        """
        Display or replace the ongoing card for a match.

        Args:
            data: Merged live payload
            minute: Minute to render
            timestamp: Epoch seconds the card is rendered at; defaults to now

        Returns:
            Platform id of the ongoing card
        """
        pass

    @abstractmethod
    def show_result(self, data: LiveMatchNotificationData) -> str:
        """Display a one-shot, dismissible result notification."""
        pass

    def cancel(self, notification_id: str) -> None:
        self.transport.dismiss(notification_id)


class RichNotificationSink(NotificationSink):
    """Android-style sink: channels, colorized ongoing cards and inbox lines."""

    def __init__(self, transport: NotificationTransport, asset_base_url: str = ""):
        super().__init__(transport, asset_base_url)
        self._live_channel_id: Optional[str] = None
        self._event_channel_id: Optional[str] = None

    def ensure_live_channel(self) -> str:
        if self._live_channel_id is None:
            self._live_channel_id = self.transport.create_channel(LIVE_CHANNEL)
        return self._live_channel_id

    def ensure_event_channel(self) -> str:
        if self._event_channel_id is None:
            self._event_channel_id = self.transport.create_channel(EVENT_CHANNEL)
        return self._event_channel_id

    def show_live(self, data: LiveMatchNotificationData, minute: int,
                  timestamp: Optional[float] = None) -> str:
        channel_id = self.ensure_live_channel()
        home_score, away_score = _scores(data)
        line = status_line(data.type, minute, data.status)

        lines = [f"<b>{line}</b>"]
        if has_possession(data):
            lines.append(
                f"📊  Possession:  <b>{data.home_possession}%</b>  -  <b>{data.away_possession}%</b>"
            )
        if data.competition_name:
            lines.append(f"🏆  {data.competition_name}")

        notification = Notification(
            id=live_notification_id(data.match_id),
            channel_id=channel_id,
            title=(
                f"<b>{data.home_team_name}</b>  <b>{home_score}</b> - "
                f"<b>{away_score}</b>  <b>{data.away_team_name}</b>"
            ),
            body=line,
            subtitle=data.competition_name,
            data={"matchId": data.match_id, "type": DATA_TYPE_LIVE_MATCH},
            lines=lines,
            ongoing=True,
            auto_cancel=False,
            only_alert_once=True,
            color=LIVE_COLOR,
            colorized=True,
            category="progress",
            large_icon=resolve_logo_url(data.home_team_logo, self.asset_base_url),
            timestamp=timestamp if timestamp is not None else now_ts(),
        )
        return self.transport.send(notification)

    def show_result(self, data: LiveMatchNotificationData) -> str:
        channel_id = self.ensure_event_channel()
        home_score, away_score = _scores(data)
        lines = [f"<b>{data.home_team_name}</b>  {home_score} - {away_score}  <b>{data.away_team_name}</b>"]
        if data.competition_name:
            lines.append(f"🏆  {data.competition_name}")

        notification = Notification(
            channel_id=channel_id,
            title=f"<b>{RESULT_TITLE}</b>",
            body=lines[0],
            data={"matchId": data.match_id, "type": DATA_TYPE_MATCH_RESULT},
            lines=lines,
            auto_cancel=True,
            color=RESULT_COLOR,
            sound="default",
        )
        return self.transport.send(notification)


class PlainNotificationSink(NotificationSink):
    """Sink for platforms without rich styles; everything goes in the body."""

    def show_live(self, data: LiveMatchNotificationData, minute: int,
                  timestamp: Optional[float] = None) -> str:
        home_score, away_score = _scores(data)
        line = status_line(data.type, minute, data.status)

        body_parts = [line]
        if has_possession(data):
            body_parts.append(f"📊 Possession: {data.home_possession}% - {data.away_possession}%")
        if data.competition_name:
            body_parts.append(f"🏆 {data.competition_name}")

        notification = Notification(
            id=live_notification_id(data.match_id),
            channel_id=LIVE_CHANNEL_ID,
            title=f"{data.home_team_name}  {home_score} - {away_score}  {data.away_team_name}",
            body="\n".join(body_parts),
            data={"matchId": data.match_id, "type": DATA_TYPE_LIVE_MATCH},
            ongoing=True,
            auto_cancel=False,
            timestamp=timestamp if timestamp is not None else now_ts(),
        )
        return self.transport.send(notification)

    def show_result(self, data: LiveMatchNotificationData) -> str:
        home_score, away_score = _scores(data)
        body_parts = [f"{data.home_team_name}  {home_score} - {away_score}  {data.away_team_name}"]
        if data.competition_name:
            body_parts.append(f"🏆 {data.competition_name}")

        notification = Notification(
            channel_id=EVENT_CHANNEL_ID,
            title=RESULT_TITLE,
            body="\n".join(body_parts),
            data={"matchId": data.match_id, "type": DATA_TYPE_MATCH_RESULT},
            sound="default",
        )
        return self.transport.send(notification)
