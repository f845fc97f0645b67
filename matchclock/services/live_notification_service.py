"""
Live notification registry for the live match clock application.

Keeps one ongoing notification per live match, merges every inbound
payload into what is already known about the match, and runs a local
interval per match so the displayed minute keeps advancing between pushes.
"""
import functools
import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

from ..models import LiveMatchNotificationData, LiveNotificationState, PayloadValidationError
from ..utils.constants import (
    LIVE_NOTIFICATION_TICK_SECONDS, MATCH_END_TYPES, NON_TICKING_NOTIFICATION_STATUSES,
    STATUS_FINISHED, TYPE_LIVE_UPDATE,
)
from .interval_scheduler import IntervalScheduler
from .match_time import compute_match_time
from .notification_sinks import NotificationSink

logger = logging.getLogger(__name__)


def compute_notification_minute(data: LiveMatchNotificationData,
                                minute_reported_at: Optional[float],
                                now: float) -> int:
    """
    Minute to render for a live notification.

    Uses the same derivation as every on-screen clock, falling back to the
    payload's own minute (0 when absent or not a number).
    """
    time = compute_match_time(data.to_snapshot(minute_reported_at), now)
    if time is not None:
        return time.minute
    try:
        return int(data.minute or 0)
    except ValueError:
        return 0


class LiveNotificationRegistry:
    """
    Owns every live notification and its refresh timer.

    Per match id the lifecycle is absent -> live -> finalized (removed); a
    new live payload after finalization starts over from absent. All maps
    are keyed by match id, so there is never more than one live state or
    one ongoing notification per match.
    """

    def __init__(self, sink: NotificationSink, scheduler: IntervalScheduler,
                 tick_seconds: float = LIVE_NOTIFICATION_TICK_SECONDS):
        self._sink = sink
        self._scheduler = scheduler
        self._tick_seconds = tick_seconds
        self._states: Dict[str, LiveNotificationState] = {}
        self._active: Dict[str, str] = {}

    @property
    def sink(self) -> NotificationSink:
        return self._sink

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def show_or_update_live_notification(self, data: LiveMatchNotificationData) -> None:
        """
        Create or refresh the ongoing notification for a live match.

        The payload is merged into the cached state, the notification is
        rendered with the freshly derived minute and the match's local
        timer is restarted.
        """
        now = self._scheduler.now()
        existing = self._states.get(data.match_id)

        if existing is None:
            merged = data
            minute_reported_at = now
            logger.info("Live notification started for match %s", data.match_id)
        else:
            merged = existing.data.merged_with(data)
            minute_reported_at = now if data.minute is not None else existing.updated_at

        minute = compute_notification_minute(merged, minute_reported_at, now)
        self._states[data.match_id] = LiveNotificationState(
            data=merged,
            timer_handle=existing.timer_handle if existing else None,
            last_minute=minute,
            updated_at=minute_reported_at,
        )

        self._display_live(merged, minute, now)
        self._start_timer(data.match_id)

    def cancel_live_notification(self, match_id: str) -> None:
        """Stop the match's timer and remove its ongoing notification. Idempotent."""
        self._stop_timer(match_id)
        notification_id = self._active.pop(match_id, None)
        if notification_id is None:
            return

        try:
            self._sink.cancel(notification_id)
            logger.info("Live notification %s cancelled", notification_id)
        except Exception:
            logger.exception("Error cancelling live notification %s", notification_id)

    def show_match_ended_notification(self, data: LiveMatchNotificationData) -> None:
        """Replace the ongoing card with a dismissible full-time result."""
        known = self._states.get(data.match_id)
        final = known.data.merged_with(data) if known else data

        self.cancel_live_notification(data.match_id)

        try:
            notification_id = self._sink.show_result(final)
            logger.info("Match %s finalized (result notification %s)", data.match_id, notification_id)
        except Exception:
            logger.exception("Error showing match ended notification for %s", data.match_id)

    def handle_live_match_fcm_data(self, payload: Dict[str, Any]) -> bool:
        """
        Single entry point for inbound live-update message payloads.

        Malformed payloads are logged and dropped, never raised.

        Returns:
            True if the payload was dispatched, False if it was dropped
        """
        try:
            data = LiveMatchNotificationData.from_payload(payload)
        except PayloadValidationError as e:
            logger.warning("Dropping live match payload: %s", e)
            return False

        if data.type is None:
            data = replace(data, type=TYPE_LIVE_UPDATE)

        if data.type in MATCH_END_TYPES or data.status == STATUS_FINISHED:
            self.show_match_ended_notification(data)
        else:
            self.show_or_update_live_notification(data)
        return True

    def cancel_all_live_notifications(self) -> None:
        for match_id in list(dict.fromkeys([*self._active, *self._states])):
            self.cancel_live_notification(match_id)

    def has_active_notification(self, match_id: str) -> bool:
        return match_id in self._active

    def state_for(self, match_id: str) -> Optional[LiveNotificationState]:
        return self._states.get(match_id)

    def live_match_ids(self) -> List[str]:
        return list(self._states)

    def shutdown(self) -> None:
        """Cancel every timer and ongoing notification owned by this registry."""
        count = len(self._states)
        self.cancel_all_live_notifications()
        logger.info("Live notification registry shut down (%d live matches)", count)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _display_live(self, data: LiveMatchNotificationData, minute: int, now: float) -> None:
        try:
            self._active[data.match_id] = self._sink.show_live(data, minute, now)
        except Exception:
            # State stays cached; the next tick or payload will try again
            logger.exception("Error showing live notification for match %s", data.match_id)

    def _start_timer(self, match_id: str) -> None:
        state = self._states.get(match_id)
        if state is None:
            return
        self._scheduler.clear_interval(state.timer_handle)
        state.timer_handle = self._scheduler.set_interval(
            functools.partial(self._tick, match_id), self._tick_seconds
        )
        logger.debug("Local timer (re)started for match %s", match_id)

    def _stop_timer(self, match_id: str) -> None:
        state = self._states.pop(match_id, None)
        if state is not None:
            self._scheduler.clear_interval(state.timer_handle)
            state.timer_handle = None

    def _tick(self, match_id: str) -> None:
        state = self._states.get(match_id)
        if state is None:
            return
        if state.data.clock_status() in NON_TICKING_NOTIFICATION_STATUSES:
            return

        now = self._scheduler.now()
        minute = compute_notification_minute(state.data, state.updated_at, now)
        if minute == state.last_minute and match_id in self._active:
            return

        state.last_minute = minute
        logger.debug("Match %s advanced to minute %s", match_id, minute)
        self._display_live(replace(state.data, type=TYPE_LIVE_UPDATE), minute, now)
