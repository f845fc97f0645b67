"""
Web application module for the live match clock.

This module contains the Flask server that receives live-update pushes,
exposes the notification tray and answers clock/countdown queries for
lists of matches.
"""
import logging
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request

from ..config import AppConfig
from ..models import MatchSnapshot
from ..services import (
    InMemoryNotificationTray, LiveMatchTimesClock,
    LiveMinutesClock, ManualIntervalScheduler, MatchApiError, ServiceFactory,
    compute_match_time,
)

logger = logging.getLogger(__name__)


class WebAppState:
    """
    State holder for the web application.

    Uses the service factory so the notification backend is picked once.
    The interval scheduler is cooperative: it is pumped before every request,
    which keeps all timer callbacks on the request thread.
    """

    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or AppConfig()
        self.service_factory = ServiceFactory(self.config)

        services = self.service_factory.create_complete_service_suite(ManualIntervalScheduler())
        self.scheduler = services['scheduler']
        self.transport = services['transport']
        self.registry = services['registry']
        self.match_api = services['match_api']

    def shutdown(self) -> None:
        self.registry.shutdown()


def _error(message: str, status: int):
    return jsonify({"success": False, "error": message}), status


def _parse_matches(body: Any) -> List[MatchSnapshot]:
    if not isinstance(body, dict) or not isinstance(body.get("matches"), list):
        raise ValueError("Body must be an object with a 'matches' list")
    return [MatchSnapshot.from_json(m) for m in body["matches"] if isinstance(m, dict)]


def _parse_now(body: Dict[str, Any]) -> Optional[float]:
    now = body.get("now")
    if now is None:
        return None
    if isinstance(now, bool) or not isinstance(now, (int, float)):
        raise ValueError("'now' must be epoch seconds")
    return float(now)


def create_app(state: Optional[WebAppState] = None) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        state: Optional pre-built state (tests inject their own)

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app_state = state or WebAppState()
    app.config["APP_STATE"] = app_state

    @app.before_request
    def pump_timers():
        """Run every interval that became due since the last request."""
        app_state.scheduler.run_pending()

    # ==================== Push handling ==================== #

    @app.route("/api/push", methods=["POST"])
    def receive_push():
        """Accept an inbound live-update payload; delivery is best effort."""
        payload = request.get_json(silent=True)
        accepted = app_state.registry.handle_live_match_fcm_data(payload if isinstance(payload, dict) else {})
        return jsonify({"success": True, "accepted": accepted}), 202

    # ==================== Notification tray ==================== #

    @app.route("/api/notifications", methods=["GET"])
    def list_notifications():
        transport = app_state.transport
        if not isinstance(transport, InMemoryNotificationTray):
            return _error("Notifications are delivered to a gateway", 404)
        notifications = [n.to_json() for n in transport.notifications()]
        return jsonify({"success": True, "notifications": notifications, "count": len(notifications)})

    @app.route("/api/notifications/<match_id>", methods=["DELETE"])
    def cancel_notification(match_id: str):
        app_state.registry.cancel_live_notification(match_id)
        return jsonify({"success": True})

    # ==================== Clock queries ==================== #

    @app.route("/api/clock/minutes", methods=["POST"])
    def clock_minutes():
        body = request.get_json(silent=True) or {}
        try:
            matches = _parse_matches(body)
            now = _parse_now(body)
        except ValueError as e:
            return _error(str(e), 400)
        minutes = LiveMinutesClock(app_state.scheduler, matches).compute(now)
        return jsonify({"success": True, "minutes": minutes})

    @app.route("/api/clock/times", methods=["POST"])
    def clock_times():
        body = request.get_json(silent=True) or {}
        try:
            matches = _parse_matches(body)
            now = _parse_now(body)
        except ValueError as e:
            return _error(str(e), 400)
        times = LiveMatchTimesClock(app_state.scheduler, matches).compute(now)
        return jsonify({"success": True, "times": {k: v.to_json() for k, v in times.items()}})

    @app.route("/api/clock/countdowns", methods=["POST"])
    def clock_countdowns():
        body = request.get_json(silent=True) or {}
        try:
            matches = _parse_matches(body)
            now = _parse_now(body)
        except ValueError as e:
            return _error(str(e), 400)
        countdown_scheduler = app_state.service_factory.create_countdown_scheduler(app_state.scheduler, matches)
        countdowns = countdown_scheduler.compute(now)
        return jsonify({"success": True, "countdowns": countdowns})

    # ==================== Upstream matches ==================== #

    @app.route("/api/matches/live", methods=["GET"])
    def live_matches():
        try:
            matches = app_state.match_api.live_matches()
        except MatchApiError as e:
            logger.error("Live match fetch failed: %s", e)
            return _error("Match API unavailable", 502)

        now = app_state.scheduler.now()
        out = []
        for match in matches:
            time = compute_match_time(match, now)
            out.append({
                "id": match.id,
                "status": match.status,
                "time": time.to_json() if time else None,
            })
        return jsonify({"success": True, "matches": out, "count": len(out)})

    return app


def run_web_app(host: str = "127.0.0.1", port: int = 7122) -> None:
    """
    Run the Flask web application.

    Single-threaded so every timer callback and request share one thread.
    """
    app = create_app()
    try:
        app.run(host=host, port=port, debug=False, threaded=False)
    finally:
        app.config["APP_STATE"].shutdown()
