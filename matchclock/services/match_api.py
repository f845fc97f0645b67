"""
Thin HTTP client for the match REST API.

Only the match listing endpoints the clocks need are covered; responses are
turned into MatchSnapshots and everything else in the payload is ignored.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from ..models import MatchSnapshot


class MatchApiError(RuntimeError):
    """Raised when the match API is unreachable or answers with an error."""
    pass


class MatchApiClient:
    """A minimal client for retrieving matches from the REST API base."""

    def __init__(self, base_url: str, timeout: int = 10, session: Optional[requests.Session] = None) -> None:
        """Store the base URL and build request headers."""
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._headers = {"User-Agent": "matchclock/1.0", "Accept": "application/json"}

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Execute a GET request to base_url + path and return parsed JSON.

        Raises:
            MatchApiError on network failures, non-2xx responses or invalid JSON.
        """
        url = f"{self.base_url}{path}"
        try:
            r = self._session.get(url, params=params, timeout=self.timeout, headers=self._headers)
            r.raise_for_status()
            return r.json()
        except requests.RequestException as e:
            raise MatchApiError(f"GET {url} failed: {e}") from e
        except ValueError as e:
            raise MatchApiError(f"GET {url} returned invalid JSON") from e

    @staticmethod
    def _unwrap_list(payload: Any) -> List[Dict[str, Any]]:
        """The API returns either a bare list or {"data": [...]} / {"matches": [...]}."""
        if isinstance(payload, list):
            return [m for m in payload if isinstance(m, dict)]
        if isinstance(payload, dict):
            for key in ("data", "matches"):
                node = payload.get(key)
                if isinstance(node, list):
                    return [m for m in node if isinstance(m, dict)]
        return []

    def live_matches(self) -> List[MatchSnapshot]:
        """Fetch every match currently in play."""
        return [MatchSnapshot.from_json(m) for m in self._unwrap_list(self.get_json("/matches/live"))]

    def upcoming_matches(self) -> List[MatchSnapshot]:
        """Fetch scheduled matches."""
        payload = self.get_json("/matches", params={"status": "scheduled"})
        return [MatchSnapshot.from_json(m) for m in self._unwrap_list(payload)]

    def match(self, match_id: str) -> MatchSnapshot:
        """Fetch one match by id."""
        payload = self.get_json(f"/matches/{match_id}")
        if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
            payload = payload["data"]
        if not isinstance(payload, dict):
            raise MatchApiError(f"Unexpected payload for match {match_id}")
        return MatchSnapshot.from_json(payload)
