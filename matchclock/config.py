"""
Configuration for the live match clock.

This module centralizes the tunable settings (REST API base URL, notification
platform and gateway, tick periods, HTTP timeout and log level).
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .utils.constants import COUNTDOWN_TICK_SECONDS, LIVE_NOTIFICATION_TICK_SECONDS

PLATFORM_ANDROID = "android"
PLATFORM_IOS = "ios"
SUPPORTED_PLATFORMS = (PLATFORM_ANDROID, PLATFORM_IOS)


def _env_int(name: str, default: int) -> int:
    """Read a positive integer environment variable, returning default on missing/invalid values."""
    try:
        value = int(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def _env_str(name: str, default: str) -> str:
    """Read a string environment variable; blank values count as missing."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _env_choice(name: str, choices, default: str) -> str:
    value = _env_str(name, default).lower()
    return value if value in choices else default


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable app configuration.

    Every field reads its environment variable when the config is created,
    so tests can set variables and build a fresh AppConfig.
    """

    api_base_url: str = ""
    notification_platform: str = ""
    notification_gateway_url: str = ""
    live_tick_seconds: int = 0
    countdown_tick_seconds: int = 0
    http_timeout_seconds: int = 0
    log_level: str = ""

    def __post_init__(self):
        """Fill unset fields from the environment (dataclass frozen => object.__setattr__)."""
        defaults = {
            "api_base_url": lambda: _env_str("API_BASE_URL", "http://localhost:3000/api"),
            "notification_platform": lambda: _env_choice(
                "NOTIFICATION_PLATFORM", SUPPORTED_PLATFORMS, PLATFORM_ANDROID
            ),
            "notification_gateway_url": lambda: _env_str("NOTIFICATION_GATEWAY_URL", ""),
            "live_tick_seconds": lambda: _env_int("LIVE_TICK_SECONDS", LIVE_NOTIFICATION_TICK_SECONDS),
            "countdown_tick_seconds": lambda: _env_int("COUNTDOWN_TICK_SECONDS", COUNTDOWN_TICK_SECONDS),
            "http_timeout_seconds": lambda: _env_int("HTTP_TIMEOUT_SECONDS", 10),
            "log_level": lambda: _env_str("LOG_LEVEL", "INFO").upper(),
        }
        for name, load in defaults.items():
            if not getattr(self, name):
                object.__setattr__(self, name, load())

    @property
    def asset_base_url(self) -> str:
        """Origin that server-relative upload paths resolve against."""
        base = self.api_base_url.rstrip("/")
        if base.endswith("/api"):
            base = base[: -len("/api")]
        return base
