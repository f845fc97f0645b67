"""
Service Factory for dependency injection.

This module wires the notification backend, the countdown scheduler and the
live notification registry from an AppConfig. The notification sink is
chosen once here so no call site ever branches on the platform.
"""
from typing import Iterable, Optional

from ..config import AppConfig, PLATFORM_ANDROID
from ..models import MatchSnapshot
from .countdown_service import CountdownScheduler
from .interval_scheduler import IntervalScheduler, ManualIntervalScheduler
from .live_notification_service import LiveNotificationRegistry
from .match_api import MatchApiClient
from .notification_sinks import (
    HttpNotificationTransport, InMemoryNotificationTray, NotificationSink,
    NotificationTransport, PlainNotificationSink, RichNotificationSink,
)


class ServiceFactory:
    """
    Factory for creating service instances with proper dependency injection.

    Transport and sink are created lazily and then reused, so every
    registry built by one factory shares the same channels and tray.
    """

    def __init__(self, config: Optional[AppConfig] = None):
        """Initialize factory with the given (or environment) configuration."""
        self.config = config or AppConfig()
        self._transport: Optional[NotificationTransport] = None
        self._sink: Optional[NotificationSink] = None

    def create_transport(self) -> NotificationTransport:
        """
        Create the notification transport.

        Returns:
            HTTP gateway transport when a gateway URL is configured,
            otherwise an in-memory tray
        """
        if self.config.notification_gateway_url:
            return HttpNotificationTransport(
                self.config.notification_gateway_url,
                timeout=self.config.http_timeout_seconds,
            )
        return InMemoryNotificationTray()

    def create_sink(self, transport: Optional[NotificationTransport] = None) -> NotificationSink:
        """
        Create the notification sink for the configured platform.

        Args:
            transport: Optional transport; defaults to the factory's shared one

        Returns:
            RichNotificationSink on Android, PlainNotificationSink elsewhere
        """
        transport = transport or self._get_transport()
        if self.config.notification_platform == PLATFORM_ANDROID:
            return RichNotificationSink(transport, self.config.asset_base_url)
        return PlainNotificationSink(transport, self.config.asset_base_url)

    def create_live_notification_registry(self, scheduler: IntervalScheduler) -> LiveNotificationRegistry:
        """
        Create LiveNotificationRegistry with injected dependencies.

        Args:
            scheduler: Interval scheduler driving the per-match refresh timers

        Returns:
            Configured LiveNotificationRegistry instance
        """
        return LiveNotificationRegistry(
            self._get_sink(),
            scheduler,
            tick_seconds=self.config.live_tick_seconds,
        )

    def create_countdown_scheduler(self, scheduler: IntervalScheduler,
                                   matches: Iterable[MatchSnapshot] = ()) -> CountdownScheduler:
        """
        Create an unmounted CountdownScheduler ticking at the configured period.

        Args:
            scheduler: Interval scheduler driving the shared countdown timer
            matches: Initial list of matches

        Returns:
            CountdownScheduler instance; call mount() to start it
        """
        return CountdownScheduler(scheduler, matches, interval_seconds=self.config.countdown_tick_seconds)

    def create_match_api_client(self) -> MatchApiClient:
        return MatchApiClient(self.config.api_base_url, timeout=self.config.http_timeout_seconds)

    def create_complete_service_suite(self, scheduler: Optional[IntervalScheduler] = None) -> dict:
        """
        Create a complete suite of services sharing one scheduler.

        Args:
            scheduler: Optional scheduler; defaults to a ManualIntervalScheduler

        Returns:
            Dictionary containing all configured services
        """
        scheduler = scheduler or ManualIntervalScheduler()
        return {
            'scheduler': scheduler,
            'transport': self._get_transport(),
            'registry': self.create_live_notification_registry(scheduler),
            'match_api': self.create_match_api_client(),
        }

    def _get_transport(self) -> NotificationTransport:
        """Get singleton transport."""
        if self._transport is None:
            self._transport = self.create_transport()
        return self._transport

    def _get_sink(self) -> NotificationSink:
        """Get singleton sink."""
        if self._sink is None:
            self._sink = self.create_sink()
        return self._sink
