import unittest
from unittest.mock import MagicMock

from matchclock.models import LiveMatchNotificationData
from matchclock.services import (
    InMemoryNotificationTray, LiveNotificationRegistry, ManualIntervalScheduler,
    NotificationBackendError, NotificationSink, RichNotificationSink,
)

from support import T0, FakeClock, Ticker, iso


def payload(**overrides) -> dict:
    data = {
        "matchId": "m1",
        "homeTeamName": "Hawks",
        "awayTeamName": "Owls",
        "homeScore": "0",
        "awayScore": "0",
        "status": "live",
        "liveStartedAt": iso(T0),
        "competitionName": "Premier Cup",
    }
    data.update(overrides)
    return {k: v for k, v in data.items() if v is not None}


class LiveNotificationRegistryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock(T0 + 10)
        self.scheduler = ManualIntervalScheduler(self.clock)
        self.tick = Ticker(self.clock, self.scheduler)
        self.tray = InMemoryNotificationTray()
        self.registry = LiveNotificationRegistry(RichNotificationSink(self.tray), self.scheduler)

    def live_card(self):
        return self.tray.get("live-m1")

    def test_first_payload_creates_live_card_and_timer(self) -> None:
        self.assertTrue(self.registry.handle_live_match_fcm_data(payload(type="match_start")))

        card = self.live_card()
        self.assertEqual(card.title, "<b>Hawks</b>  <b>0</b> - <b>0</b>  <b>Owls</b>")
        self.assertEqual(card.body, "▶️  Kick-off")
        self.assertTrue(self.registry.has_active_notification("m1"))
        self.assertEqual(self.scheduler.active_count(), 1)
        self.assertEqual(self.registry.state_for("m1").last_minute, 1)

    def test_merge_keeps_fields_the_new_payload_omits(self) -> None:
        data = LiveMatchNotificationData.from_payload(payload())
        self.registry.show_or_update_live_notification(data)

        second = LiveMatchNotificationData.from_payload(
            payload(homeScore="1", liveStartedAt=None, competitionName=None, status=None)
        )
        self.registry.show_or_update_live_notification(second)

        merged = self.registry.state_for("m1").data
        self.assertEqual(merged.live_started_at, iso(T0))
        self.assertEqual(merged.home_score, "1")
        self.assertEqual(merged.competition_name, "Premier Cup")
        self.assertEqual(merged.status, "live")
        self.assertIn("🏆  Premier Cup", self.live_card().lines)

    def test_one_timer_and_one_card_per_match(self) -> None:
        for score in ("0", "1", "2"):
            self.registry.handle_live_match_fcm_data(payload(homeScore=score))
        self.registry.handle_live_match_fcm_data(payload(matchId="m2"))

        self.assertEqual(self.scheduler.active_count(), 2)
        self.assertEqual(sorted(n.id for n in self.tray.notifications()), ["live-m1", "live-m2"])

    def test_local_timer_advances_minute_between_payloads(self) -> None:
        self.registry.handle_live_match_fcm_data(payload(type="goal"))
        self.assertEqual(self.live_card().body, "⚽  GOAL!  •  1'")

        self.tick(30)   # T0+40: still minute 1, nothing re-rendered
        self.assertEqual(self.live_card().body, "⚽  GOAL!  •  1'")

        self.tick(30)   # T0+70: minute 2
        self.assertEqual(self.live_card().body, "🔴  Live  •  2'")
        self.assertEqual(self.registry.state_for("m1").last_minute, 2)
        # The cached payload keeps its own type
        self.assertEqual(self.registry.state_for("m1").data.type, "goal")

    def test_second_half_anchor_from_later_payload(self) -> None:
        self.registry.handle_live_match_fcm_data(payload())
        self.clock.t = T0 + 3600
        self.registry.handle_live_match_fcm_data(payload(liveStartedAt=None, secondHalfStartedAt=iso(T0 + 3590)))

        self.assertEqual(self.registry.state_for("m1").last_minute, 46)
        self.tick(60)
        self.assertEqual(self.registry.state_for("m1").last_minute, 47)

    def test_extra_time_advances_from_reported_minute(self) -> None:
        self.registry.handle_live_match_fcm_data(payload(status="extra_time", minute="95"))
        self.assertEqual(self.live_card().body, "⚡  Extra time  •  95'")

        self.tick(120)
        self.assertEqual(self.live_card().body, "⚡  Extra time  •  97'")

    def test_idle_gap_renders_latest_minute_once(self) -> None:
        sink = MagicMock(spec=NotificationSink)
        sink.show_live.return_value = "live-m1"
        registry = LiveNotificationRegistry(sink, self.scheduler)
        registry.handle_live_match_fcm_data(payload())

        fired = self.tick(2 * 3600)

        self.assertEqual(fired, 1)
        self.assertEqual(sink.show_live.call_count, 2)
        _, minute, rendered_at = sink.show_live.call_args.args
        self.assertEqual(minute, (2 * 3600 + 10) // 60 + 1)
        self.assertEqual(rendered_at, T0 + 10 + 2 * 3600)

    def test_card_timestamp_follows_scheduler_time(self) -> None:
        self.registry.handle_live_match_fcm_data(payload())
        self.assertEqual(self.live_card().timestamp, T0 + 10)

        self.tick(60)
        self.assertEqual(self.live_card().body, "🔴  Live  •  2'")
        self.assertEqual(self.live_card().timestamp, T0 + 70)

    def test_timer_does_not_tick_in_paused_phases(self) -> None:
        sink = MagicMock(spec=NotificationSink)
        sink.show_live.return_value = "live-m1"
        registry = LiveNotificationRegistry(sink, self.scheduler)

        for status in ("halftime", "extra_time_halftime", "penalties"):
            with self.subTest(status=status):
                sink.reset_mock()
                registry.handle_live_match_fcm_data(payload(status=status))
                self.assertEqual(sink.show_live.call_count, 1)
                self.tick(300)
                self.assertEqual(sink.show_live.call_count, 1)

    def test_end_half_type_counts_as_halftime(self) -> None:
        self.registry.handle_live_match_fcm_data(payload(type="end_half", status=None))
        self.assertEqual(self.registry.state_for("m1").last_minute, 45)
        self.assertEqual(self.live_card().body, "⏸  Half-time break")

    def test_cancel_unknown_match_is_a_no_op(self) -> None:
        sink = MagicMock(spec=NotificationSink)
        registry = LiveNotificationRegistry(sink, self.scheduler)

        registry.cancel_live_notification("nope")
        registry.cancel_live_notification("nope")
        sink.cancel.assert_not_called()

    def test_cancel_is_idempotent(self) -> None:
        self.registry.handle_live_match_fcm_data(payload())
        self.registry.cancel_live_notification("m1")
        self.registry.cancel_live_notification("m1")

        self.assertIsNone(self.live_card())
        self.assertIsNone(self.registry.state_for("m1"))
        self.assertFalse(self.registry.has_active_notification("m1"))
        self.assertEqual(self.scheduler.active_count(), 0)

    def test_finished_status_replaces_card_with_result(self) -> None:
        self.registry.handle_live_match_fcm_data(payload())
        self.registry.handle_live_match_fcm_data(payload(status="finished", homeScore="3", awayScore="2"))

        self.assertIsNone(self.live_card())
        notifications = self.tray.notifications()
        self.assertEqual(len(notifications), 1)
        result = notifications[0]
        self.assertNotEqual(result.id, "live-m1")
        self.assertEqual(result.data, {"matchId": "m1", "type": "match_result"})
        self.assertEqual(result.body, "<b>Hawks</b>  3 - 2  <b>Owls</b>")
        self.assertEqual(self.scheduler.active_count(), 0)

    def test_match_end_types_finalize(self) -> None:
        for end_type in ("match_end", "end_match"):
            with self.subTest(type=end_type):
                self.registry.handle_live_match_fcm_data(payload())
                self.registry.handle_live_match_fcm_data(payload(type=end_type, status="live"))
                self.assertFalse(self.registry.has_active_notification("m1"))
                self.assertIsNone(self.registry.state_for("m1"))

    def test_result_fills_in_known_fields(self) -> None:
        self.registry.handle_live_match_fcm_data(payload(homeScore="1", awayScore="1"))
        self.registry.handle_live_match_fcm_data(
            {"matchId": "m1", "homeTeamName": "Hawks", "awayTeamName": "Owls", "type": "match_end"}
        )
        result = self.tray.notifications()[0]
        self.assertEqual(result.lines, ["<b>Hawks</b>  1 - 1  <b>Owls</b>", "🏆  Premier Cup"])

    def test_new_live_payload_after_finalization_starts_over(self) -> None:
        self.registry.handle_live_match_fcm_data(payload(homeScore="4"))
        self.registry.handle_live_match_fcm_data(payload(status="finished"))
        self.registry.handle_live_match_fcm_data(payload(homeScore=None))

        self.assertIsNone(self.registry.state_for("m1").data.home_score)
        self.assertIsNotNone(self.live_card())

    def test_malformed_payloads_are_dropped(self) -> None:
        sink = MagicMock(spec=NotificationSink)
        registry = LiveNotificationRegistry(sink, self.scheduler)

        self.assertFalse(registry.handle_live_match_fcm_data({}))
        self.assertFalse(registry.handle_live_match_fcm_data(payload(homeTeamName="")))
        self.assertFalse(registry.handle_live_match_fcm_data(payload(awayTeamName=None)))
        self.assertFalse(registry.handle_live_match_fcm_data(None))
        sink.show_live.assert_not_called()
        sink.show_result.assert_not_called()
        self.assertEqual(self.scheduler.active_count(), 0)

    def test_platform_failure_is_logged_and_retried_on_next_tick(self) -> None:
        sink = MagicMock(spec=NotificationSink)
        sink.show_live.side_effect = [NotificationBackendError("denied"), "live-m1"]
        registry = LiveNotificationRegistry(sink, self.scheduler)

        with self.assertLogs("matchclock.services.live_notification_service", level="ERROR"):
            registry.handle_live_match_fcm_data(payload())

        self.assertIsNotNone(registry.state_for("m1"))
        self.assertFalse(registry.has_active_notification("m1"))

        self.tick(30)
        self.assertEqual(sink.show_live.call_count, 2)
        self.assertTrue(registry.has_active_notification("m1"))

    def test_cancel_failure_is_swallowed(self) -> None:
        sink = MagicMock(spec=NotificationSink)
        sink.show_live.return_value = "live-m1"
        sink.cancel.side_effect = NotificationBackendError("gone")
        registry = LiveNotificationRegistry(sink, self.scheduler)

        registry.handle_live_match_fcm_data(payload())
        registry.cancel_live_notification("m1")
        self.assertFalse(registry.has_active_notification("m1"))

    def test_shutdown_cancels_everything(self) -> None:
        self.registry.handle_live_match_fcm_data(payload())
        self.registry.handle_live_match_fcm_data(payload(matchId="m2"))

        self.registry.shutdown()

        self.assertEqual(self.scheduler.active_count(), 0)
        self.assertEqual(self.tray.notifications(), [])
        self.assertEqual(self.registry.live_match_ids(), [])


if __name__ == "__main__":
    unittest.main()
