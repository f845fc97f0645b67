"""Tests for the single- and multi-match clock hooks."""

from dataclasses import replace

from matchclock.models import MatchSnapshot
from matchclock.services import (
    LiveMatchTimeClock, LiveMinuteClock, LiveMinutesClock,
    use_live_match_time, use_live_match_times, use_live_minute, use_live_minutes,
)

from support import T0, iso


def live(match_id: str, started: float = T0) -> MatchSnapshot:
    return MatchSnapshot(id=match_id, status="live", live_started_at=iso(started))


# ----------------------------------------------------------------------
# Single match
# ----------------------------------------------------------------------
def test_live_minute_computes_immediately_and_ticks_every_30_seconds(clock, scheduler, tick):
    updates = []
    hook = use_live_minute(live("m1"), scheduler, updates.append)

    assert hook.current == 1
    assert updates == [1]
    assert scheduler.active_count() == 1

    assert tick(30) == 1
    assert updates == [1]  # still minute 1, no update

    tick(30)
    assert hook.current == 2
    assert updates == [1, 2]


def test_live_match_time_ticks_every_second(clock, scheduler, tick):
    hook = use_live_match_time(live("m1"), scheduler)
    assert hook.current.display == "1:00"

    tick(1)
    assert hook.current.display == "1:01"
    tick(64)
    assert hook.current.display == "2:05"


def test_paused_phase_starts_no_interval(scheduler, tick):
    hook = use_live_match_time(MatchSnapshot(id="m1", status="halftime"), scheduler)

    assert hook.current.display == "HT"
    assert not hook.is_ticking
    assert scheduler.active_count() == 0
    assert tick(60) == 0


def test_none_match_yields_none(scheduler):
    hook = use_live_minute(None, scheduler)
    assert hook.current is None
    assert scheduler.active_count() == 0


def test_live_minute_falls_back_to_server_minute(scheduler):
    hook = use_live_minute(MatchSnapshot(id="m1", status="live", current_minute=12), scheduler)
    assert hook.current == 12


def test_cosmetic_update_keeps_timer_and_phase_change_stops_it(clock, scheduler, tick):
    match = live("m1")
    hook = LiveMinuteClock(scheduler, match).mount()
    handle = hook._handle

    hook.update(replace(match, start_time=iso(T0 - 3600)))
    assert hook._handle == handle
    assert hook.match.start_time == iso(T0 - 3600)

    hook.update(replace(match, status="halftime"))
    assert hook.current == 45
    assert not hook.is_ticking
    assert scheduler.active_count() == 0


def test_interval_reads_latest_snapshot(clock, scheduler, tick):
    hook = LiveMatchTimeClock(scheduler, live("m1")).mount()

    # Second half kicks off: new anchor, same hook instance
    clock.t = T0 + 3000
    hook.update(replace(hook.match, second_half_started_at=iso(T0 + 3000)))
    assert hook.current.minute == 46
    assert scheduler.active_count() == 1

    tick(61)
    assert hook.current.display == "47:01"


def test_unmount_clears_interval(scheduler, tick):
    hook = use_live_minute(live("m1"), scheduler)
    hook.unmount()

    assert scheduler.active_count() == 0
    assert tick(120) == 0


def test_unsubscribe_stops_updates(scheduler, tick):
    updates = []
    hook = LiveMinuteClock(scheduler, live("m1"))
    unsubscribe = hook.subscribe(updates.append)
    hook.mount()
    unsubscribe()

    tick(120)
    assert updates == [1]
    assert hook.current == 3


# ----------------------------------------------------------------------
# Many matches
# ----------------------------------------------------------------------
def test_static_list_starts_no_interval(scheduler, tick):
    updates = []
    matches = [
        MatchSnapshot(id="a", status="halftime"),
        MatchSnapshot(id="b", status="scheduled", start_time=iso(T0 + 600)),
        MatchSnapshot(id="c", status="finished"),
    ]
    hook = use_live_minutes(matches, scheduler, updates.append)

    assert hook.current == {"a": 45}
    assert scheduler.active_count() == 0
    assert tick(30) == 0
    assert updates == [{"a": 45}]


def test_one_interval_for_many_matches(scheduler):
    matches = [live(str(i), T0 - 60 * i) for i in range(25)]
    hook = use_live_minutes(matches, scheduler)

    assert scheduler.active_count() == 1
    assert len(hook.current) == 25
    assert hook.current["3"] == 4


def test_active_set_includes_paused_phases(scheduler):
    matches = [
        live("a"),
        MatchSnapshot(id="b", status="extra_time", current_minute=100, updated_at=iso(T0)),
        MatchSnapshot(id="c", status="extra_time_halftime"),
        MatchSnapshot(id="d", status="penalties"),
        MatchSnapshot(id="e", status="finished", current_minute=90),
        MatchSnapshot(id="f", status="scheduled"),
    ]
    hook = use_live_minutes(matches, scheduler)
    assert hook.current == {"a": 1, "b": 100, "c": 105, "d": 120}


def test_no_update_signalled_when_map_unchanged(clock, scheduler, tick):
    updates = []
    hook = use_live_minutes([live("a"), MatchSnapshot(id="b", status="halftime")], scheduler, updates.append)
    assert len(updates) == 1

    tick(30)   # still minute 1
    assert len(updates) == 1

    tick(30)   # minute 2
    assert updates[-1] == {"a": 2, "b": 45}
    assert len(updates) == 2
    assert hook.current == {"a": 2, "b": 45}


def test_update_with_same_clock_fields_keeps_interval(scheduler):
    matches = [live("a")]
    hook = LiveMinutesClock(scheduler, matches).mount()
    handle = hook._handle

    hook.update([replace(m, start_time=iso(T0)) for m in matches])
    assert hook._handle == handle


def test_list_without_ticking_matches_stops_interval(scheduler, tick):
    hook = LiveMinutesClock(scheduler, [live("a")]).mount()
    assert scheduler.active_count() == 1

    hook.update([MatchSnapshot(id="a", status="finished", current_minute=93)])
    assert scheduler.active_count() == 0
    assert hook.current == {}


def test_live_match_times_map(clock, scheduler, tick):
    hook = use_live_match_times([live("a"), MatchSnapshot(id="b", status="penalties")], scheduler)
    assert hook.current["a"].display == "1:00"
    assert hook.current["b"].display == "PEN"

    tick(5)
    assert hook.current["a"].display == "1:05"
    assert hook.current["b"].display == "PEN"
