"""Tests for the per-timer state machine.

Covers: start/pause/tick/reset transitions, countdown completion and
clamping, re-arming a finished countdown, reconfigure with and without
a forced reset, and notification-epoch clearing.
"""

import pytest

from speedrunner.timer import machine
from speedrunner.timer.errors import InvalidValue
from speedrunner.timer.records import (
    TimerType, elapsed_for_display, elapsed_for_total, format_time,
)

from helpers import stopwatch, countdown


# ═══════════════════════════════════════════════════════════════════════════
#  STOPWATCH
# ═══════════════════════════════════════════════════════════════════════════


class TestStopwatch:

    def test_start_sets_running_and_last_tick(self):
        r = stopwatch()
        machine.start(r, 1000)
        assert r.is_running
        assert r.last_tick == 1000

    def test_tick_accumulates(self):
        r = stopwatch()
        machine.start(r, 0)
        machine.tick(r, 5000)
        assert r.duration == 5000
        assert format_time(r.duration) == "00:00:05"

    def test_ticks_add_up(self):
        r = stopwatch()
        machine.start(r, 0)
        for now in (16, 33, 50, 1000):
            machine.tick(r, now)
        assert r.duration == 1000
        assert r.last_tick == 1000

    def test_pause_adds_no_time(self):
        r = stopwatch()
        machine.start(r, 0)
        machine.tick(r, 2000)
        machine.pause(r)
        assert not r.is_running
        machine.tick(r, 9000)  # ignored while idle
        assert r.duration == 2000

    def test_resume_measures_from_restart(self):
        r = stopwatch()
        machine.start(r, 0)
        machine.tick(r, 1000)
        machine.pause(r)
        machine.start(r, 10_000)
        machine.tick(r, 11_000)
        assert r.duration == 2000

    def test_clock_stepping_back_adds_nothing(self):
        r = stopwatch()
        machine.start(r, 5000)
        machine.tick(r, 4000)
        assert r.duration == 0
        assert r.last_tick == 4000

    def test_start_when_running_is_noop(self):
        r = stopwatch()
        machine.start(r, 0)
        machine.start(r, 3000)
        assert r.last_tick == 0

    def test_start_from_zero_rearms_notification(self):
        r = stopwatch(has_notified=True)
        machine.start(r, 0)
        assert r.has_notified is False

    def test_resume_midway_keeps_notification_state(self):
        r = stopwatch(duration=10, has_notified=True)
        machine.start(r, 0)
        assert r.has_notified is True

    def test_display_and_total_are_duration(self):
        r = stopwatch(duration=4200)
        assert elapsed_for_display(r) == 4200
        assert elapsed_for_total(r) == 4200


# ═══════════════════════════════════════════════════════════════════════════
#  COUNTDOWN
# ═══════════════════════════════════════════════════════════════════════════


class TestCountdown:

    def test_completion_clamps_and_stops(self):
        r = countdown(initial=60_000, remaining=0)
        machine.start(r, 0)
        completed = machine.tick(r, 61_000)
        assert completed is True
        assert r.remaining == 0
        assert r.is_running is False
        assert r.is_completed

    def test_tick_counts_down(self):
        r = countdown(initial=60_000)
        machine.start(r, 0)
        assert machine.tick(r, 15_000) is False
        assert r.remaining == 45_000
        assert elapsed_for_display(r) == 45_000
        assert elapsed_for_total(r) == 15_000

    def test_exact_zero_completes(self):
        r = countdown(initial=1000)
        machine.start(r, 0)
        assert machine.tick(r, 1000) is True
        assert r.remaining == 0

    def test_start_rearms_finished_countdown(self):
        r = countdown(initial=60_000, remaining=0, has_notified=True)
        machine.start(r, 100)
        assert r.remaining == 60_000
        assert r.has_notified is False
        assert r.is_running

    def test_resume_partial_countdown_keeps_epoch(self):
        r = countdown(initial=60_000, remaining=30_000, has_notified=True)
        machine.start(r, 0)
        assert r.remaining == 30_000
        assert r.has_notified is True

    def test_remaining_never_negative(self):
        r = countdown(initial=500)
        machine.start(r, 0)
        for now in range(0, 5000, 300):
            machine.tick(r, now)
        assert r.remaining == 0
        assert r.duration == 0


# ═══════════════════════════════════════════════════════════════════════════
#  RESET
# ═══════════════════════════════════════════════════════════════════════════


class TestReset:

    def test_reset_stopwatch(self):
        r = stopwatch(duration=9000, is_running=True, has_notified=True)
        machine.reset(r)
        assert r.duration == 0
        assert r.is_running is False
        assert r.has_notified is False

    def test_reset_countdown_reloads(self):
        r = countdown(initial=60_000, remaining=12_000, is_running=True)
        machine.reset(r)
        assert r.remaining == 60_000
        assert not r.is_running
        assert elapsed_for_total(r) == 0


# ═══════════════════════════════════════════════════════════════════════════
#  RECONFIGURE
# ═══════════════════════════════════════════════════════════════════════════


class TestReconfigure:

    def test_type_change_forces_reset(self):
        r = stopwatch(duration=5000, is_running=True)
        forced = machine.reconfigure(r, TimerType.COUNTDOWN, 10 * 60_000)
        assert forced is True
        assert r.type is TimerType.COUNTDOWN
        assert r.initial_duration == 600_000
        assert r.remaining == 600_000
        assert r.duration == 0
        assert not r.is_running

    def test_countdown_to_stopwatch_resets(self):
        r = countdown(initial=60_000, remaining=20_000)
        assert machine.reconfigure(r, TimerType.STOPWATCH) is True
        assert r.duration == 0
        assert r.type is TimerType.STOPWATCH

    def test_new_duration_forces_reset(self):
        r = countdown(initial=60_000, remaining=20_000, is_running=True)
        assert machine.reconfigure(r, TimerType.COUNTDOWN, 120_000) is True
        assert r.remaining == 120_000
        assert not r.is_running

    def test_same_settings_keep_progress(self):
        r = countdown(initial=60_000, remaining=20_000, is_running=True)
        forced = machine.reconfigure(
            r, TimerType.COUNTDOWN, 60_000, notify_enabled=True, notify_time=30_000,
        )
        assert forced is False
        assert r.remaining == 20_000
        assert r.is_running
        assert r.notify_enabled is True
        assert r.notify_time == 30_000

    def test_stopwatch_without_duration_keeps_progress(self):
        r = stopwatch(duration=7000)
        assert machine.reconfigure(r, TimerType.STOPWATCH) is False
        assert r.duration == 7000

    def test_always_clears_notification_epoch(self):
        r = stopwatch(duration=7000, has_notified=True)
        machine.reconfigure(r, TimerType.STOPWATCH)
        assert r.has_notified is False

    def test_rejects_non_positive_values(self):
        r = stopwatch()
        with pytest.raises(InvalidValue):
            machine.reconfigure(r, TimerType.COUNTDOWN, 0)
        with pytest.raises(InvalidValue):
            machine.reconfigure(r, TimerType.STOPWATCH, notify_time=-1)
