"""Tests for the TimerEngine Qt façade.

Covers: signals for every operation, persistence through the key/value
store after each mutation, restoring a running timer across restarts,
title tracking, and completion / notification dispatch.
"""

import json

import pytest

from speedrunner.settings import TIMERS_KEY
from speedrunner.timer.engine import DEFAULT_TITLE, Cue, TimerEngine
from speedrunner.timer.errors import LimitReached, NotFound
from speedrunner.timer.records import MAX_TIMERS, TAG_SYMBOLS, TimerType

from helpers import SignalCollector


def _stored(kv) -> list[dict]:
    return json.loads(kv.get(TIMERS_KEY))


# ═══════════════════════════════════════════════════════════════════════════
#  OPERATIONS
# ═══════════════════════════════════════════════════════════════════════════


class TestOperations:

    def test_starts_empty(self, engine):
        assert engine.timers == []
        assert engine.total_ms == 0
        assert engine.title == DEFAULT_TITLE

    def test_add_timer_emits_and_cues(self, engine):
        changed, cues = SignalCollector(), SignalCollector()
        engine.timers_changed.connect(changed)
        engine.cue.connect(cues)
        record = engine.add_timer()
        assert engine.timers == [record]
        assert len(changed) == 1
        assert cues.last == Cue.CREATE.value

    def test_add_timer_at_capacity(self, engine):
        for _ in range(MAX_TIMERS):
            engine.add_timer()
        with pytest.raises(LimitReached):
            engine.add_timer()
        assert len(engine.timers) == MAX_TIMERS

    def test_start_pause_toggle(self, engine, clock):
        r = engine.add_timer()
        cues = SignalCollector()
        engine.cue.connect(cues)

        engine.toggle(r.id)
        assert r.is_running
        assert r.last_tick == clock.now
        assert cues.last == Cue.START.value

        engine.toggle(r.id)
        assert not r.is_running
        assert cues.last == Cue.STOP.value

    def test_start_unknown_raises(self, engine):
        with pytest.raises(NotFound):
            engine.start(123)
        with pytest.raises(NotFound):
            engine.reset(123)

    def test_remove_absent_is_silent(self, engine):
        cues = SignalCollector()
        engine.cue.connect(cues)
        engine.remove(123)
        assert len(cues) == 0

    def test_remove_cues_delete(self, engine):
        r = engine.add_timer()
        cues = SignalCollector()
        engine.cue.connect(cues)
        engine.remove(r.id)
        assert engine.timers == []
        assert cues.last == Cue.DELETE.value

    def test_reconfigure_sets_single_title_timer(self, engine):
        a, b = engine.add_timer(), engine.add_timer()
        engine.reconfigure(a.id, TimerType.STOPWATCH, show_in_title=True)
        engine.reconfigure(b.id, TimerType.STOPWATCH, show_in_title=True)
        assert not a.show_in_title
        assert b.show_in_title

    def test_reconfigure_reports_forced_reset(self, engine, clock):
        r = engine.add_timer()
        engine.start(r.id)
        engine.advance(clock.advance(5000))
        assert engine.reconfigure(r.id, TimerType.COUNTDOWN, 60_000) is True
        assert r.remaining == 60_000
        assert not r.is_running
        assert engine.total_ms == 0


# ═══════════════════════════════════════════════════════════════════════════
#  ADVANCE
# ═══════════════════════════════════════════════════════════════════════════


class TestAdvance:

    def test_total_and_updates(self, engine, clock):
        r = engine.add_timer()
        updated, totals = SignalCollector(), SignalCollector()
        engine.timer_updated.connect(updated)
        engine.total_changed.connect(totals)

        engine.start(r.id)
        updated.clear()
        engine.advance(clock.advance(5000))

        assert r.duration == 5000
        assert updated.items == [r.id]
        assert totals.last == 5000
        assert engine.total_ms == 5000

    def test_uses_clock_when_now_omitted(self, engine, clock):
        r = engine.add_timer()
        engine.start(r.id)
        clock.advance(1234)
        engine.advance()
        assert r.duration == 1234

    def test_countdown_completion(self, engine, clock):
        r = engine.add_timer()
        engine.reconfigure(r.id, TimerType.COUNTDOWN, 60_000)
        completed, cues = SignalCollector(), SignalCollector()
        engine.timer_completed.connect(completed)
        engine.cue.connect(cues)

        engine.start(r.id)
        engine.advance(clock.advance(61_000))

        assert r.remaining == 0
        assert not r.is_running
        assert completed.items == [r.id]
        assert cues.last == Cue.COMPLETE.value

    def test_notification_signal(self, engine, clock):
        r = engine.add_timer()
        engine.rename(r.id, "Code")
        engine.reconfigure(r.id, TimerType.STOPWATCH, notify_enabled=True, notify_time=60_000)
        notes = SignalCollector()
        engine.notification.connect(notes)

        engine.start(r.id)
        engine.advance(clock.advance(60_000))
        engine.advance(clock.advance(60_000))

        assert notes.items == [("Time Reached: Code", "You have spent 00:01:00 on this task.")]

    def test_title_changes_only_when_text_changes(self, engine, clock):
        r = engine.add_timer()
        engine.rename(r.id, "Code")
        engine.reconfigure(r.id, TimerType.STOPWATCH, show_in_title=True)
        titles = SignalCollector()
        engine.title_changed.connect(titles)

        engine.start(r.id)
        engine.advance(clock.advance(100))
        engine.advance(clock.advance(100))
        engine.advance(clock.advance(1000))

        assert titles.items == ["00:00:00 - Code", "00:00:01 - Code"]
        engine.reconfigure(r.id, TimerType.STOPWATCH, show_in_title=False)
        engine.advance(clock.advance(10))
        assert titles.last == DEFAULT_TITLE


# ═══════════════════════════════════════════════════════════════════════════
#  PERSISTENCE
# ═══════════════════════════════════════════════════════════════════════════


class TestPersistence:

    def test_every_mutation_is_saved(self, engine, kv):
        r = engine.add_timer()
        assert [d["id"] for d in _stored(kv)] == [r.id]

        engine.start(r.id)
        assert _stored(kv)[0]["isRunning"] is True

        engine.pause(r.id)
        assert _stored(kv)[0]["isRunning"] is False

        engine.rename(r.id, "Read")
        assert _stored(kv)[0]["name"] == "Read"

        engine.retag(r.id, TAG_SYMBOLS[5])
        assert _stored(kv)[0]["tag"] == TAG_SYMBOLS[5]

        engine.reconfigure(r.id, TimerType.COUNTDOWN, 60_000)
        assert _stored(kv)[0]["type"] == "countdown"

        engine.reset(r.id)
        assert _stored(kv)[0]["remaining"] == 60_000

        engine.remove(r.id)
        assert _stored(kv) == []

    def test_completion_is_saved(self, engine, kv, clock):
        r = engine.add_timer()
        engine.reconfigure(r.id, TimerType.COUNTDOWN, 1000)
        engine.start(r.id)
        engine.advance(clock.advance(2000))
        stored = _stored(kv)[0]
        assert stored["remaining"] == 0
        assert stored["isRunning"] is False

    def test_running_timer_survives_restart(self, qapp, kv, clock):
        first = TimerEngine(store=kv, clock=clock)
        r = first.add_timer()
        first.start(r.id)

        clock.advance(30_000)
        second = TimerEngine(store=kv, clock=clock)
        restored = second.find(r.id)
        assert restored.is_running
        second.advance()
        assert restored.duration == 30_000

    def test_new_ids_continue_after_restart(self, qapp, kv, clock):
        first = TimerEngine(store=kv, clock=clock)
        ids = [first.add_timer().id for _ in range(3)]
        second = TimerEngine(store=kv, clock=clock)
        assert second.add_timer().id > max(ids)

    def test_engine_without_store(self, engine_no_db, clock):
        r = engine_no_db.add_timer()
        engine_no_db.start(r.id)
        engine_no_db.advance(clock.advance(10))
        assert r.duration == 10
