"""Qt façade over the timer collection.

``TimerEngine`` owns a :class:`TimerStore` and a :class:`TickScheduler`,
persists the collection after every mutation, and reports what happened
through Qt signals so a renderer, a notification sink and an audio
collaborator can react without the engine knowing about them.

The engine never starts a timer of its own.  The host calls
:meth:`TimerEngine.advance` from a periodic callback (see
:class:`speedrunner.app.SpeedrunnerApp`).
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable

from PyQt6.QtCore import QObject, pyqtSignal

from . import machine
from .errors import ValidationWarning
from .records import TimerRecord, TimerType
from .scheduler import TickReport, TickScheduler, grand_total
from .store import TimerStore
from ..settings import TIMERS_KEY

log = logging.getLogger(__name__)

DEFAULT_TITLE = "Speedrunner - Multi-Track Timer"


class Cue(Enum):
    CREATE = "create"
    START = "start"
    STOP = "stop"
    DELETE = "delete"
    COMPLETE = "complete"


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


class TimerEngine(QObject):
    """The live timer collection.

    Signals
    -------
    timers_changed()
        The set of timers, their order, names, tags or settings changed.
    timer_updated(timer_id)
        One timer's running state or time changed.
    timer_completed(timer_id)
        A countdown ran out during ``advance``.
    total_changed(total_ms)
        Emitted after every ``advance`` with the grand total.
    title_changed(text)
        The title value changed; ``DEFAULT_TITLE`` when no timer drives it.
    notification(title, body)
        A notification threshold was crossed.
    cue(name)
        Named audio cue (see :class:`Cue`).
    alert(title, message)
        Recoverable failure the user should see.
    """

    # ids and millisecond totals overflow a C++ int; ship them as objects
    timers_changed = pyqtSignal()
    timer_updated = pyqtSignal(object)
    timer_completed = pyqtSignal(object)
    total_changed = pyqtSignal(object)
    title_changed = pyqtSignal(str)
    notification = pyqtSignal(str, str)
    cue = pyqtSignal(str)
    alert = pyqtSignal(str, str)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        store=None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        super().__init__(parent)
        self._kv = store
        self._clock = clock or wall_clock_ms
        self._timers = (
            TimerStore.load(store.get(TIMERS_KEY)) if store is not None else TimerStore()
        )
        self._scheduler = TickScheduler(self._timers)
        self._title = DEFAULT_TITLE
        self._total = grand_total(self._timers)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def timers(self) -> list[TimerRecord]:
        return self._timers.list()

    @property
    def collection(self) -> TimerStore:
        return self._timers

    @property
    def total_ms(self) -> int:
        """Grand total as of the last ``advance`` or mutation."""
        return self._total

    @property
    def title(self) -> str:
        return self._title

    @property
    def is_full(self) -> bool:
        return self._timers.is_full

    def find(self, timer_id: int) -> TimerRecord:
        return self._timers.find(timer_id)

    def any_other_running(self, excluding_id: int) -> bool:
        return self._timers.any_other_running(excluding_id)

    def available_tags(self, timer_id: int) -> list[str]:
        return self._timers.available_tags(timer_id)

    # ══════════════════════════════════════════════════════════════════
    #  OPERATIONS
    # ══════════════════════════════════════════════════════════════════

    def add_timer(self) -> TimerRecord:
        """Create a timer.  Raises ``LimitReached`` at capacity."""
        record = self._timers.create()
        self._changed()
        self.cue.emit(Cue.CREATE.value)
        return record

    def remove(self, timer_id: int) -> None:
        if not self._timers.remove(timer_id):
            return
        self._changed()
        self.cue.emit(Cue.DELETE.value)

    def start(self, timer_id: int, now: int | None = None) -> None:
        record = self._timers.find(timer_id)
        if record.is_running:
            return
        machine.start(record, self._now(now))
        self._updated(record)
        self.cue.emit(Cue.START.value)

    def pause(self, timer_id: int) -> None:
        record = self._timers.find(timer_id)
        if not record.is_running:
            return
        machine.pause(record)
        self._updated(record)
        self.cue.emit(Cue.STOP.value)

    def toggle(self, timer_id: int, now: int | None = None) -> None:
        if self._timers.find(timer_id).is_running:
            self.pause(timer_id)
        else:
            self.start(timer_id, now)

    def reset(self, timer_id: int) -> None:
        record = self._timers.find(timer_id)
        machine.reset(record)
        self._updated(record)

    def rename(self, timer_id: int, name: str) -> ValidationWarning | None:
        warning = self._timers.rename(timer_id, name)
        self._changed()
        return warning

    def retag(self, timer_id: int, tag: str) -> None:
        self._timers.retag(timer_id, tag)
        self._changed()

    def reconfigure(
        self,
        timer_id: int,
        new_type: TimerType,
        new_initial_duration: int | None = None,
        *,
        show_in_title: bool | None = None,
        notify_enabled: bool | None = None,
        notify_time: int | None = None,
    ) -> bool:
        """Settings save.  Returns True when progress was reset."""
        record = self._timers.find(timer_id)
        forced = machine.reconfigure(
            record,
            new_type,
            new_initial_duration,
            notify_enabled=notify_enabled,
            notify_time=notify_time,
        )
        if show_in_title is not None:
            self._timers.set_title_timer(timer_id, show_in_title)
        self._changed()
        return forced

    def advance(self, now: int | None = None) -> TickReport:
        """One tick of the host loop."""
        report = self._scheduler.advance(self._now(now))

        for timer_id in report.ticked:
            self.timer_updated.emit(timer_id)
        for timer_id in report.completed:
            self.timer_completed.emit(timer_id)
            self.cue.emit(Cue.COMPLETE.value)
        for note in report.notifications:
            log.info("notification threshold reached for timer %d", note.timer_id)
            self.notification.emit(note.title, note.body)

        if report.needs_save:
            self.save()

        self._total = report.total_ms
        self.total_changed.emit(report.total_ms)
        self._set_title(report.title)
        return report

    def save(self) -> None:
        if self._kv is None:
            return
        self._kv.set(TIMERS_KEY, self._timers.dump())

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _now(self, now: int | None) -> int:
        return self._clock() if now is None else now

    def _refresh_total(self) -> None:
        self._total = grand_total(self._timers)

    def _changed(self) -> None:
        self.save()
        self._refresh_total()
        self.timers_changed.emit()

    def _updated(self, record: TimerRecord) -> None:
        self.save()
        self._refresh_total()
        self.timer_updated.emit(record.id)

    def _set_title(self, text: str | None) -> None:
        text = text or DEFAULT_TITLE
        if text != self._title:
            self._title = text
            self.title_changed.emit(text)
