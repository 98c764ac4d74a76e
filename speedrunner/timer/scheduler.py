"""Advance every running timer by the time elapsed since its last tick."""

from __future__ import annotations

from dataclasses import dataclass, field

from . import machine
from .notify import Notification, fire
from .records import elapsed_for_display, elapsed_for_total, format_time
from .store import TimerStore


@dataclass
class TickReport:
    """What one ``advance`` call changed and what the host should show."""

    total_ms: int = 0
    title: str | None = None
    ticked: list[int] = field(default_factory=list)
    completed: list[int] = field(default_factory=list)
    notifications: list[Notification] = field(default_factory=list)

    @property
    def needs_save(self) -> bool:
        return bool(self.completed or self.notifications)


def title_text(record) -> str:
    return f"{format_time(elapsed_for_display(record))} - {record.name}"


def grand_total(records) -> int:
    return sum(elapsed_for_total(r) for r in records)


class TickScheduler:
    """Drives the state machine over a :class:`TimerStore`.

    It never schedules itself; the host calls :meth:`advance` from its
    periodic callback.
    """

    def __init__(self, store: TimerStore) -> None:
        self.store = store

    def advance(self, now: int) -> TickReport:
        report = TickReport()
        for record in self.store:
            if record.is_running:
                if machine.tick(record, now):
                    report.completed.append(record.id)
                report.ticked.append(record.id)
                notification = fire(record)
                if notification is not None:
                    report.notifications.append(notification)

            report.total_ms += elapsed_for_total(record)
            if record.show_in_title and report.title is None:
                report.title = title_text(record)
        return report
