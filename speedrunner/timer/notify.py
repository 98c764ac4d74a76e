"""Notification threshold evaluator."""

from __future__ import annotations

from dataclasses import dataclass

from .records import elapsed_for_total, format_time


@dataclass(frozen=True)
class Notification:
    timer_id: int
    title: str
    body: str


def should_fire(record) -> bool:
    """True iff the record is armed, has not fired this epoch, and the
    time spent has reached its threshold."""
    return (
        record.notify_enabled
        and not record.has_notified
        and elapsed_for_total(record) >= record.notify_time
    )


def build_notification(record) -> Notification:
    return Notification(
        timer_id=record.id,
        title=f"Time Reached: {record.name}",
        body=f"You have spent {format_time(record.notify_time)} on this task.",
    )


def fire(record) -> Notification | None:
    """Evaluate and, on a crossing, close the epoch.

    Closing the epoch here is the only place ``has_notified`` turns True.
    """
    if not should_fire(record):
        return None
    record.has_notified = True
    return build_notification(record)
