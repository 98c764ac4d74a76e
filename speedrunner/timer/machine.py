"""Per-timer state machine.

States
------
IDLE        ``is_running`` is False.
RUNNING     ``is_running`` is True; ``last_tick`` is where the next delta
            is measured from.
COMPLETED   Countdown only: ``remaining == 0`` and not running.  Looks
            like IDLE except for the zero.

Transitions
-----------
IDLE → RUNNING                  (start)
RUNNING → IDLE                  (pause)
RUNNING → RUNNING | COMPLETED   (tick)
Any → IDLE                      (reset, forced reconfigure)

Notification epochs
-------------------
Every operation that starts a new epoch clears ``has_notified`` itself:
``reset``, ``reconfigure``, and ``start`` when the timer starts from its
baseline (stopwatch at zero, countdown full or re-armed).
"""

from __future__ import annotations

import logging

from .errors import InvalidValue
from .records import TimerRecord, TimerType

log = logging.getLogger(__name__)


def start(record: TimerRecord, now: int) -> None:
    """Begin accumulating from *now*.  No-op when already running."""
    if record.is_running:
        return
    record.is_running = True
    record.last_tick = now

    if record.type is TimerType.COUNTDOWN:
        if record.remaining <= 0:
            record.remaining = record.initial_duration
        if record.remaining == record.initial_duration:
            record.has_notified = False
    elif record.duration == 0:
        record.has_notified = False

    log.debug("timer %s started at %d", record.id, now)


def pause(record: TimerRecord) -> None:
    """Stop accumulating.  Time up to the last tick is already counted."""
    if not record.is_running:
        return
    record.is_running = False
    log.debug("timer %s paused", record.id)


def tick(record: TimerRecord, now: int) -> bool:
    """Account for the time since ``last_tick``.

    Returns True when this tick ran a countdown out.
    """
    if not record.is_running:
        return False

    # A wall clock stepping backwards must not subtract time.
    delta = max(0, now - record.last_tick)
    record.last_tick = now

    if record.type is TimerType.STOPWATCH:
        record.duration += delta
        return False

    record.remaining -= delta
    if record.remaining <= 0:
        record.remaining = 0
        record.is_running = False
        log.debug("countdown %s completed", record.id)
        return True
    return False


def reset(record: TimerRecord) -> None:
    """Back to IDLE at the start of a fresh epoch."""
    record.is_running = False
    record.duration = 0
    record.remaining = record.initial_duration
    record.has_notified = False


def needs_forced_reset(
    record: TimerRecord,
    new_type: TimerType,
    new_initial_duration: int | None,
) -> bool:
    if new_type is not record.type:
        return True
    return (
        new_initial_duration is not None
        and new_initial_duration != record.initial_duration
    )


def reconfigure(
    record: TimerRecord,
    new_type: TimerType,
    new_initial_duration: int | None = None,
    *,
    notify_enabled: bool | None = None,
    notify_time: int | None = None,
) -> bool:
    """Apply a settings save.

    Switching type, or changing the initial duration, throws away the
    accumulated progress.  Anything else updates in place.  The
    notification epoch restarts either way.

    Returns True when the forced reset happened.
    """
    if new_initial_duration is not None and new_initial_duration <= 0:
        raise InvalidValue("initial duration must be positive")
    if notify_time is not None and notify_time <= 0:
        raise InvalidValue("notify time must be positive")

    forced = needs_forced_reset(record, new_type, new_initial_duration)

    record.type = new_type
    if notify_enabled is not None:
        record.notify_enabled = notify_enabled
    if notify_time is not None:
        record.notify_time = notify_time
    record.has_notified = False

    if forced:
        if new_initial_duration is not None:
            record.initial_duration = new_initial_duration
        reset(record)
        log.debug("timer %s reconfigured as %s (reset)", record.id, new_type.value)
    return forced
