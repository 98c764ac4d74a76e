"""The closed set of things a renderer can ask the engine to do.

A renderer builds one of the intent dataclasses below and hands it to
:func:`dispatch`, which maps it onto a single engine operation and
reports an :class:`Outcome`::

    outcome = dispatch(engine, Start(timer_id))
    if outcome is Outcome.NEEDS_CONFIRMATION:
        if ask_user("Run multiple timers simultaneously?"):
            dispatch(engine, Start(timer_id, confirmed=True))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .errors import InvalidValue, LimitReached, NotFound
from .records import TimerType

log = logging.getLogger(__name__)


class Outcome(Enum):
    OK = "ok"
    LIMIT_REACHED = "limit_reached"
    NOT_FOUND = "not_found"
    NEEDS_CONFIRMATION = "needs_confirmation"
    NAME_TOO_LONG = "name_too_long"
    INVALID = "invalid"


# ── intents ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Add:
    pass


@dataclass(frozen=True)
class Start:
    timer_id: int
    confirmed: bool = False


@dataclass(frozen=True)
class Pause:
    timer_id: int


@dataclass(frozen=True)
class Reset:
    timer_id: int


@dataclass(frozen=True)
class Delete:
    timer_id: int


@dataclass(frozen=True)
class Rename:
    timer_id: int
    name: str


@dataclass(frozen=True)
class Retag:
    timer_id: int
    tag: str


@dataclass(frozen=True)
class SaveSettings:
    timer_id: int
    type: TimerType
    initial_duration: int | None = None   # ms; None keeps the current one
    show_in_title: bool = False
    notify_enabled: bool = False
    notify_time: int | None = None        # ms


Intent = Add | Start | Pause | Reset | Delete | Rename | Retag | SaveSettings


def minutes_to_ms(text, default_minutes: int) -> int:
    """Parse a minutes field from a form.  Blank, non-numeric or
    non-positive input falls back to *default_minutes*."""
    try:
        minutes = int(str(text).strip())
    except ValueError:
        minutes = 0
    if minutes <= 0:
        minutes = default_minutes
    return minutes * 60 * 1000


# ── handlers ──────────────────────────────────────────────────────────────


def _add(engine, intent: Add) -> Outcome:
    engine.add_timer()
    return Outcome.OK


def _start(engine, intent: Start) -> Outcome:
    record = engine.find(intent.timer_id)
    if (
        not intent.confirmed
        and not record.is_running
        and engine.any_other_running(intent.timer_id)
    ):
        return Outcome.NEEDS_CONFIRMATION
    engine.start(intent.timer_id)
    return Outcome.OK


def _pause(engine, intent: Pause) -> Outcome:
    engine.pause(intent.timer_id)
    return Outcome.OK


def _reset(engine, intent: Reset) -> Outcome:
    engine.reset(intent.timer_id)
    return Outcome.OK


def _delete(engine, intent: Delete) -> Outcome:
    engine.remove(intent.timer_id)
    return Outcome.OK


def _rename(engine, intent: Rename) -> Outcome:
    warning = engine.rename(intent.timer_id, intent.name)
    if warning is not None:
        engine.alert.emit("Input Warning", str(warning))
        return Outcome.NAME_TOO_LONG
    return Outcome.OK


def _retag(engine, intent: Retag) -> Outcome:
    engine.retag(intent.timer_id, intent.tag)
    return Outcome.OK


def _save_settings(engine, intent: SaveSettings) -> Outcome:
    engine.reconfigure(
        intent.timer_id,
        intent.type,
        intent.initial_duration,
        show_in_title=intent.show_in_title,
        notify_enabled=intent.notify_enabled,
        notify_time=intent.notify_time,
    )
    return Outcome.OK


_HANDLERS = {
    Add: _add,
    Start: _start,
    Pause: _pause,
    Reset: _reset,
    Delete: _delete,
    Rename: _rename,
    Retag: _retag,
    SaveSettings: _save_settings,
}


def dispatch(engine, intent) -> Outcome:
    """Apply *intent* to *engine*.

    ``LimitReached``, ``NotFound`` and ``InvalidValue`` come back as
    outcomes.  A full collection or a rejected value also raises an alert
    on the engine.
    """
    try:
        handler = _HANDLERS[type(intent)]
    except KeyError:
        raise TypeError(f"not an intent: {intent!r}") from None

    try:
        return handler(engine, intent)
    except LimitReached as exc:
        engine.alert.emit("Limit Reached", str(exc))
        return Outcome.LIMIT_REACHED
    except NotFound as exc:
        log.warning("%s ignored: %s", type(intent).__name__, exc)
        return Outcome.NOT_FOUND
    except InvalidValue as exc:
        engine.alert.emit("Input Warning", str(exc))
        return Outcome.INVALID
