"""Timer records, the tag palette, and the time helpers shared by the
engine, the stats aggregator and the share codec.

A record is plain data.  Behaviour lives in :mod:`.machine` (per-timer
transitions) and :mod:`.store` (collection policy).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


# ── enums ─────────────────────────────────────────────────────────────────


class TimerType(Enum):
    STOPWATCH = "stopwatch"
    COUNTDOWN = "countdown"


# ── constants ─────────────────────────────────────────────────────────────

MAX_TIMERS = 9
NAME_SOFT_LIMIT = 45

DEFAULT_NAME = "New Activity"
DEFAULT_INITIAL_DURATION = 25 * 60 * 1000   # ms
DEFAULT_NOTIFY_TIME = 60 * 60 * 1000        # ms


@dataclass(frozen=True)
class Tag:
    symbol: str
    color: str


# Index in this tuple is the ``tagIndex`` used on the share wire format.
TAG_PALETTE: tuple[Tag, ...] = (
    Tag("⚪", "#e0e0e0"),          # no tag
    Tag("\U0001f7e2", "#4ade80"),
    Tag("\U0001f535", "#60a5fa"),
    Tag("\U0001f7e1", "#facc15"),
    Tag("\U0001f534", "#f87171"),
    Tag("\U0001f7e3", "#c084fc"),
    Tag("⚡", "#fbbf24"),
    Tag("\U0001f4bb", "#94a3b8"),
    Tag("\U0001f3a8", "#f472b6"),
    Tag("\U0001f9e0", "#818cf8"),
)

NO_TAG = TAG_PALETTE[0].symbol
TAG_SYMBOLS: tuple[str, ...] = tuple(t.symbol for t in TAG_PALETTE)


def tag_index(symbol: str) -> int:
    """Palette position of *symbol*, 0 when it is not a palette symbol."""
    try:
        return TAG_SYMBOLS.index(symbol)
    except ValueError:
        return 0


def tag_color(symbol: str) -> str:
    return TAG_PALETTE[tag_index(symbol)].color


# ── record ────────────────────────────────────────────────────────────────


@dataclass
class TimerRecord:
    """Persisted shape of one timer.  All times are integer milliseconds."""

    id: int
    tag: str = NO_TAG
    name: str = DEFAULT_NAME
    type: TimerType = TimerType.STOPWATCH
    duration: int = 0
    remaining: int = 0
    initial_duration: int = DEFAULT_INITIAL_DURATION
    is_running: bool = False
    last_tick: int = 0
    show_in_title: bool = False
    notify_enabled: bool = False
    notify_time: int = DEFAULT_NOTIFY_TIME
    has_notified: bool = False

    @property
    def is_countdown(self) -> bool:
        return self.type is TimerType.COUNTDOWN

    @property
    def is_completed(self) -> bool:
        """A countdown that ran out; otherwise indistinguishable from idle."""
        return self.is_countdown and not self.is_running and self.remaining == 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "tag": self.tag,
            "name": self.name,
            "type": self.type.value,
            "duration": self.duration,
            "remaining": self.remaining,
            "initialDuration": self.initial_duration,
            "isRunning": self.is_running,
            "lastTick": self.last_tick,
            "showInTitle": self.show_in_title,
            "notifyEnabled": self.notify_enabled,
            "notifyTime": self.notify_time,
            "hasNotified": self.has_notified,
        }

    @classmethod
    def from_dict(cls, data: dict) -> TimerRecord:
        """Build a record from its JSON form.  Missing keys take defaults;
        out-of-range times are clamped so loaded data honours the invariants."""
        initial = int(data.get("initialDuration", DEFAULT_INITIAL_DURATION))
        if initial <= 0:
            initial = DEFAULT_INITIAL_DURATION
        notify_time = int(data.get("notifyTime", DEFAULT_NOTIFY_TIME))
        if notify_time <= 0:
            notify_time = DEFAULT_NOTIFY_TIME
        return cls(
            id=int(data["id"]),
            tag=str(data.get("tag", NO_TAG)),
            name=str(data.get("name", DEFAULT_NAME)),
            type=TimerType(data.get("type", TimerType.STOPWATCH.value)),
            duration=max(0, int(data.get("duration", 0))),
            remaining=min(max(0, int(data.get("remaining", 0))), initial),
            initial_duration=initial,
            is_running=bool(data.get("isRunning", False)),
            last_tick=int(data.get("lastTick", 0)),
            show_in_title=bool(data.get("showInTitle", False)),
            notify_enabled=bool(data.get("notifyEnabled", False)),
            notify_time=notify_time,
            has_notified=bool(data.get("hasNotified", False)),
        )


@dataclass(frozen=True)
class SnapshotRecord:
    """Read-only record reconstructed from a share token."""

    name: str
    duration: int
    tag: str = NO_TAG
    type: TimerType = TimerType.STOPWATCH
    initial_duration: int = 0
    remaining: int = 0


# ── time helpers ──────────────────────────────────────────────────────────


def elapsed_for_display(record) -> int:
    """Value shown on the row: accumulated time, or time left."""
    if record.type is TimerType.COUNTDOWN:
        return record.remaining
    return record.duration


def elapsed_for_total(record) -> int:
    """Time *spent* on a timer regardless of mode."""
    if record.type is TimerType.COUNTDOWN:
        return record.initial_duration - record.remaining
    return record.duration


def format_time(ms: int) -> str:
    """``HH:MM:SS``; hours are not wrapped, negatives show as zero."""
    total_seconds = max(0, int(ms)) // 1000
    h, rem = divmod(total_seconds, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"
