"""Timer package."""

from .engine import TimerEngine, Cue, DEFAULT_TITLE
from .errors import (
    SpeedrunnerError,
    LimitReached,
    InvalidValue,
    NotFound,
    MalformedShareData,
    NotificationUnsupported,
    PermissionDenied,
    ValidationWarning,
)
from .records import (
    TimerRecord,
    SnapshotRecord,
    TimerType,
    Tag,
    TAG_PALETTE,
    NO_TAG,
    MAX_TIMERS,
    elapsed_for_display,
    elapsed_for_total,
    format_time,
)
from .scheduler import TickReport, TickScheduler
from .store import TimerStore

__all__ = [
    "TimerEngine",
    "Cue",
    "DEFAULT_TITLE",
    "SpeedrunnerError",
    "InvalidValue",
    "LimitReached",
    "NotFound",
    "MalformedShareData",
    "NotificationUnsupported",
    "PermissionDenied",
    "ValidationWarning",
    "TimerRecord",
    "SnapshotRecord",
    "TimerType",
    "Tag",
    "TAG_PALETTE",
    "NO_TAG",
    "MAX_TIMERS",
    "elapsed_for_display",
    "elapsed_for_total",
    "format_time",
    "TickReport",
    "TickScheduler",
    "TimerStore",
]
