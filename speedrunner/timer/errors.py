"""Engine error taxonomy.

Every failure here is local and recoverable.  Core operations raise;
:func:`speedrunner.timer.intents.dispatch` and the Qt façade turn them
into outcomes and alerts for the caller to present.
"""

from __future__ import annotations


class SpeedrunnerError(Exception):
    """Base class for engine failures."""


class LimitReached(SpeedrunnerError):
    """``create()`` called with the collection already at capacity."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"Maximum {limit} timers allowed.")
        self.limit = limit


class NotFound(SpeedrunnerError):
    """An operation referenced a timer id not in the collection."""

    def __init__(self, timer_id: int) -> None:
        super().__init__(f"No timer with id {timer_id}")
        self.timer_id = timer_id


class InvalidValue(SpeedrunnerError, ValueError):
    """A setting or tag outside what the engine accepts."""


class MalformedShareData(SpeedrunnerError):
    """A share token could not be decoded."""


class NotificationUnsupported(SpeedrunnerError):
    """The desktop offers no way to show notifications."""


class PermissionDenied(SpeedrunnerError):
    """Notifications exist but the user turned them off."""


class ValidationWarning(UserWarning):
    """Advisory only: the mutation it describes still happened."""
