"""Shared test helpers for Speedrunner."""

from speedrunner.timer.records import TimerRecord, TimerType


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Millisecond clock the tests move by hand."""

    def __init__(self, now: int = 1_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


class FakeTray:
    """Stands in for QSystemTrayIcon.showMessage."""

    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def showMessage(self, title, body):
        self.messages.append((title, body))


def stopwatch(timer_id: int = 1, **kwargs) -> TimerRecord:
    return TimerRecord(id=timer_id, **kwargs)


def countdown(timer_id: int = 1, initial: int = 60_000, **kwargs) -> TimerRecord:
    kwargs.setdefault("remaining", initial)
    return TimerRecord(
        id=timer_id, type=TimerType.COUNTDOWN, initial_duration=initial, **kwargs,
    )
