"""Application host: drives the engine and wires its collaborators.

``SpeedrunnerApp`` owns the periodic ``QTimer`` that feeds "now" into
:meth:`TimerEngine.advance`, the user preferences, the notification
sink and the audio callable.  Rendering stays outside: a renderer
listens to ``app.engine`` signals and sends intents to
:meth:`SpeedrunnerApp.dispatch`.
"""

from __future__ import annotations

import logging
from typing import Callable

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from .database.db import SqlKeyValueStore
from .notifications import TrayNotificationSink
from .settings import Settings, load_settings, save_settings
from .stats.aggregator import ShareSummary, share_summary
from .stats.share import load_shared, share_link
from .timer.engine import TimerEngine
from .timer.errors import NotificationUnsupported, PermissionDenied
from .timer.intents import Outcome, SaveSettings, dispatch

log = logging.getLogger(__name__)


class SpeedrunnerApp(QObject):
    """Headless application core.

    Signals
    -------
    theme_changed(theme)
        ``"dark"`` or ``"light"`` after :meth:`toggle_theme`.
    shared_view(summary)
        A shared token was opened; carries a :class:`ShareSummary` built
        from the decoded snapshot, never from the live timers.
    """

    theme_changed = pyqtSignal(str)
    shared_view = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        store=None,
        sink: TrayNotificationSink | None = None,
        audio: Callable[[str], None] | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        super().__init__(parent)

        # ── persistence & preferences ─────────────────────────────────
        self._store = store if store is not None else SqlKeyValueStore()
        self._settings: Settings = load_settings(self._store)

        # ── engine ────────────────────────────────────────────────────
        self._engine = TimerEngine(self, store=self._store, clock=clock)

        # ── collaborators ─────────────────────────────────────────────
        self._sink = sink or TrayNotificationSink(
            self, enabled=self._settings.notifications_enabled,
        )
        self._audio = audio
        self._engine.notification.connect(self._sink.send)
        self._engine.cue.connect(self._on_cue)

        # ── driver ────────────────────────────────────────────────────
        self._driver = QTimer(self)
        self._driver.setInterval(self._settings.tick_interval_ms)
        self._driver.timeout.connect(self._on_frame)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def sink(self) -> TrayNotificationSink:
        return self._sink

    @property
    def is_driving(self) -> bool:
        return self._driver.isActive()

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Begin the periodic tick.  Timers keep their own running state."""
        self._driver.start()

    def stop(self) -> None:
        self._driver.stop()

    def dispatch(self, intent) -> Outcome:
        """Route a renderer intent to the engine."""
        arming = (
            isinstance(intent, SaveSettings)
            and intent.notify_enabled
            and not self._was_armed(intent.timer_id)
        )
        outcome = dispatch(self._engine, intent)
        if arming and outcome is Outcome.OK:
            self._request_notifications()
        return outcome

    def toggle_theme(self) -> str:
        theme = self._settings.toggle_theme()
        save_settings(self._store, self._settings)
        self.theme_changed.emit(theme)
        return theme

    def set_sound_enabled(self, enabled: bool) -> None:
        self._settings.sound_enabled = enabled
        save_settings(self._store, self._settings)

    def set_notifications_enabled(self, enabled: bool) -> None:
        self._settings.notifications_enabled = enabled
        self._sink.set_enabled(enabled)
        save_settings(self._store, self._settings)

    # ── sharing ───────────────────────────────────────────────────────

    def export_link(self, base_url: str) -> str:
        return share_link(base_url, self._engine.timers)

    def summary(self) -> ShareSummary:
        return share_summary(self._engine.timers)

    def open_shared(self, url_or_token: str) -> ShareSummary | None:
        """Show a shared snapshot read-only.  The live timers are untouched."""
        records = load_shared(url_or_token)
        if not records:
            self._engine.alert.emit("Share", "This share link could not be read.")
            return None
        summary = share_summary(records)
        self.shared_view.emit(summary)
        return summary

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _on_frame(self) -> None:
        self._engine.advance()

    def _on_cue(self, name: str) -> None:
        if self._audio is not None and self._settings.sound_enabled:
            self._audio(name)

    def _was_armed(self, timer_id: int) -> bool:
        for record in self._engine.timers:
            if record.id == timer_id:
                return record.notify_enabled
        return False

    def _request_notifications(self) -> None:
        try:
            self._sink.request_permission()
        except NotificationUnsupported as exc:
            self._engine.alert.emit("Error", str(exc))
        except PermissionDenied as exc:
            self._engine.alert.emit("Notification Blocked", str(exc))
