"""Desktop notifications through the system tray.

The engine only emits ``(title, body)`` pairs.  Whether they reach the
user depends on the desktop (a tray that can show messages) and on the
user's notifications preference; neither affects timing.
"""

from __future__ import annotations

import logging
from enum import Enum

from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtWidgets import QSystemTrayIcon

from .timer.errors import NotificationUnsupported, PermissionDenied

log = logging.getLogger(__name__)

APP_NAME = "Speedrunner"


class Permission(Enum):
    GRANTED = "granted"
    DENIED = "denied"
    UNDETERMINED = "undetermined"
    UNSUPPORTED = "unsupported"


def tray_supports_messages() -> bool:
    return (
        QSystemTrayIcon.isSystemTrayAvailable()
        and QSystemTrayIcon.supportsMessages()
    )


class TrayNotificationSink(QObject):
    """Shows engine notifications as tray balloons.

    Signals
    -------
    delivered(title, body)
        A notification was handed to the tray.
    """

    delivered = pyqtSignal(str, str)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        tray: QSystemTrayIcon | None = None,
        enabled: bool = True,
        supported: bool | None = None,
    ) -> None:
        super().__init__(parent)
        self._tray = tray
        self._enabled = enabled
        self._asked = False
        self._supported = tray_supports_messages() if supported is None else supported

    @property
    def permission(self) -> Permission:
        if not self._supported or self._tray is None:
            return Permission.UNSUPPORTED
        if not self._enabled:
            return Permission.DENIED
        if not self._asked:
            return Permission.UNDETERMINED
        return Permission.GRANTED

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def request_permission(self) -> None:
        """Arm the sink when a timer first turns notifications on.

        Raises ``NotificationUnsupported`` or ``PermissionDenied``; on
        success a confirmation notification is shown.
        """
        if self.permission is Permission.UNSUPPORTED:
            raise NotificationUnsupported(
                "This desktop does not support notifications."
            )
        if self.permission is Permission.DENIED:
            raise PermissionDenied(
                "Please enable notifications in the Speedrunner settings."
            )
        self._asked = True
        self.send(APP_NAME, "Notifications enabled successfully!")

    def send(self, title: str, body: str) -> None:
        """Show *title* / *body*.  Dropped (and logged) without permission."""
        state = self.permission
        if state is Permission.UNDETERMINED and self._enabled:
            # An enabled preference counts as consent once something fires.
            self._asked = True
            state = self.permission
        if state is not Permission.GRANTED:
            log.info("notification dropped (%s): %s", state.value, title)
            return
        self._tray.showMessage(title, body)
        self.delivered.emit(title, body)
