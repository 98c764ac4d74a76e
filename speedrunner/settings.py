"""User preferences persisted through the key/value store.

Keys::

    speedrunner_theme          "dark" | "light"
    speedrunner_sound          "true" | "false"
    speedrunner_notifications  "true" | "false"

Usage::

    prefs = load_settings(store)
    prefs.sound_enabled = False
    save_settings(store, prefs)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

log = logging.getLogger(__name__)

TIMERS_KEY = "speedrunner_timers"
THEME_KEY = "speedrunner_theme"
SOUND_KEY = "speedrunner_sound"
NOTIFICATIONS_KEY = "speedrunner_notifications"

THEMES = ("dark", "light")

DEFAULT_TICK_INTERVAL_MS = 50


@dataclass
class Settings:
    """All user-configurable preferences."""

    theme: str = "dark"
    sound_enabled: bool = True
    notifications_enabled: bool = True
    tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS

    def toggle_theme(self) -> str:
        self.theme = "light" if self.theme == "dark" else "dark"
        return self.theme


def _parse_bool(raw: str | None, default: bool) -> bool:
    # Anything but an explicit "false" counts as on.
    if raw is None:
        return default
    return raw.strip().lower() != "false"


def load_settings(store) -> Settings:
    """Read preferences, falling back to defaults for absent or bad values."""
    settings = Settings()
    theme = store.get(THEME_KEY)
    if theme in THEMES:
        settings.theme = theme
    elif theme is not None:
        log.warning("ignoring unknown theme %r", theme)
    settings.sound_enabled = _parse_bool(store.get(SOUND_KEY), settings.sound_enabled)
    settings.notifications_enabled = _parse_bool(
        store.get(NOTIFICATIONS_KEY), settings.notifications_enabled,
    )
    return settings


def save_settings(store, settings: Settings) -> None:
    """Write preferences as strings."""
    store.set(THEME_KEY, settings.theme)
    store.set(SOUND_KEY, "true" if settings.sound_enabled else "false")
    store.set(
        NOTIFICATIONS_KEY, "true" if settings.notifications_enabled else "false",
    )
