"""Allow running Speedrunner as a module: python -m speedrunner.

    python -m speedrunner                 run the tray host
    python -m speedrunner --export URL    print a share link for the stored timers
    python -m speedrunner --share TOKEN   print a shared snapshot (link or token)
"""

from __future__ import annotations

import argparse
import logging
import sys

from .database.db import SqlKeyValueStore, init_db
from .settings import TIMERS_KEY
from .stats.aggregator import share_summary
from .stats.share import load_shared, share_link
from .timer.store import TimerStore


def _print_summary(records) -> None:
    summary = share_summary(records, limit=len(records))
    for name, elapsed in summary.items:
        print(f"{elapsed}  {name}")
    print(f"{summary.total}  total")


def _run_tray() -> int:
    from PyQt6.QtGui import QColor, QIcon, QPixmap, QPainter
    from PyQt6.QtWidgets import QApplication, QMenu, QSystemTrayIcon

    from .app import SpeedrunnerApp
    from .notifications import TrayNotificationSink

    app = QApplication(sys.argv)
    app.setApplicationName("Speedrunner")
    app.setOrganizationName("Speedrunner")
    app.setQuitOnLastWindowClosed(False)

    # Tray icon: generated placeholder, a green circle
    pixmap = QPixmap(64, 64)
    pixmap.fill(QColor(0, 0, 0, 0))
    p = QPainter(pixmap)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    p.setBrush(QColor("#4ade80"))
    p.setPen(QColor("#4ade80").darker(120))
    p.drawEllipse(4, 4, 56, 56)
    p.end()

    tray = QSystemTrayIcon(QIcon(pixmap))
    menu = QMenu()
    menu.addAction("Quit", app.quit)
    tray.setContextMenu(menu)

    store = SqlKeyValueStore()
    host = SpeedrunnerApp(store=store, sink=TrayNotificationSink(tray=tray))
    host.sink.set_enabled(host.settings.notifications_enabled)
    host.engine.title_changed.connect(tray.setToolTip)
    host.engine.alert.connect(lambda title, message: tray.showMessage(title, message))
    tray.setToolTip(host.engine.title)
    tray.show()
    host.start()

    return app.exec()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="speedrunner")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--share", metavar="TOKEN", help="show a shared snapshot")
    group.add_argument("--export", metavar="URL", help="print a share link")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.share is not None:
        records = load_shared(args.share)
        if not records:
            print("Invalid share data.", file=sys.stderr)
            return 1
        _print_summary(records)
        return 0

    init_db()
    if args.export is not None:
        timers = TimerStore.load(SqlKeyValueStore().get(TIMERS_KEY))
        print(share_link(args.export, timers))
        return 0

    return _run_tray()


if __name__ == "__main__":
    sys.exit(main())
