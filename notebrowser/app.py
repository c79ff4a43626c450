from __future__ import annotations

import argparse
import logging
import sys

from PySide6.QtWidgets import QApplication

from .config import config_file_path, load_settings
from .store import NoteDirectoryStore
from .window import APP_NAME, NoteWindow

logger = logging.getLogger("notebrowser")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main() -> int:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Browse and edit linked notes like web pages.",
    )
    parser.add_argument(
        "notes_dir",
        nargs="?",
        default=None,
        help=f"Notes directory (default: $NOTEBROWSER_DIR, ~/{config_file_path().name} path, or ~/Notes).",
    )
    parser.add_argument("--open", dest="open_id", default=None, help="Note id to show at start-up.")
    parser.add_argument("--log-level", default=None, help="Logging level (default: WARNING).")
    args = parser.parse_args()

    settings = load_settings(args.notes_dir, args.log_level)
    configure_logging(settings.log_level)
    if settings.notes_dir.exists() and not settings.notes_dir.is_dir():
        print(f"Path is not a directory: {settings.notes_dir}", file=sys.stderr)
        return 2
    try:
        settings.notes_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        print(f"Cannot create notes directory {settings.notes_dir}: {exc}", file=sys.stderr)
        return 2
    logger.info("startup", extra={"notes_dir": str(settings.notes_dir), "open_id": args.open_id})

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setDesktopFileName(APP_NAME)

    window = NoteWindow(settings, NoteDirectoryStore(settings.notes_dir), open_id=args.open_id)
    window.show()
    return app.exec()
