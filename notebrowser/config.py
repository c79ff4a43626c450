from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILE_NAME = ".notebrowser.cfg"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    notes_dir: Path
    log_level: str

    @property
    def base_url(self) -> str:
        return self.notes_dir.as_uri().rstrip("/") + "/"


def config_file_path() -> Path:
    return Path.home() / CONFIG_FILE_NAME


def _load_notes_dir_from_config(cfg_path: Path) -> Path | None:
    """Notes directory named on the first line of the config file, if any."""
    try:
        if not cfg_path.exists():
            return None
        lines = cfg_path.read_text(encoding="utf-8").strip().splitlines()
        if not lines or not lines[0].strip():
            return None
        return Path(lines[0].strip()).expanduser()
    except (OSError, UnicodeDecodeError):
        # Unreadable config falls back to the default directory.
        return None


def load_settings(
    path: str | None = None,
    log_level: str | None = None,
    *,
    cfg_path: Path | None = None,
) -> Settings:
    if path:
        notes_dir = Path(path).expanduser()
    elif os.environ.get("NOTEBROWSER_DIR"):
        notes_dir = Path(os.environ["NOTEBROWSER_DIR"]).expanduser()
    else:
        notes_dir = _load_notes_dir_from_config(cfg_path or config_file_path()) or Path.home() / "Notes"
    level = log_level or os.environ.get("NOTEBROWSER_LOG_LEVEL") or DEFAULT_LOG_LEVEL
    return Settings(notes_dir=notes_dir.resolve(), log_level=level.upper())
