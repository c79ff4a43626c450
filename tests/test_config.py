from pathlib import Path

import pytest

from notebrowser.config import load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.delenv("NOTEBROWSER_DIR", raising=False)
    monkeypatch.delenv("NOTEBROWSER_LOG_LEVEL", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


def test_cli_path_wins(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("NOTEBROWSER_DIR", str(tmp_path / "env"))
    settings = load_settings(str(tmp_path / "cli"), cfg_path=tmp_path / "missing.cfg")
    assert settings.notes_dir == (tmp_path / "cli").resolve()


def test_env_beats_config_file(tmp_path, monkeypatch) -> None:
    cfg = tmp_path / "nb.cfg"
    cfg.write_text(str(tmp_path / "from-cfg") + "\n", encoding="utf-8")
    monkeypatch.setenv("NOTEBROWSER_DIR", str(tmp_path / "env"))
    assert load_settings(cfg_path=cfg).notes_dir == (tmp_path / "env").resolve()


def test_config_file_first_line(tmp_path) -> None:
    cfg = tmp_path / "nb.cfg"
    cfg.write_text(f"  {tmp_path / 'from-cfg'}  \nignored\n", encoding="utf-8")
    assert load_settings(cfg_path=cfg).notes_dir == (tmp_path / "from-cfg").resolve()


def test_blank_or_missing_config_falls_back_to_home_notes(tmp_path) -> None:
    cfg = tmp_path / "nb.cfg"
    cfg.write_text("\n", encoding="utf-8")
    expected = (Path.home() / "Notes").resolve()
    assert load_settings(cfg_path=cfg).notes_dir == expected
    assert load_settings(cfg_path=tmp_path / "missing.cfg").notes_dir == expected


def test_log_level_precedence(tmp_path, monkeypatch) -> None:
    cfg = tmp_path / "missing.cfg"
    assert load_settings(cfg_path=cfg).log_level == "WARNING"
    monkeypatch.setenv("NOTEBROWSER_LOG_LEVEL", "info")
    assert load_settings(cfg_path=cfg).log_level == "INFO"
    assert load_settings(log_level="debug", cfg_path=cfg).log_level == "DEBUG"


def test_base_url_is_directory_file_url(tmp_path) -> None:
    settings = load_settings(str(tmp_path / "notes"), cfg_path=tmp_path / "missing.cfg")
    assert settings.base_url.startswith("file:///")
    assert settings.base_url.endswith("/notes/")
