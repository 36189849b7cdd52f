from __future__ import annotations

import json
from pathlib import Path

import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for settings tests", exc_type=ImportError)
pytest.importorskip("PySide6.QtTest", reason="Qt test helpers not available", exc_type=ImportError)

from PySide6.QtTest import QSignalSpy

from eventFrames.errors import SettingsLoadError, SettingsValidationError
from eventFrames.settings.manager import SettingsManager


def test_settings_manager_roundtrip(tmp_path: Path, qapp) -> None:
    settings_path = tmp_path / "settings.json"
    manager = SettingsManager(path=settings_path)
    manager.load()
    assert settings_path.exists()
    assert manager.get("export.prefix") == "RNMSG"
    assert manager.export_size() == 4000

    spy = QSignalSpy(manager.settingsChanged)
    export_dir = tmp_path / "Exports"
    manager.set("export.directory", export_dir)
    qapp.processEvents()

    assert spy.count() == 1
    assert manager.export_directory() == export_dir
    stored = json.loads(settings_path.read_text(encoding="utf-8"))
    assert stored["export"]["directory"] == str(export_dir)


def test_nested_updates_preserve_defaults(tmp_path: Path) -> None:
    manager = SettingsManager(path=tmp_path / "settings.json")
    manager.load()
    manager.set("ui.last_frame_id", "2")
    assert manager.get("ui.last_frame_id") == "2"
    assert manager.export_size() == 4000
    assert manager.get("export.prefix") == "RNMSG"


def test_invalid_values_are_rejected(tmp_path: Path) -> None:
    manager = SettingsManager(path=tmp_path / "settings.json")
    manager.load()
    with pytest.raises(SettingsValidationError):
        manager.set("export.prefix", "bad prefix!")
    with pytest.raises(SettingsValidationError):
        manager.set("export.size", 10)
    assert manager.export_prefix() == "RNMSG"


def test_frames_path_defaults_next_to_settings(tmp_path: Path) -> None:
    manager = SettingsManager(path=tmp_path / "conf" / "settings.json")
    manager.load()
    assert manager.frames_path() == tmp_path / "conf" / "frames.json"
    manager.set("frames_path", tmp_path / "shared.json")
    assert manager.frames_path() == tmp_path / "shared.json"


def test_load_rejects_corrupt_file(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.json"
    settings_path.write_text("[1, 2", encoding="utf-8")
    with pytest.raises(SettingsLoadError):
        SettingsManager(path=settings_path).load()

    settings_path.write_text("[]", encoding="utf-8")
    with pytest.raises(SettingsLoadError):
        SettingsManager(path=settings_path).load()


def test_load_rejects_schema_violations(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(json.dumps({"export": {"size": "huge"}}), encoding="utf-8")
    with pytest.raises(SettingsValidationError):
        SettingsManager(path=settings_path).load()
