"""Settings file management with validation and change notifications."""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any

from jsonschema import ValidationError
from PySide6.QtCore import QObject, QStandardPaths, Signal

from ..config import FRAMES_FILE_NAME
from ..errors import SettingsLoadError, SettingsValidationError
from ..utils.jsonio import read_json, write_json
from .schema import DEFAULT_SETTINGS, merge_with_defaults


def default_config_dir() -> Path:
    """Return the per-user directory holding settings.json and frames.json."""

    location = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.GenericConfigLocation)
    base = Path(location) if location else Path.home() / ".config"
    return base / "eventFrames"


def default_settings_path() -> Path:
    """Return the default settings.json location for the current platform."""

    return default_config_dir() / "settings.json"


def default_export_directory() -> Path:
    """Return the user's pictures folder, falling back to the home directory."""

    location = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.PicturesLocation)
    if location:
        return Path(location)
    return Path.home()


class SettingsManager(QObject):
    """Load, validate and persist user settings for the application."""

    settingsChanged = Signal(str, object)

    def __init__(self, path: Path | None = None) -> None:
        super().__init__()
        self._path = path
        self._data: dict[str, Any] = deepcopy(DEFAULT_SETTINGS)

    @property
    def path(self) -> Path:
        return self._path or default_settings_path()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Read settings.json, merge in defaults and write the result back.

        A missing file yields the defaults. Unreadable JSON raises
        :class:`SettingsLoadError`; schema violations raise
        :class:`SettingsValidationError`.
        """

        path = self.path
        self._path = path
        payload: Any = None
        if path.exists():
            try:
                payload = read_json(path)
            except (OSError, ValueError) as exc:
                raise SettingsLoadError(f"Could not read {path}: {exc}") from exc
            if not isinstance(payload, dict):
                raise SettingsLoadError(f"{path} does not contain a JSON object")
        self._data = self._validated(payload)
        self._write()

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return the value stored under dotted *key* such as ``"export.size"``."""

        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        """Store *value* under dotted *key*, persist, and emit ``settingsChanged``."""

        if isinstance(value, Path):
            value = str(value)
        *sections, leaf = key.split(".")
        candidate = deepcopy(self._data)
        node = candidate
        for part in sections:
            child = node.get(part)
            if not isinstance(child, dict):
                child = node[part] = {}
            node = child
        node[leaf] = value
        self._data = self._validated(candidate)
        self._write()
        self.settingsChanged.emit(key, value)

    @staticmethod
    def _validated(payload: dict[str, Any] | None) -> dict[str, Any]:
        try:
            return merge_with_defaults(payload)
        except ValidationError as exc:
            raise SettingsValidationError(exc.message) from exc

    # ------------------------------------------------------------------
    # Typed accessors
    # ------------------------------------------------------------------
    def export_directory(self) -> Path:
        stored = self.get("export.directory")
        if isinstance(stored, str) and stored:
            return Path(stored).expanduser()
        return default_export_directory()

    def export_prefix(self) -> str:
        return str(self.get("export.prefix", DEFAULT_SETTINGS["export"]["prefix"]))

    def export_size(self) -> int:
        return int(self.get("export.size", DEFAULT_SETTINGS["export"]["size"]))

    def frames_path(self) -> Path:
        stored = self.get("frames_path")
        if isinstance(stored, str) and stored:
            return Path(stored).expanduser()
        return self.path.parent / FRAMES_FILE_NAME

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _write(self) -> None:
        self._path = self.path
        write_json(self._path, self._data)


__all__ = [
    "SettingsManager",
    "default_config_dir",
    "default_export_directory",
    "default_settings_path",
]
