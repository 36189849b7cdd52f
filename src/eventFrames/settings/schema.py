"""Schema helpers for the application settings file."""

from __future__ import annotations

import os
from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import EXPORT_FILENAME_PREFIX, HIGH_RES_SIZE

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "eventFrames/settings.schema.json",
    "type": "object",
    "required": ["schema", "export", "ui"],
    "properties": {
        "schema": {"const": "eventFrames/settings@1"},
        "frames_path": {"type": ["string", "null"]},
        "export": {
            "type": "object",
            "properties": {
                "directory": {"type": ["string", "null"]},
                "prefix": {
                    "type": "string",
                    "minLength": 1,
                    "pattern": "^[A-Za-z0-9_-]+$",
                },
                "size": {"type": "integer", "minimum": 100, "maximum": 10000},
            },
            "additionalProperties": True,
        },
        "ui": {
            "type": "object",
            "properties": {
                "last_frame_id": {"type": ["string", "null"]},
            },
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "eventFrames/settings@1",
    "frames_path": None,
    "export": {
        "directory": None,
        "prefix": EXPORT_FILENAME_PREFIX,
        "size": HIGH_RES_SIZE,
    },
    "ui": {
        "last_frame_id": None,
    },
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)

# Keys whose values are filesystem paths; stored as strings or null.
_PATH_KEYS = {("frames_path",), ("export", "directory")}


def _as_path_string(value: Any) -> str | None:
    if value is None or value == "":
        return None
    try:
        return os.fspath(value)
    except TypeError:
        return None


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Overlay *data* on :data:`DEFAULT_SETTINGS` one section deep and validate.

    Raises :class:`jsonschema.ValidationError` when the result is invalid.
    """

    merged = deepcopy(DEFAULT_SETTINGS)
    for key, value in (data or {}).items():
        section = merged.get(key)
        if isinstance(section, dict) and isinstance(value, dict):
            for sub_key, sub_value in value.items():
                if (key, sub_key) in _PATH_KEYS:
                    sub_value = _as_path_string(sub_value)
                section[sub_key] = sub_value
        elif (key,) in _PATH_KEYS:
            merged[key] = _as_path_string(value)
        else:
            merged[key] = value
    _validator.validate(merged)
    return merged


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults"]
