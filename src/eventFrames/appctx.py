"""Application-wide context shared by the GUI and the CLI."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .errors.handler import ErrorHandler, ErrorSeverity

if TYPE_CHECKING:  # pragma: no cover - only for type checking
    from .library.frames import FrameLibrary
    from .settings.manager import SettingsManager


def _create_settings_manager() -> "SettingsManager":
    from .settings.manager import SettingsManager

    manager = SettingsManager()
    manager.load()
    return manager


def _create_error_handler() -> ErrorHandler:
    return ErrorHandler(logging.getLogger("eventFrames"))


@dataclass
class AppContext:
    """Container object shared across components.

    ``admin`` only controls whether the frame catalog accepts edits; there is
    no login behind it.
    """

    admin: bool = False
    settings: "SettingsManager" = field(default_factory=_create_settings_manager)
    errors: ErrorHandler = field(default_factory=_create_error_handler)
    frames: Optional["FrameLibrary"] = None

    def __post_init__(self) -> None:
        if self.frames is None:
            from .errors import CatalogLoadError
            from .library.frames import FrameLibrary

            self.frames = FrameLibrary(self.settings.frames_path(), admin=self.admin)
            try:
                self.frames.load()
            except CatalogLoadError as exc:
                # The built-in frames stay available when the catalog is broken.
                self.errors.handle(exc, ErrorSeverity.WARNING)


__all__ = ["AppContext"]
