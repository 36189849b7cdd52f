"""GUI entry point for the Event Frames desktop application."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from ..appctx import AppContext
from ..errors import SettingsError
from ..settings.manager import SettingsManager
from .ui.main_window import MainWindow
from .ui.widgets.dialogs import show_error

_LOGGER = logging.getLogger(__name__)


def _load_settings() -> tuple[SettingsManager, str | None]:
    manager = SettingsManager()
    try:
        manager.load()
    except SettingsError as exc:
        _LOGGER.warning("Falling back to default settings: %s", exc)
        return SettingsManager(manager.path.with_name("settings.recovered.json")), str(exc)
    return manager, None


def main(argv: list[str] | None = None, *, admin: bool = False) -> int:
    """Launch the Qt application and return the exit code."""

    arguments = list(sys.argv if argv is None else argv)
    app = QApplication.instance() or QApplication(arguments)
    app.setApplicationName("Event Frames")

    settings, settings_error = _load_settings()
    context = AppContext(admin=admin, settings=settings)
    window = MainWindow(context)
    window.show()
    if settings_error:
        show_error(window, f"Your settings could not be read and were reset.\n\n{settings_error}")

    # Allow opening a photo directly via argv[1].
    if len(arguments) > 1:
        window.controller.load_source_file(Path(arguments[1]))
    return app.exec()


if __name__ == "__main__":  # pragma: no cover - manual launch
    raise SystemExit(main())
