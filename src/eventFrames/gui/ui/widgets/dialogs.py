"""Modal prompts used by the main window."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from PySide6.QtGui import QPalette
from PySide6.QtWidgets import QApplication, QFileDialog, QMessageBox, QWidget

WINDOW_TITLE = "Event Frames"

IMAGE_FILE_FILTER = "Images (*.png *.jpg *.jpeg *.gif *.bmp *.webp *.heic);;All files (*)"


def select_photo(parent: QWidget, start: Optional[Path] = None) -> Optional[Path]:
    """Ask for the photo to place in the frame; ``None`` when cancelled."""

    chosen, _ = QFileDialog.getOpenFileName(
        parent,
        "Upload Your Photo",
        "" if start is None else str(start),
        IMAGE_FILE_FILTER,
    )
    return Path(chosen) if chosen else None


def _match_palette(box: QMessageBox, parent: Optional[QWidget]) -> None:
    # Message boxes otherwise keep the platform colours in a styled window.
    palette = (parent or QApplication).palette()
    window = palette.color(QPalette.ColorRole.Window).name()
    text = palette.color(QPalette.ColorRole.WindowText).name()
    box.setStyleSheet(
        f"QMessageBox {{ background-color: {window}; color: {text}; }}"
        f"QMessageBox QLabel {{ color: {text}; }}"
    )


def show_error(parent: Optional[QWidget], message: str) -> None:
    box = QMessageBox(
        QMessageBox.Icon.Warning,
        WINDOW_TITLE,
        message,
        QMessageBox.StandardButton.Ok,
        parent,
    )
    _match_palette(box, parent)
    box.exec()


def confirm_action(parent: QWidget, message: str, *, title: str = WINDOW_TITLE) -> bool:
    """Return ``True`` only when the user picks the destructive option."""

    box = QMessageBox(QMessageBox.Icon.Question, title, message, QMessageBox.StandardButton.NoButton, parent)
    delete_button = box.addButton("Delete", QMessageBox.ButtonRole.DestructiveRole)
    cancel_button = box.addButton("Cancel", QMessageBox.ButtonRole.RejectRole)
    box.setDefaultButton(cancel_button)
    _match_palette(box, parent)
    box.exec()
    return box.clickedButton() is delete_button


__all__ = ["IMAGE_FILE_FILTER", "confirm_action", "select_photo", "show_error"]
