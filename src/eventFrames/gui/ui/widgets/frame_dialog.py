"""Dialog for adding or editing an event frame."""

from __future__ import annotations

from typing import Optional

from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QLineEdit,
    QVBoxLayout,
    QWidget,
)

from ....models.types import EventFrame


class FrameDialog(QDialog):
    """Collect a frame name and image URL; both fields are required."""

    def __init__(self, parent: Optional[QWidget] = None, *, frame: Optional[EventFrame] = None) -> None:
        super().__init__(parent)
        self._frame = frame
        self.setWindowTitle("Edit Frame" if frame is not None else "Add New Frame")
        self.setModal(True)
        self.resize(420, 160)

        self._name_edit = QLineEdit(self)
        self._name_edit.setPlaceholderText("e.g., Scout Jamboree 2024")
        self._url_edit = QLineEdit(self)
        self._url_edit.setPlaceholderText("https://... or a local PNG path")
        if frame is not None:
            self._name_edit.setText(frame.name)
            self._url_edit.setText(frame.image_url)

        self._error_label = QLabel(self)
        self._error_label.setStyleSheet("color: #DC2626;")
        self._error_label.hide()

        form = QFormLayout()
        form.addRow("Frame Name", self._name_edit)
        form.addRow("Image URL", self._url_edit)

        self._buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel,
            parent=self,
        )
        self._buttons.accepted.connect(self.accept)
        self._buttons.rejected.connect(self.reject)

        layout = QVBoxLayout(self)
        layout.addLayout(form)
        layout.addWidget(self._error_label)
        layout.addWidget(self._buttons)

    def name(self) -> str:
        return self._name_edit.text().strip()

    def image_url(self) -> str:
        return self._url_edit.text().strip()

    def name_edit(self) -> QLineEdit:
        return self._name_edit

    def url_edit(self) -> QLineEdit:
        return self._url_edit

    def error_text(self) -> str:
        return self._error_label.text()

    def result_frame(self) -> EventFrame:
        """Return the edited frame; new frames get an empty id."""
        frame_id = self._frame.id if self._frame is not None else ""
        return EventFrame(id=frame_id, name=self.name(), image_url=self.image_url())

    def accept(self) -> None:  # type: ignore[override]
        if not self.name() or not self.image_url():
            self._error_label.setText("Both a name and an image URL are required.")
            self._error_label.show()
            return
        super().accept()


__all__ = ["FrameDialog"]
