"""Transient notification bubble anchored to the bottom of a window."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import QHBoxLayout, QLabel, QWidget

from ....config import NOTIFICATION_TIMEOUT_MS

_STYLES = {
    "success": "background-color: #16A34A; color: white;",
    "error": "background-color: #DC2626; color: white;",
}


class NotificationToast(QWidget):
    """Show a short message that hides itself after a timeout.

    Only one message is visible at a time; showing a new one replaces the
    text and restarts the timer.
    """

    def __init__(self, parent: QWidget, *, timeout_ms: int = NOTIFICATION_TIMEOUT_MS) -> None:
        super().__init__(parent)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)

        self._label = QLabel(self)
        self._label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._label.setWordWrap(True)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(16, 10, 16, 10)
        layout.addWidget(self._label)

        self._kind = "success"
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(timeout_ms)
        self._timer.timeout.connect(self.hide)
        self.hide()

    def message(self) -> str:
        return self._label.text()

    def kind(self) -> str:
        return self._kind

    def timer(self) -> QTimer:
        return self._timer

    def show_toast(self, message: str, kind: str = "success") -> None:
        if kind not in _STYLES:
            raise ValueError(f"Unknown notification kind: {kind!r}")
        self._kind = kind
        self._label.setText(message)
        self.setStyleSheet(f"NotificationToast {{ {_STYLES[kind]} border-radius: 8px; }}"
                           f"QLabel {{ color: white; font-size: 14px; }}")
        self._reposition()
        self.show()
        self.raise_()
        self._timer.start()

    def _reposition(self) -> None:
        parent: Optional[QWidget] = self.parentWidget()
        self.adjustSize()
        if parent is None:
            return
        width = min(max(self.sizeHint().width(), 240), max(240, parent.width() - 40))
        self.resize(width, self.sizeHint().height())
        x = (parent.width() - self.width()) // 2
        y = parent.height() - self.height() - 24
        self.move(max(0, x), max(0, y))


__all__ = ["NotificationToast"]
