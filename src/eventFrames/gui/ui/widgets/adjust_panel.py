"""Zoom and rotation sliders for the loaded photo."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from ....config import MAX_ZOOM, MIN_ZOOM, ROTATION_SLIDER_RANGE, ZOOM_STEP
from ..models.compositor_session import CompositorSession

# The zoom slider works in integer ticks of ``ZOOM_STEP``.
_ZOOM_TICKS_MIN = int(round(MIN_ZOOM / ZOOM_STEP))
_ZOOM_TICKS_MAX = int(round(MAX_ZOOM / ZOOM_STEP))


def zoom_to_ticks(zoom: float) -> int:
    ticks = int(round(zoom / ZOOM_STEP))
    return max(_ZOOM_TICKS_MIN, min(_ZOOM_TICKS_MAX, ticks))


def ticks_to_zoom(ticks: int) -> float:
    return round(ticks * ZOOM_STEP, 6)


class AdjustPanel(QWidget):
    """Expose the session transform as two sliders and a reset button.

    Gestures on the canvas update the sliders through
    :attr:`CompositorSession.transformChanged`; slider signals are blocked
    while syncing so the round trip does not quantize the gesture values.
    """

    def __init__(self, session: CompositorSession, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._session = session

        self._zoom_slider = QSlider(Qt.Orientation.Horizontal, self)
        self._zoom_slider.setRange(_ZOOM_TICKS_MIN, _ZOOM_TICKS_MAX)
        self._zoom_slider.setSingleStep(1)
        self._zoom_value = QLabel(self)

        self._rotation_slider = QSlider(Qt.Orientation.Horizontal, self)
        self._rotation_slider.setRange(*ROTATION_SLIDER_RANGE)
        self._rotation_value = QLabel(self)

        self._reset_button = QPushButton("Reset Adjustments", self)

        form = QFormLayout()
        form.addRow("Zoom", _row(self._zoom_slider, self._zoom_value))
        form.addRow("Rotate", _row(self._rotation_slider, self._rotation_value))

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addLayout(form)
        layout.addWidget(self._reset_button)

        self._zoom_slider.valueChanged.connect(self._on_zoom_slider)
        self._rotation_slider.valueChanged.connect(self._on_rotation_slider)
        self._reset_button.clicked.connect(session.reset_transforms)
        session.transformChanged.connect(self.sync_from_session)
        session.sourceChanged.connect(self._update_visibility)

        self.sync_from_session()
        self._update_visibility()

    # ------------------------------------------------------------------
    def zoom_slider(self) -> QSlider:
        return self._zoom_slider

    def rotation_slider(self) -> QSlider:
        return self._rotation_slider

    def reset_button(self) -> QPushButton:
        return self._reset_button

    def sync_from_session(self) -> None:
        state = self._session.transform()
        rotation = int(round(state.rotation)) % 360

        self._zoom_slider.blockSignals(True)
        self._zoom_slider.setValue(zoom_to_ticks(state.zoom))
        self._zoom_slider.blockSignals(False)
        self._rotation_slider.blockSignals(True)
        self._rotation_slider.setValue(rotation)
        self._rotation_slider.blockSignals(False)

        self._zoom_value.setText(f"{state.zoom:.1f}x")
        self._rotation_value.setText(f"{rotation}°")

    # ------------------------------------------------------------------
    def _on_zoom_slider(self, ticks: int) -> None:
        self._session.set_zoom(ticks_to_zoom(ticks))

    def _on_rotation_slider(self, degrees: int) -> None:
        self._session.set_rotation(float(degrees))

    def _update_visibility(self) -> None:
        self.setVisible(self._session.has_source())


def _row(slider: QSlider, label: QLabel) -> QWidget:
    container = QWidget()
    layout = QHBoxLayout(container)
    layout.setContentsMargins(0, 0, 0, 0)
    layout.addWidget(slider, 1)
    label.setMinimumWidth(48)
    layout.addWidget(label)
    return container


__all__ = ["AdjustPanel", "ticks_to_zoom", "zoom_to_ticks"]
