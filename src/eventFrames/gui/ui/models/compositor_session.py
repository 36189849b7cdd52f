"""State container for one frame-compositing session."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QObject, Signal
from PySide6.QtGui import QImage

from ....config import MAX_ZOOM, MIN_ZOOM
from ....core.compositor import is_usable
from ....core.geometry import clamp_zoom
from ....models.types import EventFrame, TransformState


class CompositorSession(QObject):
    """Hold the decoded photo, the decoded frame and the photo transform."""

    transformChanged = Signal()
    """Emitted after zoom, rotation or offset changed."""

    sourceChanged = Signal()
    """Emitted when a new photo has been installed (or cleared)."""

    frameChanged = Signal()
    """Emitted when a new frame has been installed (or cleared)."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._transform = TransformState.identity()
        self._source: Optional[QImage] = None
        self._frame_image: Optional[QImage] = None
        self._frame: Optional[EventFrame] = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def transform(self) -> TransformState:
        return self._transform

    def source_image(self) -> Optional[QImage]:
        return self._source

    def frame_image(self) -> Optional[QImage]:
        return self._frame_image

    def frame(self) -> Optional[EventFrame]:
        return self._frame

    def has_source(self) -> bool:
        return is_usable(self._source)

    def has_frame(self) -> bool:
        return is_usable(self._frame_image)

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------
    def set_source_image(self, image: Optional[QImage]) -> None:
        """Install a freshly decoded photo and start from the identity transform."""
        self._source = image
        self._transform.reset()
        self.sourceChanged.emit()
        self.transformChanged.emit()

    def set_frame(self, frame: Optional[EventFrame], image: Optional[QImage]) -> None:
        """Install *frame*; photo adjustments are left untouched."""
        self._frame = frame
        self._frame_image = image
        self.frameChanged.emit()

    # ------------------------------------------------------------------
    # Transform
    # ------------------------------------------------------------------
    def set_zoom(self, zoom: float) -> None:
        clamped = clamp_zoom(zoom, MIN_ZOOM, MAX_ZOOM)
        if abs(clamped - self._transform.zoom) < 1e-9:
            return
        self._transform.zoom = clamped
        self.transformChanged.emit()

    def set_rotation(self, degrees: float) -> None:
        if float(degrees) == self._transform.rotation:
            return
        self._transform.rotation = float(degrees)
        self.transformChanged.emit()

    def reset_transforms(self) -> None:
        self._transform.reset()
        self.transformChanged.emit()

    def notify_transform_changed(self) -> None:
        """Announce an in-place mutation performed by the gesture tracker."""
        self.transformChanged.emit()
