"""Interactive preview surface for the frame compositor."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QEvent, QPointF, QRectF, QSize, Qt
from PySide6.QtGui import (
    QColor,
    QEventPoint,
    QImage,
    QMouseEvent,
    QPainter,
    QPaintEvent,
    QTouchEvent,
    QWheelEvent,
)
from PySide6.QtWidgets import QLabel, QSizePolicy, QWidget

from ....config import PREVIEW_SIZE, ZOOM_STEP
from ....core.compositor import render_preview
from ....core.gestures import GestureTracker
from ..models.compositor_session import CompositorSession


class CompositorCanvas(QWidget):
    """Show the live composition and translate input into photo adjustments.

    The composition is always rendered at ``PREVIEW_SIZE`` and scaled to fit
    the widget.  Pointer positions are mapped back into preview pixels before
    they reach the :class:`GestureTracker`, so a drag moves the photo by the
    same amount on screen regardless of the window size.
    """

    def __init__(
        self,
        session: CompositorSession,
        parent: Optional[QWidget] = None,
        *,
        preview_size: int = PREVIEW_SIZE,
    ) -> None:
        super().__init__(parent)
        self._session = session
        self._preview_size = preview_size
        self._preview: Optional[QImage] = None
        self._tracker = GestureTracker(
            transform_provider=session.transform,
            has_image=session.has_source,
            on_changed=session.notify_transform_changed,
        )

        self.setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents, True)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setMinimumSize(240, 240)

        self._processing_overlay = QLabel("Generating your image...", self)
        self._processing_overlay.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._processing_overlay.setAttribute(
            Qt.WidgetAttribute.WA_TransparentForMouseEvents,
            True,
        )
        self._processing_overlay.setStyleSheet(
            "background-color: rgba(0, 0, 0, 128); color: white; font-size: 18px;"
        )
        self._processing_overlay.hide()

        session.transformChanged.connect(self._invalidate)
        session.sourceChanged.connect(self._on_source_changed)
        session.frameChanged.connect(self._invalidate)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def tracker(self) -> GestureTracker:
        return self._tracker

    def preview_image(self) -> QImage:
        """Return the current preview, rendering it if necessary."""
        if self._preview is None:
            session = self._session
            self._preview = render_preview(
                session.source_image(),
                session.frame_image(),
                session.transform(),
                self._preview_size,
            )
        return self._preview

    def set_processing(self, processing: bool) -> None:
        """Toggle the translucent overlay shown while an export runs."""

        if processing:
            self._processing_overlay.setVisible(True)
            self._processing_overlay.raise_()
            self._processing_overlay.resize(self.size())
        else:
            self._processing_overlay.hide()

    def is_processing(self) -> bool:
        return self._processing_overlay.isVisible()

    def preview_rect(self) -> QRectF:
        """Return the widget rectangle occupied by the scaled preview."""
        side = float(min(self.width(), self.height()))
        return QRectF(
            (self.width() - side) / 2.0,
            (self.height() - side) / 2.0,
            side,
            side,
        )

    def map_to_preview(self, pos: QPointF) -> QPointF:
        """Convert a widget position into preview-canvas pixels."""
        rect = self.preview_rect()
        if rect.width() <= 0.0:
            return QPointF(pos)
        factor = self._preview_size / rect.width()
        return QPointF((pos.x() - rect.x()) * factor, (pos.y() - rect.y()) * factor)

    def sizeHint(self) -> QSize:  # type: ignore[override]
        return QSize(self._preview_size, self._preview_size)

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------
    def paintEvent(self, event: QPaintEvent) -> None:  # type: ignore[override]
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, True)
            rect = self.preview_rect()
            painter.fillRect(rect, QColor("#F3F4F6"))
            painter.drawImage(rect, self.preview_image())
        finally:
            painter.end()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        if self._processing_overlay.isVisible():
            self._processing_overlay.resize(self.size())

    # ------------------------------------------------------------------
    # Mouse input
    # ------------------------------------------------------------------
    def mousePressEvent(self, event: QMouseEvent) -> None:  # type: ignore[override]
        if event.button() == Qt.MouseButton.LeftButton and self._tracker.mouse_press(
            self.map_to_preview(event.position())
        ):
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:  # type: ignore[override]
        if self._tracker.mouse_move(self.map_to_preview(event.position())):
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # type: ignore[override]
        if event.button() == Qt.MouseButton.LeftButton:
            self._tracker.mouse_release()
            self.unsetCursor()
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def leaveEvent(self, event: QEvent) -> None:  # type: ignore[override]
        # A drag that leaves the canvas ends the mouse pan; touch points stay.
        self._tracker.mouse_release()
        self.unsetCursor()
        super().leaveEvent(event)

    def wheelEvent(self, event: QWheelEvent) -> None:  # type: ignore[override]
        if not self._session.has_source():
            super().wheelEvent(event)
            return
        angle = event.angleDelta().y()
        if angle == 0:
            event.ignore()
            return
        step = ZOOM_STEP if angle > 0 else -ZOOM_STEP
        self._session.set_zoom(self._session.transform().zoom + step)
        event.accept()

    # ------------------------------------------------------------------
    # Touch input
    # ------------------------------------------------------------------
    def event(self, event: QEvent) -> bool:  # type: ignore[override]
        kind = event.type()
        if kind in (
            QEvent.Type.TouchBegin,
            QEvent.Type.TouchUpdate,
            QEvent.Type.TouchEnd,
        ):
            self._handle_touch(event)  # type: ignore[arg-type]
            event.accept()
            return True
        if kind == QEvent.Type.TouchCancel:
            self._tracker.cancel()
            event.accept()
            return True
        return super().event(event)

    def _handle_touch(self, event: QTouchEvent) -> None:
        for point in event.points():
            pos = self.map_to_preview(point.position())
            state = point.state()
            if state == QEventPoint.State.Pressed:
                self._tracker.pointer_down(point.id(), pos)
            elif state == QEventPoint.State.Updated:
                self._tracker.pointer_move(point.id(), pos)
            elif state == QEventPoint.State.Released:
                self._tracker.pointer_up(point.id())

    # ------------------------------------------------------------------
    # Session updates
    # ------------------------------------------------------------------
    def _on_source_changed(self) -> None:
        # A new photo invalidates any gesture that was in progress.
        self._tracker.cancel()
        self._invalidate()

    def _invalidate(self) -> None:
        self._preview = None
        self.update()


__all__ = ["CompositorCanvas"]
