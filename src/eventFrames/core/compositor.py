"""Raster compositing of a user photo underneath an event frame.

The same draw routine serves the interactive preview and the high-resolution
export.  Only the canvas size and the offset multiplier differ between the
two, which keeps the exported PNG identical to what the user composed on the
preview canvas, up to resolution.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np
from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QFont, QImage, QPainter

from ..config import (
    HIGH_RES_SIZE,
    PLACEHOLDER_COLOR,
    PLACEHOLDER_FONT_PX,
    PLACEHOLDER_TEXT,
    PREVIEW_SIZE,
)
from ..errors import ExportError, ExportPreconditionError
from ..models.types import TransformState
from ..utils.image_loader import qimage_to_rgba_array
from .geometry import compute_base_scale

_LOGGER = logging.getLogger(__name__)

_CANVAS_FORMAT = QImage.Format.Format_ARGB32_Premultiplied


def is_usable(image: Optional[QImage]) -> bool:
    """Return ``True`` when *image* has finished decoding and holds pixels."""
    return image is not None and not image.isNull() and image.width() > 0 and image.height() > 0


def create_canvas(width: int, height: int | None = None) -> QImage:
    """Allocate a transparent drawing surface."""
    canvas = QImage(int(width), int(height if height is not None else width), _CANVAS_FORMAT)
    if not canvas.isNull():
        canvas.fill(Qt.GlobalColor.transparent)
    return canvas


def render(
    canvas: QImage,
    source: Optional[QImage],
    frame: Optional[QImage],
    state: TransformState,
    *,
    offset_ratio: float = 1.0,
    placeholder: Optional[str] = PLACEHOLDER_TEXT,
    placeholder_color: str = PLACEHOLDER_COLOR,
) -> QImage:
    """Draw the composition onto *canvas* and return it.

    Order of operations on the photo: translate to the canvas centre plus the
    (scaled) offset, rotate, scale by ``base_scale * zoom``, then draw the
    photo centred on the local origin.  The frame is drawn last, stretched to
    the canvas and untouched by the user transform.
    """

    width = canvas.width()
    height = canvas.height()
    canvas.fill(Qt.GlobalColor.transparent)

    painter = QPainter(canvas)
    try:
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, True)

        if is_usable(source):
            base_scale = compute_base_scale((width, height), (source.width(), source.height()))
            effective_scale = base_scale * state.zoom
            offset = state.scaled_offset(offset_ratio)

            painter.save()
            painter.translate(width / 2.0 + offset.x(), height / 2.0 + offset.y())
            painter.rotate(state.rotation)
            painter.scale(effective_scale, effective_scale)
            painter.drawImage(QPointF(-source.width() / 2.0, -source.height() / 2.0), source)
            painter.restore()
        elif placeholder:
            font = QFont()
            font.setPixelSize(PLACEHOLDER_FONT_PX)
            painter.setFont(font)
            painter.setPen(QColor(placeholder_color))
            painter.drawText(
                QRectF(0.0, 0.0, float(width), float(height)),
                Qt.AlignmentFlag.AlignCenter,
                placeholder,
            )

        if is_usable(frame):
            painter.drawImage(QRectF(0.0, 0.0, float(width), float(height)), frame)
    finally:
        painter.end()
    return canvas


def render_preview(
    source: Optional[QImage],
    frame: Optional[QImage],
    state: TransformState,
    size: int = PREVIEW_SIZE,
    *,
    placeholder_color: str = PLACEHOLDER_COLOR,
) -> QImage:
    """Return a freshly rendered ``size``×``size`` preview."""
    canvas = create_canvas(size)
    return render(canvas, source, frame, state, placeholder_color=placeholder_color)


def export_high_res(
    source: Optional[QImage],
    frame: Optional[QImage],
    state: TransformState,
    target_size: int = HIGH_RES_SIZE,
    preview_size: int = PREVIEW_SIZE,
) -> QImage:
    """Replay the preview composition on a ``target_size`` canvas.

    Raises
    ------
    ExportPreconditionError
        If the photo or the frame has not been decoded yet.
    ExportError
        If the drawing surface cannot be allocated.
    """

    if not is_usable(source):
        raise ExportPreconditionError("No photo has been loaded")
    if not is_usable(frame):
        raise ExportPreconditionError("No frame has been selected")
    if target_size <= 0 or preview_size <= 0:
        raise ExportError(f"Invalid export size {target_size} (preview {preview_size})")

    canvas = create_canvas(target_size)
    if canvas.isNull():
        raise ExportError(f"Could not allocate a {target_size}x{target_size} canvas")

    ratio = float(target_size) / float(preview_size)
    _LOGGER.debug(
        "Exporting %dpx composition (zoom=%.3f rotation=%.2f offset_ratio=%.2f)",
        target_size,
        state.zoom,
        state.rotation,
        ratio,
    )
    return render(canvas, source, frame, state, offset_ratio=ratio, placeholder=None)


def frame_opening_ratio(frame: QImage, alpha_threshold: int = 128) -> float:
    """Return the fraction of *frame* pixels that let the photo show through."""

    if not is_usable(frame):
        return 0.0
    if not frame.hasAlphaChannel():
        return 0.0
    pixels = qimage_to_rgba_array(frame)
    if pixels is None or pixels.size == 0:
        return 0.0
    return float(np.count_nonzero(pixels[..., 3] < alpha_threshold)) / float(
        pixels.shape[0] * pixels.shape[1]
    )
