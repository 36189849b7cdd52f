"""Pure geometry helpers shared by the preview, the export path and gestures."""

from __future__ import annotations

import math

from PySide6.QtCore import QPointF

from ..config import MAX_ZOOM, MIN_ZOOM


def compute_base_scale(
    canvas_size: tuple[float, float],
    image_size: tuple[float, float],
) -> float:
    """Return the cover-fit scale of *image_size* inside *canvas_size*.

    The image always fills the whole canvas and the overflow is cropped: a
    relatively wider image is fitted by height, anything else by width.
    """

    canvas_w, canvas_h = canvas_size
    img_w, img_h = image_size
    if canvas_w <= 0 or canvas_h <= 0 or img_w <= 0 or img_h <= 0:
        return 1.0
    canvas_aspect = float(canvas_w) / float(canvas_h)
    img_aspect = float(img_w) / float(img_h)
    if img_aspect > canvas_aspect:
        return float(canvas_h) / float(img_h)
    return float(canvas_w) / float(img_w)


def clamp_zoom(value: float, minimum: float = MIN_ZOOM, maximum: float = MAX_ZOOM) -> float:
    """Clamp *value* into the supported zoom range."""
    if not math.isfinite(value):
        return minimum if value < 0 else maximum
    return max(minimum, min(maximum, float(value)))


def pointer_distance(p1: QPointF, p2: QPointF) -> float:
    return math.hypot(p2.x() - p1.x(), p2.y() - p1.y())


def pointer_angle(p1: QPointF, p2: QPointF) -> float:
    """Return the angle of the segment ``p1 -> p2`` in degrees."""
    return math.degrees(math.atan2(p2.y() - p1.y(), p2.x() - p1.x()))


def offset_scale_ratio(
    target_size: tuple[int, int],
    preview_size: tuple[int, int],
) -> float:
    """Return the factor that maps preview offsets onto a *target_size* canvas."""
    preview_w = preview_size[0]
    if preview_w <= 0:
        return 1.0
    return float(target_size[0]) / float(preview_w)
