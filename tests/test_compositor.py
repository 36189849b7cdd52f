"""Tests for the shared preview/export draw routine."""

from __future__ import annotations

import numpy as np
import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for compositor tests", exc_type=ImportError)

from PySide6.QtCore import QPointF, QRect, Qt
from PySide6.QtGui import QColor, QImage, QPainter

from eventFrames.core.compositor import (
    create_canvas,
    export_high_res,
    frame_opening_ratio,
    render,
    render_preview,
)
from eventFrames.errors import ExportError, ExportPreconditionError
from eventFrames.models.types import TransformState
from eventFrames.utils.image_loader import qimage_to_rgba_array

RED = QColor(220, 30, 30)
BLUE = QColor(30, 30, 220)
FRAME_GREEN = QColor(20, 160, 60)


def _split_photo(width: int = 200, height: int = 200) -> QImage:
    """Left half red, right half blue."""
    image = QImage(width, height, QImage.Format.Format_ARGB32)
    image.fill(BLUE)
    painter = QPainter(image)
    painter.fillRect(QRect(0, 0, width // 2, height), RED)
    painter.end()
    return image


def _frame_with_hole(size: int = 100, border: int = 10) -> QImage:
    frame = QImage(size, size, QImage.Format.Format_ARGB32)
    frame.fill(FRAME_GREEN)
    painter = QPainter(frame)
    painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_Source)
    painter.fillRect(QRect(border, border, size - 2 * border, size - 2 * border), Qt.GlobalColor.transparent)
    painter.end()
    return frame


def _rgb(image: QImage, x: int, y: int) -> tuple[int, int, int]:
    colour = image.pixelColor(x, y)
    return colour.red(), colour.green(), colour.blue()


def test_render_is_deterministic(qapp) -> None:
    photo = _split_photo()
    frame = _frame_with_hole()
    state = TransformState(zoom=1.3, rotation=17.0, offset=QPointF(6.0, -4.0))

    first = render_preview(photo, frame, state, 100)
    second = render_preview(photo, frame, state, 100)

    assert first == second


def test_frame_is_drawn_over_the_photo(qapp) -> None:
    preview = render_preview(_split_photo(), _frame_with_hole(), TransformState(), 100)

    # Opaque frame border wins, the transparent opening shows the photo.
    assert _rgb(preview, 2, 50) == (FRAME_GREEN.red(), FRAME_GREEN.green(), FRAME_GREEN.blue())
    assert _rgb(preview, 30, 50) == (RED.red(), RED.green(), RED.blue())
    assert _rgb(preview, 70, 50) == (BLUE.red(), BLUE.green(), BLUE.blue())


def test_frame_stretches_to_canvas(qapp) -> None:
    small_frame = _frame_with_hole(size=20, border=2)
    preview = render_preview(None, small_frame, TransformState(), 100)
    # A 2px border on a 20px frame becomes 10px on a 100px canvas.
    assert preview.pixelColor(5, 50).alpha() == 255
    assert preview.pixelColor(50, 50).alpha() == 0


def test_render_without_photo_or_frame_is_transparent(qapp) -> None:
    canvas = create_canvas(64)
    render(canvas, None, None, TransformState(), placeholder=None)
    pixels = qimage_to_rgba_array(canvas)
    assert pixels is not None
    assert int(pixels[..., 3].max()) == 0


def test_placeholder_leaves_frame_opening_otherwise_empty(qapp) -> None:
    preview = render_preview(None, _frame_with_hole(), TransformState(), 100)
    # Corners of the opening are far from the centred placeholder text.
    assert preview.pixelColor(12, 12).alpha() == 0
    assert preview.pixelColor(87, 87).alpha() == 0


def test_offset_moves_photo_in_canvas_pixels(qapp) -> None:
    photo = _split_photo(100, 100)
    state = TransformState(offset=QPointF(10.0, 0.0))

    preview = render_preview(photo, None, state, 100)
    # The red/blue edge moved from x=50 to x=60.
    assert _rgb(preview, 57, 50) == (RED.red(), RED.green(), RED.blue())
    assert _rgb(preview, 63, 50) == (BLUE.red(), BLUE.green(), BLUE.blue())


def test_export_scales_offset_with_resolution(qapp) -> None:
    photo = _split_photo(100, 100)
    frame = _frame_with_hole()
    state = TransformState(offset=QPointF(10.0, 0.0))

    exported = export_high_res(photo, frame, state, target_size=400, preview_size=100)

    assert exported.width() == 400 and exported.height() == 400
    # Offset 10 on the 100px preview is 40 on the 400px export: edge at x=240.
    assert _rgb(exported, 228, 200) == (RED.red(), RED.green(), RED.blue())
    assert _rgb(exported, 252, 200) == (BLUE.red(), BLUE.green(), BLUE.blue())


def test_export_matches_preview_up_to_resolution(qapp) -> None:
    photo = _split_photo(300, 200)
    frame = _frame_with_hole()
    state = TransformState(zoom=1.5, rotation=30.0, offset=QPointF(12.0, -8.0))

    preview = render_preview(photo, frame, state, 100)
    exported = export_high_res(photo, frame, state, target_size=400, preview_size=100)
    downsampled = exported.scaled(
        100,
        100,
        Qt.AspectRatioMode.IgnoreAspectRatio,
        Qt.TransformationMode.SmoothTransformation,
    )

    expected = qimage_to_rgba_array(preview).astype(np.int16)
    actual = qimage_to_rgba_array(downsampled).astype(np.int16)
    difference = np.abs(expected - actual)
    # Only anti-aliased edges may differ.
    assert float(difference.mean()) < 4.0
    assert float(np.mean(difference.max(axis=2) > 64)) < 0.05


def test_export_does_not_touch_transform(qapp) -> None:
    state = TransformState(zoom=2.0, rotation=45.0, offset=QPointF(3.0, 4.0))
    before = state.as_tuple()
    export_high_res(_split_photo(), _frame_with_hole(), state, target_size=200, preview_size=100)
    assert state.as_tuple() == before


def test_export_requires_photo_and_frame(qapp) -> None:
    with pytest.raises(ExportPreconditionError):
        export_high_res(None, _frame_with_hole(), TransformState(), target_size=200)
    with pytest.raises(ExportPreconditionError):
        export_high_res(_split_photo(), None, TransformState(), target_size=200)
    with pytest.raises(ExportPreconditionError):
        export_high_res(QImage(), _frame_with_hole(), TransformState(), target_size=200)


def test_export_rejects_invalid_sizes(qapp) -> None:
    with pytest.raises(ExportError):
        export_high_res(_split_photo(), _frame_with_hole(), TransformState(), target_size=0)


def test_frame_opening_ratio(qapp) -> None:
    assert frame_opening_ratio(_frame_with_hole(100, 25)) == pytest.approx(0.25)

    opaque = QImage(50, 50, QImage.Format.Format_ARGB32)
    opaque.fill(FRAME_GREEN)
    assert frame_opening_ratio(opaque) == 0.0

    no_alpha = QImage(50, 50, QImage.Format.Format_RGB32)
    no_alpha.fill(FRAME_GREEN)
    assert frame_opening_ratio(no_alpha) == 0.0
