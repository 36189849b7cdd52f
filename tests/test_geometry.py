"""Tests for the cover-fit and pointer geometry helpers."""

from __future__ import annotations

import math

import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for geometry tests", exc_type=ImportError)

from PySide6.QtCore import QPointF

from eventFrames.config import MAX_ZOOM, MIN_ZOOM
from eventFrames.core.geometry import (
    clamp_zoom,
    compute_base_scale,
    offset_scale_ratio,
    pointer_angle,
    pointer_distance,
)


@pytest.mark.parametrize(
    ("canvas", "image", "expected"),
    [
        ((500, 500), (1000, 500), 1.0),  # wider image: fit by height
        ((500, 500), (500, 1000), 1.0),  # taller image: fit by width
        ((500, 500), (500, 500), 1.0),
        ((500, 500), (250, 250), 2.0),
        ((4000, 4000), (1000, 500), 8.0),
        ((500, 500), (3000, 2000), 0.25),
    ],
)
def test_compute_base_scale_covers_canvas(canvas, image, expected) -> None:
    scale = compute_base_scale(canvas, image)
    assert scale == pytest.approx(expected)
    # The scaled image never leaves a gap on either axis.
    assert image[0] * scale >= canvas[0] - 1e-9
    assert image[1] * scale >= canvas[1] - 1e-9


def test_compute_base_scale_degenerate_sizes() -> None:
    assert compute_base_scale((500, 500), (0, 100)) == 1.0
    assert compute_base_scale((0, 0), (100, 100)) == 1.0


def test_clamp_zoom_bounds() -> None:
    assert clamp_zoom(0.01) == MIN_ZOOM
    assert clamp_zoom(12.0) == MAX_ZOOM
    assert clamp_zoom(1.7) == pytest.approx(1.7)
    assert clamp_zoom(math.inf) == MAX_ZOOM
    assert clamp_zoom(-math.inf) == MIN_ZOOM


def test_pointer_distance_and_angle() -> None:
    origin = QPointF(0.0, 0.0)
    assert pointer_distance(origin, QPointF(3.0, 4.0)) == pytest.approx(5.0)
    assert pointer_angle(origin, QPointF(10.0, 0.0)) == pytest.approx(0.0)
    # Qt's y axis points down, so a point below the origin is at +90 degrees.
    assert pointer_angle(origin, QPointF(0.0, 10.0)) == pytest.approx(90.0)


def test_offset_scale_ratio() -> None:
    assert offset_scale_ratio((4000, 4000), (500, 500)) == pytest.approx(8.0)
    assert offset_scale_ratio((4000, 4000), (0, 0)) == 1.0
