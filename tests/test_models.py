from __future__ import annotations

import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for model tests", exc_type=ImportError)

from PySide6.QtCore import QPointF

from eventFrames.models.types import EventFrame, TransformState


def test_transform_state_reset_restores_identity() -> None:
    state = TransformState(zoom=2.5, rotation=-40.0, offset=QPointF(12.0, -3.0))
    assert not state.is_identity()
    state.reset()
    assert state.is_identity()
    assert state.as_tuple() == (1.0, 0.0, 0.0, 0.0)


def test_transform_state_copy_is_independent() -> None:
    state = TransformState()
    snapshot = state.copy()
    state.translate(10.0, -5.0)
    state.zoom = 3.0
    assert snapshot.is_identity()
    assert state.as_tuple() == (3.0, 0.0, 10.0, -5.0)


def test_scaled_offset() -> None:
    state = TransformState(offset=QPointF(10.0, -5.0))
    scaled = state.scaled_offset(8.0)
    assert (scaled.x(), scaled.y()) == (80.0, -40.0)


def test_event_frame_dict_uses_image_url_key() -> None:
    frame = EventFrame.from_dict({"id": 7, "name": "Gala", "imageUrl": "https://example.com/f.png"})
    assert frame.id == "7"
    assert frame.to_dict() == {"id": "7", "name": "Gala", "imageUrl": "https://example.com/f.png"}
