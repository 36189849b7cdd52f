from __future__ import annotations

import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for session tests", exc_type=ImportError)
pytest.importorskip("PySide6.QtTest", reason="Qt test helpers not available", exc_type=ImportError)

from PySide6.QtCore import QPointF
from PySide6.QtGui import QColor, QImage
from PySide6.QtTest import QSignalSpy

from eventFrames.config import MAX_ZOOM, MIN_ZOOM
from eventFrames.gui.ui.models.compositor_session import CompositorSession
from eventFrames.models.types import EventFrame


def _image(size: int = 20) -> QImage:
    image = QImage(size, size, QImage.Format.Format_ARGB32)
    image.fill(QColor("#123456"))
    return image


def test_new_photo_resets_transform(qapp) -> None:
    session = CompositorSession()
    session.set_source_image(_image())
    session.set_zoom(2.0)
    session.set_rotation(45.0)
    session.transform().translate(5.0, 5.0)

    spy = QSignalSpy(session.transformChanged)
    session.set_source_image(_image(30))

    assert session.transform().is_identity()
    assert spy.count() == 1
    assert session.has_source()


def test_frame_change_keeps_transform(qapp) -> None:
    session = CompositorSession()
    session.set_source_image(_image())
    session.set_zoom(1.5)
    session.transform().offset = QPointF(3.0, 4.0)

    session.set_frame(EventFrame("1", "A", "a.png"), _image())
    session.set_frame(EventFrame("2", "B", "b.png"), _image())

    assert session.transform().as_tuple() == (1.5, 0.0, 3.0, 4.0)
    assert session.frame().id == "2"
    assert session.has_frame()


def test_zoom_is_clamped(qapp) -> None:
    session = CompositorSession()
    session.set_zoom(50.0)
    assert session.transform().zoom == MAX_ZOOM
    session.set_zoom(0.0)
    assert session.transform().zoom == MIN_ZOOM


def test_unchanged_values_do_not_notify(qapp) -> None:
    session = CompositorSession()
    spy = QSignalSpy(session.transformChanged)
    session.set_zoom(1.0)
    session.set_rotation(0.0)
    assert spy.count() == 0


def test_reset_transforms(qapp) -> None:
    session = CompositorSession()
    session.set_rotation(90.0)
    session.reset_transforms()
    assert session.transform().is_identity()
