"""Tests for the controller driving photo loading, frame selection and export."""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for controller tests", exc_type=ImportError)
pytest.importorskip("PySide6.QtTest", reason="Qt test helpers not available", exc_type=ImportError)

from PIL import Image
from PySide6.QtCore import QPointF
from PySide6.QtTest import QTest

from eventFrames.config import EXPORT_YIELD_MS
from eventFrames.errors.handler import ErrorHandler, ErrorSeverity
from eventFrames.gui.ui.controllers import CompositorController
from eventFrames.gui.ui.models import CompositorSession
from eventFrames.gui.ui.tasks import ExportWorker
from eventFrames.library.frames import FrameLibrary
from eventFrames.models.types import EventFrame
from eventFrames.settings.manager import SettingsManager


def _png(size=(40, 30), color=(255, 0, 0, 255)) -> bytes:
    buffer = BytesIO()
    Image.new("RGBA", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def _frame_file(path: Path) -> str:
    image = Image.new("RGBA", (20, 20), (0, 0, 0, 255))
    image.paste((0, 0, 0, 0), (4, 4, 16, 16))
    image.save(path, format="PNG")
    return str(path)


class _Harness:
    def __init__(self, tmp_path: Path, pool, *, frames=None) -> None:
        self.messages: list[tuple[str, ErrorSeverity]] = []
        self.errors = ErrorHandler(logging.getLogger("eventFrames.tests"))
        self.errors.register_ui_callback(lambda message, severity: self.messages.append((message, severity)))
        self.settings = SettingsManager(path=tmp_path / "settings.json")
        self.settings.load()
        self.settings.set("export.directory", tmp_path / "exports")
        if frames is None:
            frames = [
                EventFrame("a", "Frame A", _frame_file(tmp_path / "a.png")),
                EventFrame("b", "Frame B", _frame_file(tmp_path / "b.png")),
            ]
        self.library = FrameLibrary(admin=True, frames=frames)
        self.session = CompositorSession()
        self.controller = CompositorController(
            self.session,
            self.library,
            self.errors,
            settings=self.settings,
            thread_pool=pool,
            preview_size=50,
        )

    def error_messages(self) -> list[str]:
        return [m for m, s in self.messages if s is ErrorSeverity.ERROR]


def test_loading_photo_installs_it_and_resets_transform(qapp, tmp_path: Path, inline_pool) -> None:
    h = _Harness(tmp_path, inline_pool)
    h.session.set_zoom(3.0)

    h.controller.load_source_image(_png())

    assert h.session.has_source()
    assert h.session.source_image().width() == 40
    assert h.session.transform().is_identity()


def test_stale_photo_decode_is_ignored(qapp, tmp_path: Path, deferred_pool) -> None:
    h = _Harness(tmp_path, deferred_pool)
    h.controller.load_source_image(_png((11, 11)))
    h.controller.load_source_image(_png((22, 22)))

    # The newer request finishes first, then the stale one arrives.
    deferred_pool.run(1)
    deferred_pool.run(0)

    assert h.session.source_image().width() == 22


def test_failed_photo_keeps_previous_state(qapp, tmp_path: Path, inline_pool) -> None:
    h = _Harness(tmp_path, inline_pool)
    h.controller.load_source_image(_png())
    h.session.set_zoom(2.0)

    h.controller.load_source_image(b"definitely not an image")

    assert h.session.source_image().width() == 40
    assert h.session.transform().zoom == 2.0
    assert h.error_messages() == ["Could not load that photo."]


def test_missing_photo_file_is_reported(qapp, tmp_path: Path, inline_pool) -> None:
    h = _Harness(tmp_path, inline_pool)
    h.controller.load_source_file(tmp_path / "nope.jpg")
    assert h.error_messages() == ["Could not load that photo."]
    assert not h.session.has_source()


def test_selecting_frame_preserves_adjustments(qapp, tmp_path: Path, inline_pool) -> None:
    h = _Harness(tmp_path, inline_pool)
    h.controller.load_source_image(_png())
    h.session.set_zoom(1.8)
    h.session.transform().offset = QPointF(7.0, -2.0)

    h.controller.select_frame(h.library.get("b"))

    assert h.session.frame().id == "b"
    assert h.session.has_frame()
    assert h.session.transform().as_tuple() == (1.8, 0.0, 7.0, -2.0)
    assert h.settings.get("ui.last_frame_id") == "b"


def test_stale_frame_decode_is_ignored(qapp, tmp_path: Path, deferred_pool) -> None:
    h = _Harness(tmp_path, deferred_pool)
    h.controller.select_frame(h.library.get("a"))
    h.controller.select_frame(h.library.get("b"))

    deferred_pool.run(1)
    deferred_pool.run(0)

    assert h.session.frame().id == "b"


def test_broken_frame_is_reported(qapp, tmp_path: Path, inline_pool) -> None:
    h = _Harness(tmp_path, inline_pool, frames=[EventFrame("x", "Broken", str(tmp_path / "missing.png"))])
    h.controller.select_frame(h.library.get("x"))

    assert not h.session.has_frame()
    assert h.controller.pending_frame() is None
    assert h.error_messages() == ["Could not load that frame."]


def test_default_frame_prefers_last_used(qapp, tmp_path: Path, inline_pool) -> None:
    h = _Harness(tmp_path, inline_pool)
    h.controller.ensure_default_frame()
    assert h.session.frame().id == "a"

    h2 = _Harness(tmp_path, inline_pool)
    h2.settings.set("ui.last_frame_id", "b")
    h2.controller.ensure_default_frame()
    assert h2.session.frame().id == "b"


def test_deleting_selected_frame_selects_another(qapp, tmp_path: Path, inline_pool) -> None:
    h = _Harness(tmp_path, inline_pool)
    h.controller.select_frame(h.library.get("a"))

    h.library.delete_frame("a")

    assert h.session.frame() is not None
    assert h.session.frame().id == "b"


def test_export_requires_photo_and_frame(qapp, tmp_path: Path, inline_pool) -> None:
    h = _Harness(tmp_path, inline_pool)
    states: list[bool] = []
    h.controller.processingChanged.connect(states.append)

    assert h.controller.export() is False

    assert states == []
    assert h.error_messages() == ["Please upload a photo and select a frame."]
    assert not (tmp_path / "exports").exists()


def test_export_writes_file_and_toggles_processing(qapp, tmp_path: Path, inline_pool) -> None:
    h = _Harness(tmp_path, inline_pool)
    h.settings.set("export.size", 200)
    h.controller.load_source_image(_png())
    h.controller.select_frame(h.library.get("a"))
    h.session.set_rotation(15.0)
    states: list[bool] = []
    finished: list[Path] = []
    h.controller.processingChanged.connect(states.append)
    h.controller.exportFinished.connect(finished.append)

    assert h.controller.export() is True
    assert h.controller.is_processing()
    # A second request while the first one is pending is refused.
    assert h.controller.export() is False

    QTest.qWait(EXPORT_YIELD_MS * 4)

    assert states == [True, False]
    assert len(finished) == 1
    path = finished[0]
    assert path.parent == tmp_path / "exports"
    assert path.name.startswith("RNMSG_Frame_")
    assert path.exists()
    assert h.session.transform().rotation == 15.0
    assert any(message.startswith("Saved ") for message, _ in h.messages)


def test_export_renders_state_from_click_time(qapp, tmp_path: Path, deferred_pool) -> None:
    h = _Harness(tmp_path, deferred_pool)
    h.controller.load_source_image(_png())
    deferred_pool.run(0)
    h.controller.select_frame(h.library.get("a"))
    deferred_pool.run(0)
    h.session.set_rotation(15.0)

    assert h.controller.export() is True
    # Input keeps flowing while the processing overlay paints.
    h.session.set_rotation(90.0)
    h.session.transform().translate(30.0, 0.0)
    h.controller.load_source_image(_png((22, 22)))
    deferred_pool.run(0)
    assert h.session.source_image().width() == 22

    QTest.qWait(EXPORT_YIELD_MS * 4)

    exporters = [w for w in deferred_pool.pending if isinstance(w, ExportWorker)]
    assert len(exporters) == 1
    state = exporters[0].state()
    assert state.rotation == 15.0
    assert (state.offset.x(), state.offset.y()) == (0.0, 0.0)

    finished: list[Path] = []
    h.controller.exportFinished.connect(finished.append)
    exporters[0].run()
    assert len(finished) == 1
    assert finished[0].exists()


def test_failed_frame_decode_reports_the_frame(qapp, tmp_path: Path, inline_pool) -> None:
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"not an image")
    frames = [
        EventFrame("a", "Frame A", _frame_file(tmp_path / "a.png")),
        EventFrame("b", "Broken", str(broken)),
    ]
    h = _Harness(tmp_path, inline_pool, frames=frames)
    h.controller.select_frame(h.library.get("a"))
    failed: list[EventFrame] = []
    h.controller.frameLoadFailed.connect(failed.append)

    h.controller.select_frame(h.library.get("b"))

    assert [frame.id for frame in failed] == ["b"]
    assert h.session.frame().id == "a"
