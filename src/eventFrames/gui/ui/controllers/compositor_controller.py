"""Controller orchestrating photo loading, frame selection and export."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Optional, Set, Tuple

from PySide6.QtCore import QObject, QThreadPool, QTimer, Signal
from PySide6.QtGui import QImage

from ....config import EXPORT_FILENAME_PREFIX, EXPORT_YIELD_MS, HIGH_RES_SIZE, PREVIEW_SIZE
from ....core.compositor import frame_opening_ratio
from ....errors import (
    ExportError,
    ExportPreconditionError,
    ImageDecodeError,
    SettingsError,
)
from ....errors.handler import ErrorHandler
from ....library.frames import FrameLibrary
from ....models.types import EventFrame, TransformState
from ..models.compositor_session import CompositorSession
from ..tasks.export_worker import ExportWorker
from ..tasks.image_load_worker import ImageLoadWorker

if TYPE_CHECKING:
    from ....settings.manager import SettingsManager

_LOGGER = logging.getLogger(__name__)


class CompositorController(QObject):
    """Drive a :class:`CompositorSession` from user actions.

    Decoding and export happen on a thread pool.  Each decode request carries
    a generation number so a slow, superseded request can never replace the
    image the user picked afterwards.
    """

    processingChanged = Signal(bool)
    """Emitted when an export starts (``True``) and when it ends (``False``)."""

    exportFinished = Signal(Path)
    """Emitted with the written file once an export succeeds."""

    frameLoadFailed = Signal(object)
    """Emitted with the :class:`EventFrame` whose image could not be decoded."""

    def __init__(
        self,
        session: CompositorSession,
        library: FrameLibrary,
        error_handler: ErrorHandler,
        *,
        settings: Optional["SettingsManager"] = None,
        thread_pool: Optional[QThreadPool] = None,
        preview_size: int = PREVIEW_SIZE,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._session = session
        self._library = library
        self._errors = error_handler
        self._settings = settings
        self._pool = thread_pool or QThreadPool.globalInstance()
        self._preview_size = preview_size

        self._source_generation = 0
        self._frame_generation = 0
        self._pending_frame: Optional[EventFrame] = None
        self._processing = False
        # QRunnables are kept alive until they report back so their signal
        # containers are not collected mid-flight.
        self._loaders: Dict[Tuple[str, int], ImageLoadWorker] = {}
        self._exporters: Set[ExportWorker] = set()

        self._library.framesChanged.connect(self._on_frames_changed)
        self._library.frameRemoved.connect(self._on_frame_removed)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def session(self) -> CompositorSession:
        return self._session

    def library(self) -> FrameLibrary:
        return self._library

    def is_processing(self) -> bool:
        return self._processing

    def pending_frame(self) -> Optional[EventFrame]:
        return self._pending_frame

    # ------------------------------------------------------------------
    # Photo loading
    # ------------------------------------------------------------------
    def load_source_file(self, path: Path) -> None:
        """Read *path* and decode it as the new photo."""
        try:
            data = Path(path).read_bytes()
        except OSError as exc:
            self._errors.handle(
                ImageDecodeError(f"Could not read {path}: {exc}"),
                message="Could not load that photo.",
            )
            return
        self.load_source_image(data, label=Path(path).name)

    def load_source_image(self, data: bytes, label: str = "photo") -> None:
        """Decode *data* in the background and install it when ready."""
        self._source_generation += 1
        _LOGGER.debug("Decoding %s (request %d)", label, self._source_generation)
        worker = ImageLoadWorker(generation=self._source_generation, data=data)
        worker.signals.imageLoaded.connect(self._on_source_loaded)
        worker.signals.loadFailed.connect(self._on_source_failed)
        self._start(worker, kind="source")

    def _on_source_loaded(self, generation: int, image: QImage) -> None:
        self._release(generation, kind="source")
        if generation != self._source_generation:
            _LOGGER.debug("Discarding stale photo decode %d", generation)
            return
        _LOGGER.info("Loaded photo %dx%d", image.width(), image.height())
        self._session.set_source_image(image)

    def _on_source_failed(self, generation: int, message: str) -> None:
        self._release(generation, kind="source")
        if generation != self._source_generation:
            return
        self._errors.handle(ImageDecodeError(message), message="Could not load that photo.")

    # ------------------------------------------------------------------
    # Frame selection
    # ------------------------------------------------------------------
    def select_frame(self, frame: Optional[EventFrame]) -> None:
        """Fetch and install *frame*; the photo transform is preserved."""
        self._frame_generation += 1
        if frame is None:
            self._pending_frame = None
            self._session.set_frame(None, None)
            return
        self._pending_frame = frame
        worker = ImageLoadWorker(generation=self._frame_generation, url=frame.image_url)
        worker.signals.imageLoaded.connect(self._on_frame_loaded)
        worker.signals.loadFailed.connect(self._on_frame_failed)
        self._start(worker, kind="frame")

    def ensure_default_frame(self) -> None:
        """Select a frame when none is selected, preferring the last one used."""
        current = self._pending_frame or self._session.frame()
        if current is not None and self._library.contains(current.id):
            return
        candidate: Optional[EventFrame] = None
        last_id = self._settings.get("ui.last_frame_id") if self._settings is not None else None
        if isinstance(last_id, str) and self._library.contains(last_id):
            candidate = self._library.get(last_id)
        if candidate is None:
            candidate = self._library.first()
        self.select_frame(candidate)

    def _on_frame_loaded(self, generation: int, image: QImage) -> None:
        self._release(generation, kind="frame")
        if generation != self._frame_generation or self._pending_frame is None:
            _LOGGER.debug("Discarding stale frame decode %d", generation)
            return
        frame = self._pending_frame
        self._pending_frame = None
        if frame_opening_ratio(image) <= 0.0:
            _LOGGER.warning("Frame %r has no transparent opening; the photo will be hidden", frame.name)
        self._session.set_frame(frame, image)
        self._remember_frame(frame)

    def _on_frame_failed(self, generation: int, message: str) -> None:
        self._release(generation, kind="frame")
        if generation != self._frame_generation:
            return
        failed_frame = self._pending_frame
        self._pending_frame = None
        self._errors.handle(ImageDecodeError(message), message="Could not load that frame.")
        self.frameLoadFailed.emit(failed_frame)

    def _remember_frame(self, frame: EventFrame) -> None:
        if self._settings is None:
            return
        try:
            self._settings.set("ui.last_frame_id", frame.id)
        except SettingsError:
            _LOGGER.exception("Failed to persist the selected frame")

    def _on_frames_changed(self) -> None:
        current = self._pending_frame or self._session.frame()
        if current is not None and self._library.contains(current.id):
            updated = self._library.get(current.id)
            if updated.image_url != current.image_url:
                self.select_frame(updated)
            elif updated != current and self._pending_frame is None:
                self._session.set_frame(updated, self._session.frame_image())
            return
        self.ensure_default_frame()

    def _on_frame_removed(self, frame_id: str) -> None:
        current = self._pending_frame or self._session.frame()
        if current is not None and current.id == frame_id:
            self._pending_frame = None
            self._frame_generation += 1
            self._session.set_frame(None, None)
            self.ensure_default_frame()

    # ------------------------------------------------------------------
    # Transform
    # ------------------------------------------------------------------
    def reset_transforms(self) -> None:
        self._session.reset_transforms()

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def export(self, destination_dir: Optional[Path] = None) -> bool:
        """Start an export; return ``False`` if it could not be started."""

        if self._processing:
            return False
        if not self._session.has_source() or not self._session.has_frame():
            self._errors.handle(
                ExportPreconditionError("Export requested without a photo and a frame"),
                message="Please upload a photo and select a frame.",
            )
            return False

        destination = destination_dir or self._export_directory()
        # The export reproduces what was on screen at click time; input that
        # arrives during the yield below must not leak into it.
        source = self._session.source_image().copy()
        frame = self._session.frame_image().copy()
        state = self._session.transform().copy()
        self._set_processing(True)
        # Give the "processing" overlay a chance to paint before the heavy
        # render is queued.
        QTimer.singleShot(
            EXPORT_YIELD_MS,
            lambda: self._start_export(source, frame, state, destination),
        )
        return True

    def _start_export(
        self,
        source: QImage,
        frame: QImage,
        state: TransformState,
        destination: Path,
    ) -> None:
        worker = ExportWorker(
            source,
            frame,
            state,
            destination,
            prefix=self._export_prefix(),
            target_size=self._export_size(),
            preview_size=self._preview_size,
        )
        worker.signals.finished.connect(lambda path, w=worker: self._on_export_finished(w, path))
        worker.signals.failed.connect(lambda message, w=worker: self._on_export_failed(message, w))
        self._exporters.add(worker)
        self._pool.start(worker)

    def _on_export_finished(self, worker: ExportWorker, path: Path) -> None:
        self._exporters.discard(worker)
        self._set_processing(False)
        self._errors.notify(f"Saved {Path(path).name}")
        self.exportFinished.emit(Path(path))

    def _on_export_failed(self, message: str, worker: Optional[ExportWorker] = None) -> None:
        if worker is not None:
            self._exporters.discard(worker)
        self._set_processing(False)
        self._errors.handle(ExportError(message), message="Could not generate image.")

    def _set_processing(self, value: bool) -> None:
        if self._processing == value:
            return
        self._processing = value
        self.processingChanged.emit(value)

    def _export_directory(self) -> Path:
        if self._settings is not None:
            return self._settings.export_directory()
        return Path.cwd()

    def _export_prefix(self) -> str:
        if self._settings is not None:
            return self._settings.export_prefix()
        return EXPORT_FILENAME_PREFIX

    def _export_size(self) -> int:
        if self._settings is not None:
            return self._settings.export_size()
        return HIGH_RES_SIZE

    # ------------------------------------------------------------------
    # Worker bookkeeping
    # ------------------------------------------------------------------
    def _start(self, worker: ImageLoadWorker, *, kind: str) -> None:
        self._loaders[(kind, worker.generation)] = worker
        self._pool.start(worker)

    def _release(self, generation: int, *, kind: str) -> None:
        self._loaders.pop((kind, generation), None)


__all__ = ["CompositorController"]
