"""Background worker rendering the high-resolution composition."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import QObject, QRunnable, Signal
from PySide6.QtGui import QImage

from ....core.export import export_composition
from ....errors import EventFramesError
from ....models.types import TransformState


_LOGGER = logging.getLogger(__name__)


class ExportSignals(QObject):
    """Signals emitted by export workers."""

    finished = Signal(Path)
    failed = Signal(str)


class ExportWorker(QRunnable):
    """Render and save one composition.

    The worker receives copies of both images and a snapshot of the transform
    so gestures made while it runs cannot alter the output.
    """

    def __init__(
        self,
        source: QImage,
        frame: QImage,
        state: TransformState,
        destination_dir: Path,
        *,
        prefix: str,
        target_size: int,
        preview_size: int,
    ) -> None:
        super().__init__()
        self._source = source.copy()
        self._frame = frame.copy()
        self._state = state.copy()
        self._destination_dir = destination_dir
        self._prefix = prefix
        self._target_size = target_size
        self._preview_size = preview_size
        self.signals = ExportSignals()

    def state(self) -> TransformState:
        """Return the transform snapshot this worker renders."""
        return self._state

    def run(self) -> None:  # type: ignore[override]
        try:
            path = export_composition(
                self._source,
                self._frame,
                self._state,
                self._destination_dir,
                prefix=self._prefix,
                target_size=self._target_size,
                preview_size=self._preview_size,
            )
        except EventFramesError as exc:
            self.signals.failed.emit(str(exc))
            return
        except Exception as exc:
            _LOGGER.exception("Export failed for %s", self._destination_dir)
            self.signals.failed.emit(str(exc))
            return
        self.signals.finished.emit(path)


__all__ = ["ExportSignals", "ExportWorker"]
