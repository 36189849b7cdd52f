"""Worker that decodes photos and frame images off the UI thread."""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, QRunnable, Signal
from PySide6.QtGui import QImage

from ....errors import ImageDecodeError
from ....utils import image_loader

_LOGGER = logging.getLogger(__name__)


class ImageLoadWorkerSignals(QObject):
    """Signals exposed by :class:`ImageLoadWorker`.

    ``ImageLoadWorker`` lives on a global thread pool.  The signal container is
    kept separate from the runnable itself so slots always execute on the GUI
    thread regardless of which worker picked up the job.
    """

    imageLoaded = Signal(int, QImage)
    """Emitted with the request generation once the :class:`QImage` is ready."""

    loadFailed = Signal(int, str)
    """Emitted with the request generation if fetching or decoding fails."""


class ImageLoadWorker(QRunnable):
    """Decode either raw photo bytes or a frame URL without blocking the UI."""

    def __init__(
        self,
        *,
        generation: int,
        data: Optional[bytes] = None,
        url: Optional[str] = None,
    ) -> None:
        super().__init__()
        if (data is None) == (url is None):
            raise ValueError("ImageLoadWorker needs exactly one of data or url")
        self._generation = generation
        self._data = data
        self._url = url
        self.signals = ImageLoadWorkerSignals()

    @property
    def generation(self) -> int:
        return self._generation

    def run(self) -> None:  # type: ignore[override]
        """Execute the I/O and decoding work on a background thread."""

        try:
            if self._url is not None:
                image = image_loader.load_qimage_from_url(self._url)
            else:
                image = image_loader.qimage_from_bytes(self._data or b"")
        except ImageDecodeError as exc:
            self.signals.loadFailed.emit(self._generation, str(exc))
            return
        except Exception as exc:  # pragma: no cover - best effort propagation
            _LOGGER.exception("Unexpected failure while decoding image")
            self.signals.loadFailed.emit(self._generation, str(exc))
            return

        if image is None or image.isNull():
            self.signals.loadFailed.emit(self._generation, "Loaded image is null")
            return

        self.signals.imageLoaded.emit(self._generation, image)


__all__ = ["ImageLoadWorker", "ImageLoadWorkerSignals"]
