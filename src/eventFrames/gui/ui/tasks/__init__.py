"""Background tasks and workers."""

from __future__ import annotations

from .export_worker import ExportSignals, ExportWorker
from .image_load_worker import ImageLoadWorker, ImageLoadWorkerSignals

__all__ = [
    "ExportSignals",
    "ExportWorker",
    "ImageLoadWorker",
    "ImageLoadWorkerSignals",
]
