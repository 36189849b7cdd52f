"""Export engine for writing composited frames to disk."""

from __future__ import annotations

import base64
import logging
import time
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QBuffer, QByteArray, QIODevice
from PySide6.QtGui import QImage

from ..config import EXPORT_FILENAME_PREFIX, EXPORT_FORMAT, HIGH_RES_SIZE, PREVIEW_SIZE
from ..errors import ExportError
from ..models.types import TransformState
from .compositor import export_high_res

_LOGGER = logging.getLogger(__name__)


def export_filename(prefix: str = EXPORT_FILENAME_PREFIX, timestamp_ms: Optional[int] = None) -> str:
    """Return ``<prefix>_Frame_<timestamp>.png``."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{prefix}_Frame_{int(timestamp_ms)}.png"


def get_unique_destination(destination: Path) -> Path:
    """Return *destination* or a variant with a counter if it exists."""
    if not destination.exists():
        return destination

    parent = destination.parent
    stem = destination.stem
    suffix = destination.suffix
    counter = 1
    while True:
        candidate = parent / f"{stem} ({counter}){suffix}"
        if not candidate.exists():
            return candidate
        counter += 1


def encode_png(image: QImage) -> bytes:
    """Serialise *image* to PNG bytes."""
    byte_array = QByteArray()
    buffer = QBuffer(byte_array)
    buffer.open(QIODevice.OpenModeFlag.WriteOnly)
    try:
        ok = image.save(buffer, EXPORT_FORMAT)
    finally:
        buffer.close()
    if not ok:
        raise ExportError("PNG encoding failed")
    return bytes(byte_array.data())


def png_data_uri(image: QImage) -> str:
    """Return *image* as a ``data:image/png;base64`` URI."""
    payload = base64.b64encode(encode_png(image)).decode("ascii")
    return f"data:image/png;base64,{payload}"


def save_png(image: QImage, destination: Path) -> Path:
    """Write *image* to *destination* as PNG and return the final path."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    final_dest = get_unique_destination(destination)
    if not image.save(str(final_dest), EXPORT_FORMAT):
        raise ExportError(f"Could not write {final_dest}")
    _LOGGER.info("Exported composition to %s", final_dest)
    return final_dest


def export_composition(
    source: Optional[QImage],
    frame: Optional[QImage],
    state: TransformState,
    destination_dir: Path,
    *,
    prefix: str = EXPORT_FILENAME_PREFIX,
    target_size: int = HIGH_RES_SIZE,
    preview_size: int = PREVIEW_SIZE,
    timestamp_ms: Optional[int] = None,
) -> Path:
    """Render the high-resolution composition and save it under *destination_dir*.

    Nothing is written when the render fails, so a precondition error never
    leaves a partial file behind.
    """

    image = export_high_res(source, frame, state, target_size=target_size, preview_size=preview_size)
    destination = Path(destination_dir) / export_filename(prefix, timestamp_ms)
    return save_png(image, destination)
