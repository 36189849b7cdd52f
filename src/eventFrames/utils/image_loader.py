"""Helpers for turning photo bytes and frame URLs into Qt images."""

from __future__ import annotations

import base64
import binascii
import logging
import urllib.error
import urllib.parse
import urllib.request
from io import BytesIO
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError
from PIL.ImageQt import ImageQt
from PySide6.QtCore import QBuffer, QByteArray, QIODevice
from PySide6.QtGui import QImage, QImageReader

from ..config import NETWORK_TIMEOUT_SEC
from ..errors import ImageDecodeError

_LOGGER = logging.getLogger(__name__)


def qimage_from_bytes(data: bytes) -> Optional[QImage]:
    """Return a :class:`QImage` decoded from encoded image *data*.

    Qt's reader handles the common formats and honours the EXIF orientation
    tag.  Anything Qt cannot decode is retried through Pillow.
    """

    if not data:
        return None
    byte_array = QByteArray(data)
    buffer = QBuffer(byte_array)
    buffer.open(QIODevice.OpenModeFlag.ReadOnly)
    try:
        reader = QImageReader(buffer)
        reader.setAutoTransform(True)
        image = reader.read()
    finally:
        buffer.close()
    if not image.isNull():
        return image
    return _load_with_pillow(data)


def qimage_from_pil(image: "Image.Image") -> Optional[QImage]:
    """Convert a Pillow image into a detached :class:`QImage`."""

    try:
        qt_image = ImageQt(image.convert("RGBA"))
    except (OSError, ValueError):
        _LOGGER.exception("Pillow failed to convert image to QImage")
        return None
    # ``ImageQt`` borrows Pillow's buffer; detach before it goes away.
    return qt_image.copy()


def _load_with_pillow(data: bytes) -> Optional[QImage]:
    try:
        with Image.open(BytesIO(data)) as img:
            img = ImageOps.exif_transpose(img)
            img.load()
            return qimage_from_pil(img)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        _LOGGER.debug("Pillow could not decode %d bytes: %s", len(data), exc)
        return None


def read_image_url(url: str) -> bytes:
    """Return the raw bytes referenced by *url*.

    Supported forms are ``data:`` URIs, ``file://`` URLs, ``http(s)://`` URLs
    and plain filesystem paths.
    """

    if not url or not url.strip():
        raise ImageDecodeError("Empty image URL")
    url = url.strip()
    parsed = urllib.parse.urlparse(url)
    scheme = parsed.scheme.lower()

    if scheme == "data":
        return _decode_data_uri(url)
    if scheme in ("http", "https"):
        try:
            with urllib.request.urlopen(url, timeout=NETWORK_TIMEOUT_SEC) as response:
                return response.read()
        except (urllib.error.URLError, OSError, ValueError) as exc:
            raise ImageDecodeError(f"Could not download {url}: {exc}") from exc
    if scheme == "file":
        path = Path(urllib.request.url2pathname(parsed.path))
    else:
        # Windows drive letters parse as a one-letter scheme.
        path = Path(url).expanduser()
    try:
        return path.read_bytes()
    except OSError as exc:
        raise ImageDecodeError(f"Could not read {path}: {exc}") from exc


def _decode_data_uri(uri: str) -> bytes:
    header, sep, payload = uri.partition(",")
    if not sep:
        raise ImageDecodeError("Malformed data URI")
    if header.endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=False)
        except (binascii.Error, ValueError) as exc:
            raise ImageDecodeError(f"Malformed base64 payload: {exc}") from exc
    return urllib.parse.unquote_to_bytes(payload)


def load_qimage_from_url(url: str) -> QImage:
    """Fetch and decode *url*, raising :class:`ImageDecodeError` on failure."""

    data = read_image_url(url)
    image = qimage_from_bytes(data)
    if image is None or image.isNull():
        raise ImageDecodeError(f"Unsupported or corrupt image: {_describe(url)}")
    return image


def load_qimage(source: Path) -> QImage:
    """Decode the image stored at *source*."""

    try:
        data = Path(source).read_bytes()
    except OSError as exc:
        raise ImageDecodeError(f"Could not read {source}: {exc}") from exc
    image = qimage_from_bytes(data)
    if image is None or image.isNull():
        raise ImageDecodeError(f"Unsupported or corrupt image: {source}")
    return image


def qimage_to_rgba_array(image: QImage) -> Optional[np.ndarray]:
    """Return a ``(height, width, 4)`` RGBA copy of *image* pixels."""

    if image.isNull():
        return None
    img = image.convertToFormat(QImage.Format.Format_RGBA8888)
    width, height = img.width(), img.height()
    bytes_per_line = img.bytesPerLine()
    ptr = img.constBits()
    byte_count = img.sizeInBytes()
    if hasattr(ptr, "setsize"):
        ptr.setsize(byte_count)
    buffer = np.frombuffer(ptr, dtype=np.uint8, count=bytes_per_line * height)
    surface = buffer.reshape((height, bytes_per_line))
    return surface[:, : width * 4].reshape((height, width, 4)).copy()


def _describe(url: str) -> str:
    if url.startswith("data:"):
        return "data URI"
    return url
