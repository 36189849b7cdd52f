"""Grid of selectable event frames."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from PySide6.QtCore import QSize, Qt, QThreadPool, Signal
from PySide6.QtGui import QIcon, QImage, QPixmap
from PySide6.QtWidgets import (
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QPushButton,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from ....config import FRAME_GRID_COLUMNS, FRAME_TILE_SIZE
from ....library.frames import FrameLibrary
from ....models.types import EventFrame
from ..tasks.image_load_worker import ImageLoadWorker

_LOGGER = logging.getLogger(__name__)


class FrameTile(QFrame):
    """A single frame thumbnail, with admin controls when enabled."""

    clicked = Signal(object)
    editRequested = Signal(object)
    deleteRequested = Signal(object)

    def __init__(self, frame: EventFrame, *, admin: bool, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._frame = frame
        self.setObjectName("frameTile")

        self._button = QToolButton(self)
        self._button.setCheckable(True)
        self._button.setAutoExclusive(False)
        self._button.setText(frame.name)
        self._button.setToolTip(frame.name)
        self._button.setIconSize(QSize(FRAME_TILE_SIZE, FRAME_TILE_SIZE))
        self._button.setToolButtonStyle(Qt.ToolButtonStyle.ToolButtonTextUnderIcon)
        self._button.setStyleSheet(
            "QToolButton { border: 2px solid transparent; border-radius: 6px; padding: 4px; }"
            "QToolButton:checked { border-color: #2563EB; }"
        )
        self._button.clicked.connect(lambda: self.clicked.emit(self._frame))

        layout = QVBoxLayout(self)
        layout.setContentsMargins(2, 2, 2, 2)
        layout.setSpacing(2)
        layout.addWidget(self._button, 0, Qt.AlignmentFlag.AlignHCenter)

        self._edit_button: Optional[QPushButton] = None
        self._delete_button: Optional[QPushButton] = None
        if admin:
            controls = QHBoxLayout()
            controls.setContentsMargins(0, 0, 0, 0)
            self._edit_button = QPushButton("Edit", self)
            self._delete_button = QPushButton("Delete", self)
            self._edit_button.clicked.connect(lambda: self.editRequested.emit(self._frame))
            self._delete_button.clicked.connect(lambda: self.deleteRequested.emit(self._frame))
            controls.addWidget(self._edit_button)
            controls.addWidget(self._delete_button)
            layout.addLayout(controls)

    def frame(self) -> EventFrame:
        return self._frame

    def button(self) -> QToolButton:
        return self._button

    def edit_button(self) -> Optional[QPushButton]:
        return self._edit_button

    def delete_button(self) -> Optional[QPushButton]:
        return self._delete_button

    def set_selected(self, selected: bool) -> None:
        self._button.setChecked(selected)

    def is_selected(self) -> bool:
        return self._button.isChecked()

    def set_thumbnail(self, image: QImage) -> None:
        pixmap = QPixmap.fromImage(image).scaled(
            FRAME_TILE_SIZE,
            FRAME_TILE_SIZE,
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )
        self._button.setIcon(QIcon(pixmap))


class FramePicker(QWidget):
    """Show every frame of a :class:`FrameLibrary` as a clickable tile."""

    frameSelected = Signal(object)
    editRequested = Signal(object)
    deleteRequested = Signal(object)
    addRequested = Signal()

    def __init__(
        self,
        library: FrameLibrary,
        parent: Optional[QWidget] = None,
        *,
        load_thumbnails: bool = True,
        thread_pool: Optional[QThreadPool] = None,
    ) -> None:
        super().__init__(parent)
        self._library = library
        self._load_thumbnails = load_thumbnails
        self._pool = thread_pool or QThreadPool.globalInstance()
        self._tiles: Dict[str, FrameTile] = {}
        self._selected_id: Optional[str] = None
        # Thumbnail requests are keyed by a generation number so tiles that
        # were rebuilt in the meantime ignore late results.
        self._thumb_generation = 0
        self._thumb_requests: Dict[int, str] = {}
        self._thumb_workers: Dict[int, ImageLoadWorker] = {}

        self._grid = QGridLayout()
        self._grid.setContentsMargins(0, 0, 0, 0)
        self._grid.setSpacing(8)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addLayout(self._grid)

        self._add_button: Optional[QPushButton] = None
        if library.is_admin():
            self._add_button = QPushButton("Add New Frame", self)
            self._add_button.clicked.connect(lambda: self.addRequested.emit())
            layout.addWidget(self._add_button)
        layout.addStretch(1)

        library.framesChanged.connect(self.rebuild)
        self.rebuild()

    # ------------------------------------------------------------------
    def tiles(self) -> Dict[str, FrameTile]:
        return dict(self._tiles)

    def add_button(self) -> Optional[QPushButton]:
        return self._add_button

    def selected_id(self) -> Optional[str]:
        return self._selected_id

    def set_selected(self, frame_id: Optional[str]) -> None:
        """Highlight the tile of *frame_id* and clear every other tile."""
        self._selected_id = frame_id
        for tile_id, tile in self._tiles.items():
            tile.set_selected(tile_id == frame_id)

    def rebuild(self) -> None:
        while self._grid.count():
            item = self._grid.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        self._tiles.clear()
        self._thumb_requests.clear()

        admin = self._library.is_admin()
        for index, frame in enumerate(self._library.frames()):
            tile = FrameTile(frame, admin=admin, parent=self)
            tile.clicked.connect(self.frameSelected.emit)
            tile.editRequested.connect(self.editRequested.emit)
            tile.deleteRequested.connect(self.deleteRequested.emit)
            row, column = divmod(index, FRAME_GRID_COLUMNS)
            self._grid.addWidget(tile, row, column)
            self._tiles[frame.id] = tile
            if self._load_thumbnails:
                self._request_thumbnail(frame)

        self.set_selected(self._selected_id)

    # ------------------------------------------------------------------
    def _request_thumbnail(self, frame: EventFrame) -> None:
        self._thumb_generation += 1
        generation = self._thumb_generation
        worker = ImageLoadWorker(generation=generation, url=frame.image_url)
        worker.signals.imageLoaded.connect(self._on_thumbnail_loaded)
        worker.signals.loadFailed.connect(self._on_thumbnail_failed)
        self._thumb_requests[generation] = frame.id
        self._thumb_workers[generation] = worker
        self._pool.start(worker)

    def _on_thumbnail_loaded(self, generation: int, image: QImage) -> None:
        self._thumb_workers.pop(generation, None)
        frame_id = self._thumb_requests.pop(generation, None)
        tile = self._tiles.get(frame_id) if frame_id is not None else None
        if tile is not None:
            tile.set_thumbnail(image)

    def _on_thumbnail_failed(self, generation: int, message: str) -> None:
        self._thumb_workers.pop(generation, None)
        frame_id = self._thumb_requests.pop(generation, None)
        if frame_id is not None:
            _LOGGER.warning("Thumbnail for frame %s failed: %s", frame_id, message)


__all__ = ["FramePicker", "FrameTile"]
