"""Frame catalog: the admin-managed list of event frames."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, List, Optional

from jsonschema import Draft202012Validator, ValidationError
from PySide6.QtCore import QObject, Signal

from ..errors import (
    AdminRequiredError,
    CatalogLoadError,
    FrameNotFoundError,
    FrameValidationError,
)
from ..models.types import EventFrame
from ..utils.jsonio import read_json, write_json

_LOGGER = logging.getLogger(__name__)

CATALOG_SCHEMA: dict[str, Any] = {
    "$id": "eventFrames/frames.schema.json",
    "type": "object",
    "required": ["schema", "frames"],
    "properties": {
        "schema": {"const": "eventFrames/frames@1"},
        "frames": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "name", "imageUrl"],
                "properties": {
                    "id": {"type": ["string", "integer"]},
                    "name": {"type": "string", "minLength": 1},
                    "imageUrl": {"type": "string", "minLength": 1},
                },
            },
        },
    },
}

DEFAULT_FRAMES: tuple[EventFrame, ...] = (
    EventFrame(
        id="1",
        name="Scout Jamboree 2024",
        image_url="https://res.cloudinary.com/dtqnpnzxj/image/upload/v1717830831/1_n8t9tq.png",
    ),
    EventFrame(
        id="2",
        name="Clean-Up Drive Frame",
        image_url="https://res.cloudinary.com/dtqnpnzxj/image/upload/v1717830831/2_kfrwdt.png",
    ),
    EventFrame(
        id="3",
        name="RNMSG Anniversary",
        image_url="https://res.cloudinary.com/dtqnpnzxj/image/upload/v1717830831/3_wgwx8i.png",
    ),
)

_validator = Draft202012Validator(CATALOG_SCHEMA)


class FrameLibrary(QObject):
    """Hold the event frames offered to users and apply admin edits."""

    framesChanged = Signal()
    frameRemoved = Signal(str)

    def __init__(
        self,
        path: Path | None = None,
        *,
        admin: bool = False,
        frames: Optional[List[EventFrame]] = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._path = path
        self._admin = bool(admin)
        self._frames: List[EventFrame] = list(frames) if frames is not None else [
            EventFrame(f.id, f.name, f.image_url) for f in DEFAULT_FRAMES
        ]

    # ------------------------------------------------------------------
    # Basic properties
    # ------------------------------------------------------------------
    def is_admin(self) -> bool:
        return self._admin

    def path(self) -> Path | None:
        return self._path

    def frames(self) -> List[EventFrame]:
        return list(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def first(self) -> Optional[EventFrame]:
        return self._frames[0] if self._frames else None

    def get(self, frame_id: str) -> EventFrame:
        for frame in self._frames:
            if frame.id == str(frame_id):
                return frame
        raise FrameNotFoundError(f"No frame with id {frame_id!r}")

    def contains(self, frame_id: str) -> bool:
        return any(frame.id == str(frame_id) for frame in self._frames)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Replace the in-memory catalog with the contents of the backing file.

        A missing file keeps the default frames.
        """

        if self._path is None or not self._path.exists():
            return
        try:
            payload = read_json(self._path)
        except (OSError, ValueError) as exc:
            raise CatalogLoadError(f"Could not read {self._path}: {exc}") from exc
        try:
            _validator.validate(payload)
        except ValidationError as exc:
            raise CatalogLoadError(f"Invalid frame catalog {self._path}: {exc.message}") from exc
        self._frames = [EventFrame.from_dict(entry) for entry in payload["frames"]]
        _LOGGER.info("Loaded %d frames from %s", len(self._frames), self._path)
        self.framesChanged.emit()

    def save(self) -> None:
        if self._path is None:
            return
        write_json(
            self._path,
            {
                "schema": "eventFrames/frames@1",
                "frames": [frame.to_dict() for frame in self._frames],
            },
        )

    # ------------------------------------------------------------------
    # Admin operations
    # ------------------------------------------------------------------
    def add_frame(self, name: str, image_url: str) -> EventFrame:
        """Create a new frame and place it at the top of the catalog."""

        self._require_admin()
        name, image_url = _validated(name, image_url)
        frame = EventFrame(id=self._next_id(), name=name, image_url=image_url)
        self._frames.insert(0, frame)
        self._commit()
        _LOGGER.info("Added frame %s (%s)", frame.id, frame.name)
        return frame

    def update_frame(self, frame: EventFrame) -> EventFrame:
        self._require_admin()
        name, image_url = _validated(frame.name, frame.image_url)
        for index, existing in enumerate(self._frames):
            if existing.id == frame.id:
                updated = EventFrame(id=frame.id, name=name, image_url=image_url)
                self._frames[index] = updated
                self._commit()
                return updated
        raise FrameNotFoundError(f"No frame with id {frame.id!r}")

    def delete_frame(self, frame_id: str) -> None:
        self._require_admin()
        remaining = [frame for frame in self._frames if frame.id != str(frame_id)]
        if len(remaining) == len(self._frames):
            raise FrameNotFoundError(f"No frame with id {frame_id!r}")
        self._frames = remaining
        self._commit()
        self.frameRemoved.emit(str(frame_id))

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _require_admin(self) -> None:
        if not self._admin:
            raise AdminRequiredError("Editing event frames requires admin mode")

    def _next_id(self) -> str:
        candidate = int(time.time() * 1000)
        while self.contains(str(candidate)):
            candidate += 1
        return str(candidate)

    def _commit(self) -> None:
        self.save()
        self.framesChanged.emit()


def _validated(name: str, image_url: str) -> tuple[str, str]:
    name = (name or "").strip()
    image_url = (image_url or "").strip()
    if not name:
        raise FrameValidationError("Frame name is required")
    if not image_url:
        raise FrameValidationError("Frame image URL is required")
    return name, image_url


__all__ = ["CATALOG_SCHEMA", "DEFAULT_FRAMES", "FrameLibrary"]
