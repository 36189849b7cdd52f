"""Data models used by eventFrames."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from PySide6.QtCore import QPointF


@dataclass(slots=True)
class TransformState:
    """Placement of the user photo relative to the frame.

    ``zoom`` multiplies the cover-fit base scale, ``rotation`` is expressed in
    degrees and is unbounded, and ``offset`` is a translation
    in preview-canvas pixels accumulated from drag deltas.
    """

    zoom: float = 1.0
    rotation: float = 0.0
    offset: QPointF = field(default_factory=lambda: QPointF(0.0, 0.0))

    @classmethod
    def identity(cls) -> "TransformState":
        return cls()

    def reset(self) -> None:
        """Restore the identity transform in place."""
        self.zoom = 1.0
        self.rotation = 0.0
        self.offset = QPointF(0.0, 0.0)

    def is_identity(self) -> bool:
        return (
            self.zoom == 1.0
            and self.rotation == 0.0
            and self.offset.x() == 0.0
            and self.offset.y() == 0.0
        )

    def translate(self, dx: float, dy: float) -> None:
        self.offset = QPointF(self.offset.x() + float(dx), self.offset.y() + float(dy))

    def scaled_offset(self, ratio: float) -> QPointF:
        """Return the offset expressed on a canvas *ratio* times larger."""
        return QPointF(self.offset.x() * ratio, self.offset.y() * ratio)

    def copy(self) -> "TransformState":
        return TransformState(
            zoom=self.zoom,
            rotation=self.rotation,
            offset=QPointF(self.offset),
        )

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.zoom, self.rotation, self.offset.x(), self.offset.y())


@dataclass(slots=True)
class PinchGestureState:
    """Snapshot captured when the second pointer touches down."""

    initial_distance: float
    initial_angle: float
    initial_zoom: float
    initial_rotation: float


@dataclass(slots=True)
class EventFrame:
    """Decorative overlay offered in the frame picker."""

    id: str
    name: str
    image_url: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "imageUrl": self.image_url}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "EventFrame":
        return cls(
            id=str(payload["id"]),
            name=str(payload["name"]),
            image_url=str(payload["imageUrl"]),
        )
