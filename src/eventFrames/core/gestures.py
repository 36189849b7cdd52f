"""Pointer and touch gesture state machine for the compositor canvas.

The tracker converts raw pointer events, expressed in preview-canvas
coordinates, into :class:`TransformState` mutations:

* one pointer pans the photo by the screen-space delta between events;
* two pointers pinch (zoom) and twist (rotate) relative to the moment the
  second pointer touched down;
* lifting one finger of a pinch resumes panning from the remaining finger's
  current position so the photo does not jump.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from typing import Optional

from PySide6.QtCore import QPointF

from ..config import MAX_ZOOM, MIN_ZOOM, PINCH_MIN_DISTANCE
from ..models.types import PinchGestureState, TransformState
from .geometry import clamp_zoom, pointer_angle, pointer_distance

_LOGGER = logging.getLogger(__name__)

MOUSE_POINTER_ID = -1


class GestureMode(enum.Enum):
    IDLE = "idle"
    PANNING = "panning"
    GESTURING = "gesturing"


class GestureTracker:
    """Track active pointers and apply pan / pinch / rotate to a transform."""

    def __init__(
        self,
        *,
        transform_provider: Callable[[], TransformState],
        has_image: Callable[[], bool],
        on_changed: Callable[[], None],
        zoom_limits: tuple[float, float] = (MIN_ZOOM, MAX_ZOOM),
    ) -> None:
        """Initialize the tracker.

        Parameters
        ----------
        transform_provider:
            Callable returning the transform to mutate.
        has_image:
            Callable reporting whether a photo is loaded; gestures are ignored
            while it returns ``False``.
        on_changed:
            Invoked after every transform mutation.
        zoom_limits:
            ``(minimum, maximum)`` zoom applied while pinching.
        """
        self._transform_provider = transform_provider
        self._has_image = has_image
        self._on_changed = on_changed
        self._zoom_limits = zoom_limits

        self._mode = GestureMode.IDLE
        # Insertion order decides which two pointers form the pinch pair.
        self._pointers: dict[int, QPointF] = {}
        self._pan_pointer: Optional[int] = None
        self._last_pos = QPointF()
        self._pinch: Optional[PinchGestureState] = None
        self._pinch_pair: tuple[int, int] | None = None

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------
    @property
    def mode(self) -> GestureMode:
        return self._mode

    @property
    def pinch_state(self) -> Optional[PinchGestureState]:
        return self._pinch

    def active_pointer_count(self) -> int:
        return len(self._pointers)

    # ------------------------------------------------------------------
    # Generic pointer API
    # ------------------------------------------------------------------
    def pointer_down(self, pointer_id: int, pos: QPointF) -> bool:
        """Register a new pointer; return ``True`` if it was accepted."""

        if not self._has_image():
            return False
        self._pointers[pointer_id] = QPointF(pos)
        count = len(self._pointers)
        if count == 1:
            self._start_panning(pointer_id)
        elif count == 2 or self._mode is not GestureMode.GESTURING:
            self._start_pinch()
        return True

    def pointer_move(self, pointer_id: int, pos: QPointF) -> bool:
        """Update *pointer_id*; return ``True`` if the transform changed."""

        if pointer_id not in self._pointers:
            return False
        self._pointers[pointer_id] = QPointF(pos)
        if not self._has_image():
            return False

        if self._mode is GestureMode.PANNING and pointer_id == self._pan_pointer:
            return self._apply_pan(pos)
        if self._mode is GestureMode.GESTURING and self._pinch_pair and pointer_id in self._pinch_pair:
            return self._apply_pinch()
        return False

    def pointer_up(self, pointer_id: int) -> None:
        if self._pointers.pop(pointer_id, None) is None:
            return
        remaining = len(self._pointers)
        if remaining == 0:
            self._reset_tracking()
            return
        if self._mode is GestureMode.GESTURING:
            if remaining == 1:
                self._start_panning(next(iter(self._pointers)))
            elif self._pinch_pair and pointer_id in self._pinch_pair:
                self._start_pinch()

    def cancel(self) -> None:
        """Drop every tracked pointer (pointer leave, touch cancel)."""
        self._pointers.clear()
        self._reset_tracking()

    # ------------------------------------------------------------------
    # Mouse convenience wrappers: mouse input only ever pans
    # ------------------------------------------------------------------
    def mouse_press(self, pos: QPointF) -> bool:
        return self.pointer_down(MOUSE_POINTER_ID, pos)

    def mouse_move(self, pos: QPointF) -> bool:
        return self.pointer_move(MOUSE_POINTER_ID, pos)

    def mouse_release(self) -> None:
        self.pointer_up(MOUSE_POINTER_ID)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _start_panning(self, pointer_id: int) -> None:
        self._mode = GestureMode.PANNING
        self._pan_pointer = pointer_id
        self._last_pos = QPointF(self._pointers[pointer_id])
        self._pinch = None
        self._pinch_pair = None

    def _start_pinch(self) -> None:
        first, second = list(self._pointers)[:2]
        p1 = self._pointers[first]
        p2 = self._pointers[second]
        transform = self._transform_provider()
        self._pinch = PinchGestureState(
            initial_distance=pointer_distance(p1, p2),
            initial_angle=pointer_angle(p1, p2),
            initial_zoom=transform.zoom,
            initial_rotation=transform.rotation,
        )
        self._pinch_pair = (first, second)
        self._pan_pointer = None
        self._mode = GestureMode.GESTURING

    def _reset_tracking(self) -> None:
        self._mode = GestureMode.IDLE
        self._pan_pointer = None
        self._pinch = None
        self._pinch_pair = None

    def _apply_pan(self, pos: QPointF) -> bool:
        dx = pos.x() - self._last_pos.x()
        dy = pos.y() - self._last_pos.y()
        self._last_pos = QPointF(pos)
        if dx == 0.0 and dy == 0.0:
            return False
        self._transform_provider().translate(dx, dy)
        self._on_changed()
        return True

    def _apply_pinch(self) -> bool:
        pinch = self._pinch
        if pinch is None or self._pinch_pair is None:
            return False
        if pinch.initial_distance < PINCH_MIN_DISTANCE:
            _LOGGER.debug("Ignoring pinch update with degenerate initial distance")
            return False
        p1 = self._pointers[self._pinch_pair[0]]
        p2 = self._pointers[self._pinch_pair[1]]
        distance = pointer_distance(p1, p2)
        angle = pointer_angle(p1, p2)

        transform = self._transform_provider()
        minimum, maximum = self._zoom_limits
        transform.zoom = clamp_zoom(pinch.initial_zoom * (distance / pinch.initial_distance), minimum, maximum)
        transform.rotation = pinch.initial_rotation + (angle - pinch.initial_angle)
        self._on_changed()
        return True
