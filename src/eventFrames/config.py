"""Default configuration values for eventFrames."""

from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# Canvas sizes
# ---------------------------------------------------------------------------

# The interactive preview is always rendered on a square canvas of this size.
# Pointer offsets are accumulated in this coordinate space, so changing the
# value also changes how far a drag moves the photo relative to the frame.
PREVIEW_SIZE: Final[int] = 500

# Side length of the exported PNG.  The same transform state is replayed at
# this size with the offset scaled by ``HIGH_RES_SIZE / PREVIEW_SIZE``.
HIGH_RES_SIZE: Final[int] = 4000

# ---------------------------------------------------------------------------
# Transform limits
# ---------------------------------------------------------------------------

MIN_ZOOM: Final[float] = 0.1
MAX_ZOOM: Final[float] = 5.0
ZOOM_STEP: Final[float] = 0.1
ROTATION_SLIDER_RANGE: Final[tuple[int, int]] = (0, 360)

# Two touch points closer than this (in preview pixels) cannot produce a
# meaningful zoom ratio.
PINCH_MIN_DISTANCE: Final[float] = 1e-3

# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

EXPORT_FILENAME_PREFIX: Final[str] = "RNMSG"
EXPORT_FORMAT: Final[str] = "PNG"

# Delay before the export worker is queued so the "processing" overlay gets a
# chance to paint first.
EXPORT_YIELD_MS: Final[int] = 50

# ---------------------------------------------------------------------------
# UI
# ---------------------------------------------------------------------------

PLACEHOLDER_TEXT: Final[str] = "Your preview will appear here."
PLACEHOLDER_COLOR: Final[str] = "#9CA3AF"
PLACEHOLDER_FONT_PX: Final[int] = 16
NOTIFICATION_TIMEOUT_MS: Final[int] = 4000
FRAME_TILE_SIZE: Final[int] = 96
FRAME_GRID_COLUMNS: Final[int] = 3

# Timeout applied when a frame image has to be fetched over HTTP.
NETWORK_TIMEOUT_SEC: Final[float] = 15.0

FRAMES_FILE_NAME: Final[str] = "frames.json"
