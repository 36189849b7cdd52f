"""Reusable Qt widgets for the Event Frames GUI."""

from .adjust_panel import AdjustPanel
from .compositor_canvas import CompositorCanvas
from .frame_dialog import FrameDialog
from .frame_picker import FramePicker, FrameTile
from .notification_toast import NotificationToast

__all__ = [
    "AdjustPanel",
    "CompositorCanvas",
    "FrameDialog",
    "FramePicker",
    "FrameTile",
    "NotificationToast",
]
