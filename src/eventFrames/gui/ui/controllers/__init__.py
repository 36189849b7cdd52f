"""Controllers coordinating the compositor window."""

from .compositor_controller import CompositorController

__all__ = ["CompositorController"]
