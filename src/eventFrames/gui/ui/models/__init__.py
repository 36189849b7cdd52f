"""Qt models backing the compositor UI."""

from .compositor_session import CompositorSession

__all__ = ["CompositorSession"]
