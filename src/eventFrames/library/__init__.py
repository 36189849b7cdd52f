"""Frame catalog management."""

from .frames import DEFAULT_FRAMES, FrameLibrary

__all__ = ["DEFAULT_FRAMES", "FrameLibrary"]
