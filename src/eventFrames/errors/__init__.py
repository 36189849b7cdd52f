"""Custom exception hierarchy for eventFrames."""

from __future__ import annotations


class EventFramesError(Exception):
    """Base class for all custom errors raised by eventFrames."""


# --- 3-layer hierarchy ---

class DomainError(EventFramesError):
    """Base class for domain-level errors."""


class InfrastructureError(EventFramesError):
    """Base class for infrastructure-level errors."""


class ApplicationError(EventFramesError):
    """Base class for application-level errors."""


# --- Domain errors ---

class FrameNotFoundError(DomainError):
    """Raised when the requested event frame cannot be located."""


class FrameValidationError(DomainError):
    """Raised when a frame record is missing its name or image URL."""


class AdminRequiredError(DomainError):
    """Raised when a catalog mutation is attempted outside admin mode."""


# --- Infrastructure errors ---

class ImageDecodeError(InfrastructureError):
    """Raised when a photo or frame image cannot be fetched or decoded."""


class CatalogLoadError(InfrastructureError):
    """Raised when the frame catalog file cannot be parsed or validated."""


# --- Application errors ---

class ExportError(ApplicationError):
    """Raised when the composited image cannot be rendered or written."""


class ExportPreconditionError(ExportError):
    """Raised when an export is requested before both images are loaded."""


# --- Settings ---

class SettingsError(EventFramesError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""
