import logging
from enum import Enum
from typing import Callable, Optional


class ErrorSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorHandler:
    """Log failures and surface the user-facing ones through a UI callback.

    Every failure in the compositor is terminal for the attempted operation
    only; the handler is the single place where it gets reported.
    """

    def __init__(self, logger: logging.Logger):
        self._logger = logger
        self._ui_callback: Optional[Callable[[str, ErrorSeverity], None]] = None

    def register_ui_callback(self, callback: Optional[Callable[[str, ErrorSeverity], None]]):
        self._ui_callback = callback

    def handle(
        self,
        error: Exception,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        *,
        message: Optional[str] = None,
        context: dict = None,
    ):
        # Log the error
        log_method = getattr(self._logger, severity.value, self._logger.error)
        log_method("%s: %s", error.__class__.__name__, error, extra=context or {})

        # Notify UI
        if self._ui_callback and severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL):
            self._ui_callback(message or str(error), severity)

    def notify(self, message: str, severity: ErrorSeverity = ErrorSeverity.INFO):
        """Forward a plain status *message* to the UI without an exception."""
        self._logger.debug("Notification (%s): %s", severity.value, message)
        if self._ui_callback:
            self._ui_callback(message, severity)
