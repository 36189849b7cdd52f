"""Qt widgets composing the main application window."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QThreadPool
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from ...appctx import AppContext
from ...errors import EventFramesError
from ...errors.handler import ErrorSeverity
from ...models.types import EventFrame
from .controllers.compositor_controller import CompositorController
from .models.compositor_session import CompositorSession
from .widgets.adjust_panel import AdjustPanel
from .widgets.compositor_canvas import CompositorCanvas
from .widgets.dialogs import confirm_action, select_photo
from .widgets.frame_dialog import FrameDialog
from .widgets.frame_picker import FramePicker
from .widgets.notification_toast import NotificationToast


class MainWindow(QMainWindow):
    """Primary window: upload a photo, adjust it, pick a frame, download."""

    def __init__(
        self,
        context: AppContext,
        *,
        load_thumbnails: bool = True,
        thread_pool: Optional[QThreadPool] = None,
    ) -> None:
        super().__init__()
        self._context = context
        self.setWindowTitle("Event Frames")
        self.resize(1100, 720)

        library = context.frames
        if library is None:
            raise ValueError("AppContext has no frame library")
        self.session = CompositorSession(self)
        self.controller = CompositorController(
            self.session,
            library,
            context.errors,
            settings=context.settings,
            thread_pool=thread_pool,
            parent=self,
        )

        self.canvas = CompositorCanvas(self.session, self)
        self.adjust_panel = AdjustPanel(self.session)
        self.frame_picker = FramePicker(library, load_thumbnails=load_thumbnails)
        self.toast = NotificationToast(self)

        self.upload_button = QPushButton("Choose Photo...")
        self.download_button = QPushButton("Download Image")
        self.download_button.setMinimumHeight(40)

        self._build_layout()
        self._connect_signals()

        context.errors.register_ui_callback(self._show_notification)
        self._update_download_button()
        self.controller.ensure_default_frame()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def _build_layout(self) -> None:
        sidebar = QWidget()
        sidebar_layout = QVBoxLayout(sidebar)
        sidebar_layout.setSpacing(12)

        upload_box = QGroupBox("1. Upload Your Photo")
        upload_layout = QVBoxLayout(upload_box)
        upload_layout.addWidget(self.upload_button)
        sidebar_layout.addWidget(upload_box)

        self.adjust_box = QGroupBox("2. Adjust")
        adjust_layout = QVBoxLayout(self.adjust_box)
        adjust_layout.addWidget(self.adjust_panel)
        hint = QLabel("Drag to move. Pinch or use the wheel to zoom. Twist to rotate.")
        hint.setWordWrap(True)
        hint.setStyleSheet("color: #6B7280;")
        adjust_layout.addWidget(hint)
        sidebar_layout.addWidget(self.adjust_box)

        frames_box = QGroupBox("3. Choose Frame")
        frames_layout = QVBoxLayout(frames_box)
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QScrollArea.Shape.NoFrame)
        scroll.setWidget(self.frame_picker)
        frames_layout.addWidget(scroll)
        sidebar_layout.addWidget(frames_box, 1)

        sidebar_layout.addWidget(self.download_button)
        sidebar.setFixedWidth(380)

        central = QWidget(self)
        layout = QHBoxLayout(central)
        layout.addWidget(sidebar)
        layout.addWidget(self.canvas, 1)
        self.setCentralWidget(central)
        self._update_adjust_visibility()

    def _connect_signals(self) -> None:
        self.upload_button.clicked.connect(self._choose_photo)
        self.download_button.clicked.connect(self._download)

        self.frame_picker.frameSelected.connect(self._on_frame_clicked)
        self.frame_picker.addRequested.connect(self._add_frame)
        self.frame_picker.editRequested.connect(self._edit_frame)
        self.frame_picker.deleteRequested.connect(self._delete_frame)

        self.session.sourceChanged.connect(self._update_adjust_visibility)
        self.session.sourceChanged.connect(self._update_download_button)
        self.session.frameChanged.connect(self._on_session_frame_changed)
        self.controller.frameLoadFailed.connect(self._restore_frame_selection)
        self.controller.processingChanged.connect(self._on_processing_changed)

    # ------------------------------------------------------------------
    # Photo and frame actions
    # ------------------------------------------------------------------
    def _choose_photo(self) -> None:
        path = select_photo(self)
        if path is not None:
            self.controller.load_source_file(path)

    def _on_frame_clicked(self, frame: EventFrame) -> None:
        self.frame_picker.set_selected(frame.id)
        self.controller.select_frame(frame)

    def _on_session_frame_changed(self) -> None:
        self._restore_frame_selection()
        self._update_download_button()

    def _restore_frame_selection(self, _failed: object = None) -> None:
        # The highlight follows the frame the session actually shows.
        frame = self.session.frame()
        self.frame_picker.set_selected(frame.id if frame is not None else None)

    def _add_frame(self) -> None:
        dialog = FrameDialog(self)
        if not dialog.exec():
            return
        self._run_library_action(
            lambda: self._context.frames.add_frame(dialog.name(), dialog.image_url()),
            "Frame added.",
        )

    def _edit_frame(self, frame: EventFrame) -> None:
        dialog = FrameDialog(self, frame=frame)
        if not dialog.exec():
            return
        self._run_library_action(
            lambda: self._context.frames.update_frame(dialog.result_frame()),
            "Frame updated.",
        )

    def _delete_frame(self, frame: EventFrame) -> None:
        if not confirm_action(self, f"Delete the frame \"{frame.name}\"?", title="Delete Frame"):
            return
        self._run_library_action(
            lambda: self._context.frames.delete_frame(frame.id),
            "Frame deleted.",
        )

    def _run_library_action(self, action, success_message: str) -> None:
        try:
            action()
        except EventFramesError as exc:
            self._context.errors.handle(exc)
            return
        except OSError as exc:
            self._context.errors.handle(exc, message="Could not save the frame catalog.")
            return
        self._context.errors.notify(success_message)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def _download(self) -> None:
        self.controller.export()

    def _on_processing_changed(self, processing: bool) -> None:
        self.canvas.set_processing(processing)
        self.download_button.setText("Processing..." if processing else "Download Image")
        self._update_download_button()

    def _update_download_button(self) -> None:
        ready = self.session.has_source() and self.session.has_frame()
        self.download_button.setEnabled(ready and not self.controller.is_processing())

    def _update_adjust_visibility(self) -> None:
        self.adjust_box.setVisible(self.session.has_source())

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def _show_notification(self, message: str, severity: ErrorSeverity) -> None:
        kind = "error" if severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL) else "success"
        self.toast.show_toast(message, kind)

    def closeEvent(self, event: QCloseEvent) -> None:  # type: ignore[override]
        self._context.errors.register_ui_callback(None)
        super().closeEvent(event)


__all__ = ["MainWindow"]
