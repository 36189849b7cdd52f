"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
import logging
import os
import sys
import urllib.parse
from pathlib import Path
from typing import Optional

import typer
from PySide6.QtCore import QPointF
from PySide6.QtGui import QGuiApplication, QImage
from rich import print
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import EXPORT_FILENAME_PREFIX, HIGH_RES_SIZE, PREVIEW_SIZE
from .core.compositor import export_high_res
from .core.export import export_composition, png_data_uri
from .core.geometry import clamp_zoom
from .errors import EventFramesError
from .library.frames import FrameLibrary
from .models.types import EventFrame, TransformState
from .settings.manager import SettingsManager
from .utils.image_loader import load_qimage, load_qimage_from_url

_LOGGER = logging.getLogger(__name__)

app = typer.Typer(help="Place photos inside decorative event frames")
frames_app = typer.Typer(help="Manage the event frame catalog")
app.add_typer(frames_app, name="frames")

_console = Console()
_qt_app: Optional[QGuiApplication] = None


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except EventFramesError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _ensure_qt() -> QGuiApplication:
    """Create the Qt application object text rendering depends on."""

    global _qt_app
    existing = QGuiApplication.instance()
    if existing is not None:
        return existing  # type: ignore[return-value]
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    _qt_app = QGuiApplication([sys.argv[0] if sys.argv else "eventframes"])
    return _qt_app


def _open_library(catalog: Optional[Path], *, admin: bool = False) -> FrameLibrary:
    if catalog is None:
        settings = SettingsManager()
        settings.load()
        catalog = settings.frames_path()
    library = FrameLibrary(catalog, admin=admin)
    library.load()
    return library


def _is_image_reference(value: str) -> bool:
    """Return ``True`` when *value* names an image rather than a catalog id."""

    scheme = urllib.parse.urlparse(value).scheme.lower()
    if scheme in ("http", "https", "file", "data"):
        return True
    return Path(value).expanduser().exists()


def _resolve_frame(frame: str, catalog: Optional[Path]) -> QImage:
    if _is_image_reference(frame):
        return load_qimage_from_url(frame)
    entry = _open_library(catalog).get(frame)
    _LOGGER.info("Using catalog frame %s (%s)", entry.id, entry.name)
    return load_qimage_from_url(entry.image_url)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"eventframes {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit."
    ),
) -> None:
    """Compose photos with event frames from the command line."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
@_handle_errors
def compose(
    photo: Path = typer.Argument(..., exists=True, dir_okay=False, help="Photo to place in the frame."),
    frame: str = typer.Argument(..., help="Frame image path, URL or catalog id."),
    zoom: float = typer.Option(1.0, help="Zoom factor on top of the cover fit."),
    rotation: float = typer.Option(0.0, help="Clockwise rotation in degrees."),
    offset_x: float = typer.Option(0.0, "--offset-x", help="Horizontal offset in preview pixels."),
    offset_y: float = typer.Option(0.0, "--offset-y", help="Vertical offset in preview pixels."),
    size: int = typer.Option(HIGH_RES_SIZE, min=1, help="Side length of the exported image."),
    preview_size: int = typer.Option(PREVIEW_SIZE, min=1, help="Canvas size the offsets refer to."),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", file_okay=False, help="Output directory (defaults to the current directory)."
    ),
    prefix: str = typer.Option(EXPORT_FILENAME_PREFIX, help="Filename prefix."),
    data_uri: bool = typer.Option(False, "--data-uri", help="Print a PNG data URI instead of saving."),
    catalog: Optional[Path] = typer.Option(None, help="Frame catalog used to resolve frame ids."),
) -> None:
    """Render PHOTO inside FRAME and save the high-resolution PNG."""

    _ensure_qt()
    clamped = clamp_zoom(zoom)
    if clamped != zoom:
        _LOGGER.warning("Zoom %s clamped to %s", zoom, clamped)
    state = TransformState(zoom=clamped, rotation=rotation, offset=QPointF(offset_x, offset_y))

    source = load_qimage(photo)
    frame_image = _resolve_frame(frame, catalog)

    if data_uri:
        image = export_high_res(source, frame_image, state, target_size=size, preview_size=preview_size)
        typer.echo(png_data_uri(image))
        return

    path = export_composition(
        source,
        frame_image,
        state,
        output if output is not None else Path.cwd(),
        prefix=prefix,
        target_size=size,
        preview_size=preview_size,
    )
    print(f"[green]Saved {path}")


@frames_app.command("list")
@_handle_errors
def frames_list(catalog: Optional[Path] = typer.Option(None, help="Frame catalog file.")) -> None:
    """List the frames in the catalog."""

    library = _open_library(catalog)
    table = Table(title="Event Frames")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Image URL", overflow="fold")
    for entry in library.frames():
        table.add_row(entry.id, entry.name, entry.image_url)
    _console.print(table)


@frames_app.command("add")
@_handle_errors
def frames_add(
    name: str,
    url: str,
    admin: bool = typer.Option(False, "--admin", help="Enable catalog editing."),
    catalog: Optional[Path] = typer.Option(None, help="Frame catalog file."),
) -> None:
    """Add a frame to the top of the catalog."""

    library = _open_library(catalog, admin=admin)
    entry = library.add_frame(name, url)
    print(f"[green]Added frame {entry.id} ({entry.name})")


@frames_app.command("edit")
@_handle_errors
def frames_edit(
    frame_id: str,
    name: Optional[str] = typer.Option(None, help="New frame name."),
    url: Optional[str] = typer.Option(None, help="New image URL."),
    admin: bool = typer.Option(False, "--admin", help="Enable catalog editing."),
    catalog: Optional[Path] = typer.Option(None, help="Frame catalog file."),
) -> None:
    """Rename a frame or point it at a new image."""

    library = _open_library(catalog, admin=admin)
    current = library.get(frame_id)
    updated = library.update_frame(
        EventFrame(
            id=current.id,
            name=name if name is not None else current.name,
            image_url=url if url is not None else current.image_url,
        )
    )
    print(f"[green]Updated frame {updated.id} ({updated.name})")


@frames_app.command("rm")
@_handle_errors
def frames_rm(
    frame_id: str,
    admin: bool = typer.Option(False, "--admin", help="Enable catalog editing."),
    catalog: Optional[Path] = typer.Option(None, help="Frame catalog file."),
) -> None:
    """Remove a frame from the catalog."""

    library = _open_library(catalog, admin=admin)
    library.delete_frame(frame_id)
    print(f"[green]Removed frame {frame_id}")


@app.command()
def gui(
    photo: Optional[Path] = typer.Argument(None, exists=True, dir_okay=False, help="Photo to open."),
    admin: bool = typer.Option(False, "--admin", help="Enable frame catalog editing."),
) -> None:
    """Launch the desktop application."""

    from .gui.main import main as gui_main

    argv = [sys.argv[0] if sys.argv else "eventframes"]
    if photo is not None:
        argv.append(str(photo))
    raise typer.Exit(gui_main(argv, admin=admin))


if __name__ == "__main__":  # pragma: no cover
    app()
