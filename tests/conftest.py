import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make the sources importable without an editable install.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Every test renders through Qt; never try to reach a real display.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session")
def qapp():
    pytest.importorskip("PySide6.QtWidgets", reason="Qt widgets not available", exc_type=ImportError)
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


class InlineThreadPool:
    """Stand-in for ``QThreadPool`` that runs each runnable immediately."""

    def __init__(self) -> None:
        self.started = []

    def start(self, runnable) -> None:
        self.started.append(runnable)
        runnable.run()


class DeferredThreadPool:
    """Collect runnables so a test can decide when (and in which order) they run."""

    def __init__(self) -> None:
        self.pending = []

    def start(self, runnable) -> None:
        self.pending.append(runnable)

    def run(self, index: int) -> None:
        self.pending.pop(index).run()


@pytest.fixture
def inline_pool() -> InlineThreadPool:
    return InlineThreadPool()


@pytest.fixture
def deferred_pool() -> DeferredThreadPool:
    return DeferredThreadPool()
