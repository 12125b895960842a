from __future__ import annotations

import os
import time

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt5.QtCore import QCoreApplication, QObject, QProcess, pyqtSignal
from PyQt5.QtGui import QColor, QImage
from PyQt5.QtWidgets import QApplication

from linkshade.core.host import PageRenderer, ViewerHost
from linkshade.core.page.link_provider import LinkProvider
from linkshade.core.session import DocumentSession
from linkshade.utils.settings import LinkSettings


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


class _DummyProvider(LinkProvider):
    def __init__(self, links_by_page=None, size=(612.0, 792.0)) -> None:
        self.links_by_page = dict(links_by_page or {})
        self.size = size
        self.calls: list[int] = []

    @property
    def page_count(self) -> int:
        return max(self.links_by_page, default=0)

    def get_page_links(self, page):
        self.calls.append(page)
        return list(self.links_by_page.get(page, []))

    def page_size(self, page):
        return self.size


class _DummyRenderer(PageRenderer):
    def __init__(self, cache_dir: str, width: int = 612, events=None) -> None:
        self._cache_dir = cache_dir
        self._width = width
        self.complete = True
        self.pages = 0
        self.events = events if events is not None else []

    @property
    def render_width(self) -> int:
        return self._width

    @property
    def page_count(self) -> int:
        return self.pages

    @property
    def cache_dir(self) -> str:
        return self._cache_dir

    def conversion_complete(self) -> bool:
        return self.complete

    def page_image_path(self, page):
        path = os.path.join(self._cache_dir, f"page-{page}.png")
        return path if os.path.exists(path) else None

    def invalidate_image(self, path) -> None:
        self.events.append(("invalidate", path))

    def write_page(self, page: int, width: int = 612, height: int = 792) -> str:
        image = QImage(width, height, QImage.Format_RGB32)
        image.fill(QColor("white"))
        path = os.path.join(self._cache_dir, f"page-{page}.png")
        assert image.save(path)
        self.pages = max(self.pages, page)
        return path


class _DummyViewer(ViewerHost):
    def __init__(self) -> None:
        self.displayed = {1}
        self.navigated: list[int] = []
        self.flashed: list[float] = []
        self.opened: list[str] = []
        self.remote_viewer = None
        self.shown: list[tuple[int, QImage]] = []
        self.restored: list[int] = []
        self.scrolls: list[str] = []
        self.messages: list[str] = []
        self.position = 0
        self.bottom = 1

    def is_page_displayed(self, page) -> bool:
        return page in self.displayed

    def navigate_to(self, page) -> None:
        self.navigated.append(page)

    def flash_indicator(self, top) -> None:
        self.flashed.append(top)

    def open_document(self, path):
        self.opened.append(path)
        return self.remote_viewer

    def show_image(self, page, image) -> None:
        self.shown.append((page, image))

    def restore_page(self, page) -> None:
        self.restored.append(page)

    def is_at_bottom(self) -> bool:
        return self.position >= self.bottom

    def scroll_down(self) -> None:
        self.position += 1
        self.scrolls.append("down")

    def scroll_to_top(self) -> None:
        self.position = 0
        self.scrolls.append("top")

    def message(self, text) -> None:
        self.messages.append(text)


class _StartedProcesses(list):
    factory = None


class _DummyProcess(QObject):
    finished = pyqtSignal(int, int)
    errorOccurred = pyqtSignal(int)

    def __init__(self, events, parent=None) -> None:
        super().__init__(parent)
        self.events = events
        self.program = None
        self.args: list[str] = []
        self.running = False
        self.killed = False

    def start(self, program, args) -> None:
        self.program = program
        self.args = list(args)
        self.running = True
        self.events.append(("start", self.args[0]))

    def state(self):
        return QProcess.Running if self.running else QProcess.NotRunning

    def kill(self) -> None:
        self.killed = True
        self.running = False

    def waitForFinished(self, msecs=30000) -> bool:  # noqa: N802
        return True

    @property
    def input_path(self) -> str:
        return self.args[0]

    @property
    def output_path(self) -> str:
        return self.args[-1]

    def complete(self, exit_code: int = 0, output: bytes | None = b"decorated") -> None:
        if output is not None:
            with open(self.output_path, "wb") as f:
                f.write(output)
        self.running = False
        self.finished.emit(exit_code, QProcess.NormalExit)

    def fail_to_start(self) -> None:
        self.running = False
        self.errorOccurred.emit(QProcess.FailedToStart)


@pytest.fixture
def make_provider():
    return _DummyProvider


@pytest.fixture
def events():
    return []


@pytest.fixture
def renderer(tmp_path, events, qapp):
    return _DummyRenderer(str(tmp_path), events=events)


@pytest.fixture
def viewer():
    return _DummyViewer()


@pytest.fixture
def processes(events):
    """Started dummy processes, in launch order."""
    started = _StartedProcesses()

    def factory(parent=None):
        process = _DummyProcess(events, parent)
        started.append(process)
        return process

    started.factory = factory
    return started


@pytest.fixture
def make_session(renderer, processes):
    def _make(provider, settings=None, process_factory=None):
        return DocumentSession(
            "/tmp/doc.pdf",
            provider,
            renderer,
            settings or LinkSettings(),
            process_factory=process_factory or processes.factory,
        )

    return _make


@pytest.fixture
def wait_until(qapp):
    def _wait(predicate, timeout: float = 10.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            QCoreApplication.processEvents()
            if predicate():
                return True
            time.sleep(0.01)
        return predicate()

    return _wait
