"""
Background pipeline drawing link outlines onto rendered page images.
"""

import logging
import os
import re
import tempfile
from collections import deque
from enum import Enum
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Deque, List, Optional, Sequence, Tuple

from PyQt5.QtCore import QObject, QProcess, QTimer, pyqtSignal
from PyQt5.QtGui import QImageReader

from ..page.models import LinkRegion

if TYPE_CHECKING:
    from ..session import DocumentSession

logger = logging.getLogger(__name__)

PAGE_IMAGE_PATTERN = re.compile(r"^page-(\d+)\.([A-Za-z0-9]+)$")


class PipelineStatus(Enum):
    IDLE = "idle"
    SCHEDULED = "scheduled"
    CONVERTING = "converting"
    DONE = "done"
    CANCELLED = "cancelled"


def list_page_images(cache_dir: str) -> List[Tuple[int, str]]:
    """
    Find rendered page images in a cache directory.

    Returns:
        (page, path) pairs sorted by page number
    """
    try:
        names = os.listdir(cache_dir)
    except OSError:
        return []

    images = []
    for name in names:
        match = PAGE_IMAGE_PATTERN.match(name)
        if match:
            images.append((int(match.group(1)), os.path.join(cache_dir, name)))
    images.sort(key=lambda item: item[0])
    return images


def build_convert_command(
    template: Sequence[str],
    apply_template: Sequence[str],
    input_path: str,
    output_path: str,
    regions: Sequence[LinkRegion],
    foreground: str,
    background: str,
) -> List[str]:
    """
    Expand a command template for one page image.

    An argument that is exactly ``{apply}`` is replaced by
    ``apply_template`` once per region, with ``{x0}``..``{y1}`` set to the
    region's pixel rectangle. Other arguments may use ``{input}``,
    ``{output}``, ``{fg}`` and ``{bg}``.
    """
    values = {
        "input": input_path,
        "output": output_path,
        "fg": foreground,
        "bg": background,
    }

    command = []
    for arg in template:
        if arg == "{apply}":
            for region in regions:
                rect = region.pixel_rect
                region_values = dict(
                    values,
                    x0=int(rect.x0),
                    y0=int(rect.y0),
                    x1=int(rect.x1),
                    y1=int(rect.y1),
                )
                command.extend(part.format(**region_values) for part in apply_template)
        else:
            command.append(arg.format(**values))
    return command


class DecorationPipeline(QObject):
    """
    Annotates the page images of one document session, one page at a time.

    Every page image is piped through an external command writing to a
    scratch file, which then replaces the original. A page whose command
    fails is skipped. Once the queue is empty a zero-length marker file is
    written to the cache directory; while it exists the document is not
    decorated again.

    At most one process and one retry timer exist per pipeline: every
    ``schedule`` and ``convert`` starts with ``cancel``.
    """

    # Signals
    status_changed = pyqtSignal(str)  # status indicator text, "" when idle
    page_decorated = pyqtSignal(int, str)  # page, image path
    page_skipped = pyqtSignal(int, str)  # page, image path
    finished = pyqtSignal()

    def __init__(self, session: "DocumentSession", process_factory=None, parent=None):
        super().__init__(parent)
        self._session = session
        self._process_factory = process_factory or QProcess

        self.status = PipelineStatus.IDLE
        self._pending: Deque[Tuple[int, str]] = deque()
        self._total = 0
        self._current: Optional[Tuple[int, str]] = None
        self._process = None
        self._scratch_file: Optional[str] = None
        self._status_text = ""
        # Bumped by cancel; callbacks of an older run must not resume it
        self._generation = 0

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_retry_timeout)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def sentinel_path(self) -> str:
        return os.path.join(
            self._session.renderer.cache_dir, self._session.settings.sentinel_name
        )

    @property
    def scratch_file(self) -> Optional[str]:
        return self._scratch_file

    @property
    def active_process(self):
        return self._process

    @property
    def pending_files(self) -> List[str]:
        return [path for _, path in self._pending]

    def is_timer_armed(self) -> bool:
        return self._timer.isActive()

    def is_done(self) -> bool:
        """Whether the document's images already carry link outlines."""
        return os.path.exists(self.sentinel_path)

    def reset(self) -> None:
        """Forget that decoration was applied so the next schedule redoes it."""
        self.cancel()
        try:
            os.remove(self.sentinel_path)
        except FileNotFoundError:
            pass
        self.status = PipelineStatus.IDLE

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def schedule(self, immediate: bool = False) -> None:
        """
        (Re)start decoration of the session's page images.

        Converts right away when ``immediate`` is set or the renderer has
        finished producing images, otherwise retries after
        ``retry_delay_ms``.
        """
        self.cancel()

        settings = self._session.settings
        if not self._session.is_open or not settings.decorate_pages:
            return

        if self.is_done():
            self.status = PipelineStatus.DONE
            return

        if immediate or self._session.renderer.conversion_complete():
            self.convert()
        else:
            self.status = PipelineStatus.SCHEDULED
            self._timer.start(settings.retry_delay_ms)
            logger.debug(
                "Page images not ready, retrying in %d ms", settings.retry_delay_ms
            )

    def _on_retry_timeout(self):
        self.schedule()

    def convert(self) -> None:
        """Queue every rendered page image and start with the first one."""
        self.cancel()

        cache_dir = self._session.renderer.cache_dir
        images = list_page_images(cache_dir)
        self._pending = deque(images)
        self._total = len(images)
        self.status = PipelineStatus.CONVERTING

        if images:
            suffix = os.path.splitext(images[0][1])[1]
            fd, self._scratch_file = tempfile.mkstemp(
                prefix="links-", suffix=suffix, dir=cache_dir
            )
            os.close(fd)

        logger.info("Decorating %d page images in %s", len(images), cache_dir)
        self._process_next()

    def cancel(self) -> None:
        """Stop all pending and active work. Safe to call at any time."""
        was_active = self.status in (PipelineStatus.SCHEDULED, PipelineStatus.CONVERTING)

        self._generation += 1
        self._timer.stop()
        self._kill_process()
        self._pending.clear()
        self._current = None
        self._release()

        if was_active:
            self.status = PipelineStatus.CANCELLED
            logger.debug("Decoration cancelled")

    # ------------------------------------------------------------------
    # Queue processing
    # ------------------------------------------------------------------

    def _process_next(self) -> None:
        """Launch the command for the next page that has something to draw."""
        generation = self._generation
        while self._pending:
            page, path = self._pending.popleft()

            if not self._session.is_open:
                self._skip(page, path, "session closed")
            elif not os.path.exists(path):
                self._skip(page, path, "image vanished")
            else:
                try:
                    regions = self._page_regions(page, path)
                except Exception as e:
                    self._skip(page, path, f"failed to read links: {e}")
                else:
                    if regions:
                        self._launch(page, path, regions)
                        return
                    logger.debug("Page %d has no links, leaving image untouched", page)

            if generation != self._generation:
                return

        self._finish()

    def _page_regions(self, page: int, path: str) -> Tuple[LinkRegion, ...]:
        size = QImageReader(path).size()
        width = size.width() if size.isValid() else self._session.renderer.render_width
        return self._session.projector.project(page, width)

    def _launch(self, page: int, path: str, regions: Sequence[LinkRegion]) -> None:
        settings = self._session.settings

        # A leftover scratch file would hide a command that wrote nothing
        self._remove_scratch_output()

        command = build_convert_command(
            settings.convert_command,
            settings.convert_apply,
            path,
            self._scratch_file,
            regions,
            settings.foreground,
            settings.background,
        )

        process = self._process_factory(self)
        process.finished.connect(partial(self._on_process_finished, process))
        process.errorOccurred.connect(partial(self._on_process_error, process))
        self._process = process
        self._current = (page, path)

        done = self._total - len(self._pending)
        self._set_status_text(f"Decorating links {done}/{self._total}")
        logger.debug("Decorating page %d: %s", page, " ".join(command))

        process.start(command[0], command[1:])

    def _on_process_finished(self, process, exit_code=0, exit_status=QProcess.NormalExit):
        success = exit_status == QProcess.NormalExit and exit_code == 0
        self._page_done(process, success, f"exit code {exit_code}")

    def _on_process_error(self, process, error):
        # Other errors are followed by ``finished``
        if error == QProcess.FailedToStart:
            self._page_done(process, False, "command failed to start")

    def _page_done(self, process, success: bool, detail: str) -> None:
        if process is not self._process:
            return

        page, path = self._current
        self._drop_process()
        self._current = None
        generation = self._generation

        if not success:
            self._skip(page, path, detail)
        elif not self._session.is_open:
            self._skip(page, path, "session closed")
        elif not self._has_scratch_output():
            self._skip(page, path, "no output written")
        else:
            try:
                os.replace(self._scratch_file, path)
            except OSError as e:
                self._skip(page, path, str(e))
            else:
                self._session.renderer.invalidate_image(path)
                self.page_decorated.emit(page, path)

        if generation == self._generation:
            self._process_next()

    def _skip(self, page: int, path: str, reason: str) -> None:
        logger.warning("Skipping link decoration of page %d (%s): %s", page, path, reason)
        self.page_skipped.emit(page, path)

    def _finish(self) -> None:
        if self._session.is_open:
            try:
                Path(self.sentinel_path).touch()
            except OSError as e:
                logger.warning("Failed to write decoration marker: %s", e)
        self._release()
        self.status = PipelineStatus.DONE
        logger.info("Link decoration finished")
        self.finished.emit()

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    def _kill_process(self) -> None:
        process = self._process
        if process is None:
            return
        self._drop_process()
        if process.state() != QProcess.NotRunning:
            process.kill()
            process.waitForFinished(1000)

    def _drop_process(self) -> None:
        process = self._process
        if process is None:
            return
        self._process = None
        for signal in (process.finished, process.errorOccurred):
            try:
                signal.disconnect()
            except TypeError:
                pass
        process.deleteLater()

    def _has_scratch_output(self) -> bool:
        return (
            self._scratch_file is not None
            and os.path.exists(self._scratch_file)
            and os.path.getsize(self._scratch_file) > 0
        )

    def _remove_scratch_output(self) -> None:
        if self._scratch_file:
            try:
                os.remove(self._scratch_file)
            except FileNotFoundError:
                pass

    def _release(self) -> None:
        self._remove_scratch_output()
        self._scratch_file = None
        self._drop_process()
        self._set_status_text("")

    def _set_status_text(self, text: str) -> None:
        if text != self._status_text:
            self._status_text = text
            self.status_changed.emit(text)
