"""
Choosing a link on the displayed page by typing its letter code.
"""

import logging
import string
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence, Tuple

from PyQt5.QtCore import QEvent, QEventLoop, QObject, QRectF, Qt, pyqtSignal
from PyQt5.QtGui import QColor, QFont, QFontMetricsF, QImage, QPainter

from ..errors import NoLinksOnPage, PageNotReady, SelectionCancelled
from ..page.models import LinkAction, LinkRegion

if TYPE_CHECKING:
    from ..host import ViewerHost
    from ..session import DocumentSession

logger = logging.getLogger(__name__)

ALPHABET = string.ascii_uppercase
SCROLL_TOKEN = "<scroll>"
ABORT_TOKEN = "<abort>"

# Render width at which label_point_size applies (US letter at 72 dpi)
REFERENCE_WIDTH = 612.0


def code_length(n: int) -> int:
    """Smallest L with 26**L >= n, i.e. ceil(log26(n))."""
    length = 0
    while len(ALPHABET) ** length < n:
        length += 1
    return length


def make_codes(n: int) -> List[str]:
    """
    Distinct fixed-length letter codes for ``n`` candidates.

    Code ``i`` is ``i`` written in base 26 with digits A-Z, most
    significant first.
    """
    length = code_length(n)
    base = len(ALPHABET)
    codes = []
    for index in range(n):
        digits = []
        for _ in range(length):
            digits.append(ALPHABET[index % base])
            index //= base
        codes.append("".join(reversed(digits)))
    return codes


# ==============================================================================
# Selection state machine
# ==============================================================================


class FeedKind(Enum):
    CONTINUE = "continue"
    DONE = "done"
    NOOP = "noop"


@dataclass(frozen=True)
class Candidate:
    region: LinkRegion
    remaining: str  # Code letters not typed yet


@dataclass(frozen=True)
class FeedResult:
    kind: FeedKind
    candidates: Tuple[Candidate, ...] = ()
    action: Optional[LinkAction] = None


class KeyHintState:
    """
    Narrows the candidate links one typed letter at a time.

    ``feed`` returns DONE with the chosen action as soon as a single
    candidate is left, CONTINUE when the candidate set shrank, and NOOP for
    scroll tokens and letters that match no candidate.
    """

    def __init__(self, regions: Sequence[LinkRegion]):
        codes = make_codes(len(regions))
        self.candidates: Tuple[Candidate, ...] = tuple(
            Candidate(region, code) for region, code in zip(regions, codes)
        )

    @property
    def is_done(self) -> bool:
        return len(self.candidates) == 1

    @property
    def action(self) -> Optional[LinkAction]:
        return self.candidates[0].region.action if self.is_done else None

    def feed(self, token: Optional[str]) -> FeedResult:
        if self.is_done:
            return FeedResult(FeedKind.DONE, self.candidates, self.action)

        # None comes from a reader whose event loop was torn down
        if token is None or token == ABORT_TOKEN:
            raise SelectionCancelled()

        if token == SCROLL_TOKEN or len(token) != 1:
            return FeedResult(FeedKind.NOOP, self.candidates)

        key = token.upper()
        survivors = tuple(
            Candidate(candidate.region, candidate.remaining[1:])
            for candidate in self.candidates
            if candidate.remaining[:1] == key
        )
        if not survivors:
            return FeedResult(FeedKind.NOOP, self.candidates)

        self.candidates = survivors
        if self.is_done:
            return FeedResult(FeedKind.DONE, survivors, self.action)
        return FeedResult(FeedKind.CONTINUE, survivors)


# ==============================================================================
# Overlay
# ==============================================================================


def label_point_size(width: float, base_size: float = 12.0) -> float:
    """Label font size for a page rendered ``width`` pixels wide."""
    return max(4.0, base_size * width / REFERENCE_WIDTH)


def render_overlay(
    image: QImage,
    candidates: Sequence[Candidate],
    width: int,
    font_family: str = "Sans",
    base_size: float = 12.0,
    foreground: str = "#000000",
    background: str = "#ffff00",
) -> QImage:
    """
    Draw each candidate's remaining code at the top-left of its region.

    Region rectangles were projected for ``width``; they are scaled when the
    image has a different width. The source image is not modified.
    """
    overlay = image.convertToFormat(QImage.Format_ARGB32)
    scale = overlay.width() / width if width > 0 else 1.0

    font = QFont(font_family)
    font.setPointSizeF(label_point_size(overlay.width(), base_size))
    font.setBold(True)
    metrics = QFontMetricsF(font)
    padding = max(1.0, metrics.height() * 0.1)

    painter = QPainter(overlay)
    painter.setRenderHint(QPainter.Antialiasing)
    painter.setFont(font)
    for candidate in candidates:
        rect = candidate.region.pixel_rect
        box = QRectF(
            rect.x0 * scale,
            rect.y0 * scale,
            metrics.horizontalAdvance(candidate.remaining) + 2 * padding,
            metrics.height() + 2 * padding,
        )
        painter.fillRect(box, QColor(background))
        painter.setPen(QColor(foreground))
        painter.drawText(box, Qt.AlignCenter, candidate.remaining)
    painter.end()
    return overlay


# ==============================================================================
# Interactive selection
# ==============================================================================


class KeySelector:
    """Runs the labeled-overlay selection on the displayed page."""

    def __init__(self, session: "DocumentSession", viewer: "ViewerHost"):
        self.session = session
        self.viewer = viewer

    def select(
        self, prompt: str, page: int, read_token: Callable[[str], str]
    ) -> LinkAction:
        """
        Let the user pick a link of ``page`` by typing its code.

        Args:
            prompt: Text shown while waiting for a key
            page: 1-based page number
            read_token: Blocking reader returning one letter, SCROLL_TOKEN
                or ABORT_TOKEN

        Raises:
            PageNotReady: if the page is not displayed
            NoLinksOnPage: if the page has no links
            SelectionCancelled: if the user aborted
        """
        if not self.viewer.is_page_displayed(page):
            raise PageNotReady(f"Page {page} is not displayed")

        width = self.session.renderer.render_width
        regions = self.session.regions(page, width)
        if not regions:
            raise NoLinksOnPage(f"No links on page {page}")

        state = KeyHintState(regions)
        if state.is_done:
            return state.action

        image = self._page_image(page)
        try:
            self._show_overlay(page, image, state.candidates, width)
            while True:
                token = read_token(prompt)
                if token == SCROLL_TOKEN:
                    self._scroll()
                    continue

                result = state.feed(token)
                if result.kind == FeedKind.DONE:
                    return result.action
                if result.kind == FeedKind.CONTINUE:
                    self._show_overlay(page, image, result.candidates, width)
        finally:
            self.viewer.restore_page(page)

    def _page_image(self, page: int) -> QImage:
        path = self.session.renderer.page_image_path(page)
        image = QImage(path) if path else QImage()
        if image.isNull():
            raise PageNotReady(f"No image for page {page}")
        return image

    def _show_overlay(
        self, page: int, image: QImage, candidates: Sequence[Candidate], width: int
    ) -> None:
        settings = self.session.settings
        overlay = render_overlay(
            image,
            candidates,
            width,
            font_family=settings.label_font_family,
            base_size=settings.label_point_size,
            foreground=settings.label_foreground,
            background=settings.label_background,
        )
        self.viewer.show_image(page, overlay)

    def _scroll(self) -> None:
        if self.viewer.is_at_bottom():
            self.viewer.scroll_to_top()
        else:
            self.viewer.scroll_down()


def key_event_token(event) -> Optional[str]:
    """Translate a key event into a selection token, None for other keys."""
    key = event.key()
    if key == Qt.Key_Escape or (
        key == Qt.Key_G and event.modifiers() & Qt.ControlModifier
    ):
        return ABORT_TOKEN
    if key in (Qt.Key_Space, Qt.Key_PageDown):
        return SCROLL_TOKEN

    text = event.text()
    if len(text) == 1 and text.upper() in ALPHABET:
        return text.upper()
    return None


class QtKeyReader(QObject):
    """
    Blocking token reader for ``KeySelector.select``.

    Each call spins a nested event loop until a key press reaches
    ``widget``; other input keeps being processed meanwhile.
    """

    prompt_changed = pyqtSignal(str)

    def __init__(self, widget, parent=None):
        super().__init__(parent)
        self.widget = widget
        self._loop: Optional[QEventLoop] = None
        self._token: Optional[str] = None

    def __call__(self, prompt: str = "") -> str:
        self.prompt_changed.emit(prompt)
        self._token = None
        self._loop = QEventLoop()
        self.widget.installEventFilter(self)
        try:
            self._loop.exec_()
        finally:
            self.widget.removeEventFilter(self)
            self._loop = None
            self.prompt_changed.emit("")
        return self._token

    def eventFilter(self, obj, event):
        if self._loop is None or event.type() != QEvent.KeyPress:
            return False

        token = key_event_token(event)
        if token is not None:
            self._token = token
            self._loop.quit()
        # Swallow every key while a selection is running
        return True
