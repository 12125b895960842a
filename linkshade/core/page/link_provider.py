"""
Link sources for document pages.
"""

import logging
import os
from typing import List, Optional, Tuple

import fitz

from .models import Link, LinkAction, LinkType, Rect

logger = logging.getLogger(__name__)


class LinkProvider:
    """
    Interface of an already-parsed link source.

    Pages are 1-based.
    """

    @property
    def page_count(self) -> int:
        raise NotImplementedError

    def get_page_links(self, page: int) -> List[Link]:
        raise NotImplementedError

    def page_size(self, page: int) -> Tuple[float, float]:
        """Native (width, height) of a page."""
        raise NotImplementedError


class FitzLinkProvider(LinkProvider):
    """
    Reads links from a PyMuPDF document.

    Rectangles are normalized against the page size, destinations are
    converted to 1-based pages with a normalized top offset. Relative file
    names of remote and launch links are resolved against ``base_dir``,
    which defaults to the directory of the document.
    """

    # Mapping from fitz link kinds to our LinkType
    _LINK_TYPE_MAP = {
        fitz.LINK_NONE: LinkType.UNKNOWN,
        fitz.LINK_GOTO: LinkType.GOTO_DEST,
        fitz.LINK_GOTOR: LinkType.GOTO_REMOTE,
        fitz.LINK_URI: LinkType.URI,
        fitz.LINK_LAUNCH: LinkType.LAUNCH,
        fitz.LINK_NAMED: LinkType.GOTO_DEST,
    }

    def __init__(self, doc: fitz.Document, base_dir: Optional[str] = None):
        self.doc = doc
        if base_dir is None and doc.name:
            base_dir = os.path.dirname(os.path.abspath(doc.name))
        self.base_dir = base_dir

    @property
    def page_count(self) -> int:
        return self.doc.page_count

    def page_size(self, page: int) -> Tuple[float, float]:
        rect = self.doc.load_page(page - 1).rect
        return rect.width, rect.height

    def get_page_links(self, page: int) -> List[Link]:
        fitz_page = self.doc.load_page(page - 1)
        width, height = fitz_page.rect.width, fitz_page.rect.height
        links = []

        for link_data in fitz_page.get_links():
            link = self._parse_link(link_data, width, height)
            if link:
                links.append(link)

        logger.debug("Page %d: %d links", page, len(links))
        return links

    def _parse_link(
        self, link_data: dict, width: float, height: float
    ) -> Optional[Link]:
        """Parse a raw link dictionary into a Link."""
        from_rect = link_data.get("from")
        if from_rect is None or width <= 0 or height <= 0:
            return None

        x0, y0, x1, y1 = tuple(from_rect)
        rect = Rect(
            _clamp(min(x0, x1) / width),
            _clamp(min(y0, y1) / height),
            _clamp(max(x0, x1) / width),
            _clamp(max(y0, y1) / height),
        )

        kind = link_data.get("kind", fitz.LINK_NONE)
        link_type = self._LINK_TYPE_MAP.get(kind, LinkType.UNKNOWN)

        if link_type == LinkType.GOTO_DEST:
            page, top = self._parse_destination(link_data)
            action = LinkAction.goto_dest(page, top)

        elif link_type == LinkType.GOTO_REMOTE:
            page = max(0, link_data.get("page", -1) + 1)
            action = LinkAction.goto_remote(
                self._resolve_file(link_data.get("file", "")), page
            )

        elif link_type == LinkType.LAUNCH:
            action = LinkAction.launch(self._resolve_program(link_data.get("file", "")))

        elif link_type == LinkType.URI:
            action = LinkAction.uri_link(link_data.get("uri", "") or "")

        else:
            action = LinkAction(LinkType.UNKNOWN)

        return Link(rect=rect, action=action)

    def _resolve_file(self, file_name: str) -> str:
        """File specs in a PDF are relative to the document."""
        if not file_name or not self.base_dir:
            return file_name
        expanded = os.path.expanduser(file_name)
        if os.path.isabs(expanded):
            return expanded
        return os.path.normpath(os.path.join(self.base_dir, expanded))

    def _resolve_program(self, program: str) -> str:
        # Bare names are looked up on PATH unless the document ships the file
        resolved = self._resolve_file(program)
        if os.sep in program or os.path.exists(resolved):
            return resolved
        return program

    def _parse_destination(self, link_data: dict) -> Tuple[int, Optional[float]]:
        """Destination page (1-based, 0 if unresolved) and normalized top."""
        page_index = link_data.get("page", -1)
        if page_index is None or page_index < 0 or page_index >= self.doc.page_count:
            return 0, None

        to_point = link_data.get("to")
        if to_point is None:
            return page_index + 1, None

        if hasattr(to_point, "y"):
            y = to_point.y
        elif isinstance(to_point, (tuple, list)) and len(to_point) >= 2:
            y = to_point[1]
        else:
            return page_index + 1, None

        target_height = self.doc.load_page(page_index).rect.height
        if target_height <= 0:
            return page_index + 1, None
        return page_index + 1, _clamp(y / target_height)


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))
