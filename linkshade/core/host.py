"""
Interfaces the embedding viewer implements.
"""

from typing import Optional

from PyQt5.QtGui import QImage


class PageRenderer:
    """
    Page image producer of the host viewer.

    Rendered images live in ``cache_dir`` and are named ``page-<N>.<ext>``
    with a 1-based page number.
    """

    @property
    def render_width(self) -> int:
        raise NotImplementedError

    @property
    def page_count(self) -> int:
        raise NotImplementedError

    @property
    def cache_dir(self) -> str:
        raise NotImplementedError

    def conversion_complete(self) -> bool:
        """Whether all page images have been produced."""
        raise NotImplementedError

    def page_image_path(self, page: int) -> Optional[str]:
        raise NotImplementedError

    def invalidate_image(self, path: str) -> None:
        """Drop any display cache entry for an image that was rewritten."""


class ViewerHost:
    """Navigation and display services of the host viewer."""

    def is_page_displayed(self, page: int) -> bool:
        raise NotImplementedError

    def navigate_to(self, page: int) -> None:
        raise NotImplementedError

    def flash_indicator(self, top: float) -> None:
        """Briefly mark a vertical position (normalized) on the current page."""

    def open_document(self, path: str) -> Optional["ViewerHost"]:
        """Display another document, returning its viewer if navigable."""
        raise NotImplementedError

    def show_image(self, page: int, image: QImage) -> None:
        raise NotImplementedError

    def restore_page(self, page: int) -> None:
        raise NotImplementedError

    def is_at_bottom(self) -> bool:
        raise NotImplementedError

    def scroll_down(self) -> None:
        raise NotImplementedError

    def scroll_to_top(self) -> None:
        raise NotImplementedError

    def message(self, text: str) -> None:
        """Show a short message to the user."""
