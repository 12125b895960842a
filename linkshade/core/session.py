"""
Per-document link state.
"""

import logging
from typing import Optional, Tuple

from .decoration.pipeline import DecorationPipeline
from .host import PageRenderer
from .page.link_cache import LinkCache
from .page.link_provider import LinkProvider
from .page.models import LinkRegion
from .page.region_map import RegionProjector
from ..utils.settings import LinkSettings

logger = logging.getLogger(__name__)


class DocumentSession:
    """
    Owns the link cache, region map and decoration pipeline of one open
    document. Nothing is shared between sessions.
    """

    def __init__(
        self,
        document_path: str,
        link_provider: LinkProvider,
        renderer: PageRenderer,
        settings: Optional[LinkSettings] = None,
        process_factory=None,
    ):
        self.document_path = document_path
        self.renderer = renderer
        self.settings = settings or LinkSettings()

        self.link_cache = LinkCache(link_provider)
        self.projector = RegionProjector(self.link_cache)
        self.pipeline = DecorationPipeline(self, process_factory=process_factory)

        self._open = True

    @property
    def is_open(self) -> bool:
        return self._open

    def regions(self, page: int, width: Optional[int] = None) -> Tuple[LinkRegion, ...]:
        """Clickable regions of a page, at the current render width by default."""
        if width is None:
            width = self.renderer.render_width
        return self.projector.project(page, width)

    def on_page_image(self, page: int, image_path: str) -> Tuple[LinkRegion, ...]:
        """
        Called by the renderer after it produced the image of a page.

        Returns the region map to attach before the image is displayed.
        """
        logger.debug("Page %d rendered to %s", page, image_path)
        return self.regions(page)

    def set_decoration_enabled(self, enabled: bool) -> None:
        self.settings.decorate_pages = enabled
        if enabled:
            self.pipeline.schedule()
        else:
            self.pipeline.cancel()

    def reload(self) -> None:
        """Drop all cached link data after the document was reverted."""
        logger.info("Reloading links of %s", self.document_path)
        self.pipeline.cancel()
        self.link_cache.clear()
        self.projector.clear()
        if self.settings.decorate_pages:
            self.pipeline.schedule()

    def close(self) -> None:
        logger.debug("Closing link session of %s", self.document_path)
        self.pipeline.cancel()
        self._open = False
