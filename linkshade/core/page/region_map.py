"""
Projection of normalized link rectangles into clickable pixel regions.
"""

import logging
from typing import Dict, Optional, Tuple

from ..errors import InvalidActionKind
from .actions import describe_action
from .link_cache import LinkCache
from .models import LinkAction, LinkRegion

logger = logging.getLogger(__name__)


class RegionProjector:
    """
    Builds and caches the region map of a page for a render width.

    Each (page, width) pair gets its own entry; a zoom change never
    rescales an existing entry. Region ids are unique within the projector
    and resolve back to their region through
    ``region``/``action_for``.
    """

    def __init__(self, link_cache: LinkCache):
        self.link_cache = link_cache
        self._regions: Dict[Tuple[int, int], Tuple[LinkRegion, ...]] = {}
        self._by_id: Dict[str, LinkRegion] = {}
        self._next_id = 1

    def project(self, page: int, width: int) -> Tuple[LinkRegion, ...]:
        """
        Get the clickable regions of ``page`` rendered ``width`` pixels wide.

        Args:
            page: 1-based page number
            width: Render width in pixels

        Returns:
            Regions in the link provider's order
        """
        key = (page, int(width))
        regions = self._regions.get(key)
        if regions is not None:
            return regions

        links = self.link_cache.get(page)
        height = self.target_height(page, width)

        regions = tuple(
            LinkRegion(
                region_id=self._new_id(page),
                page=page,
                pixel_rect=link.rect.scaled(int(width), height),
                link=link,
                description=_describe(link.action),
            )
            for link in links
        )
        self._regions[key] = regions
        for region in regions:
            self._by_id[region.region_id] = region

        logger.debug(
            "Projected %d regions for page %d at %dx%d",
            len(regions),
            page,
            width,
            height,
        )
        return regions

    def target_height(self, page: int, width: int) -> int:
        """Pixel height of a page rendered at ``width``, keeping its aspect."""
        page_width, page_height = self.link_cache.page_size(page)
        if page_width <= 0:
            return int(width)
        return round(width * page_height / page_width)

    def region(self, region_id: str) -> Optional[LinkRegion]:
        return self._by_id.get(region_id)

    def action_for(self, region_id: str) -> Optional[LinkAction]:
        """Dispatch a region id (e.g. from a click) to its action."""
        region = self._by_id.get(region_id)
        return region.action if region else None

    def region_at(self, page: int, width: int, x: float, y: float) -> Optional[LinkRegion]:
        """
        Find the region under a pixel position.

        Returns the topmost region if several overlap.
        """
        # Later links are on top
        for region in reversed(self.project(page, width)):
            if region.pixel_rect.contains_point(x, y):
                return region
        return None

    def clear(self) -> None:
        self._regions.clear()
        self._by_id.clear()

    def _new_id(self, page: int) -> str:
        # Not reset by clear(); ids from before a clear must stay unresolvable
        region_id = f"link-{page}-{self._next_id}"
        self._next_id += 1
        return region_id


def _describe(action: LinkAction) -> str:
    try:
        return describe_action(action)
    except InvalidActionKind:
        logger.warning("Link with unsupported action kind %s", action.link_type)
        return "Unsupported link"
