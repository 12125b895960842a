"""
Links overlapping a search match.
"""

from typing import Iterable, List

from ..page.models import LinkRegion, Rect


def overlap_ratio(match_rect: Rect, link_rect: Rect) -> float:
    """Intersection area relative to the smaller of the two boxes."""
    smaller = min(match_rect.area, link_rect.area)
    if smaller <= 0:
        return 0.0
    return match_rect.intersection_area(link_rect) / smaller


def pick(match_rect: Rect, regions: Iterable[LinkRegion]) -> List[LinkRegion]:
    """
    Regions intersecting ``match_rect``, largest intersection first.

    Both the match and the regions are in pixel space.
    """
    scored = []
    for region in regions:
        area = match_rect.intersection_area(region.pixel_rect)
        if area > 0:
            scored.append((area, region))
    scored.sort(key=lambda item: item[0], reverse=True)
    return [region for _, region in scored]


def overlaps_link(
    match_rect: Rect, regions: Iterable[LinkRegion], threshold: float = 0.5
) -> bool:
    """Whether a match lies mostly on some link (used to restrict searches)."""
    return any(
        overlap_ratio(match_rect, region.pixel_rect) > threshold for region in regions
    )
