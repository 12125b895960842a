"""
Page link data: models, sources, caching and pixel projection.
"""

from .actions import describe_action
from .link_cache import LinkCache
from .link_provider import FitzLinkProvider, LinkProvider
from .models import Link, LinkAction, LinkRegion, LinkType, Rect
from .region_map import RegionProjector

__all__ = [
    "Rect",
    "Link",
    "LinkAction",
    "LinkRegion",
    "LinkType",
    "LinkProvider",
    "FitzLinkProvider",
    "LinkCache",
    "RegionProjector",
    "describe_action",
]
