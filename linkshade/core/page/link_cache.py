"""
Per-page memoized link lists.
"""

from typing import Dict, Tuple

from .link_provider import LinkProvider
from .models import Link


class LinkCache:
    """
    Caches the links of each page for one document session.

    Entries live until ``clear`` is called on reload; there is no
    per-page invalidation.
    """

    def __init__(self, provider: LinkProvider):
        self.provider = provider
        self._links: Dict[int, Tuple[Link, ...]] = {}

    def get(self, page: int) -> Tuple[Link, ...]:
        links = self._links.get(page)
        if links is None:
            links = tuple(self.provider.get_page_links(page))
            self._links[page] = links
        return links

    def page_size(self, page: int) -> Tuple[float, float]:
        return self.provider.page_size(page)

    def clear(self) -> None:
        self._links.clear()

    def __contains__(self, page: int) -> bool:
        return page in self._links

    def __len__(self) -> int:
        return len(self._links)
