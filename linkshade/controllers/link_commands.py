"""
Interactive link commands of the viewer.
"""

import logging
from typing import TYPE_CHECKING, Callable, Optional

from ..core.errors import LinkError, SelectionCancelled
from ..core.page.models import LinkAction, Rect
from ..core.selection import overlap
from ..core.selection.key_selector import KeySelector
from .link_handler import ActionResolver

if TYPE_CHECKING:
    from ..core.host import ViewerHost
    from ..core.session import DocumentSession

logger = logging.getLogger(__name__)


class LinkCommands:
    """
    Entry points bound to user input.

    A failing command reports its error to the viewer and leaves the
    session untouched.
    """

    def __init__(
        self,
        session: "DocumentSession",
        viewer: "ViewerHost",
        resolver: Optional[ActionResolver] = None,
    ):
        self.session = session
        self.viewer = viewer
        self.resolver = resolver or ActionResolver(viewer, session.settings)
        self.selector = KeySelector(session, viewer)

    def follow_action(self, action: LinkAction) -> bool:
        """Execute an already identified link action."""
        return self.resolver.perform(action)

    def follow_link_by_keys(
        self,
        page: int,
        read_token: Callable[[str], str],
        prompt: str = "Activate link (C-g quit): ",
    ) -> bool:
        """Let the user type a link's code on ``page`` and follow it."""
        try:
            action = self.selector.select(prompt, page, read_token)
        except SelectionCancelled:
            self.viewer.message("Quit")
            return False
        except LinkError as e:
            self.viewer.message(str(e))
            return False
        return self.follow_action(action)

    def follow_region(self, region_id: str) -> bool:
        """Follow the link of a clicked region."""
        action = self.session.projector.action_for(region_id)
        if action is None:
            logger.debug("Click on unknown region %s", region_id)
            return False
        return self.follow_action(action)

    def follow_link_under_match(self, page: int, match_rect: Rect) -> bool:
        """Follow the link sharing the most area with a search match."""
        regions = self.session.regions(page)
        candidates = overlap.pick(match_rect, regions)
        if not candidates:
            self.viewer.message("No link under the search match")
            return False
        return self.follow_action(candidates[0].action)

    def is_match_on_link(self, page: int, match_rect: Rect) -> bool:
        """Search filter keeping only matches that lie on a link."""
        return overlap.overlaps_link(match_rect, self.session.regions(page))
