"""
Errors raised by link commands.

Everything derived from ``LinkError`` aborts only the current interactive
command and is shown to the user as a message.
"""


class LinkError(Exception):
    """Base class for link command failures."""


class PageNotReady(LinkError):
    """The requested page is not currently displayed."""


class NoLinksOnPage(LinkError):
    """The page has no links to choose from."""


class BrokenTarget(LinkError):
    """A goto link without a destination."""


class MissingFile(LinkError):
    """A remote link pointing to a file that does not exist."""


class InvalidActionKind(LinkError):
    """An action of a kind the resolver cannot handle."""


class LaunchNotPermitted(LinkError):
    """Launch links are disabled unless explicitly allowed."""


class SelectionCancelled(Exception):
    """The user aborted an interactive selection."""
