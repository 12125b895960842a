from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

# ==============================================================================
# Types
# ==============================================================================


class LinkType(Enum):
    """Kinds of link actions."""

    GOTO_DEST = "goto-dest"  # Page in the same document
    GOTO_REMOTE = "goto-remote"  # Page in another file
    LAUNCH = "launch"  # External program
    URI = "uri"  # External URI
    UNKNOWN = "unknown"


# ==============================================================================
# Geometry
# ==============================================================================


@dataclass(frozen=True)
class Rect:
    """Axis-aligned box, either normalized (0.0-1.0) or in pixels."""

    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def width(self) -> float:
        return max(0.0, self.x1 - self.x0)

    @property
    def height(self) -> float:
        return max(0.0, self.y1 - self.y0)

    @property
    def area(self) -> float:
        return self.width * self.height

    def contains_point(self, x: float, y: float) -> bool:
        """Check if a point is within this box."""
        return self.x0 <= x <= self.x1 and self.y0 <= y <= self.y1

    def intersection_area(self, other: "Rect") -> float:
        """Area shared with another box, 0.0 if they are disjoint."""
        width = min(self.x1, other.x1) - max(self.x0, other.x0)
        height = min(self.y1, other.y1) - max(self.y0, other.y0)
        if width <= 0 or height <= 0:
            return 0.0
        return width * height

    def scaled(self, width: int, height: int) -> "Rect":
        """Project a normalized box into a width x height pixel grid."""
        return Rect(
            round(self.x0 * width),
            round(self.y0 * height),
            round(self.x1 * width),
            round(self.y1 * height),
        )

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x0, self.y0, self.x1, self.y1)


# ==============================================================================
# Link Objects
# ==============================================================================


@dataclass(frozen=True)
class LinkAction:
    """
    What happens when a link is followed.

    Only the fields belonging to ``link_type`` are meaningful:
    GOTO_DEST uses page/top, GOTO_REMOTE uses file_path/page/top,
    LAUNCH uses program/args and URI uses uri.
    """

    link_type: LinkType
    page: int = 0  # 1-based, 0 = no destination
    top: Optional[float] = None  # Normalized vertical position
    file_path: str = ""
    program: str = ""
    args: str = ""
    uri: str = ""
    title: str = ""

    @classmethod
    def goto_dest(cls, page: int, top: Optional[float] = None, title: str = ""):
        return cls(LinkType.GOTO_DEST, page=page, top=top, title=title)

    @classmethod
    def goto_remote(
        cls, file_path: str, page: int = 0, top: Optional[float] = None, title: str = ""
    ):
        return cls(
            LinkType.GOTO_REMOTE, page=page, top=top, file_path=file_path, title=title
        )

    @classmethod
    def launch(cls, program: str, args: str = "", title: str = ""):
        return cls(LinkType.LAUNCH, program=program, args=args, title=title)

    @classmethod
    def uri_link(cls, uri: str, title: str = ""):
        return cls(LinkType.URI, uri=uri, title=title)


@dataclass(frozen=True)
class Link:
    """A clickable area of a page together with its action."""

    rect: Rect  # Normalized page coordinates
    action: LinkAction


@dataclass(frozen=True)
class LinkRegion:
    """A link projected into pixel space for one render width."""

    region_id: str
    page: int
    pixel_rect: Rect
    link: Link
    description: str = ""

    @property
    def action(self) -> LinkAction:
        return self.link.action
