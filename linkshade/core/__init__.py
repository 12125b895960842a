"""
Core link logic: caches, projection, decoration and selection.
"""
from .errors import (
    BrokenTarget,
    InvalidActionKind,
    LaunchNotPermitted,
    LinkError,
    MissingFile,
    NoLinksOnPage,
    PageNotReady,
    SelectionCancelled,
)
from .page import Link, LinkAction, LinkRegion, LinkType, Rect
from .session import DocumentSession

__all__ = [
    'DocumentSession',
    'Link',
    'LinkAction',
    'LinkRegion',
    'LinkType',
    'Rect',
    'LinkError',
    'PageNotReady',
    'NoLinksOnPage',
    'BrokenTarget',
    'MissingFile',
    'InvalidActionKind',
    'LaunchNotPermitted',
    'SelectionCancelled',
]
