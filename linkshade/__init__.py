"""
Link resolution, selection and page decoration for document viewers.
"""
from .core import DocumentSession, Link, LinkAction, LinkRegion, LinkType, Rect
from .controllers import ActionResolver, LinkCommands

__version__ = "0.1.0"

__all__ = [
    'DocumentSession',
    'Link',
    'LinkAction',
    'LinkRegion',
    'LinkType',
    'Rect',
    'ActionResolver',
    'LinkCommands',
]
