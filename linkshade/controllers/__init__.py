"""
Controllers connecting user input to link actions.
"""
from .link_handler import ActionResolver
from .link_commands import LinkCommands

__all__ = [
    'ActionResolver',
    'LinkCommands'
]
