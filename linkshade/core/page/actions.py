"""
Human-readable descriptions of link actions.
"""

import os
import shutil

from ..errors import InvalidActionKind
from .models import LinkAction, LinkType


def remote_file_exists(file_path: str) -> bool:
    return bool(file_path) and os.path.exists(os.path.expanduser(file_path))


def is_executable(program: str) -> bool:
    return bool(program) and shutil.which(os.path.expanduser(program)) is not None


def describe_action(action: LinkAction) -> str:
    """
    Describe what following ``action`` would do.

    Only reads the filesystem; the action is never modified.

    Raises:
        InvalidActionKind: for actions of an unknown type
    """
    if action.link_type == LinkType.GOTO_DEST:
        if action.page > 0:
            text = f"Goto page {action.page}"
        else:
            text = "Destination not found"

    elif action.link_type == LinkType.GOTO_REMOTE:
        if remote_file_exists(action.file_path):
            page_clause = f"p. {action.page} of " if action.page > 0 else ""
            text = f"Goto {page_clause}file '{action.file_path}'"
        else:
            text = f"Link to nonexistent file '{action.file_path}'"

    elif action.link_type == LinkType.LAUNCH:
        if is_executable(action.program):
            text = f"Launch '{action.program}' with arguments '{action.args}'"
        else:
            text = f"Link to nonexecutable program '{action.program}'"

    elif action.link_type == LinkType.URI:
        if action.uri:
            text = f"Link to uri '{action.uri}'"
        else:
            text = "Link to empty uri"

    else:
        raise InvalidActionKind(f"Invalid link action kind: {action.link_type.value}")

    if action.title:
        text += f" ({action.title})"
    return text
