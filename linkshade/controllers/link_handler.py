"""
Resolves and performs link actions.
"""

import logging
import os
import shlex
import webbrowser
from typing import TYPE_CHECKING, Optional

from PyQt5.QtCore import QObject, QProcess, pyqtSignal

from ..core.errors import (
    BrokenTarget,
    InvalidActionKind,
    LaunchNotPermitted,
    LinkError,
    MissingFile,
)
from ..core.page.actions import describe_action, is_executable, remote_file_exists
from ..core.page.models import LinkAction, LinkType
from ..utils.settings import LinkSettings

if TYPE_CHECKING:
    from ..core.host import ViewerHost

logger = logging.getLogger(__name__)


class ActionResolver(QObject):
    """
    Describes and executes link actions.

    Supports:
    - Page navigation in the current document
    - Opening other documents, optionally at a page
    - URIs through a configurable handler
    - Program launch, only when explicitly allowed in the settings
    """

    # Signals
    navigation_requested = pyqtSignal(int, float)  # page (1-based), top (-1 if unset)
    external_link_opened = pyqtSignal(str)  # URI
    link_action_failed = pyqtSignal(str)  # error message

    def __init__(
        self, viewer: "ViewerHost", settings: Optional[LinkSettings] = None, parent=None
    ):
        super().__init__(parent)
        self.viewer = viewer
        self.settings = settings or LinkSettings()

    @staticmethod
    def describe(action: LinkAction) -> str:
        return describe_action(action)

    def perform(self, action: LinkAction) -> bool:
        """
        Execute an action on behalf of an interactive command.

        Failures are reported through ``link_action_failed`` and the viewer.

        Returns:
            True if the action was executed
        """
        try:
            self.execute(action)
        except LinkError as e:
            logger.info("Link action failed: %s", e)
            self.viewer.message(str(e))
            self.link_action_failed.emit(str(e))
            return False
        return True

    def execute(self, action: LinkAction) -> None:
        """
        Execute an action.

        Raises:
            BrokenTarget: goto link without destination
            MissingFile: remote link to a file that does not exist
            LaunchNotPermitted: launch link while launching is disabled
            InvalidActionKind: action of an unknown type
        """
        if action.link_type == LinkType.GOTO_DEST:
            self._navigate_to_internal(self.viewer, action)

        elif action.link_type == LinkType.GOTO_REMOTE:
            self._navigate_to_remote(action)

        elif action.link_type == LinkType.URI:
            self._open_uri(action)

        elif action.link_type == LinkType.LAUNCH:
            self._launch(action)

        else:
            raise InvalidActionKind(
                f"Invalid link action kind: {action.link_type.value}"
            )

    def _navigate_to_internal(self, viewer: "ViewerHost", action: LinkAction) -> None:
        """Go to a page of the document shown by ``viewer``."""
        if action.page <= 0:
            raise BrokenTarget("Destination not found")

        top = action.top if action.top is not None else -1.0
        self.navigation_requested.emit(action.page, top)

        viewer.navigate_to(action.page)
        if action.top is not None and self.settings.flash_on_jump:
            viewer.flash_indicator(action.top)

    def _navigate_to_remote(self, action: LinkAction) -> None:
        """Open another document, then go to the linked page if any."""
        if not remote_file_exists(action.file_path):
            raise MissingFile(f"Link to nonexistent file '{action.file_path}'")

        path = os.path.expanduser(action.file_path)
        remote_viewer = self.viewer.open_document(path)
        if remote_viewer is not None and action.page > 0:
            self._navigate_to_internal(remote_viewer, action)

    def _open_uri(self, action: LinkAction) -> None:
        handler = self.settings.uri_handler or webbrowser.open
        logger.debug("Opening uri %r", action.uri)
        handler(action.uri)
        self.external_link_opened.emit(action.uri)

    def _launch(self, action: LinkAction) -> None:
        """Start a program named by the document, if the user allowed it."""
        if not self.settings.allow_launch:
            raise LaunchNotPermitted(
                "Launching programs from documents is disabled: "
                f"'{action.program}'"
            )
        if not is_executable(action.program):
            raise LaunchNotPermitted(
                f"Link to nonexecutable program '{action.program}'"
            )

        program = os.path.expanduser(action.program)
        started = QProcess.startDetached(program, shlex.split(action.args))
        # PyQt returns (ok, pid) for the overload with a pid out-parameter
        if isinstance(started, tuple):
            started = started[0]
        if not started:
            raise LaunchNotPermitted(f"Failed to launch '{action.program}'")
        logger.info("Launched %s %s", program, action.args)
