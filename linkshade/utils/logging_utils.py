"""
Application-wide logging setup.
"""
import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from .resource_loader import get_log_dir

_CONFIGURED_FLAG = "_linkshade_configured"


def configure_logging(*, debug: bool = False, log_path: Optional[str] = None) -> None:
    """
    Configure the ``linkshade`` logger.

    - Always logs to a rotating file under the app data directory
    - Also logs to the console when debug is enabled

    Calling it again only updates the level.
    """
    level = logging.DEBUG if debug else logging.INFO

    if log_path is None:
        log_path = str(get_log_dir() / "linkshade.log")

    root = logging.getLogger("linkshade")
    root.setLevel(level)

    # Avoid duplicating handlers when called more than once
    if getattr(root, _CONFIGURED_FLAG, False):
        return

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = RotatingFileHandler(
        log_path, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    if debug:
        console = logging.StreamHandler()
        console.setLevel(level)
        console.setFormatter(fmt)
        root.addHandler(console)

    setattr(root, _CONFIGURED_FLAG, True)
