"""
User settings for link handling, persisted as JSON.
"""
import copy
import json
import logging
import os
from dataclasses import dataclass, field, fields
from typing import Callable, List, Optional

from .resource_loader import get_config_dir

logger = logging.getLogger(__name__)

SETTINGS_FILE_NAME = "links.json"


def _default_convert_command() -> List[str]:
    # ImageMagick; "{apply}" expands to convert_apply once per link region
    return [
        "convert",
        "{input}",
        "-fill",
        "{bg}",
        "-stroke",
        "{fg}",
        "-strokewidth",
        "1",
        "{apply}",
        "{output}",
    ]


def _default_convert_apply() -> List[str]:
    return ["-draw", "rectangle {x0},{y0} {x1},{y1}"]


@dataclass
class LinkSettings:
    """Options for link decoration, selection and execution."""

    # Decoration
    decorate_pages: bool = True
    foreground: str = "red"
    background: str = "none"
    retry_delay_ms: int = 1000
    convert_command: List[str] = field(default_factory=_default_convert_command)
    convert_apply: List[str] = field(default_factory=_default_convert_apply)
    sentinel_name: str = ".links-decorated"

    # Key selection overlay
    label_font_family: str = "Sans"
    label_point_size: float = 12.0  # At a render width of 612 px
    label_foreground: str = "#000000"
    label_background: str = "#ffff00"

    # Execution
    allow_launch: bool = False
    flash_on_jump: bool = True

    # Runtime only, not persisted
    uri_handler: Optional[Callable[[str], object]] = field(
        default=None, repr=False, compare=False
    )

    def to_dict(self) -> dict:
        return {
            f.name: copy.deepcopy(getattr(self, f.name))
            for f in fields(self)
            if f.name != "uri_handler"
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LinkSettings":
        known = {f.name for f in fields(cls) if f.name != "uri_handler"}
        unknown = set(data) - known
        if unknown:
            logger.debug("Ignoring unknown settings: %s", ", ".join(sorted(unknown)))
        return cls(**{key: value for key, value in data.items() if key in known})


def get_settings_path() -> str:
    return str(get_config_dir() / SETTINGS_FILE_NAME)


def load_settings(file_path: Optional[str] = None) -> LinkSettings:
    """
    Load settings from disk.

    Missing or unreadable files yield the defaults.
    """
    if file_path is None:
        file_path = get_settings_path()

    if not os.path.exists(file_path):
        return LinkSettings()

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("settings file does not contain an object")
        return LinkSettings.from_dict(data)
    except (OSError, ValueError, TypeError) as e:
        logger.warning("Failed to load settings from %s: %s", file_path, e)
        return LinkSettings()


def save_settings(settings: LinkSettings, file_path: Optional[str] = None) -> bool:
    """
    Save settings to disk.

    Returns:
        True if save was successful, False otherwise
    """
    if file_path is None:
        file_path = get_settings_path()

    try:
        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(settings.to_dict(), f, indent=2)
        return True
    except OSError as e:
        logger.error("Failed to save settings to %s: %s", file_path, e)
        return False
