"""
Per-user directories for settings and logs.

``LINKSHADE_HOME`` moves everything under one directory, which is what
embedding viewers and test runs use to keep state out of the user's home.
"""
import os
import sys
from pathlib import Path

APP_NAME = "Linkshade"
HOME_ENV = "LINKSHADE_HOME"

# (Windows, macOS, other) locations per kind of directory
_PLATFORM_BASES = {
    "data": (
        lambda: os.environ.get("APPDATA", os.path.expanduser("~")),
        lambda: os.path.expanduser("~/Library/Application Support"),
        lambda: os.environ.get("XDG_DATA_HOME", os.path.expanduser("~/.local/share")),
    ),
    "config": (
        lambda: os.environ.get("APPDATA", os.path.expanduser("~")),
        lambda: os.path.expanduser("~/Library/Preferences"),
        lambda: os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config")),
    ),
}


def _user_dir(kind: str, app_name: str) -> Path:
    override = os.environ.get(HOME_ENV)
    if override:
        directory = Path(override) / kind
    else:
        windows, macos, other = _PLATFORM_BASES[kind]
        if os.name == "nt":
            base = windows()
        elif sys.platform == "darwin":
            base = macos()
        else:
            base = other()
        directory = Path(base) / app_name
        # Windows keeps config and data side by side under APPDATA
        if os.name == "nt" and kind == "config":
            directory = directory / "config"

    directory.mkdir(parents=True, exist_ok=True)
    return directory


def get_app_data_dir(app_name: str = APP_NAME) -> Path:
    """Directory for data written by the library, created on demand."""
    return _user_dir("data", app_name)


def get_config_dir(app_name: str = APP_NAME) -> Path:
    """Directory holding ``links.json``, created on demand."""
    return _user_dir("config", app_name)


def get_log_dir(app_name: str = APP_NAME) -> Path:
    """Directory holding rotating log files."""
    log_dir = get_app_data_dir(app_name) / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir
