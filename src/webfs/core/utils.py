# src/webfs/core/utils.py

import logging
import os
import sys
from pathlib import Path

log = logging.getLogger(__name__)


def get_app_data_path(app_name: str) -> Path:
    """
    Returns the per-user directory for application data (config and logs).

    Windows: %APPDATA%/<app_name>
    macOS:   ~/Library/Application Support/<app_name>
    Linux:   $XDG_CONFIG_HOME/<app_name> (defaults to ~/.config/<app_name>)
    """
    if sys.platform == "win32":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / app_name
        return Path.home() / "AppData" / "Roaming" / app_name
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / app_name
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / app_name.lower()
    return Path.home() / ".config" / app_name.lower()


def normalize_url_prefix(prefix: str) -> str:
    """Returns the prefix as '/segment[/segment]' with no trailing slash, or ''."""
    prefix = (prefix or "").strip().strip("/")
    return f"/{prefix}" if prefix else ""


class DummyTty:
    """A dummy TTY-like object for environments where sys.stdout is None."""

    def isatty(self) -> bool:
        return False

    def write(self, msg: str):
        pass

    def flush(self):
        pass
