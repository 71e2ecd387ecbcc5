# src/webfs/services/path_resolver.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

import logging
import os
import sys

if sys.platform != "win32":
    import pwd

log = logging.getLogger(__name__)

HOME_TOKEN = "~"


def current_user_home() -> str:
    """Home directory of the user running the process, or $HOME if lookup fails."""
    try:
        if sys.platform == "win32":
            home = os.path.expanduser(HOME_TOKEN)
            if home != HOME_TOKEN:
                return home
        else:
            return pwd.getpwuid(os.getuid()).pw_dir
    except (KeyError, OSError) as e:
        log.debug(f"User lookup failed, falling back to $HOME: {e}")
    return os.environ.get("HOME", "")


class PathResolver:
    """
    Turns untrusted path tokens from a request into filesystem paths.

    Two forms are produced for every token:
      * the access form, an absolute canonical path used for every OS call;
      * the display form, the absolute path before canonicalization, used
        only when echoing a path back to the client.

    Paths are NOT confined to any base directory. A token with '..' segments
    reaches whatever the host process can reach.
    """

    def __init__(self, windows: bool | None = None):
        self.windows = (sys.platform == "win32") if windows is None else windows

    def _expand_home(self, token: str) -> str:
        if token == HOME_TOKEN:
            return current_user_home()
        return token

    def resolve_for_display(self, token: str) -> str:
        path = self._expand_home(token or "")
        if not self.windows and not path.startswith("/"):
            path = "/" + path
        return path

    def resolve_for_access(self, token: str) -> str:
        return os.path.abspath(self.resolve_for_display(token))


# Global instance
path_resolver = PathResolver()
