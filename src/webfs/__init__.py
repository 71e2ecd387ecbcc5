# src/webfs/__init__.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

from .core.version import __app_name__, __version__

__all__ = ["__app_name__", "__version__"]
