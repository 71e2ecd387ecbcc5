# src/webfs/services/__init__.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

from .path_resolver import path_resolver
from .listing_service import listing_service
from .streaming_service import streaming_service
from .mutation_service import mutation_service

__all__ = [
    "path_resolver",
    "listing_service",
    "streaming_service",
    "mutation_service",
]
