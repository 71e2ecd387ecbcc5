# src/webfs/services/listing_service.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

import asyncio
import logging
import os
import stat
from typing import List, Union

from ..core.exceptions import PathNotFoundError
from .models import DirectoryEntry, FileMarker, FolderDescriptor
from .path_resolver import PathResolver, path_resolver
from .sorting import SortKey, SortSpec, sort_entries

log = logging.getLogger(__name__)

ListingResult = Union[FolderDescriptor, FileMarker]


def _base_name(path: str) -> str:
    return os.path.basename(path.rstrip(os.sep)) or path


class ListingService:
    """Builds folder descriptors for directory listing requests."""

    def __init__(self, resolver: PathResolver = path_resolver):
        self.resolver = resolver

    def _scan(self, path: str) -> List[DirectoryEntry]:
        """Blocking scan of every immediate child of `path`."""
        entries = []
        with os.scandir(path) as it:
            for entry in it:
                try:
                    st = entry.stat(follow_symlinks=False)
                except OSError as e:
                    # Entry vanished or is unreadable between readdir and stat.
                    log.warning(f"Could not access item {entry.path}: {e}")
                    continue
                entries.append(DirectoryEntry.from_stat(entry.name, st))
        return entries

    def _list_blocking(self, token: str, spec: SortSpec) -> ListingResult:
        path = self.resolver.resolve_for_access(token)
        log.debug(f"List: {token!r} -> {path}")
        try:
            st = os.stat(path)
            if not stat.S_ISDIR(st.st_mode):
                return FileMarker(path=path)
            entries = self._scan(path)
        except OSError as e:
            log.warning(f"Failed to open '{path}': {e}")
            raise PathNotFoundError(f"Failed to open file: {path}") from e

        return FolderDescriptor(
            base_name=_base_name(path),
            # Two levels up: the client's "up" link targets the grandparent.
            parent_display_path=os.path.dirname(os.path.dirname(path)),
            display_path=self.resolver.resolve_for_display(token),
            entries=sort_entries(entries, spec),
        )

    async def list(self, token: str, spec: SortSpec = SortSpec()) -> ListingResult:
        return await asyncio.to_thread(self._list_blocking, token, spec)

    async def list_simple(self, token: str) -> ListingResult:
        return await self.list(token, SortSpec(SortKey.NAME, True))

    async def list_parent(self, token: str) -> ListingResult:
        path = self.resolver.resolve_for_access(token)
        parent = os.path.dirname(path)
        log.debug(f"Parent folder of {path} is {parent}")
        return await self.list_simple(parent)


# Global instance
listing_service = ListingService()
