# src/webfs/services/sorting.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

from enum import Enum
from functools import cmp_to_key
from typing import Callable, Dict, Iterable, List, NamedTuple

from .models import DirectoryEntry


class SortKey(str, Enum):
    NAME = "Name"
    SIZE = "Size"
    TIME = "Time"


class SortSpec(NamedTuple):
    key: SortKey = SortKey.NAME
    ascending: bool = True


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _type_order(a: DirectoryEntry, b: DirectoryEntry) -> int:
    """Directories before files."""
    return _cmp(not a.is_dir, not b.is_dir)


def compare_by_name(a: DirectoryEntry, b: DirectoryEntry) -> int:
    if a.is_dir != b.is_dir:
        return _type_order(a, b)
    return _cmp(a.name.lower(), b.name.lower())


def compare_by_size(a: DirectoryEntry, b: DirectoryEntry) -> int:
    if a.is_dir != b.is_dir:
        return _type_order(a, b)
    if a.is_dir:
        # Directory sizes carry no meaning; keep them alphabetical.
        return _cmp(a.name.lower(), b.name.lower())
    return _cmp(a.size, b.size)


def compare_by_time(a: DirectoryEntry, b: DirectoryEntry) -> int:
    if a.is_dir != b.is_dir:
        return _type_order(a, b)
    # Newest first.
    return _cmp(b.mod_time, a.mod_time)


COMPARATORS: Dict[SortKey, Callable[[DirectoryEntry, DirectoryEntry], int]] = {
    SortKey.NAME: compare_by_name,
    SortKey.SIZE: compare_by_size,
    SortKey.TIME: compare_by_time,
}


def sort_entries(entries: Iterable[DirectoryEntry], spec: SortSpec = SortSpec()) -> List[DirectoryEntry]:
    """
    Returns the entries ordered by `spec`. The ascending order is stable;
    a descending request is the exact reverse of that order, so the
    directory-first grouping flips as well.
    """
    ordered = sorted(entries, key=cmp_to_key(COMPARATORS[SortKey(spec.key)]))
    if not spec.ascending:
        ordered.reverse()
    return ordered
