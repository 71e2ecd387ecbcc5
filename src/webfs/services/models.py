# src/webfs/services/models.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

import os
import stat
from datetime import datetime
from typing import List

from pydantic import BaseModel, computed_field


def format_unix_date(timestamp: float) -> str:
    """Formats a timestamp like `date(1)`: 'Mon Jan  2 15:04:05 UTC 2006' in local time."""
    dt = datetime.fromtimestamp(timestamp).astimezone()
    return f"{dt:%a %b} {dt.day:>2} {dt:%H:%M:%S} {dt:%Z} {dt:%Y}"


class DirectoryEntry(BaseModel):
    """Snapshot of one directory child at listing time."""

    name: str
    is_dir: bool
    size: int
    mod_time: float
    mode: str

    @computed_field
    @property
    def mod_time_text(self) -> str:
        return format_unix_date(self.mod_time)

    @classmethod
    def from_stat(cls, name: str, st: os.stat_result) -> "DirectoryEntry":
        return cls(
            name=name,
            is_dir=stat.S_ISDIR(st.st_mode),
            size=st.st_size,
            mod_time=st.st_mtime,
            mode=stat.filemode(st.st_mode),
        )


class FolderDescriptor(BaseModel):
    base_name: str
    parent_display_path: str
    display_path: str
    entries: List[DirectoryEntry]


class FileMarker(BaseModel):
    """Listing result for a path that names a regular file."""

    path: str

    @property
    def message(self) -> str:
        return f"file:{self.path}"


class FileInfo(BaseModel):
    path: str
    size: int
    is_dir: bool
    mode: str


class EditDocument(BaseModel):
    content: str
    file_path: str
    folder: str
    base_name: str
