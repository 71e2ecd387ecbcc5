# src/webfs/services/mutation_service.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

import asyncio
import logging
import os
import stat

from ..core.constants import MKDIRS_MODE
from ..core.exceptions import FileOperationError, PathNotFoundError, UploadError
from .models import EditDocument, FileInfo
from .path_resolver import PathResolver, path_resolver

log = logging.getLogger(__name__)


class MutationService:
    """
    Single-effect filesystem operations. Each method resolves its token(s)
    and performs exactly one filesystem call; OS failures are re-raised as
    FileOperationError carrying the OS error text.
    """

    def __init__(self, resolver: PathResolver = path_resolver):
        self.resolver = resolver

    async def make_dirs(self, token: str) -> str:
        path = self.resolver.resolve_for_access(token)
        log.info(f"Mkdir: {path}")
        try:
            await asyncio.to_thread(os.makedirs, path, MKDIRS_MODE, True)
        except OSError as e:
            log.warning(f"Mkdir failed for '{path}': {e}")
            raise FileOperationError(str(e)) from e
        return path

    def _remove_sync(self, path: str):
        if os.path.isdir(path) and not os.path.islink(path):
            os.rmdir(path)
        else:
            os.remove(path)

    async def remove(self, token: str) -> str:
        """Deletes a file or an empty directory. Never recursive."""
        path = self.resolver.resolve_for_access(token)
        log.info(f"Remove: {path}")
        try:
            await asyncio.to_thread(self._remove_sync, path)
        except OSError as e:
            log.warning(f"Remove failed for '{path}': {e}")
            raise FileOperationError(str(e)) from e
        return path

    async def rename(self, source_token: str, target_token: str) -> str:
        source = self.resolver.resolve_for_access(source_token)
        target = self.resolver.resolve_for_access(target_token)
        log.info(f"Rename: {source} -> {target}")
        if not await asyncio.to_thread(os.path.lexists, source):
            raise PathNotFoundError(f"Source does not exist: {source}")
        try:
            await asyncio.to_thread(os.rename, source, target)
        except OSError as e:
            log.warning(f"Rename failed for '{source}': {e}")
            raise FileOperationError(str(e)) from e
        return target

    def _write_sync(self, path: str, data: bytes):
        with open(path, "wb") as f:
            f.write(data)

    async def save(self, token: str, content: str) -> str:
        """Creates or truncates the target and writes `content` as UTF-8."""
        path = self.resolver.resolve_for_access(token)
        log.info(f"Save: {path}")
        try:
            await asyncio.to_thread(self._write_sync, path, content.encode("utf-8"))
        except OSError as e:
            log.warning(f"Save failed for '{path}': {e}")
            raise FileOperationError(str(e)) from e
        return path

    async def upload(self, parent_token: str, filename: str, data: bytes) -> str:
        """
        Writes an uploaded part under the resolved parent directory.
        Only the base name of the client-supplied filename is used.
        """
        base_name = os.path.basename(filename)
        if not base_name:
            raise UploadError("Uploaded part has no filename")
        parent = self.resolver.resolve_for_access(parent_token)
        full_path = os.path.join(parent, base_name)
        log.info(f"Upload: {len(data)} bytes to {full_path}")
        try:
            await asyncio.to_thread(self._write_sync, full_path, data)
        except OSError as e:
            log.warning(f"Upload failed for '{full_path}': {e}")
            raise FileOperationError(str(e)) from e
        return full_path

    async def get_info(self, token: str) -> FileInfo:
        path = self.resolver.resolve_for_access(token)
        try:
            st = await asyncio.to_thread(os.stat, path)
        except FileNotFoundError as e:
            raise PathNotFoundError(str(e)) from e
        except OSError as e:
            raise FileOperationError(str(e)) from e
        return FileInfo(
            path=path,
            size=st.st_size,
            is_dir=stat.S_ISDIR(st.st_mode),
            mode=stat.filemode(st.st_mode),
        )

    def _read_text_sync(self, path: str) -> str:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return f.read()

    async def read_for_edit(self, token: str) -> EditDocument:
        """Loads a file's text along with the paths an editor view needs."""
        path = self.resolver.resolve_for_access(token)
        log.info(f"Edit: {path}")
        try:
            content = await asyncio.to_thread(self._read_text_sync, path)
        except FileNotFoundError as e:
            raise PathNotFoundError(str(e)) from e
        except OSError as e:
            raise FileOperationError(str(e)) from e
        return EditDocument(
            content=content,
            file_path=self.resolver.resolve_for_display(token),
            folder=os.path.dirname(path),
            base_name=os.path.basename(path),
        )


# Global instance
mutation_service = MutationService()
