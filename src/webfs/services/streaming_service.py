# src/webfs/services/streaming_service.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

import logging
import os
import stat
import urllib.parse
import zlib
from enum import Enum
from typing import AsyncIterator, Dict, NamedTuple, Optional, Union

import aiofiles
import aiofiles.os

from ..core.constants import COMPRESSION_LEVEL, STREAM_CHUNK_SIZE
from ..core.exceptions import PathNotFoundError, RangeNotSatisfiableError
from .path_resolver import PathResolver, path_resolver

log = logging.getLogger(__name__)


class StreamMode(str, Enum):
    DOWNLOAD = "download"
    VIEW = "view"


class ContentEncoding(str, Enum):
    IDENTITY = "identity"
    GZIP = "gzip"
    DEFLATE = "deflate"


# zlib window bits per encoding: gzip container vs. zlib container.
_WBITS = {
    ContentEncoding.GZIP: 16 + zlib.MAX_WBITS,
    ContentEncoding.DEFLATE: zlib.MAX_WBITS,
}


class ByteRange(NamedTuple):
    """Half-open byte interval [start, end)."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    def content_range(self, file_size: int) -> str:
        return f"bytes {self.start}-{self.end - 1}/{file_size}"


class StreamPlan(NamedTuple):
    status_code: int
    headers: Dict[str, str]
    media_type: str
    body: AsyncIterator[bytes]


class StreamRedirect(NamedTuple):
    """A view request hit a directory; the client should go to its listing."""

    display_path: str


def _parse_int(text: str) -> Optional[int]:
    try:
        value = int(text.strip())
    except ValueError:
        return None
    return value if value >= 0 else None


def parse_range(header: Optional[str], file_size: int) -> Optional[ByteRange]:
    """
    Parses a `Range: bytes=<start>-<end>` header (end inclusive on the wire).

    Returns None when no byte range was requested. Unparseable bounds fall
    back to 0 for the start and the file size for the end. Only the first
    range of a multi-range header is honored.

    Raises RangeNotSatisfiableError when the start lies at or past EOF.
    """
    if not header:
        return None
    header = header.strip()
    if not header.lower().startswith("bytes="):
        return None

    first = header[len("bytes="):].split(",", 1)[0]
    start_text, _, end_text = first.partition("-")
    start_text, end_text = start_text.strip(), end_text.strip()

    if not start_text and end_text:
        suffix = _parse_int(end_text)
        if suffix is None:
            start, end = 0, file_size
        else:
            start, end = max(file_size - suffix, 0), file_size
    else:
        start = _parse_int(start_text) or 0
        last = _parse_int(end_text)
        end = file_size if last is None or last < start else last + 1

    end = min(end, file_size)
    if start >= end:
        raise RangeNotSatisfiableError(file_size)
    return ByteRange(start, end)


def choose_encoding(accept_encoding: Optional[str]) -> ContentEncoding:
    """First of gzip/deflate in the client's listed order; identity otherwise."""
    if not accept_encoding:
        return ContentEncoding.IDENTITY
    for item in accept_encoding.split(","):
        name, _, params = item.partition(";")
        name = name.strip().lower()
        if name not in (ContentEncoding.GZIP.value, ContentEncoding.DEFLATE.value):
            continue
        q = params.strip().lower()
        if q.startswith("q=") and _is_zero(q[2:]):
            continue
        return ContentEncoding(name)
    return ContentEncoding.IDENTITY


def _is_zero(text: str) -> bool:
    try:
        return float(text) == 0
    except ValueError:
        return False


def attachment_disposition(filename: str) -> str:
    try:
        filename.encode("ascii")
        return f'attachment; filename="{filename}"'
    except UnicodeEncodeError:
        encoded_filename = urllib.parse.quote(filename, safe="")
        return f"attachment; filename*=UTF-8''{encoded_filename}"


async def iter_file_range(path: str, start: int, length: int, chunk_size: int = STREAM_CHUNK_SIZE):
    """Yields exactly `length` bytes of `path` from `start` (fewer only if the file shrank)."""
    async with aiofiles.open(path, "rb") as f:
        await f.seek(start)
        remaining = length
        while remaining > 0:
            chunk = await f.read(min(chunk_size, remaining))
            if not chunk:
                break
            remaining -= len(chunk)
            yield chunk


async def iter_compressed(chunks: AsyncIterator[bytes], encoding: ContentEncoding):
    """Compresses `chunks` on the fly; closes the source iterator on every exit path."""
    compressor = zlib.compressobj(COMPRESSION_LEVEL, zlib.DEFLATED, _WBITS[encoding])
    try:
        async for chunk in chunks:
            data = compressor.compress(chunk)
            if data:
                yield data
        yield compressor.flush()
    finally:
        await chunks.aclose()


class StreamingService:
    """Serves file bytes for the download and view routes."""

    def __init__(self, resolver: PathResolver = path_resolver, chunk_size: int = STREAM_CHUNK_SIZE):
        self.resolver = resolver
        self.chunk_size = chunk_size

    async def open(
        self,
        token: str,
        mode: StreamMode,
        range_header: Optional[str] = None,
        accept_encoding: Optional[str] = None,
    ) -> Union[StreamPlan, StreamRedirect]:
        """
        Prepares a streamed response for `token`.

        Raises PathNotFoundError if the file cannot be stat'ed or read and
        RangeNotSatisfiableError for a range past EOF. The file is opened
        and closed by the returned body.
        """
        path = self.resolver.resolve_for_access(token)
        log.info(f"{mode.value}: {path}")

        try:
            st = await aiofiles.os.stat(path)
        except OSError as e:
            log.warning(f"Cannot stat '{path}': {e}")
            raise PathNotFoundError(f"Not Found: {path}") from e

        if stat.S_ISDIR(st.st_mode):
            if mode is StreamMode.VIEW:
                return StreamRedirect(self.resolver.resolve_for_display(token))
            raise PathNotFoundError(f"Not Found: {path}")

        if not os.access(path, os.R_OK):
            log.warning(f"Read access denied: {path}")
            raise PathNotFoundError(f"Not Found: {path}")

        file_size = st.st_size
        byte_range = parse_range(range_header, file_size)

        headers = {"Accept-Ranges": "bytes"}
        if mode is StreamMode.DOWNLOAD:
            media_type = "application/octet-stream"
            headers["Content-Disposition"] = attachment_disposition(os.path.basename(path))
        else:
            media_type = "text/plain"

        if byte_range is not None:
            headers["Content-Range"] = byte_range.content_range(file_size)
            headers["Content-Length"] = str(byte_range.length)
            log.debug(f"Range {byte_range.start}-{byte_range.end - 1}/{file_size} for {path}")
            body = iter_file_range(path, byte_range.start, byte_range.length, self.chunk_size)
            return StreamPlan(206, headers, media_type, body)

        body = iter_file_range(path, 0, file_size, self.chunk_size)
        encoding = ContentEncoding.IDENTITY
        if mode is StreamMode.VIEW:
            encoding = choose_encoding(accept_encoding)

        if encoding is ContentEncoding.IDENTITY:
            headers["Content-Length"] = str(file_size)
        else:
            # Compressed length is unknown up front; the body is sent chunked.
            headers["Content-Encoding"] = encoding.value
            headers["Vary"] = "Accept-Encoding"
            body = iter_compressed(body, encoding)
        return StreamPlan(200, headers, media_type, body)


# Global instance
streaming_service = StreamingService()
