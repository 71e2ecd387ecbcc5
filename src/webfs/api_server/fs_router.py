"""
WebFS - Remote Filesystem Gateway - Filesystem API Module
Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU Affero General Public License as published
by the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
GNU Affero General Public License for more details.

You should have received a copy of the GNU Affero General Public License
along with this program. If not, see <https://www.gnu.org/licenses/>.
"""

import logging
import urllib.parse
from typing import Awaitable, Optional

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import (JSONResponse, PlainTextResponse,
                               RedirectResponse, StreamingResponse)
from starlette.convertors import Convertor, register_url_convertor

from ..core.config import ServerConfig
from ..core.constants import (RENAME_TARGET_FIELD, SAVE_CONTENT_FIELD,
                              UPLOAD_FILE_FIELD)
from ..core.exceptions import (PathNotFoundError, RangeNotSatisfiableError,
                               WebFSError)
from ..services.listing_service import ListingService, listing_service
from ..services.models import FileMarker
from ..services.mutation_service import MutationService, mutation_service
from ..services.sorting import SortKey, SortSpec
from ..services.streaming_service import (StreamingService, StreamMode,
                                          StreamRedirect, streaming_service)
from .envelope import failure, success

log = logging.getLogger(__name__)


# --- URL Convertors ---
# Keep the sorted-listing route from swallowing plain paths like
# '/fs/list/@home/user/docs': its first two segments must look like a
# sort key and a boolean.
class SortKeyConvertor(Convertor):
    regex = "|".join(key.value for key in SortKey)

    def convert(self, value: str) -> SortKey:
        return SortKey(value)

    def to_string(self, value) -> str:
        return SortKey(value).value


TRUE_STRINGS = ("1", "t", "T", "TRUE", "true", "True")
FALSE_STRINGS = ("0", "f", "F", "FALSE", "false", "False")


class BoolConvertor(Convertor):
    # Longest spellings first so alternation never stops at a prefix.
    regex = "|".join(sorted(TRUE_STRINGS + FALSE_STRINGS, key=len, reverse=True))

    def convert(self, value: str) -> bool:
        return value in TRUE_STRINGS

    def to_string(self, value) -> str:
        return "true" if value else "false"


register_url_convertor("sortkey", SortKeyConvertor())
register_url_convertor("boolean", BoolConvertor())


def listing_url(prefix: str, display_path: str) -> str:
    return f"{prefix}/fs/list/@{urllib.parse.quote(display_path, safe='/~')}"


async def _run(operation: Awaitable, payload=None) -> JSONResponse:
    """Awaits a service call and wraps the outcome in the JSON envelope."""
    try:
        result = await operation
    except WebFSError as e:
        return failure(str(e))
    if isinstance(result, FileMarker):
        return success(result.message)
    return success(result if payload is None else payload)


def create_fs_router(
    config: ServerConfig,
    listing: ListingService = listing_service,
    streaming: StreamingService = streaming_service,
    mutation: MutationService = mutation_service,
) -> APIRouter:
    """Builds the /fs router bound to one configuration and service set."""
    router = APIRouter()

    # --- Listing ---
    @router.get("/list/")
    async def index():
        return success({"dir": config.initial_dir, "prefix": config.prefix})

    # Registered before the simple listing so the convertors get first pick.
    @router.get("/list/@{order_by:sortkey}/{is_asc:boolean}/{path:path}")
    async def list_sorted(order_by: SortKey, is_asc: bool, path: str):
        return await _run(listing.list(path, SortSpec(order_by, is_asc)))

    @router.get("/list/@{path:path}")
    async def list_simple(path: str):
        return await _run(listing.list_simple(path))

    @router.get("/listup/@{path:path}")
    async def list_up(path: str):
        return await _run(listing.list_parent(path))

    # --- Mutation ---
    @router.post("/mkdirs/@{path:path}")
    async def make_dirs(path: str):
        return await _run(mutation.make_dirs(path), payload="")

    @router.get("/delete/@{path:path}")
    async def remove(path: str):
        return await _run(mutation.remove(path), payload="")

    @router.post("/rename/@{path:path}")
    async def rename(path: str, target: str = Form(..., alias=RENAME_TARGET_FIELD)):
        return await _run(mutation.rename(path, target), payload="")

    @router.get("/info/@{path:path}")
    async def get_info(path: str):
        return await _run(mutation.get_info(path))

    @router.get("/onedit/@{path:path}")
    async def on_edit(path: str):
        return await _run(mutation.read_for_edit(path))

    @router.post("/save/@{path:path}")
    async def save(path: str, content: str = Form("", alias=SAVE_CONTENT_FIELD)):
        return await _run(mutation.save(path, content), payload="")

    @router.post("/upload/@{path:path}")
    async def upload(path: str, uploaded_file: Optional[UploadFile] = File(None, alias=UPLOAD_FILE_FIELD)):
        if uploaded_file is None:
            log.warning(f"Upload to '{path}' without an '{UPLOAD_FILE_FIELD}' part")
            return failure(f"request has no multipart part '{UPLOAD_FILE_FIELD}'")
        try:
            data = await uploaded_file.read()
        except Exception as e:
            log.error(f"Failed to read uploaded part for '{path}': {e}")
            return failure(f"Failed to read uploaded file: {e}")
        finally:
            await uploaded_file.close()
        return await _run(mutation.upload(path, uploaded_file.filename or "", data), payload="")

    # --- Streaming ---
    async def _stream(path: str, mode: StreamMode, request: Request):
        try:
            plan = await streaming.open(
                path,
                mode,
                range_header=request.headers.get("range"),
                accept_encoding=request.headers.get("accept-encoding"),
            )
        except PathNotFoundError:
            return PlainTextResponse("Not Found", status_code=404)
        except RangeNotSatisfiableError as e:
            return PlainTextResponse(
                "Requested Range Not Satisfiable",
                status_code=416,
                headers={"Content-Range": f"bytes */{e.file_size}"},
            )

        if isinstance(plan, StreamRedirect):
            return RedirectResponse(listing_url(config.prefix, plan.display_path), status_code=302)
        return StreamingResponse(
            plan.body,
            status_code=plan.status_code,
            headers=plan.headers,
            media_type=plan.media_type,
        )

    @router.get("/download/@{path:path}")
    async def download(path: str, request: Request):
        return await _stream(path, StreamMode.DOWNLOAD, request)

    @router.get("/view/@{path:path}")
    async def view(path: str, request: Request):
        return await _stream(path, StreamMode.VIEW, request)

    return router
