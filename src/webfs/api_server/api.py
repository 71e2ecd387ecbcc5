# filename: src/webfs/api_server/api.py
"""
WebFS - Remote Filesystem Gateway - Main API Module
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
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from ..core.config import ServerConfig
from ..core.version import __version__
from ..services.listing_service import ListingService
from ..services.mutation_service import MutationService
from ..services.path_resolver import PathResolver
from ..services.streaming_service import StreamingService
from .fs_router import create_fs_router

log = logging.getLogger(__name__)


# --- FastAPI App Factory ---
def create_api_app(config: Optional[ServerConfig] = None, resolver: Optional[PathResolver] = None) -> FastAPI:
    config = config or ServerConfig()
    resolver = resolver or PathResolver()
    prefix = config.prefix

    app = FastAPI(title="WebFS API", version=__version__, docs_url=None, redoc_url=None)
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    fs_router = create_fs_router(
        config,
        listing=ListingService(resolver),
        streaming=StreamingService(resolver),
        mutation=MutationService(resolver),
    )
    app.include_router(fs_router, prefix=f"{prefix}/fs")

    # --- Redirect chain to the listing index ---
    def _redirect(target: str):
        async def handler():
            return RedirectResponse(f"{prefix}{target}", status_code=302)
        return handler

    for source, target in (("/", "/fs/"), ("/fs", "/fs/"), ("/fs/", "/fs/list/"), ("/fs/list", "/fs/list/")):
        app.add_api_route(f"{prefix}{source}", _redirect(target), methods=["GET"], include_in_schema=False)

    app.state.config = config
    log.info(f"WebFS API created with prefix '{prefix or '/'}', initial dir '{config.initial_dir}'")
    return app
