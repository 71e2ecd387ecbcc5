# src/webfs/core/server_controller.py
import logging
import sys

import uvicorn

from ..api_server.api import create_api_app
from .config import ServerConfig
from .exceptions import ServerError
from .utils import DummyTty

log = logging.getLogger(__name__)


class ServerController:
    """Manages the lifecycle of the WebFS HTTP server."""

    def __init__(self, config: ServerConfig):
        self.config = config
        self.server = None

    def get_url(self):
        host = "localhost" if self.config.host in ("0.0.0.0", "::") else self.config.host
        return f"http://{host}:{self.config.port}{self.config.prefix}/fs/"

    def _build_server(self) -> uvicorn.Server:
        if sys.stdout is None: sys.stdout = DummyTty()
        if sys.stderr is None: sys.stderr = DummyTty()

        app = create_api_app(self.config)
        uv_config = uvicorn.Config(
            app=app,
            host=self.config.host,
            port=self.config.port,
            log_level="warning",
            # Logging is configured by webfs.core.logging_config.
            log_config=None,
        )
        return uvicorn.Server(uv_config)

    def run(self):
        """Runs the server in the calling thread until it is stopped."""
        self.server = self._build_server()
        log.info(f"Listen on port: {self.config.port} ({self.get_url()})")
        try:
            self.server.run()
        except (OSError, SystemExit) as e:
            raise ServerError(f"Server failed to start: {e}") from e
        log.info("Server stopped.")
