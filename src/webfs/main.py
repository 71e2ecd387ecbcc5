# filename: src/webfs/main.py
#!/usr/bin/env python3
"""
WebFS - Remote Filesystem Gateway
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

import argparse
import logging
import sys
from typing import List, Optional

from .core import constants
from .core.config import ConfigManager
from .core.exceptions import WebFSError
from .core.logging_config import setup_logging
from .core.server_controller import ServerController
from .core.version import __app_name__, __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webfs",
        description="Expose the local filesystem over HTTP.",
    )
    parser.add_argument("--port", type=int, help=f"Listen port (default {constants.DEFAULT_PORT})")
    parser.add_argument("--host", help=f"Listen address (default {constants.DEFAULT_HOST})")
    parser.add_argument("--prefix", help="Web URL prefix, e.g. /files")
    parser.add_argument("--dir", dest="initial_dir", help=f"First directory shown (default {constants.DEFAULT_DIR})")
    parser.add_argument("--log-level", dest="log_level", help="DEBUG, INFO, WARNING or ERROR")
    parser.add_argument("--config", help="Path to the JSON settings file")
    parser.add_argument("--version", action="version", version=f"{__app_name__} v{__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for WebFS."""
    args = build_parser().parse_args(argv)

    try:
        if not args.config:
            constants.initialize_app_directories()
        config_manager = ConfigManager(args.config)
        config = config_manager.to_server_config(
            host=args.host,
            port=args.port,
            prefix=args.prefix,
            initial_dir=args.initial_dir,
            log_level=args.log_level,
        )
    except WebFSError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    setup_logging(config.log_level)
    log = logging.getLogger(__name__)
    log.info(f"Starting {__app_name__} v{__version__}")

    controller = ServerController(config)
    try:
        controller.run()
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received, shutting down...")
    except WebFSError as e:
        log.critical(f"Failed to start {__app_name__}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
