# filename: src/webfs/core/constants.py
"""
WebFS - Remote Filesystem Gateway - Constants Module
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

from .utils import get_app_data_path
from .version import __app_name__

# --- Application Metadata ---
APP_NAME = __app_name__

# --- Core Application Settings ---
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 5007
DEFAULT_PREFIX = ""
DEFAULT_DIR = "~"
DEFAULT_LOG_LEVEL = "INFO"

# --- Streaming ---
STREAM_CHUNK_SIZE = 65536  # 64KB
COMPRESSION_LEVEL = 6

# --- Mutation ---
MKDIRS_MODE = 0o722

# --- Form Field Names ---
SAVE_CONTENT_FIELD = "content"
UPLOAD_FILE_FIELD = "uploaded_file"
RENAME_TARGET_FIELD = "target"

# --- File Names ---
CONFIG_FILENAME = "config.json"
LOG_FILENAME = "webfs.log"

# --- Application Paths ---
# Base directory for configuration and logs.
APP_DATA_PATH = get_app_data_path(APP_NAME)
CONFIG_FILE = APP_DATA_PATH / CONFIG_FILENAME
LOG_FILE = APP_DATA_PATH / LOG_FILENAME


def initialize_app_directories():
    """
    Creates required application directories.
    Should be called once at the application's entry point.
    """
    APP_DATA_PATH.mkdir(parents=True, exist_ok=True)
