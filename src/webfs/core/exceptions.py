"""Custom exceptions for WebFS application"""


class WebFSError(Exception):
    """Base exception for WebFS application"""

    pass


class ServerError(WebFSError):
    """Server-related errors"""

    pass


class ConfigurationError(WebFSError):
    """Configuration-related errors"""

    pass


class FileOperationError(WebFSError):
    """File operation errors. The message carries the underlying OS error text."""

    pass


class PathNotFoundError(FileOperationError):
    """The requested path does not exist or cannot be opened"""

    pass


class UploadError(FileOperationError):
    """The uploaded multipart part is missing or could not be read"""

    pass


class RangeNotSatisfiableError(WebFSError):
    """The requested byte range starts at or beyond the end of the file"""

    def __init__(self, file_size: int):
        super().__init__(f"Requested range not satisfiable for a {file_size}-byte file")
        self.file_size = file_size
