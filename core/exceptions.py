"""
Exceptions for filekit.

Every error raised by the filesystem layer derives from FileSystemError.
Where a builtin exception already describes the failure, the filekit error
also subclasses it so callers can catch either.
"""

from typing import Optional


class FileSystemError(Exception):
    """Base exception for all filekit errors."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class FileAlreadyExistsError(FileSystemError, FileExistsError):
    """Raised when creating a file over an existing path."""

    def __init__(self, path: str):
        super().__init__(
            f"FileHandle.create failed. The file '{path}' already exists.",
            path=path
        )


class DirectoryNotFoundError(FileSystemError, FileNotFoundError):
    """Raised when the directory a file should be created in is missing."""

    def __init__(self, path: str, directory: str):
        super().__init__(
            "FileHandle.create failed. Unable to find the directory "
            f"to create the file in ({directory}).",
            path=path
        )
        self.directory = directory


class FileDoesNotExistError(FileSystemError, FileNotFoundError):
    """Raised when opening a path that does not exist."""

    def __init__(self, path: str):
        super().__init__(
            f"FileHandle.open failed. The file '{path}' does not exist.",
            path=path
        )


class MissingFileNameError(FileSystemError):
    """Raised when a handle without a file name needs its resource."""

    def __init__(self, operation: str = "save"):
        super().__init__(
            f"FileHandle.{operation} failed. The file object does not have a file name."
        )


class InvalidFileNameError(FileSystemError, ValueError):
    """Raised when a file name is empty or not string-like."""

    def __init__(self, value: object):
        super().__init__(
            "FileHandle.set_file_name failed. Filename should be a non-empty string."
        )
        self.value = value
