"""
File handle for filekit.

A FileHandle wraps one file on disk. Content is edited in memory and only
reaches the disk on save(). The OS file object behind the handle is opened
lazily and closed again after each save, unless the handle was switched to
append mode, which pins it open so that successive saves accumulate.

Example:
    FileHandle.create("notes.txt").write("Hello World!").save()

    text = FileHandle.open("notes.txt").read()

    with FileHandle.create("log.txt").append_mode() as log:
        log.write("first\\n").save()
        log.write("second\\n").save()
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any, BinaryIO, Optional, Union

from core.exceptions import (
    DirectoryNotFoundError,
    FileAlreadyExistsError,
    FileDoesNotExistError,
    InvalidFileNameError,
    MissingFileNameError,
)
from core.logger import ActionStatus, ActionType, AuditLogger


PathLike = Union[str, "os.PathLike[str]"]

# Undecodable bytes survive a load/save round trip unchanged.
_ERRORS = "surrogateescape"


class OpenMode(Enum):
    """How the OS file object is opened on save."""
    APPEND_CREATE = "ab"
    OVERWRITE_CREATE = "wb"
    READ_WRITE_EXISTING = "r+b"


class ResourceState(Enum):
    """
    Lifetime of the OS file object behind a handle.

    CLOSED -> OPEN_TRANSIENT on save(), back to CLOSED when save() returns.
    Any state -> OPEN_PINNED on append_mode(); save() leaves it pinned.
    Any state -> CLOSED on delete() or close().
    """
    CLOSED = "closed"
    OPEN_TRANSIENT = "open_transient"
    OPEN_PINNED = "open_pinned"


def _validate_file_name(value: Any) -> str:
    if isinstance(value, os.PathLike):
        value = os.fspath(value)
    if not isinstance(value, str) or value == "":
        raise InvalidFileNameError(value)
    return value


def _to_text(content: Any, encoding: str) -> str:
    if content is None:
        return ""
    if isinstance(content, (bytes, bytearray)):
        return bytes(content).decode(encoding, errors=_ERRORS)
    if isinstance(content, (list, tuple)):
        return "\n".join(str(item) for item in content)
    return str(content)


class FileHandle:
    """In-memory view of a file with explicit save and delete."""

    def __init__(
        self,
        filename: Optional[PathLike] = None,
        mode: OpenMode = OpenMode.APPEND_CREATE,
        encoding: str = "utf-8",
        logger: Optional[AuditLogger] = None
    ):
        """
        Initialize a FileHandle.

        If the file already exists its content is loaded into the buffer.

        Args:
            filename: Path of the backing file; may be set later with set_file_name()
            mode: How the file is opened on save (default: append)
            encoding: Text encoding used for loading and saving
            logger: Audit logger recording filesystem side effects
        """
        self._path: Optional[str] = None
        self._content = ""
        self._mode = mode
        self._resource: Optional[BinaryIO] = None
        self._state = ResourceState.CLOSED
        self.encoding = encoding
        self.logger = logger

        if filename is not None:
            self.set_file_name(filename)
            if os.path.isfile(self._path):
                raw = Path(self._path).read_bytes()
                self._content = raw.decode(self.encoding, errors=_ERRORS)

    @classmethod
    def create(
        cls,
        filename: PathLike,
        encoding: str = "utf-8",
        logger: Optional[AuditLogger] = None
    ) -> "FileHandle":
        """
        Create a handle for a new file.

        Nothing is written until save() is called.

        Args:
            filename: Path of the file to create
            encoding: Text encoding used for saving
            logger: Optional audit logger

        Returns:
            A handle that overwrites the file on every save

        Raises:
            FileAlreadyExistsError: If the path already exists
            DirectoryNotFoundError: If the parent directory does not exist
        """
        path = _validate_file_name(filename)
        if os.path.exists(path):
            raise FileAlreadyExistsError(path)

        directory = os.path.dirname(path) or os.curdir
        if not os.path.isdir(directory):
            raise DirectoryNotFoundError(path, directory)

        handle = cls(path, OpenMode.OVERWRITE_CREATE, encoding=encoding, logger=logger)
        handle._audit(ActionType.CREATE, f"Prepared new file: {path}")
        return handle

    @classmethod
    def open(
        cls,
        filename: PathLike,
        encoding: str = "utf-8",
        logger: Optional[AuditLogger] = None
    ) -> "FileHandle":
        """
        Open an existing file and load its content.

        Args:
            filename: Path of the file to open
            encoding: Text encoding used for loading and saving
            logger: Optional audit logger

        Returns:
            A handle that rewrites the file in place on save

        Raises:
            FileDoesNotExistError: If the path does not exist
        """
        path = _validate_file_name(filename)
        if not os.path.exists(path):
            raise FileDoesNotExistError(path)

        handle = cls(path, OpenMode.READ_WRITE_EXISTING, encoding=encoding, logger=logger)
        handle._audit(
            ActionType.OPEN,
            f"Opened file: {path}",
            result=f"{len(handle._content)} characters loaded"
        )
        return handle

    @staticmethod
    def unlink(filename: PathLike, logger: Optional[AuditLogger] = None) -> bool:
        """
        Delete a file if it exists.

        Directories are never removed.

        Returns:
            True if a file was deleted, False if there was nothing to delete
        """
        path = os.fspath(filename)
        if not (os.path.isfile(path) or os.path.islink(path)):
            return False

        os.remove(path)
        if logger is not None:
            logger.log_action(
                action_type=ActionType.DELETE,
                description=f"Unlinked file: {path}",
                target=path
            )
        return True

    @property
    def mode(self) -> OpenMode:
        return self._mode

    @property
    def state(self) -> ResourceState:
        return self._state

    def set_file_name(self, filename: PathLike) -> None:
        """
        Set the path of the backing file. Content is not reloaded.

        A file left open for the previous path is closed. A handle pinned
        by append_mode() is reopened for the new path and stays pinned.

        Raises:
            InvalidFileNameError: If filename is not a non-empty string
        """
        path = _validate_file_name(filename)
        if path == self._path:
            return

        pinned = self._state is ResourceState.OPEN_PINNED
        self.close()
        self._path = path
        if pinned:
            self._acquire("set_file_name")
            self._state = ResourceState.OPEN_PINNED

    def get_file_name(self) -> Optional[str]:
        return self._path

    def set_content(self, content: Any) -> None:
        """
        Replace the content buffer.

        Lists and tuples become one line per item. Bytes are decoded with
        the handle's encoding, None becomes an empty string and anything
        else is converted with str().
        """
        self._content = _to_text(content, self.encoding)

    def get_content(self) -> str:
        """Return the content buffer."""
        return self._content

    def get_contents(self) -> str:
        """Alias of get_content()."""
        return self.get_content()

    def read(self) -> str:
        """Alias of get_content()."""
        return self.get_content()

    def write(self, content: Any) -> "FileHandle":
        """Replace the content buffer and return self for chaining."""
        self.set_content(content)
        return self

    def write_before(self, content: Any) -> "FileHandle":
        """Prepend to the content buffer."""
        return self.write(_to_text(content, self.encoding) + self.get_content())

    def write_after(self, content: Any) -> "FileHandle":
        """Append to the content buffer."""
        return self.write(self.get_content() + _to_text(content, self.encoding))

    def append_mode(self) -> "FileHandle":
        """
        Switch to append mode and pin the file open.

        Any open file object is closed and the file is reopened for
        appending straight away. Later saves keep it open, so every
        write().save() adds the buffer to the end of the file.

        Raises:
            MissingFileNameError: If no file name has been set
        """
        self._mode = OpenMode.APPEND_CREATE
        self.close()
        self._acquire("append_mode")
        self._state = ResourceState.OPEN_PINNED
        return self

    def save(self) -> "FileHandle":
        """
        Write the content buffer to disk.

        The file is opened with the handle's mode if it is not already open.
        Unless the handle is pinned by append_mode(), it is closed again
        before returning. Files opened with open() are truncated after the
        written content.

        Returns:
            self, for chaining

        Raises:
            MissingFileNameError: If no file name has been set
            OSError: If the file cannot be opened or written
        """
        if not self._path:
            raise MissingFileNameError("save")

        action_type = ActionType.APPEND if self._mode is OpenMode.APPEND_CREATE else ActionType.WRITE
        data = self._content.encode(self.encoding, errors=_ERRORS)

        try:
            resource = self._acquire("save")
            resource.write(data)
            if self._mode is OpenMode.READ_WRITE_EXISTING:
                resource.truncate()
            resource.flush()
        except OSError as e:
            self.close()
            self._audit(
                action_type,
                f"Failed to save {self._path}",
                status=ActionStatus.FAILED,
                result=f"Error: {e}"
            )
            raise

        if self._state is not ResourceState.OPEN_PINNED:
            self.close()

        self._audit(
            action_type,
            f"Saved file: {self._path}",
            result=f"{len(data)} bytes written",
            metadata={"mode": self._mode.value, "pinned": self._state is ResourceState.OPEN_PINNED}
        )
        return self

    def delete(self) -> bool:
        """
        Close the file and remove it from disk.

        Returns:
            True once the file has been removed

        Raises:
            MissingFileNameError: If no file name has been set
            OSError: If the file cannot be removed, e.g. it no longer exists
        """
        if not self._path:
            raise MissingFileNameError("delete")

        self.close()
        try:
            os.remove(self._path)
        except OSError as e:
            self._audit(
                ActionType.DELETE,
                f"Failed to delete {self._path}",
                status=ActionStatus.FAILED,
                result=f"Error: {e}"
            )
            raise

        self._audit(ActionType.DELETE, f"Deleted file: {self._path}")
        return True

    def exists(self) -> bool:
        """Whether the backing path is currently a file on disk."""
        return bool(self._path) and os.path.isfile(self._path)

    def close(self) -> None:
        """Release the OS file object, if any. Safe to call repeatedly."""
        resource, self._resource = self._resource, None
        self._state = ResourceState.CLOSED
        if resource is not None:
            resource.close()

    def _acquire(self, operation: str) -> BinaryIO:
        if self._resource is None:
            if not self._path:
                raise MissingFileNameError(operation)
            self._resource = open(self._path, self._mode.value)
            self._state = ResourceState.OPEN_TRANSIENT
        return self._resource

    def _audit(
        self,
        action_type: ActionType,
        description: str,
        status: ActionStatus = ActionStatus.EXECUTED,
        result: Optional[str] = None,
        metadata: Optional[dict] = None
    ) -> None:
        if self.logger is None:
            return
        self.logger.log_action(
            action_type=action_type,
            description=description,
            target=self._path,
            status=status,
            result=result,
            metadata=metadata
        )

    def __enter__(self) -> "FileHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"FileHandle(path={self._path!r}, mode={self._mode.name}, "
            f"state={self._state.name})"
        )
