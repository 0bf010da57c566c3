# filekit - Core Module
"""
Core infrastructure for filekit.
Errors, audit logging and configuration shared by the filesystem module and the CLI.
"""

from .exceptions import (
    FileSystemError,
    FileAlreadyExistsError,
    DirectoryNotFoundError,
    FileDoesNotExistError,
    MissingFileNameError,
    InvalidFileNameError,
)
from .logger import AuditLogger, AuditEntry, ActionType, ActionStatus
from .config import FileKitConfig, load_config, save_config

__all__ = [
    "FileSystemError",
    "FileAlreadyExistsError",
    "DirectoryNotFoundError",
    "FileDoesNotExistError",
    "MissingFileNameError",
    "InvalidFileNameError",
    "AuditLogger",
    "AuditEntry",
    "ActionType",
    "ActionStatus",
    "FileKitConfig",
    "load_config",
    "save_config",
]

__version__ = "0.1.0"
