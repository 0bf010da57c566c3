"""
Filesystem module for filekit.

Provides the FileHandle wrapper for creating, reading, writing and deleting
files, and FileFinder for prefix and glob based discovery.
"""

from .file import FileHandle, OpenMode, ResourceState
from .finder import FileFinder, expand_braces

__all__ = ['FileHandle', 'OpenMode', 'ResourceState', 'FileFinder', 'expand_braces']
