"""
Folder watcher — which folders a continuous test runner observes.

Public API:
    FolderRegistry — Ordered Active/Ignored state for watched folders
    FolderEntry — A single tracked folder (path, derived name, active flag)
    FileSystemProbe — Contract for existence checks and recursive listing
    DiskFileSystem — Probe backed by the local filesystem
    FakeFileSystem — In-memory probe
"""

from .errors import (
    WatcherError,
    PathNotFoundError,
    ProbeTimeoutError,
)
from .models import FolderEntry, WatchSummary, folder_name
from .probe import FileSystemProbe, DiskFileSystem, FakeFileSystem, breadth_first
from .registry import FolderRegistry

__all__ = [
    # Errors
    "WatcherError",
    "PathNotFoundError",
    "ProbeTimeoutError",
    # Models
    "FolderEntry",
    "WatchSummary",
    "folder_name",
    # Probes
    "FileSystemProbe",
    "DiskFileSystem",
    "FakeFileSystem",
    "breadth_first",
    # Registry
    "FolderRegistry",
]
