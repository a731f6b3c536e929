"""
Filesystem probes for the folder registry.

A probe answers two questions: does a directory exist, and which
directories live under a root. The registry only consults a probe while
re-scanning a root, never for creation/deletion notifications.

DiskFileSystem walks the real filesystem with pathlib.
FakeFileSystem is an in-memory tree for tests and dry runs.
"""

import logging
import os
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Deque, Dict, Iterable, List, Optional, Protocol, Set, Tuple, runtime_checkable

logger = logging.getLogger(__name__)

_SEPARATORS = ("/", "\\")


@runtime_checkable
class FileSystemProbe(Protocol):
    """Contract consumed by FolderRegistry."""

    def exists(self, path: str) -> bool:
        ...

    def enumerate_recursive(self, root: str) -> List[str]:
        ...


def _root_prefix(root: str) -> str:
    return root.rstrip("/\\")


def is_descendant(path: str, root: str) -> bool:
    """True if `path` is `root` itself or lies somewhere beneath it."""
    if path == root:
        return True
    prefix = _root_prefix(root)
    if not path.startswith(prefix):
        return False
    rest = path[len(prefix):]
    return bool(rest) and rest[0] in _SEPARATORS and bool(rest.strip("/\\"))


def depth_below(path: str, root: str) -> int:
    """Number of path segments between `root` and `path` (0 for the root)."""
    if path == root:
        return 0
    rest = path[len(_root_prefix(root)):]
    return len([segment for segment in rest.replace("\\", "/").split("/") if segment])


def breadth_first(paths: Iterable[str], root: str) -> List[str]:
    """
    Order a folder listing breadth-first below `root`.

    The root comes first, then every depth-1 folder, then depth-2, and so on.
    Folders at the same depth keep the order they were listed in.
    Paths outside `root` and repeated paths are dropped.
    """
    seen: Set[str] = {root}
    below: List[str] = []
    for path in paths:
        if path in seen or not is_descendant(path, root):
            continue
        seen.add(path)
        below.append(path)

    # sorted() is stable, so sibling order survives
    below.sort(key=lambda p: depth_below(p, root))
    return [root] + below


class DiskFileSystem:
    """
    Probe backed by the local filesystem.

    Siblings are listed in name order so repeated scans of an unchanged
    tree produce the same sequence. Directories that become unreadable
    mid-scan are skipped; what was found so far is still returned.
    """

    def __init__(self, skip_hidden: bool = False, follow_symlinks: bool = False):
        """
        Initialize disk probe.

        Args:
            skip_hidden: Skip directories whose name starts with '.'
            follow_symlinks: Descend into symlinked directories (default: False)
        """
        self.skip_hidden = skip_hidden
        self.follow_symlinks = follow_symlinks

    def exists(self, path: str) -> bool:
        try:
            return Path(path).is_dir()
        except OSError:
            return False

    def enumerate_recursive(self, root: str) -> List[str]:
        """
        List `root` and every directory beneath it, breadth-first.

        Child paths are joined onto `root` exactly as given, so every result
        stays a string descendant of `root` even when root is not normalized
        ("./proj", "/home/u//proj").

        Returns:
            Folder paths as strings, root first (exactly as given)
        """
        found = [root]
        queue: Deque[Tuple[str, Path]] = deque([(root, Path(root))])
        visited: Set[Path] = set()

        while queue:
            current_str, current = queue.popleft()

            if self.follow_symlinks:
                try:
                    resolved = current.resolve()
                except OSError:
                    continue
                if resolved in visited:
                    continue
                visited.add(resolved)

            try:
                children = sorted(current.iterdir(), key=lambda p: p.name)
            except OSError as e:
                logger.warning(f"Skipping unreadable directory {current}: {e}")
                continue

            for child in children:
                if self.skip_hidden and child.name.startswith("."):
                    continue
                if child.is_symlink() and not self.follow_symlinks:
                    continue
                if not child.is_dir():
                    continue

                child_str = os.path.join(current_str, child.name)
                found.append(child_str)
                queue.append((child_str, child))

        logger.debug(f"Enumerated {len(found)} folder(s) under {root}")
        return found


@dataclass
class FakeEntry:
    """A node in the in-memory filesystem."""

    size: int
    modified: datetime
    is_dir: bool


class FakeFileSystem:
    """
    In-memory probe.

    Parents are not created implicitly. Enumeration lists directories in
    the order they were created, arranged breadth-first.
    """

    def __init__(self):
        self._entries: Dict[str, FakeEntry] = {}

    def create(
        self,
        path: str,
        size: int = 0,
        modified: Optional[datetime] = None,
        is_dir: bool = True,
    ) -> None:
        self._entries[path] = FakeEntry(
            size=size,
            modified=modified or datetime.now(),
            is_dir=is_dir,
        )

    def delete(self, path: str) -> None:
        """Remove `path` and everything beneath it. Missing paths are ignored."""
        for existing in list(self._entries):
            if is_descendant(existing, path):
                del self._entries[existing]

    def get(self, path: str) -> Optional[FakeEntry]:
        return self._entries.get(path)

    def exists(self, path: str) -> bool:
        entry = self._entries.get(path)
        return entry is not None and entry.is_dir

    def enumerate_recursive(self, root: str) -> List[str]:
        folders = [
            path for path, entry in self._entries.items()
            if entry.is_dir and is_descendant(path, root)
        ]
        return breadth_first(folders, root)
