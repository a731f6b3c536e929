"""
Folder registry.

Authoritative in-memory record of the folders a test runner is watching.
Fed by four independent triggers:

- adjust: a root is (re)pointed at and fully rescanned
- creation / deletion: filesystem notifications for single folders
- ignore / reinstate: operator toggles from the UI

Only two stored states exist, Active and Ignored. A path with no entry is
Untracked, whether it was never seen or was tracked and later deleted.
"""

import logging
import threading
from typing import Dict, List, Optional

from ..observability.watch_log import WatchEventLog, WatchEventType
from .errors import PathNotFoundError
from .models import FolderEntry, WatchSummary
from .probe import FileSystemProbe, breadth_first

logger = logging.getLogger(__name__)


class FolderRegistry:
    """
    Ordered set of watched folders.

    Iteration order is arrival order: rescan order (breadth-first) followed
    by creation notifications in the order they were received. Nothing is
    ever re-sorted.

    All operations are serialized by an internal lock. The slow part of
    adjust (enumerating the tree) runs before the lock is taken.
    """

    def __init__(
        self,
        probe: FileSystemProbe,
        event_log: Optional[WatchEventLog] = None,
    ):
        """
        Initialize registry.

        Args:
            probe: Filesystem probe used for root validation and rescans
            event_log: Optional WatchEventLog recording every mutation
        """
        self._probe = probe
        self._event_log = event_log
        self._folders: Dict[str, FolderEntry] = {}
        self._root: Optional[str] = None
        self._scan_generation = 0
        self._committed_generation = 0
        self._lock = threading.Lock()

    @property
    def probe(self) -> FileSystemProbe:
        return self._probe

    @property
    def root(self) -> Optional[str]:
        """Root of the last successful adjust, or None."""
        return self._root

    def __len__(self) -> int:
        with self._lock:
            return len(self._folders)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.is_watched(path)

    # Mutations

    def adjust(self, root: str) -> None:
        """
        Point the registry at `root` and rebuild the watched folders.

        Every directory under `root` (root included) becomes Active,
        shallow folders before deep ones. All previous entries are dropped,
        ignored ones included.

        Raises:
            PathNotFoundError: If root is not an existing directory.
                The watched folders are left untouched.
        """
        generation = self.begin_scan()
        self.commit_scan(root, self.scan(root), generation)

    def begin_scan(self) -> int:
        """
        Reserve a generation number for a rescan that is about to start.

        Pass it to commit_scan. A rescan whose generation is older than the
        last committed one is dropped instead of overwriting newer results.
        """
        with self._lock:
            self._scan_generation += 1
            return self._scan_generation

    def scan(self, root: str) -> List[str]:
        """
        Validate `root` and list its folders breadth-first without touching state.

        This is the only potentially slow step of adjust. Callers that need a
        timeout run it on a worker thread and pass the result to commit_scan.

        Raises:
            PathNotFoundError: If root is not an existing directory
        """
        if not self._probe.exists(root):
            error = PathNotFoundError(root)
            self.record_scan_failure(root, error)
            raise error

        return breadth_first(self._probe.enumerate_recursive(root), root)

    def record_scan_failure(self, root: str, error: Exception) -> None:
        """Log a rescan that was rejected or abandoned. State is not touched."""
        logger.warning(f"Rescan rejected: {error}")
        if self._event_log is not None:
            self._event_log.record_adjust_failed(root, str(error))

    def commit_scan(
        self,
        root: str,
        listing: List[str],
        generation: Optional[int] = None,
    ) -> bool:
        """
        Replace all watched folders with `listing`, every entry Active.

        Args:
            generation: Value from begin_scan. None commits unconditionally.

        Returns:
            False if a newer rescan was already committed and this one was dropped
        """
        rebuilt = {path: FolderEntry(path=path, active=True) for path in listing}

        with self._lock:
            if generation is not None and generation < self._committed_generation:
                stale = True
            else:
                stale = False
                self._folders = rebuilt
                self._root = root
                if generation is not None:
                    self._committed_generation = generation

        if stale:
            logger.info(f"Dropping stale rescan of {root}, a newer rescan already finished")
            return False

        logger.info(f"Watching {len(rebuilt)} folder(s) under {root}")
        if self._event_log is not None:
            self._event_log.record_adjust(root, len(rebuilt))
        return True

    def creation(self, path: str) -> bool:
        """
        Track a newly created folder as Active, after all existing entries.

        A path that is already tracked keeps its current state and position.
        An empty path names no folder and is left alone.

        Returns:
            True if a new entry was added
        """
        with self._lock:
            changed = bool(path) and path not in self._folders
            if changed:
                self._folders[path] = FolderEntry(path=path, active=True)

        self._log(WatchEventType.CREATION, path, changed)
        return changed

    def deletion(self, path: str) -> bool:
        """
        Stop tracking a deleted folder, whatever its state was.

        Returns:
            True if an entry was removed
        """
        with self._lock:
            changed = self._folders.pop(path, None) is not None

        self._log(WatchEventType.DELETION, path, changed)
        return changed

    def ignore(self, path: str) -> bool:
        """
        Exclude an Active folder. Untracked or already ignored paths are left alone.

        Returns:
            True if the folder went from Active to Ignored
        """
        return self._set_active(WatchEventType.IGNORE, path, False)

    def reinstate(self, path: str) -> bool:
        """
        Re-include an Ignored folder. Untracked or already active paths are left alone.

        Returns:
            True if the folder went from Ignored to Active
        """
        return self._set_active(WatchEventType.REINSTATE, path, True)

    def _set_active(self, event_type: WatchEventType, path: str, active: bool) -> bool:
        with self._lock:
            entry = self._folders.get(path)
            changed = entry is not None and entry.active != active
            if changed:
                entry.active = active

        self._log(event_type, path, changed)
        return changed

    def _log(self, event_type: WatchEventType, path: str, changed: bool) -> None:
        if changed:
            logger.debug(f"{event_type.value}: {path}")
        else:
            logger.debug(f"{event_type.value} ignored, nothing to change: {path}")

        if self._event_log is not None:
            self._event_log.record(event_type, path, changed)

    # Queries

    def watched_folders(self) -> List[FolderEntry]:
        """All tracked folders, Active and Ignored, in arrival order."""
        with self._lock:
            return [entry.model_copy() for entry in self._folders.values()]

    def active_folders(self) -> List[FolderEntry]:
        return [entry for entry in self.watched_folders() if entry.active]

    def ignored_folders(self) -> List[FolderEntry]:
        return [entry for entry in self.watched_folders() if not entry.active]

    def is_watched(self, path: str) -> bool:
        with self._lock:
            return path in self._folders

    def is_active(self, path: str) -> bool:
        with self._lock:
            entry = self._folders.get(path)
            return entry is not None and entry.active

    def is_ignored(self, path: str) -> bool:
        with self._lock:
            entry = self._folders.get(path)
            return entry is not None and not entry.active

    def summary(self) -> WatchSummary:
        with self._lock:
            active = sum(1 for entry in self._folders.values() if entry.active)
            return WatchSummary(
                root=self._root,
                total=len(self._folders),
                active=active,
                ignored=len(self._folders) - active,
            )
