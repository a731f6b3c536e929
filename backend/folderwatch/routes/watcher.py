"""
Watcher endpoints.

HTTP adapter over FolderRegistry for the folder toggle UI and for the
notification layer. Adds no semantics of its own: notifications and
operator toggles for unknown folders are accepted and reported as
unchanged, never rejected.

Root rescans run on a worker thread with a timeout. Network volumes can
stall enumeration indefinitely; a timed-out rescan is discarded and the
watched folders stay as they were.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from fastapi import APIRouter, HTTPException, Query, Request

from ..watcher.errors import PathNotFoundError, ProbeTimeoutError
from ..watcher.models import FolderEntry, WatchSummary
from ..watcher.registry import FolderRegistry

router = APIRouter(prefix="/watcher", tags=["watcher"])

# Executor for running blocking rescans in threads
_scan_executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="watch_scan")


class AdjustRequest(BaseModel):
    """Request body for pointing the watcher at a root."""

    model_config = ConfigDict(extra="forbid")

    root: str = Field(..., min_length=1)


class FolderRequest(BaseModel):
    """Request body for single-folder notifications and toggles."""

    model_config = ConfigDict(extra="forbid")

    path: str = Field(..., min_length=1)


class FolderListResponse(BaseModel):
    """All watched folders in arrival order."""

    model_config = ConfigDict(extra="forbid")

    root: Optional[str] = None
    folders: List[FolderEntry]


class FolderStatusResponse(BaseModel):
    """State of one path. All flags are False for untracked paths."""

    model_config = ConfigDict(extra="forbid")

    path: str
    watched: bool
    active: bool
    ignored: bool


class FolderChangeResponse(FolderStatusResponse):
    """State of one path after a mutation."""

    changed: bool


def _registry(request: Request) -> FolderRegistry:
    return request.app.state.folder_registry


def _status(registry: FolderRegistry, path: str) -> dict:
    return {
        "path": path,
        "watched": registry.is_watched(path),
        "active": registry.is_active(path),
        "ignored": registry.is_ignored(path),
    }


def _folder_list(registry: FolderRegistry) -> FolderListResponse:
    return FolderListResponse(root=registry.root, folders=registry.watched_folders())


async def scan_with_timeout(registry: FolderRegistry, root: str, timeout: float) -> List[str]:
    """
    Run registry.scan on a worker thread.

    Raises:
        PathNotFoundError: If root is not an existing directory
        ProbeTimeoutError: If enumeration exceeds `timeout` seconds
    """
    loop = asyncio.get_running_loop()
    try:
        return await asyncio.wait_for(
            loop.run_in_executor(_scan_executor, registry.scan, root),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        raise ProbeTimeoutError(root, timeout)


@router.get("/folders", response_model=FolderListResponse)
async def list_folders(request: Request):
    """List every watched folder, Active and Ignored."""
    return _folder_list(_registry(request))


@router.get("/summary", response_model=WatchSummary)
async def get_summary(request: Request):
    return _registry(request).summary()


@router.get("/status", response_model=FolderStatusResponse)
async def get_status(request: Request, path: str = Query(..., min_length=1)):
    return _status(_registry(request), path)


@router.post("/adjust", response_model=FolderListResponse)
async def adjust_root(body: AdjustRequest, request: Request):
    """
    Point the watcher at a new root and rescan it.

    Replaces all watched folders, including ignored ones. If a newer rescan
    finishes first, this one is dropped and the current folders are returned.

    Raises:
        404: If the root does not exist as a directory
        504: If enumeration timed out
    """
    registry = _registry(request)
    timeout = request.app.state.settings.adjust_timeout_seconds
    generation = registry.begin_scan()

    try:
        listing = await scan_with_timeout(registry, body.root, timeout)
    except PathNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProbeTimeoutError as e:
        registry.record_scan_failure(body.root, e)
        raise HTTPException(status_code=504, detail=str(e))

    registry.commit_scan(body.root, listing, generation)
    return _folder_list(registry)


@router.post("/creation", response_model=FolderChangeResponse)
async def folder_created(body: FolderRequest, request: Request):
    registry = _registry(request)
    changed = registry.creation(body.path)
    return {**_status(registry, body.path), "changed": changed}


@router.post("/deletion", response_model=FolderChangeResponse)
async def folder_deleted(body: FolderRequest, request: Request):
    registry = _registry(request)
    changed = registry.deletion(body.path)
    return {**_status(registry, body.path), "changed": changed}


@router.post("/ignore", response_model=FolderChangeResponse)
async def ignore_folder(body: FolderRequest, request: Request):
    """Exclude a watched folder. No-op for untracked or already ignored paths."""
    registry = _registry(request)
    changed = registry.ignore(body.path)
    return {**_status(registry, body.path), "changed": changed}


@router.post("/reinstate", response_model=FolderChangeResponse)
async def reinstate_folder(body: FolderRequest, request: Request):
    """Re-include an ignored folder. No-op for untracked or already active paths."""
    registry = _registry(request)
    changed = registry.reinstate(body.path)
    return {**_status(registry, body.path), "changed": changed}


# ============================================================================
# Debug Endpoints
# ============================================================================

@router.get("/events")
async def get_watch_events(request: Request, limit: int = Query(50, ge=1)):
    """Recent watch events, most recent first."""
    event_log = request.app.state.watch_log
    events = event_log.get_events_as_dicts(limit)

    return {
        "events": events,
        "count": len(events),
        "max_events": event_log.max_events,
    }


@router.post("/events/clear")
async def clear_watch_events(request: Request):
    request.app.state.watch_log.clear()

    return {
        "success": True,
        "message": "Watch event log cleared",
    }
