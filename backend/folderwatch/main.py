"""
folderwatch service — watched folder state over HTTP.

Run with `python -m folderwatch.main`, or hand `create_app` to an ASGI server.
"""

import logging
from typing import Optional

from fastapi import FastAPI

from . import __version__
from .config import WatcherSettings
from .observability.watch_log import WatchEventLog
from .routes import watcher
from .watcher.errors import PathNotFoundError
from .watcher.probe import DiskFileSystem, FileSystemProbe
from .watcher.registry import FolderRegistry

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8090


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )


def create_app(
    settings: Optional[WatcherSettings] = None,
    probe: Optional[FileSystemProbe] = None,
) -> FastAPI:
    """
    Build the service.

    Args:
        settings: Service settings (default: read from environment)
        probe: Filesystem probe (default: DiskFileSystem per settings)

    If settings.root is set, it is scanned once at startup. A missing root
    is logged and the service starts with no watched folders.
    """
    settings = settings or WatcherSettings.from_env()
    if probe is None:
        probe = DiskFileSystem(
            skip_hidden=settings.skip_hidden,
            follow_symlinks=settings.follow_symlinks,
        )

    app = FastAPI(title="folderwatch", version=__version__)

    app.state.settings = settings
    app.state.watch_log = WatchEventLog(max_events=settings.event_log_size)
    app.state.folder_registry = FolderRegistry(probe, event_log=app.state.watch_log)

    if settings.root:
        try:
            app.state.folder_registry.adjust(settings.root)
        except PathNotFoundError as e:
            logger.warning(f"Starting without watched folders: {e}")

    app.include_router(watcher.router)

    @app.get("/")
    async def root():
        return {"service": "folderwatch", "status": "running"}

    return app


def run_server(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    settings: Optional[WatcherSettings] = None,
) -> None:
    """
    Run the watcher service.

    Logging is configured here rather than at import, so importing this
    module has no side effects. For external ASGI servers use
    `uvicorn folderwatch.main:create_app --factory`.
    """
    import uvicorn

    settings = settings or WatcherSettings.from_env()
    configure_logging(settings.log_level)
    app = create_app(settings)

    logger.info(f"Starting folderwatch on {host}:{port}")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
