"""HTTP routers for the folder watcher service."""
