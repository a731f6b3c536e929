"""
Watcher data models.

All models use Pydantic with strict validation and no silent coercion.
"""

import re
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field

_SEPARATORS = re.compile(r"[\\/]")


def folder_name(path: str) -> str:
    """
    Final segment of a folder path.

    Trailing separators are ignored. A path with no final segment
    (a filesystem root such as "/") is its own name.
    """
    stripped = path.rstrip("/\\")
    name = _SEPARATORS.split(stripped)[-1] if stripped else ""
    return name or path


class FolderEntry(BaseModel):
    """
    A single tracked folder.

    `name` is derived from `path` and cannot be set independently.
    `active=False` means the folder has been ignored by the operator.
    """

    # Serialized entries carry the derived name; it is dropped on the way back in
    model_config = ConfigDict(extra="ignore")

    path: str = Field(..., min_length=1, description="Folder path, unique key")
    active: bool = Field(
        default=True, description="Whether this folder participates in runs"
    )

    @computed_field
    @property
    def name(self) -> str:
        return folder_name(self.path)


class WatchSummary(BaseModel):
    """Counts of tracked folders by state."""

    model_config = ConfigDict(extra="forbid")

    root: Optional[str] = None
    total: int = 0
    active: int = 0
    ignored: int = 0
