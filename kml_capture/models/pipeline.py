"""Pydantic models for the pipeline folder listing."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Literal

from pydantic import BaseModel, Field

from kml_capture.core.constants import DEFAULT_RECENT_WINDOW_MINUTES

ItemType = Literal["folder", "file"]


class PipelineItem(BaseModel):
    """One entry of a pipeline folder.

    Attributes:
        name: Display name (last path segment).
        type: ``"folder"`` or ``"file"``.
        path: Full pipeline path, used for navigation and downloads.
        modified_at: Last modification timestamp (``modifiedAt`` on the wire).
    """

    name: str
    type: ItemType
    path: str
    modified_at: datetime | None = Field(default=None, alias="modifiedAt")

    model_config = {"populate_by_name": True}

    @property
    def is_folder(self) -> bool:
        return self.type == "folder"

    def is_recently_modified(
        self,
        now: datetime | None = None,
        *,
        window_min: float = DEFAULT_RECENT_WINDOW_MINUTES,
    ) -> bool:
        """Whether the item changed less than *window_min* minutes before *now*."""
        if self.modified_at is None:
            return False
        modified = self.modified_at
        if modified.tzinfo is None:
            modified = modified.replace(tzinfo=UTC)
        now = now or datetime.now(UTC)
        return now - modified < timedelta(minutes=window_min)


class FolderListing(BaseModel):
    """Items of one pipeline folder, newest first as the server sorts them."""

    items: list[PipelineItem] = Field(default_factory=list)
    current_path: str = Field(default="", alias="currentPath")

    model_config = {"populate_by_name": True}
