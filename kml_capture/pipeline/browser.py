"""Folder-style navigation over saved pipeline artifacts.

The browser keeps the items of one folder at a time.  Opening a folder
re-fetches with that folder's path; "Back" drops the last path segment and
re-fetches.  Files are not fetched here: opening or downloading one yields
a URL for the owning UI to hand to the browser.

A failed listing is logged and keeps the previously shown items.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kml_capture.core.constants import DEFAULT_RECENT_WINDOW_MINUTES, PIPELINE_ROOT_TITLE
from kml_capture.core.exceptions import ContractError
from kml_capture.providers.base import ServiceError
from kml_capture.utils.paths import leaf_name, parent_path

if TYPE_CHECKING:
    from datetime import datetime

    from kml_capture.models.pipeline import PipelineItem
    from kml_capture.providers.base import PersistenceService

logger = logging.getLogger("kml_capture.pipeline.browser")


class PipelineBrowser:
    """State of the pipeline folder view.

    Args:
        service: Persistence service used for listings and URLs.
        initial_path: Folder to open first (``""`` is the root).
        recent_window_min: Items modified within this many minutes are new.
    """

    def __init__(
        self,
        service: PersistenceService,
        *,
        initial_path: str = "",
        recent_window_min: float = DEFAULT_RECENT_WINDOW_MINUTES,
    ) -> None:
        self._service = service
        self._initial_path = initial_path
        self._recent_window_min = recent_window_min
        self._items: list[PipelineItem] = []
        self._current_path = initial_path
        self._loading = True

    # ------------------------------------------------------------------
    # View state
    # ------------------------------------------------------------------

    @property
    def items(self) -> tuple[PipelineItem, ...]:
        return tuple(self._items)

    @property
    def current_path(self) -> str:
        return self._current_path

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def can_go_back(self) -> bool:
        return bool(self._current_path)

    @property
    def title(self) -> str:
        """Current folder name, or the root title at the top level."""
        if self._current_path:
            return leaf_name(self._current_path)
        return PIPELINE_ROOT_TITLE

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    async def open(self) -> tuple[PipelineItem, ...]:
        """Load the initial folder."""
        return await self.fetch_items(self._initial_path)

    async def fetch_items(self, path: str = "") -> tuple[PipelineItem, ...]:
        """List *path* and make it the current folder.

        Items are kept in the order the service returns them (newest first).
        """
        self._loading = True
        try:
            listing = await self._service.list_folder(path)
        except (ServiceError, ContractError) as exc:
            logger.error("Error fetching pipeline items | path=%s | error=%s", path, exc)
            return self.items
        finally:
            self._loading = False

        self._items = list(listing.items)
        self._current_path = listing.current_path
        logger.debug("Listed pipeline folder | path=%s | items=%d", path, len(self._items))
        return self.items

    async def open_item(self, item: PipelineItem) -> str | None:
        """Enter a folder, or return the URL that shows a file.

        Returns:
            ``None`` after navigating into a folder; the file URL otherwise.
        """
        if item.is_folder:
            await self.fetch_items(item.path)
            return None
        return self._service.file_url(item.path)

    async def back(self) -> tuple[PipelineItem, ...]:
        """Navigate to the parent of the current folder."""
        return await self.fetch_items(parent_path(self._current_path))

    # ------------------------------------------------------------------
    # Downloads and badges
    # ------------------------------------------------------------------

    def download_target(self, item: PipelineItem) -> str:
        """Zip-archive URL for a folder, file URL for a file."""
        if item.is_folder:
            return self._service.download_folder_url(item.path)
        return self._service.file_url(item.path)

    async def download(self, item: PipelineItem) -> bytes:
        """Fetch a folder archive or a file's bytes."""
        if item.is_folder:
            return await self._service.download_folder(item.path)
        return await self._service.fetch_file(item.path)

    def is_recently_modified(self, item: PipelineItem, now: datetime | None = None) -> bool:
        return item.is_recently_modified(now, window_min=self._recent_window_min)
