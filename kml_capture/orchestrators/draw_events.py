"""Handlers for draw-control events.

Only one feature set is active at a time:

- **created**: starting a new drawing while anything is shown clears
  everything first (remote and local), then records the new feature;
- **edited**: the drawn sequence is replaced with the layers as they now
  are, without diffing;
- **deleted**: the drawn sequence is replaced with the remaining layers;
  removing the last drawn feature with no upload loaded clears everything
  so remote state matches the empty map.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kml_capture.models.draw import DrawEventKind

if TYPE_CHECKING:
    from kml_capture.models.draw import DrawEvent
    from kml_capture.models.feature import Feature
    from kml_capture.models.feature_store import FeatureStore
    from kml_capture.orchestrators.clear import ClearOrchestrator

logger = logging.getLogger("kml_capture.orchestrators.draw_events")


class DrawEventHandlers:
    """Apply draw-control events to the ``FeatureStore``."""

    def __init__(self, store: FeatureStore, clear: ClearOrchestrator) -> None:
        self._store = store
        self._clear = clear

    async def dispatch(self, event: DrawEvent) -> None:
        """Route *event* to the matching handler."""
        if event.kind is DrawEventKind.CREATED:
            if event.layer is None:
                msg = "created event carries no layer"
                raise ValueError(msg)
            await self.on_created(event.layer)
        elif event.kind is DrawEventKind.EDITED:
            self.on_edited(event.layers)
        else:
            await self.on_deleted(event.layers)

    async def on_created(self, feature: Feature) -> None:
        if self._store.has_content:
            logger.info(
                "New drawing started, clearing existing data | state=%s",
                self._store.state,
            )
            await self._clear.run(skip_confirm=True)

        self._store.set_data_visible(True)
        self._store.add_drawn(feature)
        logger.debug("Created %s | drawn=%d", feature.geometry_type, len(self._store.drawn))

    def on_edited(self, layers: tuple[Feature, ...] | list[Feature]) -> None:
        self._store.replace_drawn(layers)
        logger.debug("Edited layers | drawn=%d", len(self._store.drawn))

    async def on_deleted(self, layers: tuple[Feature, ...] | list[Feature]) -> None:
        self._store.replace_drawn(layers)
        logger.debug("Deleted layers | remaining=%d", len(layers))

        if not layers and self._store.uploaded is None:
            self._store.set_data_visible(False)
            await self._clear.run(skip_confirm=True)
