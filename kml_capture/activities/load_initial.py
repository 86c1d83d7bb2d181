"""Restore the most recent saved entry on start-up.

``GET /data`` returns every stored entry, most recent first.  Only the
first one is used: its metadata pre-fills the form and its geometry is
shown as the uploaded collection.  A failing request leaves the client
empty; it is logged and never surfaced to the user.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kml_capture.core.exceptions import ContractError
from kml_capture.models.feature import FeatureCollection
from kml_capture.models.metadata import Metadata
from kml_capture.providers.base import ServiceError

if TYPE_CHECKING:
    from kml_capture.providers.base import PersistenceService

logger = logging.getLogger("kml_capture.activities.load_initial")


@dataclass(frozen=True, slots=True)
class InitialState:
    """What the last stored entry contributes on start-up.

    Attributes:
        metadata: Form values to restore, or ``None`` to keep the defaults.
        collection: Geometry to display, or ``None`` for an empty map.
    """

    metadata: Metadata | None = None
    collection: FeatureCollection | None = None


async def load_initial_state(service: PersistenceService) -> InitialState:
    """Fetch stored entries and extract the most recent one."""
    try:
        entries = await service.load_entries()
    except (ServiceError, ContractError):
        logger.exception("Error loading initial data")
        return InitialState()

    if not entries:
        logger.info("No stored entries to restore")
        return InitialState()

    last_entry = entries[0]
    raw_metadata = last_entry.get("metadata")
    metadata = Metadata.from_wire(raw_metadata) if isinstance(raw_metadata, dict) else None

    collection: FeatureCollection | None = None
    raw_geometry = last_entry.get("geometry")
    if isinstance(raw_geometry, list):
        try:
            collection = FeatureCollection.from_dict({"features": raw_geometry})
        except TypeError as exc:
            logger.warning("Ignoring malformed stored geometry: %s", exc)

    logger.info(
        "Restored last entry | entries=%d | features=%d | has_metadata=%s",
        len(entries),
        len(collection) if collection is not None else 0,
        metadata is not None,
    )
    return InitialState(metadata=metadata, collection=collection)
