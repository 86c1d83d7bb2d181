"""In-memory holder for drawn and uploaded features.

The store owns three pieces of state:

- the **drawn** sequence, edited interactively on the map surface;
- the **uploaded** collection, replaced wholesale by a KML parse or an
  initial restore and never edited in place;
- the **data-visible** flag the owning UI uses to hide the address search
  while features are shown.

It also exposes a ``redraw_epoch`` counter.  The map view keys its
rendering on this value, so bumping it forces a full rebuild instead of an
incremental diff.  It increases on every uploaded-collection change and on
every full clear, and is never read for business logic.

Which features are active is modelled as an explicit state machine::

    EMPTY ──draw──▶ DRAWN ──upload──▶ MIXED
      │                                 ▲
      └──upload──▶ UPLOADED ───draw─────┘

Every mutating operation is classified as a ``StoreEvent`` and the next
state is looked up in ``_TRANSITIONS``; the state is never re-derived from
the list contents.  ``MIXED`` is a supported state: it arises when a
remote clear fails before an upload, or when an initial restore is
followed by edits of an existing drawing.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kml_capture.models.feature import Feature, FeatureCollection

logger = logging.getLogger("kml_capture.models.feature_store")


class CaptureState(enum.StrEnum):
    """Which feature sources currently hold data."""

    EMPTY = "empty"
    DRAWN = "drawn"
    UPLOADED = "uploaded"
    MIXED = "mixed"


class StoreEvent(enum.StrEnum):
    """Edges of the capture state machine."""

    DRAW_ADDED = "draw_added"
    DRAWN_REPLACED = "drawn_replaced"
    DRAWN_EMPTIED = "drawn_emptied"
    UPLOAD_LOADED = "upload_loaded"
    UPLOAD_REMOVED = "upload_removed"
    CLEARED = "cleared"


_S = CaptureState
_E = StoreEvent

_TRANSITIONS: dict[tuple[CaptureState, StoreEvent], CaptureState] = {
    # EMPTY
    (_S.EMPTY, _E.DRAW_ADDED): _S.DRAWN,
    (_S.EMPTY, _E.DRAWN_REPLACED): _S.DRAWN,
    (_S.EMPTY, _E.DRAWN_EMPTIED): _S.EMPTY,
    (_S.EMPTY, _E.UPLOAD_LOADED): _S.UPLOADED,
    (_S.EMPTY, _E.UPLOAD_REMOVED): _S.EMPTY,
    (_S.EMPTY, _E.CLEARED): _S.EMPTY,
    # DRAWN
    (_S.DRAWN, _E.DRAW_ADDED): _S.DRAWN,
    (_S.DRAWN, _E.DRAWN_REPLACED): _S.DRAWN,
    (_S.DRAWN, _E.DRAWN_EMPTIED): _S.EMPTY,
    (_S.DRAWN, _E.UPLOAD_LOADED): _S.MIXED,
    (_S.DRAWN, _E.UPLOAD_REMOVED): _S.DRAWN,
    (_S.DRAWN, _E.CLEARED): _S.EMPTY,
    # UPLOADED
    (_S.UPLOADED, _E.DRAW_ADDED): _S.MIXED,
    (_S.UPLOADED, _E.DRAWN_REPLACED): _S.MIXED,
    (_S.UPLOADED, _E.DRAWN_EMPTIED): _S.UPLOADED,
    (_S.UPLOADED, _E.UPLOAD_LOADED): _S.UPLOADED,
    (_S.UPLOADED, _E.UPLOAD_REMOVED): _S.EMPTY,
    (_S.UPLOADED, _E.CLEARED): _S.EMPTY,
    # MIXED
    (_S.MIXED, _E.DRAW_ADDED): _S.MIXED,
    (_S.MIXED, _E.DRAWN_REPLACED): _S.MIXED,
    (_S.MIXED, _E.DRAWN_EMPTIED): _S.UPLOADED,
    (_S.MIXED, _E.UPLOAD_LOADED): _S.MIXED,
    (_S.MIXED, _E.UPLOAD_REMOVED): _S.DRAWN,
    (_S.MIXED, _E.CLEARED): _S.EMPTY,
}


def next_state(state: CaptureState, event: StoreEvent) -> CaptureState:
    """Return the state reached from *state* along *event*."""
    return _TRANSITIONS[(state, event)]


class FeatureStore:
    """Drawn sequence, uploaded collection, visibility flag and redraw epoch."""

    def __init__(self) -> None:
        self._drawn: list[Feature] = []
        self._uploaded: FeatureCollection | None = None
        self._data_visible = False
        self._redraw_epoch = 0
        self._state = CaptureState.EMPTY

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def drawn(self) -> tuple[Feature, ...]:
        return tuple(self._drawn)

    @property
    def uploaded(self) -> FeatureCollection | None:
        return self._uploaded

    @property
    def uploaded_features(self) -> tuple[Feature, ...]:
        """Uploaded features, or an empty tuple when nothing is loaded."""
        if self._uploaded is None:
            return ()
        return self._uploaded.features

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def redraw_epoch(self) -> int:
        return self._redraw_epoch

    @property
    def data_visible(self) -> bool:
        return self._data_visible

    @property
    def has_content(self) -> bool:
        """Whether a drawing or any uploaded collection is present."""
        return self._state is not CaptureState.EMPTY

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_drawn(self, feature: Feature) -> None:
        """Append a newly drawn feature."""
        self._drawn.append(feature)
        self._transition(StoreEvent.DRAW_ADDED)

    def replace_drawn(self, features: list[Feature] | tuple[Feature, ...]) -> None:
        """Replace the drawn sequence wholesale (edit / delete)."""
        self._drawn = list(features)
        event = StoreEvent.DRAWN_REPLACED if self._drawn else StoreEvent.DRAWN_EMPTIED
        self._transition(event)

    def replace_uploaded(self, collection: FeatureCollection | None) -> None:
        """Swap the uploaded collection and force a map rebuild."""
        self._uploaded = collection
        self._bump_epoch()
        event = StoreEvent.UPLOAD_REMOVED if collection is None else StoreEvent.UPLOAD_LOADED
        self._transition(event)

    def clear_all(self) -> None:
        """Reset drawn, uploaded and the data-visible flag."""
        self._drawn = []
        self._uploaded = None
        self._data_visible = False
        self._bump_epoch()
        self._transition(StoreEvent.CLEARED)

    def set_data_visible(self, visible: bool) -> None:
        self._data_visible = visible

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _bump_epoch(self) -> None:
        self._redraw_epoch += 1

    def _transition(self, event: StoreEvent) -> None:
        previous = self._state
        self._state = next_state(previous, event)
        if self._state is not previous:
            logger.debug(
                "Capture state %s -> %s | event=%s | drawn=%d | uploaded=%d",
                previous,
                self._state,
                event,
                len(self._drawn),
                len(self.uploaded_features),
            )
