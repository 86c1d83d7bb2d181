"""Pydantic model for the save-context metadata.

The metadata record is supplied by the owning form and travels with both
``POST /save`` (as a JSON object) and ``POST /upload-kml`` (as multipart
form fields).  Its lifecycle is independent of the geometry: clearing the
map leaves it untouched, only the container-level reset restores the
defaults.

Wire names are camelCase (``offsetType``, ``laneCount``,
``kmlMergeOffset``); Python attribute names are snake_case.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from kml_capture.core.constants import DEFAULT_LANE_COUNT


class Metadata(BaseModel):
    """Flat save-context record.

    Attributes:
        chainage: Chainage in kilometres, free text.
        offset_type: Offset type in metres, free text.
        lane_count: Number of lanes; the form offers ``"2"``, ``"4"`` and ``"6"``.
        kml_merge_offset: KML merge offset in kilometres, free text.
    """

    chainage: str = ""
    offset_type: str = Field(default="", alias="offsetType")
    lane_count: str = Field(default=DEFAULT_LANE_COUNT, alias="laneCount")
    kml_merge_offset: str = Field(default="", alias="kmlMergeOffset")

    model_config = {"populate_by_name": True}

    def to_wire(self) -> dict[str, str]:
        """Return the camelCase mapping sent to the persistence service."""
        return self.model_dump(by_alias=True)  # type: ignore[return-value]

    def to_form_fields(self) -> dict[str, str]:
        """Return the multipart form fields that accompany a KML upload."""
        return self.to_wire()

    @classmethod
    def from_wire(cls, raw: dict[str, Any] | None) -> Metadata:
        """Build from a stored entry, falling back to defaults for blank values.

        Stored values may be numbers or ``null``; every field is coerced to
        a string and an empty/missing lane count becomes the default.
        """
        raw = raw or {}
        return cls(
            chainage=_text(raw.get("chainage")),
            offset_type=_text(raw.get("offsetType")),
            lane_count=_text(raw.get("laneCount")) or DEFAULT_LANE_COUNT,
            kml_merge_offset=_text(raw.get("kmlMergeOffset")),
        )


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value)
