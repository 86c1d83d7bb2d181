"""GeoJSON feature models.

A ``Feature`` is a single geometry plus arbitrary properties, either drawn
on the map or extracted from an uploaded KML file.  A
``FeatureCollection`` is the wholesale unit produced by one KML parse or
by restoring the last saved entry.

Geometry is kept as the plain GeoJSON mapping (``type`` + ``coordinates``,
or ``type`` + ``geometries`` for collections) so that it serialises to
exactly the structure the persistence service stores.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

FEATURE_TYPE = "Feature"
FEATURE_COLLECTION_TYPE = "FeatureCollection"


@dataclass(frozen=True, slots=True)
class Feature:
    """A single geometry + properties record.

    Attributes:
        geometry: GeoJSON geometry mapping, e.g.
            ``{"type": "LineString", "coordinates": [[73.85, 18.52], ...]}``.
        properties: Free-form properties (Placemark name, ExtendedData, ...).
    """

    geometry: dict[str, Any]
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def geometry_type(self) -> str:
        """GeoJSON geometry type name (``"Point"``, ``"Polygon"``, ...)."""
        return str(self.geometry.get("type", ""))

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a GeoJSON Feature mapping."""
        return {
            "type": FEATURE_TYPE,
            "properties": dict(self.properties),
            "geometry": self.geometry,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Feature:
        """Deserialise from a GeoJSON Feature mapping.

        A missing ``properties`` member becomes ``{}``.

        Raises:
            TypeError: If ``geometry`` or ``properties`` have unexpected types.
        """
        geometry = data.get("geometry")
        if not isinstance(geometry, dict):
            msg = f"geometry must be a dict, got {type(geometry).__name__}"
            raise TypeError(msg)

        properties = data.get("properties") or {}
        if not isinstance(properties, dict):
            msg = f"properties must be a dict, got {type(properties).__name__}"
            raise TypeError(msg)

        return cls(geometry=geometry, properties=dict(properties))


@dataclass(frozen=True, slots=True)
class FeatureCollection:
    """An ordered, immutable collection of features."""

    features: tuple[Feature, ...] = ()

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self):  # noqa: ANN204
        return iter(self.features)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a GeoJSON FeatureCollection mapping."""
        return {
            "type": FEATURE_COLLECTION_TYPE,
            "features": [f.to_dict() for f in self.features],
        }

    @classmethod
    def from_features(cls, features: list[Feature] | tuple[Feature, ...]) -> FeatureCollection:
        return cls(features=tuple(features))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FeatureCollection:
        """Deserialise from a GeoJSON FeatureCollection mapping.

        Raises:
            TypeError: If ``features`` is not a list or an entry is malformed.
        """
        raw = data.get("features", [])
        if not isinstance(raw, list):
            msg = f"features must be a list, got {type(raw).__name__}"
            raise TypeError(msg)
        return cls(features=tuple(Feature.from_dict(f) for f in raw))
