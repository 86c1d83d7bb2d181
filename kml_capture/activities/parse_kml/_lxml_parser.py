"""lxml-based KML → GeoJSON parser.

Walks the element tree and turns every Placemark into a GeoJSON Feature:

- ``Point`` → ``Point``
- ``LineString`` → ``LineString``
- ``Polygon`` → ``Polygon`` (outer ring first, then inner rings)
- ``MultiGeometry`` → ``GeometryCollection`` (nested collections kept)

Placemarks are collected in document order through any depth of
``Document`` / ``Folder`` nesting.  A Placemark without a supported
geometry, or whose geometry fails validation, is skipped with a warning
so one bad entry does not hide the rest of the file.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from kml_capture.activities.parse_kml._constants import (
    GEOMETRY_TAGS,
    LINE_STRING,
    MULTI_GEOMETRY,
    POINT,
    POLYGON,
)
from kml_capture.activities.parse_kml._normalization import (
    extract_properties,
    parse_coordinates_text,
)
from kml_capture.activities.parse_kml._validation import (
    KmlValidationError,
    validate_coordinates,
    validate_shapely_geometry,
)
from kml_capture.models.feature import Feature

if TYPE_CHECKING:
    from lxml.etree import _Element

logger = logging.getLogger("kml_capture.activities.parse_kml")


def strip_namespaces(root: _Element) -> None:
    """Replace every namespaced tag with its local name, in place.

    KML files come with the 2.2 namespace, the older Google namespace, or
    none at all; after stripping, one set of plain paths handles them all.
    """
    from lxml import etree  # type: ignore[attr-defined]

    for elem in root.iter():
        if isinstance(elem.tag, str):
            elem.tag = etree.QName(elem).localname


def parse_with_lxml(root: _Element, source_filename: str) -> list[Feature]:
    """Convert every Placemark under *root* into a ``Feature``."""
    strip_namespaces(root)

    features: list[Feature] = []
    for idx, placemark in enumerate(root.iter("Placemark")):
        properties = extract_properties(placemark)
        display_name = str(properties.get("name") or f"Feature {idx}")

        geometry_elem = _first_geometry(placemark)
        if geometry_elem is None:
            logger.debug(
                "Skipping Placemark without geometry '%s' in %s",
                display_name,
                source_filename,
            )
            continue

        try:
            geometry = _parse_geometry(geometry_elem, display_name)
            validate_shapely_geometry(geometry, display_name)
        except KmlValidationError as exc:
            logger.warning(
                "Skipping invalid feature '%s' in %s: %s",
                display_name,
                source_filename,
                exc,
            )
            continue

        features.append(Feature(geometry=geometry, properties=properties))

    return features


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _first_geometry(parent: _Element) -> _Element | None:
    for child in parent:
        if child.tag in GEOMETRY_TAGS:
            return child
    return None


def _coordinates(elem: _Element, display_name: str) -> list[list[float]]:
    coords_elem = elem.find("coordinates")
    text = coords_elem.text if coords_elem is not None else None
    coords = parse_coordinates_text(text or "")
    if not coords:
        msg = f"<{elem.tag}> has no coordinates in Placemark '{display_name}'"
        raise KmlValidationError(msg)
    validate_coordinates(coords, display_name)
    return coords


def _parse_geometry(elem: _Element, display_name: str) -> dict[str, Any]:
    """Build the GeoJSON geometry mapping for one KML geometry element.

    Raises:
        KmlValidationError: If coordinates are missing or out of bounds.
    """
    if elem.tag == POINT:
        return {"type": "Point", "coordinates": _coordinates(elem, display_name)[0]}

    if elem.tag == LINE_STRING:
        return {"type": "LineString", "coordinates": _coordinates(elem, display_name)}

    if elem.tag == POLYGON:
        outer = elem.find("outerBoundaryIs/LinearRing")
        if outer is None:
            msg = f"<Polygon> has no outerBoundaryIs ring in Placemark '{display_name}'"
            raise KmlValidationError(msg)
        rings = [_coordinates(outer, display_name)]
        rings.extend(
            _coordinates(inner, f"{display_name} (hole)")
            for inner in elem.findall("innerBoundaryIs/LinearRing")
        )
        return {"type": "Polygon", "coordinates": rings}

    if elem.tag == MULTI_GEOMETRY:
        geometries = [
            _parse_geometry(child, display_name)
            for child in elem
            if child.tag in GEOMETRY_TAGS
        ]
        if not geometries:
            msg = f"<MultiGeometry> is empty in Placemark '{display_name}'"
            raise KmlValidationError(msg)
        return {"type": "GeometryCollection", "geometries": geometries}

    msg = f"Unsupported geometry <{elem.tag}> in Placemark '{display_name}'"
    raise KmlValidationError(msg)
