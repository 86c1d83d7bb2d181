"""Validation helpers for KML parsing.

Responsibilities:
- XML structure and KML root validation
- Coordinate bounds checking (WGS 84)
- Structural geometry checks with shapely (enough vertices to build it)

Geometry is checked but never repaired: the parsed coordinates are what
gets displayed, saved and compared during dedup, so they must stay
exactly as the file supplied them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from kml_capture.activities.parse_kml._constants import (
    KML_NAMESPACE,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
)
from kml_capture.core.exceptions import ValidationError

if TYPE_CHECKING:
    from lxml.etree import _Element

logger = logging.getLogger("kml_capture.activities.parse_kml")


# ---------------------------------------------------------------------------
# Exceptions (public API, re-exported from __init__)
# ---------------------------------------------------------------------------


class KmlParseError(ValidationError):
    """Raised when a KML file cannot be parsed."""

    default_stage = "parse_kml"
    default_code = "KML_PARSE_FAILED"


class KmlValidationError(KmlParseError):
    """Raised when a KML file is well-formed but a geometry is unusable."""

    default_code = "KML_VALIDATION_FAILED"


class InvalidCoordinateError(KmlValidationError):
    """Raised when coordinates are outside valid WGS 84 bounds."""

    default_code = "KML_COORDINATE_INVALID"


# ---------------------------------------------------------------------------
# XML / KML root validation
# ---------------------------------------------------------------------------


def validate_xml(content: bytes, source_filename: str = "") -> _Element:
    """Parse *content* as XML and check the root is a KML document.

    Returns:
        The root element.

    Raises:
        KmlParseError: If the content is empty, not XML, or not KML.
    """
    from lxml import etree  # type: ignore[attr-defined]

    label = source_filename or "<upload>"
    if not content.strip():
        msg = f"KML file is empty: {label}"
        raise KmlParseError(msg)

    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)
    try:
        root = etree.fromstring(content, parser=parser)
    except etree.XMLSyntaxError as exc:
        msg = f"Not valid XML ({label}): {exc}"
        raise KmlParseError(msg) from exc

    tag = root.tag if isinstance(root.tag, str) else ""
    if f"{{{KML_NAMESPACE}}}" not in tag and "kml" not in tag.lower():
        msg = f"Not a KML file ({label}): root element is <{tag}>"
        raise KmlParseError(msg)

    return root


# ---------------------------------------------------------------------------
# Coordinate validation
# ---------------------------------------------------------------------------


def validate_coordinates(coords: list[list[float]], placemark_name: str) -> None:
    """Validate that all positions are within WGS 84 bounds.

    Raises:
        InvalidCoordinateError: If any position is out of bounds.
    """
    for position in coords:
        lon, lat = position[0], position[1]
        if not (MIN_LONGITUDE <= lon <= MAX_LONGITUDE):
            msg = (
                f"Longitude {lon} out of WGS 84 range [{MIN_LONGITUDE}, {MAX_LONGITUDE}] "
                f"in Placemark '{placemark_name}'"
            )
            raise InvalidCoordinateError(msg)
        if not (MIN_LATITUDE <= lat <= MAX_LATITUDE):
            msg = (
                f"Latitude {lat} out of WGS 84 range [{MIN_LATITUDE}, {MAX_LATITUDE}] "
                f"in Placemark '{placemark_name}'"
            )
            raise InvalidCoordinateError(msg)


# ---------------------------------------------------------------------------
# Shapely structural validation
# ---------------------------------------------------------------------------


def validate_shapely_geometry(geometry: dict[str, Any], placemark_name: str) -> None:
    """Check that shapely can build *geometry*.

    Catches rings and lines with too few vertices.  Self-intersections
    are logged, not rejected: the drawing is kept as the user made it.

    Raises:
        KmlValidationError: If shapely rejects the geometry or it is empty.
    """
    from shapely.errors import GEOSException
    from shapely.geometry import shape

    try:
        geom = shape(geometry)
    except (ValueError, TypeError, IndexError, GEOSException) as exc:
        msg = f"Cannot build {geometry.get('type')} for Placemark '{placemark_name}': {exc}"
        raise KmlValidationError(msg) from exc

    if geom.is_empty:
        msg = f"Empty {geom.geom_type} in Placemark '{placemark_name}'"
        raise KmlValidationError(msg)

    if not geom.is_valid:
        logger.warning(
            "Geometry is not simple/valid in Placemark '%s' (%s), keeping as drawn",
            placemark_name,
            geom.geom_type,
        )
