"""KML parsing activity: KML bytes to a GeoJSON FeatureCollection.

Turns an uploaded KML file into the feature collection shown on the map
and stored as the uploaded set.  Parsing is local and synchronous; it
never waits on the persistence service.

The parsing pipeline is split into focused stages:
- **_validation**: XML/KML root check, coordinate bounds, shapely build check
- **_normalization**: coordinate text → positions, Placemark properties
- **_lxml_parser**: element-tree walk producing ``Feature`` objects

Supported KML structures:
- Point, LineString and Polygon Placemarks (with inner rings)
- MultiGeometry, as GeoJSON GeometryCollection
- Nested Document / Folder hierarchies
- ExtendedData/Data and Schema/SchemaData properties
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kml_capture.activities.parse_kml._constants import (
    KML_NAMESPACE,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
)
from kml_capture.activities.parse_kml._lxml_parser import parse_with_lxml, strip_namespaces
from kml_capture.activities.parse_kml._normalization import (
    extract_properties,
    parse_coordinates_text,
)
from kml_capture.activities.parse_kml._validation import (
    InvalidCoordinateError,
    KmlParseError,
    KmlValidationError,
    validate_coordinates,
    validate_shapely_geometry,
    validate_xml,
)
from kml_capture.models.feature import FeatureCollection

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger("kml_capture.activities.parse_kml")

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "KML_NAMESPACE",
    "MAX_LATITUDE",
    "MAX_LONGITUDE",
    "MIN_LATITUDE",
    "MIN_LONGITUDE",
    "InvalidCoordinateError",
    "KmlParseError",
    "KmlValidationError",
    "extract_properties",
    "parse_coordinates_text",
    "parse_kml",
    "parse_kml_file",
    "parse_with_lxml",
    "strip_namespaces",
    "validate_coordinates",
    "validate_shapely_geometry",
    "validate_xml",
]


def parse_kml(content: bytes | str, *, source_filename: str = "") -> FeatureCollection:
    """Parse KML content into a ``FeatureCollection``.

    Args:
        content: Raw KML document (bytes, or text which is UTF-8 encoded).
        source_filename: Original filename, used in log and error messages.

    Returns:
        One feature per valid Placemark, in document order.  An empty
        collection if the document holds no usable geometry.

    Raises:
        KmlParseError: If the content is empty, not XML, or not KML.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    label = source_filename or "<upload>"
    logger.info("Parsing KML | file=%s | size=%d", label, len(content))

    root = validate_xml(content, source_filename)
    features = parse_with_lxml(root, label)

    logger.info("Parsed %d feature(s) from %s", len(features), label)
    return FeatureCollection.from_features(features)


def parse_kml_file(kml_path: Path | str) -> FeatureCollection:
    """Parse a KML file from disk.

    Raises:
        KmlParseError: If the file cannot be read or is not valid KML.
    """
    from pathlib import Path

    kml_path = Path(kml_path)
    try:
        content = kml_path.read_bytes()
    except OSError as exc:
        msg = f"Cannot read KML file: {exc}"
        raise KmlParseError(msg) from exc
    return parse_kml(content, source_filename=kml_path.name)
