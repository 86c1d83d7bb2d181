"""Coordinate and property normalization helpers for KML parsing.

Responsibilities:
- Parse KML coordinate text into GeoJSON positions
- Extract Placemark properties (name, description, styleUrl, ExtendedData)

Elements are expected with namespaces already stripped (see
``_lxml_parser.strip_namespaces``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from lxml.etree import _Element

# ---------------------------------------------------------------------------
# KML coordinate text parsing
# ---------------------------------------------------------------------------


def parse_coordinates_text(text: str) -> list[list[float]]:
    """Parse KML coordinate text (``lon,lat[,alt] lon,lat[,alt] ...``).

    Positions keep their altitude when the file supplies one, so a
    position is ``[lon, lat]`` or ``[lon, lat, alt]``.  Tokens that are
    not numeric are skipped.
    """
    coords: list[list[float]] = []
    for token in text.split():
        parts = [p for p in token.strip().split(",") if p]
        if len(parts) < 2:
            continue
        try:
            position = [float(p) for p in parts[:3]]
        except ValueError:
            continue
        coords.append(position)
    return coords


# ---------------------------------------------------------------------------
# Placemark properties
# ---------------------------------------------------------------------------

_SIMPLE_PROPERTY_TAGS = ("name", "description", "styleUrl")


def extract_properties(placemark_elem: _Element) -> dict[str, Any]:
    """Extract GeoJSON properties from a Placemark element.

    Collects ``name``, ``description`` and ``styleUrl`` when present, then
    both ExtendedData patterns:

    - ``ExtendedData/Data/value``: untyped key-value pairs.
    - ``ExtendedData/SchemaData/SimpleData``: typed fields defined by a
      ``<Schema>`` element.
    """
    properties: dict[str, Any] = {}

    for tag in _SIMPLE_PROPERTY_TAGS:
        elem = placemark_elem.find(tag)
        if elem is not None and elem.text is not None:
            properties[tag] = elem.text.strip()

    for data_elem in placemark_elem.findall("ExtendedData/Data"):
        key = data_elem.get("name", "")
        value_elem = data_elem.find("value")
        if key and value_elem is not None and value_elem.text:
            properties[key] = value_elem.text.strip()

    for schema_data in placemark_elem.findall("ExtendedData/SchemaData"):
        for simple_data in schema_data.findall("SimpleData"):
            key = simple_data.get("name", "")
            if key and simple_data.text:
                properties[key] = simple_data.text.strip()

    return properties
