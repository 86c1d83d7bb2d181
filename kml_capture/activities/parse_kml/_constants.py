"""Shared constants for KML parsing."""

from __future__ import annotations

# KML 2.2 namespace
KML_NAMESPACE = "http://www.opengis.net/kml/2.2"

# WGS 84 coordinate bounds
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0

# Geometry element local names handled by the parser
POINT = "Point"
LINE_STRING = "LineString"
POLYGON = "Polygon"
MULTI_GEOMETRY = "MultiGeometry"
GEOMETRY_TAGS = frozenset({POINT, LINE_STRING, POLYGON, MULTI_GEOMETRY})
