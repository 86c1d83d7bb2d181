"""Data models and schemas.

Defines the data structures used throughout the capture core:
- Feature / FeatureCollection: GeoJSON geometry + properties
- FeatureStore: drawn and uploaded features with an explicit state machine
- Metadata: save-context record sent with saves and uploads
- Draw models: draw-control events and options
- Payloads: typed wire contracts for the persistence service
"""

from kml_capture.models.draw import DrawControlOptions, DrawEvent, DrawEventKind
from kml_capture.models.feature import Feature, FeatureCollection
from kml_capture.models.feature_store import CaptureState, FeatureStore, StoreEvent
from kml_capture.models.metadata import Metadata
from kml_capture.models.upload import FileInput, KmlFile

__all__ = [
    "CaptureState",
    "DrawControlOptions",
    "DrawEvent",
    "DrawEventKind",
    "Feature",
    "FeatureCollection",
    "FeatureStore",
    "FileInput",
    "KmlFile",
    "Metadata",
    "StoreEvent",
]
