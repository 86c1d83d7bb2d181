"""Orchestrators for the capture workflows.

- ``clear``:        remote clear-all followed by a local reset
- ``save``:         merge, validate and persist the canonical feature set
- ``upload``:       clear, then persist and display a KML file independently
- ``draw_events``:  created / edited / deleted handlers
- ``control``:      ``CaptureController``, busy guard and control surface
"""

from kml_capture.orchestrators.control import (
    BusyGuard,
    CaptureController,
    ImperativeControlSurface,
)

__all__ = ["BusyGuard", "CaptureController", "ImperativeControlSurface"]
