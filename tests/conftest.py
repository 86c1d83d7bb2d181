"""Shared pytest fixtures for the KML capture test suite."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from kml_capture.core.hooks import CaptureHooks
from kml_capture.models.feature import Feature
from kml_capture.models.feature_store import FeatureStore
from kml_capture.models.metadata import Metadata
from kml_capture.models.pipeline import FolderListing
from kml_capture.models.upload import KmlFile
from kml_capture.providers.base import NetworkError, PersistenceService, ServerError

# ---------------------------------------------------------------------------
# Sample geometry
# ---------------------------------------------------------------------------

LINE_A = {"type": "LineString", "coordinates": [[73.85, 18.52], [73.86, 18.53]]}
POINT_P = {"type": "Point", "coordinates": [73.8567, 18.5204]}
POLYGON_Q = {
    "type": "Polygon",
    "coordinates": [[[73.0, 18.0], [73.1, 18.0], [73.1, 18.1], [73.0, 18.1], [73.0, 18.0]]],
}

SINGLE_POINT_KML = """<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2">
  <Document>
    <Placemark>
      <name>Survey marker</name>
      <Point><coordinates>73.8567,18.5204</coordinates></Point>
    </Placemark>
  </Document>
</kml>
"""

ROAD_KML = """<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2">
  <Document>
    <Folder>
      <name>Corridor</name>
      <Folder>
        <Placemark>
          <name>Centre line</name>
          <description>Main carriageway</description>
          <ExtendedData>
            <Data name="chainage"><value>12.5</value></Data>
          </ExtendedData>
          <LineString>
            <coordinates>
              73.85,18.52,0 73.86,18.53,0
            </coordinates>
          </LineString>
        </Placemark>
      </Folder>
      <Placemark>
        <name>Toll plaza</name>
        <Polygon>
          <outerBoundaryIs><LinearRing><coordinates>
            73.0,18.0 73.1,18.0 73.1,18.1 73.0,18.1 73.0,18.0
          </coordinates></LinearRing></outerBoundaryIs>
        </Polygon>
      </Placemark>
    </Folder>
  </Document>
</kml>
"""


# ---------------------------------------------------------------------------
# In-memory persistence service
# ---------------------------------------------------------------------------


class FakePersistenceService(PersistenceService):
    """Records every call and answers from configurable canned responses.

    Set ``*_error`` attributes to an exception to make a call fail, or
    ``clear_gate`` to an ``asyncio.Event`` to hold ``clear_all`` until it
    is set.
    """

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.entries: list[dict[str, Any]] = []
        self.save_payloads: list[dict[str, Any]] = []
        self.uploads: list[tuple[KmlFile, Metadata]] = []
        self.listed_paths: list[str] = []

        self.save_response: dict[str, Any] = {"success": True, "pipelinePath": ""}
        self.upload_response: dict[str, Any] = {"success": True, "path": "uploads/x.kml"}
        self.clear_response: dict[str, Any] = {"success": True}
        self.listings: dict[str, FolderListing] = {}

        self.load_error: Exception | None = None
        self.save_error: Exception | None = None
        self.upload_error: Exception | None = None
        self.clear_error: Exception | None = None
        self.list_error: Exception | None = None

        self.clear_gate: asyncio.Event | None = None

    async def load_entries(self) -> list[dict[str, Any]]:  # type: ignore[override]
        self.calls.append("load_entries")
        if self.load_error is not None:
            raise self.load_error
        return list(self.entries)

    async def upload_kml(self, kml_file: KmlFile, metadata: Metadata) -> dict[str, Any]:  # type: ignore[override]
        self.calls.append("upload_kml")
        self.uploads.append((kml_file, metadata))
        if self.upload_error is not None:
            raise self.upload_error
        return dict(self.upload_response)

    async def save(self, payload: dict[str, Any]) -> dict[str, Any]:  # type: ignore[override]
        self.calls.append("save")
        self.save_payloads.append(payload)
        if self.save_error is not None:
            raise self.save_error
        return dict(self.save_response)

    async def clear_all(self) -> dict[str, Any]:  # type: ignore[override]
        self.calls.append("clear_all")
        if self.clear_gate is not None:
            await self.clear_gate.wait()
        self.calls.append("clear_all:done")
        if self.clear_error is not None:
            raise self.clear_error
        return dict(self.clear_response)

    async def list_folder(self, path: str = "") -> FolderListing:
        self.calls.append("list_folder")
        self.listed_paths.append(path)
        if self.list_error is not None:
            raise self.list_error
        return self.listings.get(path, FolderListing(items=[], current_path=path))

    async def fetch_file(self, path: str) -> bytes:
        self.calls.append("fetch_file")
        return f"file:{path}".encode()

    async def download_folder(self, path: str) -> bytes:
        self.calls.append("download_folder")
        return f"zip:{path}".encode()

    def file_url(self, path: str) -> str:
        return f"http://api/pipeline-files/{path}"

    def download_folder_url(self, path: str) -> str:
        return f"http://api/download-folder?path={path}"


class RecordingHooks(CaptureHooks):
    """``CaptureHooks`` that remembers what the UI was asked to show."""

    def __init__(self, *, confirm_answer: bool = True) -> None:
        self.confirmations: list[str] = []
        self.alerts: list[str] = []
        self.saved_paths: list[str] = []
        self.confirm_answer = confirm_answer
        super().__init__(
            confirm=self._confirm,
            alert=self.alerts.append,
            on_save_success=self.saved_paths.append,
        )

    def _confirm(self, message: str) -> bool:
        self.confirmations.append(message)
        return self.confirm_answer


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def service() -> FakePersistenceService:
    """Return a fresh in-memory persistence service."""
    return FakePersistenceService()


@pytest.fixture()
def hooks() -> RecordingHooks:
    """Return hooks that confirm every prompt and record alerts."""
    return RecordingHooks()


@pytest.fixture()
def store() -> FeatureStore:
    return FeatureStore()


@pytest.fixture()
def line_a() -> Feature:
    """A drawn LineString."""
    return Feature(geometry=LINE_A)


@pytest.fixture()
def point_p() -> Feature:
    """An uploaded Point."""
    return Feature(geometry=POINT_P, properties={"name": "P"})


@pytest.fixture()
def polygon_q() -> Feature:
    return Feature(geometry=POLYGON_Q)


@pytest.fixture()
def road_kml_file() -> KmlFile:
    """A KML upload with a LineString and a Polygon in nested folders."""
    return KmlFile(name="road.kml", content=ROAD_KML.encode("utf-8"))


@pytest.fixture()
def point_kml_file() -> KmlFile:
    return KmlFile(name="point.kml", content=SINGLE_POINT_KML.encode("utf-8"))


@pytest.fixture()
def broken_kml_file() -> KmlFile:
    """A file that is not XML at all."""
    return KmlFile(name="broken.kml", content=b"this is not <kml")


@pytest.fixture()
def network_error() -> NetworkError:
    return NetworkError("/test", "ConnectError: connection refused")


@pytest.fixture()
def server_error() -> ServerError:
    return ServerError("/test", "disk full")


@pytest.fixture()
def declining_hooks() -> RecordingHooks:
    """Return hooks that decline every confirmation prompt."""
    return RecordingHooks(confirm_answer=False)
