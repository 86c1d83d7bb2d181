"""Shared constants: endpoint paths, defaults and user-facing messages."""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Configuration defaults
# ---------------------------------------------------------------------------

DEFAULT_API_URL: str = "http://localhost:5000"
DEFAULT_TIMEOUT_S: float = 30.0
DEFAULT_SAVE_STATUS_DISMISS_S: float = 3.0
"""A save-success status hides itself after this many seconds."""

DEFAULT_RECENT_WINDOW_MINUTES: float = 5.0
"""Pipeline items modified within this window are flagged as new."""

# ---------------------------------------------------------------------------
# Persistence service endpoints
# ---------------------------------------------------------------------------

DATA_ENDPOINT: str = "/data"
UPLOAD_KML_ENDPOINT: str = "/upload-kml"
SAVE_ENDPOINT: str = "/save"
CLEAR_ALL_ENDPOINT: str = "/clear-all"
PIPELINE_FOLDERS_ENDPOINT: str = "/pipeline-folders"
PIPELINE_FILES_ENDPOINT: str = "/pipeline-files"
DOWNLOAD_FOLDER_ENDPOINT: str = "/download-folder"

KML_FILE_FIELD: str = "kmlFile"
KML_CONTENT_TYPE: str = "application/vnd.google-earth.kml+xml"
REQUEST_ID_HEADER: str = "X-Request-ID"

# ---------------------------------------------------------------------------
# Metadata defaults
# ---------------------------------------------------------------------------

DEFAULT_LANE_COUNT: str = "2"
LANE_COUNT_CHOICES: tuple[str, ...] = ("2", "4", "6")

# ---------------------------------------------------------------------------
# User-facing messages
# ---------------------------------------------------------------------------

CONFIRM_CLEAR_MESSAGE: str = (
    "Are you sure you want to clear all data and layers? "
    "This will delete everything from the map and pipeline."
)
EMPTY_SAVE_MESSAGE: str = "Please draw something or upload a KML before saving."
PARSE_ERROR_MESSAGE: str = "Error parsing KML file"
SAVE_SUCCESS_MESSAGE: str = "Data saved successfully!"
SAVE_SERVER_ERROR_PREFIX: str = "Error saving data: "
SAVE_NETWORK_ERROR_MESSAGE: str = (
    "Error saving data to server. Make sure the server is running."
)

PIPELINE_ROOT_TITLE: str = "Project Pipeline"
