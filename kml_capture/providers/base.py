"""PersistenceService abstract base class.

Defines the contract the orchestrators use to reach the remote store.
Orchestrators never build URLs or touch HTTP themselves; they depend only
on this interface, which keeps them testable with in-memory fakes.

Every method is a single request/response.  There is no multi-step
transaction: an upload may be persisted while the local parse of the same
file fails, and that partial outcome is accepted.

Operations:
    ``load_entries()``:          stored entries, most recent first.
    ``upload_kml(file, meta)``:  persist a raw KML file with its metadata.
    ``save(payload)``:           persist metadata + merged geometry.
    ``clear_all()``:             delete everything stored remotely.
    ``list_folder(path)``:       list one pipeline folder.
    ``fetch_file(path)``:        raw bytes of a stored file.
    ``download_folder(path)``:   zip archive of a folder.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

from kml_capture.core.exceptions import CaptureError, PermanentError, TransientError

if TYPE_CHECKING:
    from kml_capture.models.metadata import Metadata
    from kml_capture.models.payloads import (
        ClearResponse,
        DataEntry,
        SavePayload,
        SaveResponse,
        UploadResponse,
    )
    from kml_capture.models.pipeline import FolderListing
    from kml_capture.models.upload import KmlFile


class PersistenceService(abc.ABC):
    """Abstract base class for the remote persistence store."""

    @abc.abstractmethod
    async def load_entries(self) -> list[DataEntry]:
        """Return stored entries, most recent first.

        Raises:
            ServiceError: On transport or server failure.
        """

    @abc.abstractmethod
    async def upload_kml(self, kml_file: KmlFile, metadata: Metadata) -> UploadResponse:
        """Persist a raw KML file together with the current metadata.

        Returns:
            The decoded response; ``success`` may be ``False``.

        Raises:
            NetworkError: If the request could not be completed.
            ContractError: If the response body is not the expected shape.
        """

    @abc.abstractmethod
    async def save(self, payload: SavePayload) -> SaveResponse:
        """Persist metadata and merged geometry.

        Returns:
            The decoded response; ``success`` may be ``False`` with a message.

        Raises:
            NetworkError: If the request could not be completed.
            ContractError: If the response body is not the expected shape.
        """

    @abc.abstractmethod
    async def clear_all(self) -> ClearResponse:
        """Delete every stored entry and file.

        Raises:
            NetworkError: If the request could not be completed.
            ContractError: If the response body is not the expected shape.
        """

    @abc.abstractmethod
    async def list_folder(self, path: str = "") -> FolderListing:
        """List the items of one pipeline folder (``""`` is the root).

        Raises:
            ServiceError: On transport failure or ``success: false``.
        """

    @abc.abstractmethod
    async def fetch_file(self, path: str) -> bytes:
        """Return the raw bytes of a stored pipeline file."""

    @abc.abstractmethod
    async def download_folder(self, path: str) -> bytes:
        """Return a zip archive of a pipeline folder."""

    def file_url(self, path: str) -> str:
        """URL a browser can open to view a stored file (empty if unsupported)."""
        return ""

    def download_folder_url(self, path: str) -> str:
        """URL a browser can open to download a folder archive (empty if unsupported)."""
        return ""


# ---------------------------------------------------------------------------
# Service exceptions
# ---------------------------------------------------------------------------


class ServiceError(CaptureError):
    """Base exception for persistence-service failures.

    Attributes:
        endpoint: Endpoint path the failing request targeted.
        message: Human-readable error description.
    """

    default_stage = "persistence"
    default_code = "SERVICE_ERROR"

    def __init__(self, endpoint: str, message: str, **kwargs: object) -> None:
        self.endpoint = endpoint
        super().__init__(message, **kwargs)  # type: ignore[arg-type]

    def __str__(self) -> str:
        return f"[{self.endpoint}] {self.message}"


class NetworkError(ServiceError, TransientError):
    """The request was rejected or the transport failed (non-2xx, timeout, refused)."""

    default_code = "NETWORK_ERROR"

    def __init__(
        self,
        endpoint: str,
        message: str,
        *,
        status_code: int | None = None,
        correlation_id: str = "",
    ) -> None:
        self.status_code = status_code
        super().__init__(endpoint, message, retryable=True, correlation_id=correlation_id)


class ServerError(ServiceError, PermanentError):
    """The service answered ``success: false`` with a message."""

    default_code = "SERVER_REFUSED"

    def __init__(self, endpoint: str, message: str, *, correlation_id: str = "") -> None:
        super().__init__(endpoint, message, retryable=False, correlation_id=correlation_id)
