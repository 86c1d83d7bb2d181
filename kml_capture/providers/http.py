"""HTTP/JSON adapter for the persistence service.

Concrete ``PersistenceService`` implementation over ``httpx.AsyncClient``.
Mutating calls (upload, save, clear) carry an ``Authorization: Bearer``
header; read calls are anonymous, matching the service's routes.

Transport failures and non-2xx statuses without an explicit
``success: false`` body become ``NetworkError`` carrying the
response's ``X-Request-ID`` as its correlation id; a body that is not the
expected JSON object becomes ``ContractError``.  An
explicit ``success: false`` is returned to the caller unchanged for save,
upload and clear (the orchestrators decide how loud to be), and raised as
``ServerError`` for folder listings.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError as PydanticValidationError

from kml_capture.core.constants import (
    CLEAR_ALL_ENDPOINT,
    DATA_ENDPOINT,
    DOWNLOAD_FOLDER_ENDPOINT,
    KML_CONTENT_TYPE,
    KML_FILE_FIELD,
    PIPELINE_FILES_ENDPOINT,
    PIPELINE_FOLDERS_ENDPOINT,
    REQUEST_ID_HEADER,
    SAVE_ENDPOINT,
    UPLOAD_KML_ENDPOINT,
)
from kml_capture.core.exceptions import ContractError
from kml_capture.models.payloads import (
    ClearResponse,
    FolderListingResponse,
    SaveResponse,
    UploadResponse,
    validate_payload,
)
from kml_capture.models.pipeline import FolderListing
from kml_capture.providers.base import NetworkError, PersistenceService, ServerError

if TYPE_CHECKING:
    from kml_capture.core.config import CaptureConfig
    from kml_capture.models.metadata import Metadata
    from kml_capture.models.payloads import DataEntry, SavePayload
    from kml_capture.models.upload import KmlFile

logger = logging.getLogger("kml_capture.providers.http")


class HttpPersistenceService(PersistenceService):
    """``httpx``-backed client for the persistence REST API.

    Example usage::

        config = CaptureConfig.from_env()
        async with HttpPersistenceService(config) as service:
            entries = await service.load_entries()

    Args:
        config: Base URL, bearer token and timeout.
        client: Optional pre-built ``httpx.AsyncClient`` (tests pass one
            wired to ``httpx.MockTransport``).  A client passed in is not
            closed by ``aclose()``.
    """

    def __init__(
        self,
        config: CaptureConfig,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=config.api_url,
            timeout=config.timeout_s,
        )

    async def __aenter__(self) -> HttpPersistenceService:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # PersistenceService
    # ------------------------------------------------------------------

    async def load_entries(self) -> list[DataEntry]:
        body = await self._request_json("GET", DATA_ENDPOINT)
        if not isinstance(body, list):
            msg = f"{DATA_ENDPOINT}: expected a JSON array, got {type(body).__name__}"
            raise ContractError(msg, stage=DATA_ENDPOINT, code="PAYLOAD_NOT_ARRAY")
        return [entry for entry in body if isinstance(entry, dict)]

    async def upload_kml(self, kml_file: KmlFile, metadata: Metadata) -> UploadResponse:
        logger.info(
            "Uploading KML | file=%s | size=%d",
            kml_file.name,
            kml_file.size,
        )
        body = await self._request_json(
            "POST",
            UPLOAD_KML_ENDPOINT,
            auth=True,
            files={KML_FILE_FIELD: (kml_file.name, kml_file.content, KML_CONTENT_TYPE)},
            data=metadata.to_form_fields(),
        )
        validate_payload(body, UploadResponse, endpoint=UPLOAD_KML_ENDPOINT)
        return body  # type: ignore[no-any-return]

    async def save(self, payload: SavePayload) -> SaveResponse:
        logger.info("Saving features | count=%d", len(payload["geometry"]))
        body = await self._request_json("POST", SAVE_ENDPOINT, auth=True, json=payload)
        validate_payload(body, SaveResponse, endpoint=SAVE_ENDPOINT)
        return body  # type: ignore[no-any-return]

    async def clear_all(self) -> ClearResponse:
        body = await self._request_json("POST", CLEAR_ALL_ENDPOINT, auth=True)
        validate_payload(body, ClearResponse, endpoint=CLEAR_ALL_ENDPOINT)
        return body  # type: ignore[no-any-return]

    async def list_folder(self, path: str = "") -> FolderListing:
        body = await self._request_json(
            "GET",
            PIPELINE_FOLDERS_ENDPOINT,
            params={"path": path},
        )
        validate_payload(body, FolderListingResponse, endpoint=PIPELINE_FOLDERS_ENDPOINT)
        if not body["success"]:
            raise ServerError(
                PIPELINE_FOLDERS_ENDPOINT,
                str(body.get("message", "folder listing refused")),
            )
        try:
            return FolderListing.model_validate(body)
        except PydanticValidationError as exc:
            msg = f"{PIPELINE_FOLDERS_ENDPOINT}: malformed folder listing: {exc}"
            raise ContractError(
                msg, stage=PIPELINE_FOLDERS_ENDPOINT, code="PAYLOAD_INVALID"
            ) from exc

    async def fetch_file(self, path: str) -> bytes:
        response = await self._send("GET", self._file_endpoint(path))
        return response.content

    async def download_folder(self, path: str) -> bytes:
        response = await self._send(
            "GET",
            DOWNLOAD_FOLDER_ENDPOINT,
            params={"path": path},
        )
        return response.content

    def file_url(self, path: str) -> str:
        return f"{self._config.api_url}{self._file_endpoint(path)}"

    def download_folder_url(self, path: str) -> str:
        return f"{self._config.api_url}{DOWNLOAD_FOLDER_ENDPOINT}?path={quote(path, safe='')}"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _file_endpoint(path: str) -> str:
        return f"{PIPELINE_FILES_ENDPOINT}/{quote(path, safe='/')}"

    def _headers(self, *, auth: bool) -> dict[str, str]:
        if auth and self._config.api_token:
            return {"Authorization": f"Bearer {self._config.api_token}"}
        return {}

    async def _send(
        self,
        method: str,
        endpoint: str,
        *,
        auth: bool = False,
        raise_for_status: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send one request; map transport failures (and error statuses) to ``NetworkError``."""
        try:
            response = await self._client.request(
                method,
                endpoint,
                headers=self._headers(auth=auth),
                **kwargs,
            )
        except httpx.HTTPError as exc:
            raise NetworkError(endpoint, f"{type(exc).__name__}: {exc}") from exc
        if raise_for_status and response.is_error:
            raise NetworkError(
                endpoint,
                f"HTTP {response.status_code}",
                status_code=response.status_code,
                correlation_id=response.headers.get(REQUEST_ID_HEADER, ""),
            )
        return response

    async def _request_json(
        self,
        method: str,
        endpoint: str,
        *,
        auth: bool = False,
        **kwargs: Any,
    ) -> Any:
        """Send one request and decode its JSON body.

        An error status whose body is an explicit ``{"success": false, ...}``
        object is returned as-is, so the server's message reaches the user.
        """
        response = await self._send(
            method, endpoint, auth=auth, raise_for_status=False, **kwargs
        )
        try:
            body = response.json()
        except ValueError as exc:
            if response.is_error:
                raise NetworkError(
                    endpoint,
                    f"HTTP {response.status_code}",
                    status_code=response.status_code,
                    correlation_id=response.headers.get(REQUEST_ID_HEADER, ""),
                ) from exc
            msg = f"{endpoint}: response is not valid JSON"
            raise ContractError(msg, stage=endpoint, code="PAYLOAD_NOT_JSON") from exc

        if response.is_error and not (isinstance(body, dict) and body.get("success") is False):
            raise NetworkError(
                endpoint,
                f"HTTP {response.status_code}",
                status_code=response.status_code,
                correlation_id=response.headers.get(REQUEST_ID_HEADER, ""),
            )
        return body
