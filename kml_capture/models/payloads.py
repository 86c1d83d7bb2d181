"""Typed wire contracts for the persistence service.

Every endpoint exchanges JSON objects.  These ``TypedDict`` definitions
make the request and response shapes explicit, and ``validate_payload``
catches schema drift at runtime before a response is trusted.

Usage::

    from kml_capture.models.payloads import SaveResponse, validate_payload

    body = response.json()
    validate_payload(body, SaveResponse, endpoint="/save")
"""

from __future__ import annotations

from typing import Any, NotRequired, TypedDict

from kml_capture.core.exceptions import ContractError

# ---------------------------------------------------------------------------
# POST /save
# ---------------------------------------------------------------------------


class SavePayload(TypedDict):
    """Client → ``POST /save``."""

    metadata: dict[str, str]
    geometry: list[dict[str, Any]]


class SaveResponse(TypedDict):
    """``POST /save`` → client."""

    success: bool
    pipelinePath: NotRequired[str]
    message: NotRequired[str]


# ---------------------------------------------------------------------------
# POST /upload-kml
# ---------------------------------------------------------------------------


class UploadResponse(TypedDict):
    """``POST /upload-kml`` → client."""

    success: bool
    path: NotRequired[str]
    pipelinePath: NotRequired[str]
    message: NotRequired[str]


# ---------------------------------------------------------------------------
# POST /clear-all
# ---------------------------------------------------------------------------


class ClearResponse(TypedDict):
    """``POST /clear-all`` → client."""

    success: bool
    message: NotRequired[str]


# ---------------------------------------------------------------------------
# GET /data
# ---------------------------------------------------------------------------


class DataEntry(TypedDict):
    """One stored entry from ``GET /data`` (most recent first)."""

    metadata: NotRequired[dict[str, Any] | None]
    geometry: NotRequired[list[dict[str, Any]] | None]


# ---------------------------------------------------------------------------
# GET /pipeline-folders
# ---------------------------------------------------------------------------


class FolderListingResponse(TypedDict):
    """``GET /pipeline-folders`` → client."""

    success: bool
    items: NotRequired[list[dict[str, Any]]]
    currentPath: NotRequired[str]


# ---------------------------------------------------------------------------
# Required-key registrations (used by validate_payload)
# ---------------------------------------------------------------------------

_REQUIRED_KEYS: dict[type, frozenset[str]] = {
    SavePayload: frozenset({"metadata", "geometry"}),
    SaveResponse: frozenset({"success"}),
    UploadResponse: frozenset({"success"}),
    ClearResponse: frozenset({"success"}),
    FolderListingResponse: frozenset({"success"}),
}


# ---------------------------------------------------------------------------
# Runtime validation
# ---------------------------------------------------------------------------


def validate_payload(
    raw: object,
    schema: type,
    *,
    endpoint: str,
) -> None:
    """Validate that *raw* is an object containing the required keys for *schema*.

    Raises:
        ContractError: If *raw* is not a JSON object or required keys are missing.
    """
    if not isinstance(raw, dict):
        msg = f"{endpoint}: expected a JSON object, got {type(raw).__name__}"
        raise ContractError(msg, stage=endpoint, code="PAYLOAD_NOT_OBJECT")

    required = _REQUIRED_KEYS.get(schema)
    if required is None:
        return

    missing = required - raw.keys()
    if missing:
        msg = f"{endpoint}: missing required payload key(s): {', '.join(sorted(missing))}"
        raise ContractError(msg, stage=endpoint, code="PAYLOAD_MISSING_KEYS")
