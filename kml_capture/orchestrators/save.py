"""Save orchestration: merge, validate, persist, report.

1. Merge the drawn sequence with the uploaded collection (drawn wins on
   identical geometry).
2. An empty merge is rejected client-side with ``EmptyFeatureSetError``;
   no request is sent.
3. ``{metadata, geometry}`` goes to ``POST /save``.
4. Success reports the server path and shows a status that hides itself
   after a fixed delay.  Failure shows an error status that stays until
   the next save starts.  Nothing is retried.
"""

from __future__ import annotations

import asyncio
import dataclasses
import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kml_capture.core.constants import (
    DEFAULT_SAVE_STATUS_DISMISS_S,
    EMPTY_SAVE_MESSAGE,
    SAVE_ENDPOINT,
    SAVE_NETWORK_ERROR_MESSAGE,
    SAVE_SERVER_ERROR_PREFIX,
    SAVE_SUCCESS_MESSAGE,
)
from kml_capture.core.exceptions import ContractError, EmptyFeatureSetError
from kml_capture.providers.base import ServerError, ServiceError
from kml_capture.utils.dedup import merge

if TYPE_CHECKING:
    from collections.abc import Callable

    from kml_capture.core.exceptions import CaptureError
    from kml_capture.core.hooks import CaptureHooks
    from kml_capture.models.feature_store import FeatureStore
    from kml_capture.models.metadata import Metadata
    from kml_capture.models.payloads import SavePayload
    from kml_capture.providers.base import PersistenceService

logger = logging.getLogger("kml_capture.orchestrators.save")


# ---------------------------------------------------------------------------
# Result and status models
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SaveResult:
    """Outcome of one save attempt.

    Attributes:
        success: Whether the service stored the entry.
        pipeline_path: Server-assigned path (success only).
        message: Server or transport message (failure only).
        error: The classified failure (``ServerError``, ``NetworkError``
            or ``ContractError``).
    """

    success: bool
    pipeline_path: str = ""
    message: str = ""
    error: CaptureError | None = None

    @property
    def error_category(self) -> str:
        """Category of the failure (``"transient"``, ``"permanent"``, ...), or ``""``."""
        return self.error.category if self.error is not None else ""


class SaveStatusKind(enum.StrEnum):
    NONE = ""
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class SaveStatus:
    """The toast shown over the map after a save."""

    show: bool = False
    message: str = ""
    kind: SaveStatusKind = SaveStatusKind.NONE


class SaveStatusDisplay:
    """Holds the current save toast and auto-hides success toasts."""

    def __init__(self, dismiss_after_s: float = DEFAULT_SAVE_STATUS_DISMISS_S) -> None:
        self._dismiss_after_s = dismiss_after_s
        self._status = SaveStatus()
        self._dismiss_handle: asyncio.TimerHandle | None = None

    @property
    def status(self) -> SaveStatus:
        return self._status

    def reset(self) -> None:
        self._cancel_dismiss()
        self._status = SaveStatus()

    def show_success(self, message: str) -> None:
        self._cancel_dismiss()
        self._status = SaveStatus(show=True, message=message, kind=SaveStatusKind.SUCCESS)
        loop = asyncio.get_running_loop()
        self._dismiss_handle = loop.call_later(self._dismiss_after_s, self._hide)

    def show_error(self, message: str) -> None:
        self._cancel_dismiss()
        self._status = SaveStatus(show=True, message=message, kind=SaveStatusKind.ERROR)

    def _hide(self) -> None:
        self._dismiss_handle = None
        self._status = dataclasses.replace(self._status, show=False)

    def _cancel_dismiss(self) -> None:
        if self._dismiss_handle is not None:
            self._dismiss_handle.cancel()
            self._dismiss_handle = None


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class SaveOrchestrator:
    """Persists the canonical feature set with the current metadata."""

    def __init__(
        self,
        store: FeatureStore,
        service: PersistenceService,
        hooks: CaptureHooks,
        metadata: Callable[[], Metadata],
        status: SaveStatusDisplay,
    ) -> None:
        self._store = store
        self._service = service
        self._hooks = hooks
        self._metadata = metadata
        self._status = status
        self._saving = False

    @property
    def is_saving(self) -> bool:
        return self._saving

    def build_payload(self) -> SavePayload:
        """Merge the current features and wrap them with the metadata.

        Raises:
            EmptyFeatureSetError: If there is nothing to save.
        """
        merged = merge(self._store.drawn, self._store.uploaded_features)
        if not merged:
            raise EmptyFeatureSetError(EMPTY_SAVE_MESSAGE)
        return {
            "metadata": self._metadata().to_wire(),
            "geometry": [f.to_dict() for f in merged],
        }

    async def run(self) -> SaveResult:
        """Save the canonical feature set.

        Raises:
            EmptyFeatureSetError: If drawn and uploaded are both empty.
                The user is alerted and no request is sent.
        """
        try:
            payload = self.build_payload()
        except EmptyFeatureSetError:
            self._hooks.alert(EMPTY_SAVE_MESSAGE)
            raise

        self._status.reset()
        self._saving = True
        try:
            response = await self._service.save(payload)
        except (ServiceError, ContractError) as exc:
            logger.error(
                "Error saving data | features=%d | error=%s",
                len(payload["geometry"]),
                exc.to_error_dict(),
            )
            self._status.show_error(SAVE_NETWORK_ERROR_MESSAGE)
            return SaveResult(success=False, message=str(exc), error=exc)
        finally:
            self._saving = False

        if not response["success"]:
            message = str(response.get("message", ""))
            error = ServerError(SAVE_ENDPOINT, message)
            logger.warning("Save refused by server | error=%s", error.to_error_dict())
            self._status.show_error(SAVE_SERVER_ERROR_PREFIX + message)
            return SaveResult(success=False, message=message, error=error)

        pipeline_path = str(response.get("pipelinePath") or "")
        logger.info(
            "Saved features | count=%d | pipeline_path=%s",
            len(payload["geometry"]),
            pipeline_path,
        )
        self._status.show_success(SAVE_SUCCESS_MESSAGE)
        if pipeline_path:
            self._hooks.on_save_success(pipeline_path)
        return SaveResult(success=True, pipeline_path=pipeline_path)
