"""KML upload orchestration.

Phases::

    IDLE → CLEARING → UPLOADING_PARSING → DISPLAYING → IDLE
                                        ↘ ERROR ──────↗

The clear step runs to completion before anything new is written or
displayed.

After clearing, two independent actions proceed:

(a) the raw file and current metadata go to ``POST /upload-kml``; a
    returned ``pipelinePath`` is reported through the save-success hook,
    failures are logged only;
(b) the file is parsed locally and replaces the uploaded collection; a
    parse failure alerts the user and restores ``data_visible = False``.

Neither action waits on the other's outcome, and a failure in one never
undoes the other.  The file-input slot is emptied afterwards either way.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kml_capture.activities.parse_kml import KmlParseError, parse_kml
from kml_capture.core.constants import PARSE_ERROR_MESSAGE, UPLOAD_KML_ENDPOINT
from kml_capture.core.exceptions import ContractError
from kml_capture.providers.base import ServerError, ServiceError

if TYPE_CHECKING:
    from collections.abc import Callable

    from kml_capture.core.exceptions import CaptureError
    from kml_capture.core.hooks import CaptureHooks
    from kml_capture.models.feature_store import FeatureStore
    from kml_capture.models.metadata import Metadata
    from kml_capture.models.upload import FileInput, KmlFile
    from kml_capture.orchestrators.clear import ClearOrchestrator
    from kml_capture.providers.base import PersistenceService

logger = logging.getLogger("kml_capture.orchestrators.upload")


class UploadPhase(enum.StrEnum):
    IDLE = "idle"
    CLEARING = "clearing"
    UPLOADING_PARSING = "uploading_parsing"
    DISPLAYING = "displaying"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class UploadOutcome:
    """Result of one upload attempt.

    Attributes:
        cleared: Whether the preceding clear reset local state.
        feature_count: Features displayed from the parsed file.
        pipeline_path: Path returned by the upload endpoint (may be empty).
        parse_error: Set when the display path failed.
        upload_error: Set when the persistence path failed.
    """

    cleared: bool
    feature_count: int = 0
    pipeline_path: str = ""
    parse_error: KmlParseError | None = None
    upload_error: CaptureError | None = None

    @property
    def displayed(self) -> bool:
        return self.parse_error is None

    @property
    def persisted(self) -> bool:
        return self.upload_error is None

    @property
    def upload_error_category(self) -> str:
        return self.upload_error.category if self.upload_error is not None else ""


class UploadOrchestrator:
    """Imports one KML file: clear, then persist and display independently."""

    def __init__(
        self,
        store: FeatureStore,
        service: PersistenceService,
        hooks: CaptureHooks,
        metadata: Callable[[], Metadata],
        clear: ClearOrchestrator,
    ) -> None:
        self._store = store
        self._service = service
        self._hooks = hooks
        self._metadata = metadata
        self._clear = clear
        self._phase = UploadPhase.IDLE

    @property
    def phase(self) -> UploadPhase:
        return self._phase

    async def handle_file_change(self, file_input: FileInput) -> UploadOutcome | None:
        """Upload whatever file is selected, then empty the slot.

        Returns:
            ``None`` if no file is selected, else the ``UploadOutcome``.
        """
        kml_file = file_input.value
        if kml_file is None:
            return None
        try:
            return await self.run(kml_file)
        finally:
            file_input.reset()

    async def run(self, kml_file: KmlFile) -> UploadOutcome:
        self._phase = UploadPhase.CLEARING
        cleared = await self._clear.run(skip_confirm=True)
        if not cleared:
            logger.warning(
                "Clear before upload did not complete, existing drawing retained | file=%s",
                kml_file.name,
            )

        self._store.set_data_visible(True)
        self._phase = UploadPhase.UPLOADING_PARSING
        persist_task = asyncio.create_task(self._persist(kml_file))
        try:
            parse_error, feature_count = self._display(kml_file)
        finally:
            pipeline_path, upload_error = await persist_task
            self._phase = UploadPhase.IDLE

        return UploadOutcome(
            cleared=cleared,
            feature_count=feature_count,
            pipeline_path=pipeline_path,
            parse_error=parse_error,
            upload_error=upload_error,
        )

    # ------------------------------------------------------------------
    # Independent sub-actions
    # ------------------------------------------------------------------

    async def _persist(self, kml_file: KmlFile) -> tuple[str, CaptureError | None]:
        """Send the raw file to the service.  Never raises."""
        try:
            response = await self._service.upload_kml(kml_file, self._metadata())
        except (ServiceError, ContractError) as exc:
            logger.error(
                "Error uploading file | file=%s | error=%s",
                kml_file.name,
                exc.to_error_dict(),
            )
            return "", exc

        if not response["success"]:
            message = str(response.get("message", ""))
            error = ServerError(UPLOAD_KML_ENDPOINT, message)
            logger.error(
                "Upload failed | file=%s | error=%s",
                kml_file.name,
                error.to_error_dict(),
            )
            return "", error

        pipeline_path = str(response.get("pipelinePath") or "")
        logger.info(
            "File uploaded | file=%s | path=%s | pipeline_path=%s",
            kml_file.name,
            response.get("path", ""),
            pipeline_path,
        )
        if pipeline_path:
            self._hooks.on_save_success(pipeline_path)
        return pipeline_path, None

    def _display(self, kml_file: KmlFile) -> tuple[KmlParseError | None, int]:
        """Parse the file and swap it in as the uploaded collection."""
        try:
            collection = parse_kml(kml_file.content, source_filename=kml_file.name)
        except KmlParseError as exc:
            self._phase = UploadPhase.ERROR
            logger.error("Error parsing KML file | file=%s | error=%s", kml_file.name, exc)
            self._hooks.alert(PARSE_ERROR_MESSAGE)
            self._store.set_data_visible(False)
            return exc, 0

        self._phase = UploadPhase.DISPLAYING
        self._store.replace_uploaded(collection)
        return None, len(collection)
