"""Top-level wiring of the capture core and its control surface.

``CaptureController`` is what an owning container holds.  It builds the
``FeatureStore`` and the orchestrators around one ``PersistenceService``,
owns the metadata record and the file-input slot, and tracks the last
saved pipeline path.

Persisting and destructive actions share one ``BusyGuard``.  While one of
them is in flight another raises ``OperationInProgressError`` before it
touches any state.  Edit events do not need the guard: they never reach
the service.

``ImperativeControlSurface`` is the narrow handle a parent component gets:
``save()`` and ``clear()`` and nothing else.
"""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING

from kml_capture.activities.load_initial import InitialState, load_initial_state
from kml_capture.core.config import CaptureConfig
from kml_capture.core.exceptions import OperationInProgressError
from kml_capture.core.hooks import CaptureHooks
from kml_capture.models.draw import DrawControlOptions, DrawEventKind
from kml_capture.models.feature_store import FeatureStore
from kml_capture.models.metadata import Metadata
from kml_capture.models.upload import FileInput
from kml_capture.orchestrators.clear import ClearOrchestrator
from kml_capture.orchestrators.draw_events import DrawEventHandlers
from kml_capture.orchestrators.save import SaveOrchestrator, SaveStatusDisplay
from kml_capture.orchestrators.upload import UploadOrchestrator
from kml_capture.pipeline.browser import PipelineBrowser
from kml_capture.utils.paths import leaf_name, parent_path

if TYPE_CHECKING:
    from collections.abc import Iterator

    from kml_capture.models.draw import DrawEvent
    from kml_capture.models.feature import FeatureCollection
    from kml_capture.models.upload import KmlFile
    from kml_capture.orchestrators.save import SaveResult
    from kml_capture.orchestrators.upload import UploadOutcome
    from kml_capture.providers.base import PersistenceService

logger = logging.getLogger("kml_capture.orchestrators.control")


class BusyGuard:
    """Admits one named operation at a time."""

    def __init__(self) -> None:
        self._active: str | None = None

    @property
    def active(self) -> str | None:
        return self._active

    @property
    def busy(self) -> bool:
        return self._active is not None

    @contextlib.contextmanager
    def hold(self, name: str) -> Iterator[None]:
        """Hold the guard for *name*.

        Raises:
            OperationInProgressError: If another operation holds it.
        """
        if self._active is not None:
            logger.warning(
                "Operation refused | active=%s | requested=%s",
                self._active,
                name,
            )
            raise OperationInProgressError(self._active, name)
        self._active = name
        try:
            yield
        finally:
            self._active = None


class ImperativeControlSurface:
    """Save and clear, callable from outside the map component."""

    __slots__ = ("_controller",)

    def __init__(self, controller: CaptureController) -> None:
        self._controller = controller

    async def save(self) -> SaveResult:
        return await self._controller.save()

    async def clear(self) -> bool:
        """Clear everything after the user confirms."""
        return await self._controller.clear()


class CaptureController:
    """Owns the capture state and routes every user action.

    Args:
        service: Persistence service for all remote calls.
        config: Client settings; defaults are used when omitted.
        hooks: UI callbacks.  ``on_save_success`` is still called after
            the controller has recorded the path.
        draw_options: Draw-control configuration for the map view.
    """

    def __init__(
        self,
        service: PersistenceService,
        *,
        config: CaptureConfig | None = None,
        hooks: CaptureHooks | None = None,
        draw_options: DrawControlOptions | None = None,
    ) -> None:
        self._service = service
        self._config = config or CaptureConfig()
        self._user_hooks = hooks or CaptureHooks()
        self._hooks = CaptureHooks(
            confirm=self._user_hooks.confirm,
            alert=self._user_hooks.alert,
            on_save_success=self._on_save_success,
        )
        self.draw_options = draw_options or DrawControlOptions()

        self.metadata = Metadata()
        self.file_input = FileInput()
        self.last_saved_path = ""
        self.pipeline_initial_path = ""

        self.store = FeatureStore()
        self.status = SaveStatusDisplay(self._config.save_status_dismiss_s)
        self.guard = BusyGuard()

        self._clear = ClearOrchestrator(self.store, service, self._hooks)
        self._save = SaveOrchestrator(
            self.store, service, self._hooks, self._current_metadata, self.status
        )
        self._upload = UploadOrchestrator(
            self.store, service, self._hooks, self._current_metadata, self._clear
        )
        self._draw = DrawEventHandlers(self.store, self._clear)
        self._browser: PipelineBrowser | None = None

    # ------------------------------------------------------------------
    # Metadata and last-saved state
    # ------------------------------------------------------------------

    def update_metadata(self, **fields: object) -> Metadata:
        """Change form fields by attribute name (``lane_count="4"``).

        The merged record is validated again, so a non-string value raises
        ``pydantic.ValidationError`` and leaves the current metadata unchanged.
        """
        self.metadata = Metadata.model_validate({**self.metadata.model_dump(), **fields})
        return self.metadata

    @property
    def last_saved_name(self) -> str:
        return leaf_name(self.last_saved_path)

    def _current_metadata(self) -> Metadata:
        return self.metadata

    def _on_save_success(self, path: str) -> None:
        self.last_saved_path = path
        self.pipeline_initial_path = parent_path(path) if path else ""
        logger.debug(
            "Last saved path updated | path=%s | folder=%s",
            path,
            self.pipeline_initial_path,
        )
        self._user_hooks.on_save_success(path)

    # ------------------------------------------------------------------
    # Guarded actions
    # ------------------------------------------------------------------

    async def save(self) -> SaveResult:
        with self.guard.hold("save"):
            return await self._save.run()

    async def clear(self) -> bool:
        with self.guard.hold("clear"):
            return await self._clear.run()

    async def upload(self, kml_file: KmlFile) -> UploadOutcome:
        with self.guard.hold("upload"):
            return await self._upload.run(kml_file)

    async def on_file_change(self) -> UploadOutcome | None:
        """Upload the file currently in ``file_input``, then empty the slot.

        The slot is emptied even when another action holds the guard, so the
        same file can be selected again.
        """
        if self.file_input.value is None:
            return None
        try:
            with self.guard.hold("upload"):
                return await self._upload.handle_file_change(self.file_input)
        finally:
            self.file_input.reset()

    async def handle_draw_event(self, event: DrawEvent) -> None:
        """Route a draw-surface event to the store.

        ``edited`` events are applied even while another action runs.  Any
        other event raises ``OperationInProgressError`` in that case and the
        store is left unchanged: for a refused ``created`` event the view
        must remove the new layer from the map itself.
        """
        if event.kind is DrawEventKind.EDITED:
            await self._draw.dispatch(event)
            return
        with self.guard.hold(f"draw:{event.kind}"):
            await self._draw.dispatch(event)

    async def reset(self) -> bool:
        """Restore default metadata, forget the last save and clear everything."""
        with self.guard.hold("reset"):
            self.metadata = Metadata()
            self.apply_initial_geometry(None)
            self.last_saved_path = ""
            self.pipeline_initial_path = ""
            return await self._clear.run(skip_confirm=True)

    # ------------------------------------------------------------------
    # Initial restore
    # ------------------------------------------------------------------

    async def load_initial(self) -> InitialState:
        """Restore metadata and geometry from the most recent stored entry."""
        state = await load_initial_state(self._service)
        if state.metadata is not None:
            self.metadata = state.metadata
        self.apply_initial_geometry(state.collection)
        return state

    def apply_initial_geometry(self, collection: FeatureCollection | None) -> None:
        """Show *collection* as the uploaded set, or empty the map for ``None``."""
        self.store.replace_drawn([])
        self.store.replace_uploaded(collection)
        self.store.set_data_visible(collection is not None)

    # ------------------------------------------------------------------
    # Surfaces
    # ------------------------------------------------------------------

    def surface(self) -> ImperativeControlSurface:
        return ImperativeControlSurface(self)

    async def open_pipeline(self) -> PipelineBrowser:
        """Open the pipeline browser at the folder of the last save."""
        self._browser = PipelineBrowser(
            self._service,
            initial_path=self.pipeline_initial_path,
            recent_window_min=self._config.recent_window_min,
        )
        await self._browser.open()
        return self._browser

    @property
    def pipeline(self) -> PipelineBrowser | None:
        return self._browser

    def close_pipeline(self) -> None:
        self._browser = None
