"""Tests for the save orchestrator and the save-status display."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest

from kml_capture.core.constants import (
    EMPTY_SAVE_MESSAGE,
    SAVE_NETWORK_ERROR_MESSAGE,
    SAVE_SUCCESS_MESSAGE,
)
from kml_capture.core.exceptions import EmptyFeatureSetError, ValidationError
from kml_capture.models.feature import Feature, FeatureCollection
from kml_capture.models.metadata import Metadata
from kml_capture.orchestrators.save import (
    SaveOrchestrator,
    SaveStatusDisplay,
    SaveStatusKind,
)
from kml_capture.providers.base import NetworkError, ServerError

if TYPE_CHECKING:
    from kml_capture.models.feature_store import FeatureStore

    from tests.conftest import FakePersistenceService, RecordingHooks


@pytest.fixture()
def status() -> SaveStatusDisplay:
    return SaveStatusDisplay(dismiss_after_s=0.01)


@pytest.fixture()
def metadata() -> Metadata:
    return Metadata(chainage="12.5", offset_type="3", lane_count="4")


@pytest.fixture()
def saver(
    store: FeatureStore,
    service: FakePersistenceService,
    hooks: RecordingHooks,
    metadata: Metadata,
    status: SaveStatusDisplay,
) -> SaveOrchestrator:
    return SaveOrchestrator(store, service, hooks, lambda: metadata, status)


class TestEmptySave:
    @pytest.mark.asyncio()
    async def test_rejected_without_request(
        self,
        saver: SaveOrchestrator,
        service: FakePersistenceService,
        hooks: RecordingHooks,
    ) -> None:
        with pytest.raises(EmptyFeatureSetError) as exc_info:
            await saver.run()

        assert isinstance(exc_info.value, ValidationError)
        assert service.calls == []
        assert hooks.alerts == [EMPTY_SAVE_MESSAGE]
        assert saver.is_saving is False

    @pytest.mark.asyncio()
    async def test_empty_uploaded_collection_still_empty(
        self,
        saver: SaveOrchestrator,
        store: FeatureStore,
        service: FakePersistenceService,
    ) -> None:
        store.replace_uploaded(FeatureCollection())
        with pytest.raises(EmptyFeatureSetError):
            await saver.run()
        assert service.calls == []


class TestSavePayload:
    @pytest.mark.asyncio()
    async def test_drawn_line(
        self,
        saver: SaveOrchestrator,
        store: FeatureStore,
        service: FakePersistenceService,
        line_a: Feature,
        metadata: Metadata,
    ) -> None:
        store.add_drawn(line_a)

        result = await saver.run()

        assert result.success is True
        assert service.save_payloads == [
            {"metadata": metadata.to_wire(), "geometry": [line_a.to_dict()]}
        ]

    @pytest.mark.asyncio()
    async def test_uploaded_point_only(
        self,
        saver: SaveOrchestrator,
        store: FeatureStore,
        service: FakePersistenceService,
        point_p: Feature,
    ) -> None:
        store.replace_uploaded(FeatureCollection.from_features([point_p]))

        await saver.run()

        assert service.save_payloads[0]["geometry"] == [point_p.to_dict()]

    @pytest.mark.asyncio()
    async def test_duplicate_uploaded_geometry_dropped(
        self,
        saver: SaveOrchestrator,
        store: FeatureStore,
        service: FakePersistenceService,
        line_a: Feature,
        point_p: Feature,
    ) -> None:
        store.add_drawn(line_a)
        copy_of_a = Feature(geometry=dict(line_a.geometry), properties={"name": "kml"})
        store.replace_uploaded(FeatureCollection.from_features([copy_of_a, point_p]))

        await saver.run()

        assert service.save_payloads[0]["geometry"] == [line_a.to_dict(), point_p.to_dict()]


class TestSaveOutcome:
    @pytest.mark.asyncio()
    async def test_success_reports_path(
        self,
        saver: SaveOrchestrator,
        store: FeatureStore,
        service: FakePersistenceService,
        hooks: RecordingHooks,
        status: SaveStatusDisplay,
        line_a: Feature,
    ) -> None:
        store.add_drawn(line_a)
        service.save_response = {"success": True, "pipelinePath": "/pipeline/2024/x"}

        result = await saver.run()

        assert result.pipeline_path == "/pipeline/2024/x"
        assert hooks.saved_paths == ["/pipeline/2024/x"]
        assert status.status.show is True
        assert status.status.kind is SaveStatusKind.SUCCESS
        assert status.status.message == SAVE_SUCCESS_MESSAGE

    @pytest.mark.asyncio()
    async def test_success_without_path_not_reported(
        self,
        saver: SaveOrchestrator,
        store: FeatureStore,
        hooks: RecordingHooks,
        line_a: Feature,
    ) -> None:
        store.add_drawn(line_a)
        result = await saver.run()
        assert result.success is True
        assert hooks.saved_paths == []
        assert result.error_category == ""

    @pytest.mark.asyncio()
    async def test_success_status_auto_dismisses(
        self,
        saver: SaveOrchestrator,
        store: FeatureStore,
        status: SaveStatusDisplay,
        line_a: Feature,
    ) -> None:
        store.add_drawn(line_a)
        await saver.run()
        assert status.status.show is True

        await asyncio.sleep(0.05)

        assert status.status.show is False
        assert status.status.kind is SaveStatusKind.SUCCESS

    @pytest.mark.asyncio()
    async def test_server_refusal(
        self,
        saver: SaveOrchestrator,
        store: FeatureStore,
        service: FakePersistenceService,
        hooks: RecordingHooks,
        status: SaveStatusDisplay,
        line_a: Feature,
    ) -> None:
        store.add_drawn(line_a)
        service.save_response = {"success": False, "message": "disk full"}

        result = await saver.run()

        assert result.success is False
        assert result.message == "disk full"
        assert isinstance(result.error, ServerError)
        assert result.error_category == "permanent"
        assert status.status.kind is SaveStatusKind.ERROR
        assert status.status.message == "Error saving data: disk full"
        assert hooks.saved_paths == []

    @pytest.mark.asyncio()
    async def test_network_failure(
        self,
        saver: SaveOrchestrator,
        store: FeatureStore,
        service: FakePersistenceService,
        status: SaveStatusDisplay,
        line_a: Feature,
        network_error: NetworkError,
    ) -> None:
        store.add_drawn(line_a)
        service.save_error = network_error

        result = await saver.run()

        assert result.success is False
        assert result.error is network_error
        assert result.error_category == "transient"
        assert status.status.message == SAVE_NETWORK_ERROR_MESSAGE
        assert saver.is_saving is False

    @pytest.mark.asyncio()
    async def test_error_status_persists(
        self,
        saver: SaveOrchestrator,
        store: FeatureStore,
        service: FakePersistenceService,
        status: SaveStatusDisplay,
        line_a: Feature,
        network_error: NetworkError,
    ) -> None:
        store.add_drawn(line_a)
        service.save_error = network_error
        await saver.run()

        await asyncio.sleep(0.05)

        assert status.status.show is True

    @pytest.mark.asyncio()
    async def test_no_retry(
        self,
        saver: SaveOrchestrator,
        store: FeatureStore,
        service: FakePersistenceService,
        line_a: Feature,
        network_error: NetworkError,
    ) -> None:
        store.add_drawn(line_a)
        service.save_error = network_error
        await saver.run()
        assert service.calls == ["save"]

    @pytest.mark.asyncio()
    async def test_new_save_resets_status(
        self,
        saver: SaveOrchestrator,
        store: FeatureStore,
        service: FakePersistenceService,
        status: SaveStatusDisplay,
        line_a: Feature,
        network_error: NetworkError,
    ) -> None:
        store.add_drawn(line_a)
        service.save_error = network_error
        await saver.run()
        service.save_error = None

        await saver.run()

        assert status.status.kind is SaveStatusKind.SUCCESS


class TestSaveStatusDisplay:
    def test_initially_hidden(self) -> None:
        assert SaveStatusDisplay().status.show is False

    @pytest.mark.asyncio()
    async def test_reset_cancels_pending_dismiss(self) -> None:
        display = SaveStatusDisplay(dismiss_after_s=0.01)
        display.show_success("ok")
        display.show_error("bad")
        await asyncio.sleep(0.05)
        assert display.status.show is True
        assert display.status.message == "bad"
