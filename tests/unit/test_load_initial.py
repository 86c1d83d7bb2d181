"""Tests for restoring the last stored entry."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from kml_capture.activities.load_initial import InitialState, load_initial_state
from kml_capture.models.metadata import Metadata

if TYPE_CHECKING:
    from kml_capture.models.feature import Feature
    from kml_capture.providers.base import NetworkError

    from tests.conftest import FakePersistenceService


class TestLoadInitialState:
    @pytest.mark.asyncio()
    async def test_first_entry_used(
        self,
        service: FakePersistenceService,
        line_a: Feature,
    ) -> None:
        service.entries = [
            {"metadata": {"chainage": "1", "laneCount": ""}, "geometry": [line_a.to_dict()]},
            {"metadata": {"chainage": "2"}, "geometry": []},
        ]

        state = await load_initial_state(service)

        assert state.metadata == Metadata(chainage="1")
        assert state.collection is not None
        assert state.collection.features == (line_a,)

    @pytest.mark.asyncio()
    async def test_no_entries(self, service: FakePersistenceService) -> None:
        assert await load_initial_state(service) == InitialState()

    @pytest.mark.asyncio()
    async def test_empty_geometry_list_is_collection(
        self,
        service: FakePersistenceService,
    ) -> None:
        service.entries = [{"metadata": None, "geometry": []}]

        state = await load_initial_state(service)

        assert state.metadata is None
        assert state.collection is not None
        assert len(state.collection) == 0

    @pytest.mark.asyncio()
    async def test_null_geometry(self, service: FakePersistenceService) -> None:
        service.entries = [{"metadata": {"chainage": "5"}, "geometry": None}]
        state = await load_initial_state(service)
        assert state.collection is None
        assert state.metadata is not None

    @pytest.mark.asyncio()
    async def test_malformed_geometry_ignored(self, service: FakePersistenceService) -> None:
        service.entries = [{"geometry": [{"type": "Feature", "geometry": "oops"}]}]
        assert (await load_initial_state(service)).collection is None

    @pytest.mark.asyncio()
    async def test_network_failure_is_empty(
        self,
        service: FakePersistenceService,
        network_error: NetworkError,
    ) -> None:
        service.load_error = network_error
        assert await load_initial_state(service) == InitialState()
