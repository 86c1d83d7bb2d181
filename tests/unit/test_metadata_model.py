"""Tests for the save-context Metadata model."""

from __future__ import annotations

from kml_capture.models.metadata import Metadata


class TestMetadataDefaults:
    def test_defaults(self) -> None:
        meta = Metadata()
        assert meta.chainage == ""
        assert meta.offset_type == ""
        assert meta.lane_count == "2"
        assert meta.kml_merge_offset == ""


class TestMetadataWire:
    def test_to_wire_uses_camel_case(self) -> None:
        meta = Metadata(chainage="12.5", offset_type="3", lane_count="4", kml_merge_offset="0.2")
        assert meta.to_wire() == {
            "chainage": "12.5",
            "offsetType": "3",
            "laneCount": "4",
            "kmlMergeOffset": "0.2",
        }

    def test_form_fields_match_wire(self) -> None:
        meta = Metadata(chainage="1")
        assert meta.to_form_fields() == meta.to_wire()

    def test_populate_by_alias(self) -> None:
        meta = Metadata.model_validate({"offsetType": "7", "laneCount": "6"})
        assert meta.offset_type == "7"
        assert meta.lane_count == "6"


class TestMetadataFromWire:
    def test_round_values(self) -> None:
        meta = Metadata.from_wire(
            {"chainage": "3", "offsetType": "1", "laneCount": "6", "kmlMergeOffset": "2"}
        )
        assert meta == Metadata(chainage="3", offset_type="1", lane_count="6", kml_merge_offset="2")

    def test_none_and_numbers_coerced(self) -> None:
        meta = Metadata.from_wire({"chainage": 12.5, "offsetType": None, "laneCount": 4})
        assert meta.chainage == "12.5"
        assert meta.offset_type == ""
        assert meta.lane_count == "4"

    def test_blank_lane_count_defaults(self) -> None:
        assert Metadata.from_wire({"laneCount": ""}).lane_count == "2"

    def test_none_is_defaults(self) -> None:
        assert Metadata.from_wire(None) == Metadata()
