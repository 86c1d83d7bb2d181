"""Tests for the unified exception taxonomy.

Validates:
- CaptureError hierarchy and structured attributes
- Category classification (validation, transient, permanent, contract)
- ``to_error_dict()`` produces stable payload keys
- Retry semantics are consistent with taxonomy class
- Every module-level exception is a CaptureError subclass
"""

from __future__ import annotations

from typing import ClassVar

from kml_capture.activities.parse_kml import (
    InvalidCoordinateError,
    KmlParseError,
    KmlValidationError,
)
from kml_capture.core.config import ConfigValidationError
from kml_capture.core.exceptions import (
    CaptureError,
    ContractError,
    EmptyFeatureSetError,
    OperationInProgressError,
    PermanentError,
    TransientError,
    ValidationError,
)
from kml_capture.providers.base import NetworkError, ServerError, ServiceError


class TestCaptureErrorBase:
    """CaptureError base class behavior."""

    def test_default_attributes(self) -> None:
        err = CaptureError("boom")
        assert err.message == "boom"
        assert err.stage == ""
        assert err.code == ""
        assert err.retryable is False
        assert err.correlation_id == ""

    def test_custom_attributes(self) -> None:
        err = CaptureError(
            "fail",
            stage="save",
            code="SAVE_FAILED",
            retryable=True,
            correlation_id="abc-123",
        )
        assert err.stage == "save"
        assert err.code == "SAVE_FAILED"
        assert err.retryable is True
        assert err.correlation_id == "abc-123"

    def test_str_is_message(self) -> None:
        err = CaptureError("human-readable error")
        assert str(err) == "human-readable error"

    def test_uncategorised_falls_back_on_retryable(self) -> None:
        assert CaptureError("x", retryable=True).category == "transient"
        assert CaptureError("x").category == "permanent"


class TestCategories:
    """Category base classes set category and retry defaults."""

    def test_validation(self) -> None:
        err = ValidationError("bad input")
        assert err.category == "validation"
        assert err.retryable is False

    def test_transient(self) -> None:
        err = TransientError("timeout")
        assert err.category == "transient"
        assert err.retryable is True

    def test_permanent(self) -> None:
        err = PermanentError("refused")
        assert err.category == "permanent"
        assert err.retryable is False

    def test_contract(self) -> None:
        err = ContractError("drift")
        assert err.category == "contract"
        assert err.retryable is False

    def test_retryable_can_be_overridden(self) -> None:
        assert TransientError("x", retryable=False).retryable is False


class TestToErrorDict:
    """Structured payload has stable keys."""

    EXPECTED_KEYS: ClassVar[set[str]] = {
        "category",
        "code",
        "stage",
        "message",
        "retryable",
        "correlation_id",
    }

    def test_keys(self) -> None:
        assert set(CaptureError("x").to_error_dict()) == self.EXPECTED_KEYS

    def test_values(self) -> None:
        payload = EmptyFeatureSetError("nothing to save").to_error_dict()
        assert payload["category"] == "validation"
        assert payload["code"] == "EMPTY_FEATURE_SET"
        assert payload["stage"] == "save"
        assert payload["message"] == "nothing to save"
        assert payload["retryable"] is False


class TestDomainExceptions:
    """Concrete exceptions slot into the right category."""

    def test_empty_feature_set_is_validation(self) -> None:
        assert isinstance(EmptyFeatureSetError(), ValidationError)

    def test_operation_in_progress(self) -> None:
        err = OperationInProgressError("save", "clear")
        assert isinstance(err, ValidationError)
        assert err.active == "save"
        assert err.requested == "clear"
        assert err.code == "OPERATION_IN_PROGRESS"
        assert "'clear'" in str(err)
        assert "'save'" in str(err)

    def test_kml_errors(self) -> None:
        assert issubclass(KmlValidationError, KmlParseError)
        assert issubclass(InvalidCoordinateError, KmlValidationError)
        err = KmlParseError("not xml")
        assert err.category == "validation"
        assert err.stage == "parse_kml"
        assert err.code == "KML_PARSE_FAILED"

    def test_config_error_is_permanent(self) -> None:
        err = ConfigValidationError("KML_CAPTURE_TIMEOUT_S", -1, "must be > 0")
        assert err.category == "permanent"
        assert err.key == "KML_CAPTURE_TIMEOUT_S"
        assert err.value == -1

    def test_network_error_is_transient(self) -> None:
        err = NetworkError("/save", "HTTP 503", status_code=503)
        assert isinstance(err, ServiceError)
        assert err.category == "transient"
        assert err.retryable is True
        assert err.status_code == 503
        assert str(err) == "[/save] HTTP 503"

    def test_server_error_is_permanent(self) -> None:
        err = ServerError("/save", "disk full")
        assert isinstance(err, ServiceError)
        assert err.category == "permanent"
        assert err.retryable is False
        assert err.code == "SERVER_REFUSED"

    def test_all_are_capture_errors(self) -> None:
        for cls in (
            EmptyFeatureSetError,
            KmlParseError,
            ConfigValidationError,
            NetworkError,
            ServerError,
        ):
            assert issubclass(cls, CaptureError), cls.__name__
