"""Unified exception taxonomy for the capture core.

Every domain exception inherits from ``CaptureError`` and carries
structured context fields that drive the user-facing reaction (alert,
transient status, silent log) and operator diagnostics.

Taxonomy categories
-------------------
- ``ValidationError``:   client-side contract violations, never retryable.
  Raised before any request is sent (e.g. saving an empty feature set).
- ``TransientError``:    temporary failures (network, timeout).
- ``PermanentError``:    the remote service answered and refused.
- ``ContractError``:     response payload drifted from the expected schema.

Every exception exposes ``to_error_dict()`` for a stable structured
error payload suitable for logging.
"""

from __future__ import annotations


class CaptureError(Exception):
    """Base exception for all capture-domain errors.

    Attributes:
        message: Human-readable error description.
        stage: Operation where the error occurred
            (e.g. ``"save"``, ``"parse_kml"``, ``"clear_all"``).
        code: Machine-readable error code (e.g. ``"KML_PARSE_FAILED"``).
        retryable: Whether the operation could succeed if repeated.
        correlation_id: Request correlation identifier, when known.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ContractError):
            return "contract"
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, TransientError):
            return "transient"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(CaptureError):
    """Input or domain-model validation failure. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class TransientError(CaptureError):
    """Temporary failure that may succeed if the user tries again."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(CaptureError):
    """The remote side refused the operation. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class ContractError(CaptureError):
    """Response payload or schema drift from the persistence service."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Concrete client-side validation errors
# ---------------------------------------------------------------------------


class EmptyFeatureSetError(ValidationError):
    """Save attempted while the canonical feature set is empty."""

    default_stage = "save"
    default_code = "EMPTY_FEATURE_SET"


class OperationInProgressError(ValidationError):
    """A persisting or destructive action is already in flight.

    Attributes:
        active: Name of the operation currently holding the guard.
        requested: Name of the operation that was refused.
    """

    default_stage = "control"
    default_code = "OPERATION_IN_PROGRESS"

    def __init__(self, active: str, requested: str) -> None:
        self.active = active
        self.requested = requested
        super().__init__(f"Cannot start '{requested}' while '{active}' is in progress")
