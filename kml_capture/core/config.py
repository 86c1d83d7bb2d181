"""Client configuration loaded from environment variables.

All configuration values have sensible defaults for local development
against a persistence service running on ``localhost:5000``.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any numeric
    value is out of its valid range or the API URL is empty.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from kml_capture.core.constants import (
    DEFAULT_API_URL,
    DEFAULT_RECENT_WINDOW_MINUTES,
    DEFAULT_SAVE_STATUS_DISMISS_S,
    DEFAULT_TIMEOUT_S,
)
from kml_capture.core.exceptions import PermanentError


class ConfigValidationError(PermanentError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class CaptureConfig:
    """Immutable client configuration.

    Attributes:
        api_url: Base URL of the persistence service (no trailing slash).
        api_token: Bearer token sent with mutating requests.
        timeout_s: Per-request timeout in seconds.
        save_status_dismiss_s: Delay before a save-success status hides itself.
        recent_window_min: Age in minutes under which a pipeline item is "new".
    """

    api_url: str = DEFAULT_API_URL
    api_token: str = ""
    timeout_s: float = DEFAULT_TIMEOUT_S
    save_status_dismiss_s: float = DEFAULT_SAVE_STATUS_DISMISS_S
    recent_window_min: float = DEFAULT_RECENT_WINDOW_MINUTES

    @classmethod
    def from_env(cls) -> CaptureConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a numeric value is out of range
                or the API URL is empty.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``KML_CAPTURE_TIMEOUT_S=abc``).
        """
        config = cls(
            api_url=os.getenv("KML_CAPTURE_API_URL", DEFAULT_API_URL).rstrip("/"),
            api_token=os.getenv("KML_CAPTURE_API_TOKEN", ""),
            timeout_s=float(os.getenv("KML_CAPTURE_TIMEOUT_S", str(DEFAULT_TIMEOUT_S))),
            save_status_dismiss_s=float(
                os.getenv("KML_CAPTURE_SAVE_STATUS_DISMISS_S", str(DEFAULT_SAVE_STATUS_DISMISS_S))
            ),
            recent_window_min=float(
                os.getenv("KML_CAPTURE_RECENT_WINDOW_MIN", str(DEFAULT_RECENT_WINDOW_MINUTES))
            ),
        )
        _validate(config)
        return config


def _validate(config: CaptureConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if not config.api_url:
        raise ConfigValidationError("KML_CAPTURE_API_URL", config.api_url, "must not be empty")

    if config.timeout_s <= 0:
        raise ConfigValidationError(
            "KML_CAPTURE_TIMEOUT_S",
            config.timeout_s,
            "must be > 0 (seconds)",
        )

    if config.save_status_dismiss_s < 0:
        raise ConfigValidationError(
            "KML_CAPTURE_SAVE_STATUS_DISMISS_S",
            config.save_status_dismiss_s,
            "must be >= 0 (seconds)",
        )

    if config.recent_window_min <= 0:
        raise ConfigValidationError(
            "KML_CAPTURE_RECENT_WINDOW_MIN",
            config.recent_window_min,
            "must be > 0 (minutes)",
        )
