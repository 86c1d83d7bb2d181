"""Callbacks into the owning UI.

The capture core never talks to widgets directly.  The owning container
passes a ``CaptureHooks`` instance whose callables stand in for the
browser's ``confirm`` / ``alert`` dialogs and the save-success
notification that feeds the last-saved card and the pipeline browser.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("kml_capture.core.hooks")


def _deny(message: str) -> bool:
    logger.info("No confirm handler installed, declining: %s", message)
    return False


def _log_alert(message: str) -> None:
    logger.warning("Alert: %s", message)


def _ignore_path(path: str) -> None:
    return None


@dataclass(slots=True)
class CaptureHooks:
    """UI callbacks used by the orchestrators.

    Attributes:
        confirm: Ask the user a yes/no question; ``True`` means proceed.
            Defaults to declining.
        alert: Show a blocking message (validation and parse errors).
        on_save_success: Receives the server-assigned pipeline path after
            a save or upload, or ``""`` after a successful clear.
    """

    confirm: Callable[[str], bool] = field(default=_deny)
    alert: Callable[[str], None] = field(default=_log_alert)
    on_save_success: Callable[[str], None] = field(default=_ignore_path)
