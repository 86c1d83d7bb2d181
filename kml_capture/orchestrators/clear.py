"""Destructive reset: remote clear-all followed by a local reset.

Used on its own (the "Clear All" action, which asks for confirmation) and
as a precondition step of an upload or of a fresh drawing, which skip the
confirmation.

The local store is only reset after the service confirms with
``success: true``.  Any failure (transport, ``success: false``, malformed
body) is logged and swallowed: the user keeps working with the current
features and nothing is retried.  Remote and local state can therefore
disagree after a failed clear.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kml_capture.core.constants import CONFIRM_CLEAR_MESSAGE
from kml_capture.core.exceptions import ContractError
from kml_capture.providers.base import ServiceError

if TYPE_CHECKING:
    from kml_capture.core.hooks import CaptureHooks
    from kml_capture.models.feature_store import FeatureStore
    from kml_capture.providers.base import PersistenceService

logger = logging.getLogger("kml_capture.orchestrators.clear")


class ClearOrchestrator:
    """Coordinates ``POST /clear-all`` and the local ``FeatureStore`` reset."""

    def __init__(
        self,
        store: FeatureStore,
        service: PersistenceService,
        hooks: CaptureHooks,
    ) -> None:
        self._store = store
        self._service = service
        self._hooks = hooks

    async def run(self, *, skip_confirm: bool = False) -> bool:
        """Clear remote and local state.

        Args:
            skip_confirm: Internal precondition call; do not ask the user.

        Returns:
            ``True`` if the local store was reset, ``False`` if the user
            declined or the remote clear did not succeed.
        """
        if not skip_confirm and not self._hooks.confirm(CONFIRM_CLEAR_MESSAGE):
            logger.info("Clear cancelled by user")
            return False

        try:
            response = await self._service.clear_all()
        except (ServiceError, ContractError) as exc:
            logger.error(
                "Error clearing data, local state preserved | error=%s",
                exc.to_error_dict(),
            )
            return False

        if not response["success"]:
            logger.warning(
                "Clear-all refused by server, local state preserved | message=%s",
                response.get("message", ""),
            )
            return False

        self._store.clear_all()
        self._hooks.on_save_success("")
        logger.info(
            "Cleared all data | redraw_epoch=%d | skip_confirm=%s",
            self._store.redraw_epoch,
            skip_confirm,
        )
        return True
