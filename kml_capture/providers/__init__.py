"""Persistence service adapters.

Exports the abstract base class and the HTTP implementation::

    from kml_capture.providers import HttpPersistenceService, PersistenceService
"""

from kml_capture.providers.base import (
    NetworkError,
    PersistenceService,
    ServerError,
    ServiceError,
)
from kml_capture.providers.http import HttpPersistenceService

__all__ = [
    "HttpPersistenceService",
    "NetworkError",
    "PersistenceService",
    "ServerError",
    "ServiceError",
]
