"""
Error classification for result tracking.

Request errors describe a bad or unresolvable input and are safe to report
back to the caller. System failures describe a broken collaborator
(storage, lookup dataset, random source) and are not recoverable by the core.
"""

from .request_errors import (
    TrackingRequestError,
    NotFound,
    GeoRecordNotFound,
    ValidationError,
    InvalidAddress,
    InvalidDetailsError,
)
from .system_failures import (
    SystemFailureError,
    PersistenceError,
    StaleRecordError,
    DuplicateIdentifierError,
    LookupUnavailable,
    GenerationExhausted,
)

__all__ = [
    # Request Errors
    "TrackingRequestError",
    "NotFound",
    "GeoRecordNotFound",
    "ValidationError",
    "InvalidAddress",
    "InvalidDetailsError",
    # System Failures
    "SystemFailureError",
    "PersistenceError",
    "StaleRecordError",
    "DuplicateIdentifierError",
    "LookupUnavailable",
    "GenerationExhausted",
]
