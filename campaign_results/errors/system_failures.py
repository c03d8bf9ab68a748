"""
System failure error classifications for unrecoverable errors.

These exceptions represent failures of the collaborators behind the core:
the record store, the campaign event log, the geolocation dataset and the
identifier generator's retry budget.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class PersistenceError(SystemFailureError):
    """Database failures while appending events or saving records."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target


class StaleRecordError(PersistenceError):
    """Record was modified by another writer since it was read."""

    def __init__(self, message: str, result_id: Optional[int] = None,
                 expected_version: Optional[int] = None, **kwargs):
        super().__init__(message, operation="save", target="results", **kwargs)
        self.result_id = result_id
        self.expected_version = expected_version


class DuplicateIdentifierError(PersistenceError):
    """Insert rejected by the unique constraint on the external identifier."""

    def __init__(self, message: str, rid: Optional[str] = None, **kwargs):
        super().__init__(message, operation="insert", target="results", **kwargs)
        self.rid = rid


class LookupUnavailable(SystemFailureError):
    """Geolocation dataset could not be opened or has been closed."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.path = path


class GenerationExhausted(SystemFailureError):
    """Identifier generator ran out of attempts without finding a free value."""

    def __init__(self, message: str, attempts: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.attempts = attempts
