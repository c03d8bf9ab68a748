"""
Request error classifications for result tracking operations.

These exceptions describe inputs the core cannot act on: a missing
campaign or record, an unparsable IP address, or an event payload that
does not fit the event kind. They are propagated to the caller untouched.
"""

from typing import Any, Optional, Dict


class TrackingRequestError(Exception):
    """Base class for request errors that the caller can handle."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class NotFound(TrackingRequestError):
    """A campaign, result or geo record does not exist."""

    def __init__(self, message: str, entity: Optional[str] = None,
                 key: Optional[Any] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.entity = entity
        self.key = key


class GeoRecordNotFound(NotFound):
    """The lookup dataset holds no location for the address."""

    def __init__(self, message: str, address: Optional[str] = None, **kwargs):
        super().__init__(message, entity="geo_record", key=address, **kwargs)
        self.address = address


class ValidationError(TrackingRequestError):
    """Input exists but is malformed."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Optional[Any] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value


class InvalidAddress(ValidationError):
    """String does not parse as an IPv4 or IPv6 address."""

    def __init__(self, message: str, address: Optional[str] = None, **kwargs):
        super().__init__(message, field="ip", value=address, **kwargs)
        self.address = address


class InvalidDetailsError(ValidationError):
    """Event detail payload is the wrong variant or cannot be encoded."""

    def __init__(self, message: str, event_kind: Optional[str] = None, **kwargs):
        super().__init__(message, field="details", **kwargs)
        self.event_kind = event_kind
