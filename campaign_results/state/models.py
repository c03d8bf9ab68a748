"""
Data models for campaign target records and their events.

This module defines the immutable target record (Result), the append-only
Event, and the closed set of detail payload variants carried by events.
"""

import json
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from ..errors import InvalidDetailsError
from ..utils.address import format_address


class ResultStatus(str, Enum):
    """Status values stored on a target record."""
    QUEUED = "queued"
    SENT = "sent"
    SENDING_ERROR = "sending-error"
    RETRY = "retry"
    OPENED = "opened"
    CLICKED = "clicked"
    SUBMITTED_DATA = "submitted-data"


class EventKind(str, Enum):
    """Event kinds appended to a campaign's event log."""
    SENT = "sent"
    SENDING_ERROR = "sending-error"
    OPENED = "opened"
    CLICKED = "clicked"
    SUBMITTED_DATA = "submitted-data"
    REPORTED = "reported"


@dataclass(frozen=True)
class ErrorDetails:
    """Detail payload for delivery failures."""

    error: str

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass(frozen=True)
class TrackingDetails:
    """
    Detail payload captured by a tracking endpoint.

    ``payload`` holds submitted form or query values (each key maps to the
    list of values seen for it); ``browser`` holds request metadata such as
    the client address and user agent.
    """

    payload: dict[str, list[str]] = field(default_factory=dict)
    browser: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"payload": self.payload, "browser": self.browser}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


EventDetails = Union[ErrorDetails, TrackingDetails]

# Detail variants accepted for each event kind; None means no payload.
DETAIL_VARIANTS: dict[EventKind, Optional[type]] = {
    EventKind.SENT: None,
    EventKind.SENDING_ERROR: ErrorDetails,
    EventKind.OPENED: TrackingDetails,
    EventKind.CLICKED: TrackingDetails,
    EventKind.SUBMITTED_DATA: TrackingDetails,
    EventKind.REPORTED: TrackingDetails,
}


def encode_details(kind: EventKind, details: Optional[EventDetails]) -> Optional[str]:
    """
    Serialize an event's detail payload.

    Raises:
        InvalidDetailsError: payload is not the variant the event kind
            carries, or its contents are not JSON-encodable
    """
    expected = DETAIL_VARIANTS[kind]

    if details is None:
        return None

    if expected is None or not isinstance(details, expected):
        raise InvalidDetailsError(
            f"{type(details).__name__} is not a valid payload for '{kind.value}' events",
            event_kind=kind.value,
            value=details,
        )

    try:
        return details.to_json()
    except (TypeError, ValueError) as e:
        raise InvalidDetailsError(
            f"Detail payload for '{kind.value}' is not JSON-encodable: {e}",
            event_kind=kind.value,
            value=details,
        ) from e


@dataclass(frozen=True)
class Event:
    """One entry of a campaign's append-only event log."""

    campaign_id: int
    email: str
    kind: EventKind
    time: datetime
    details: Optional[str] = None

    def details_dict(self) -> Optional[dict[str, Any]]:
        """Decode the stored detail payload."""
        if self.details is None:
            return None
        return json.loads(self.details)


@dataclass(frozen=True)
class Result:
    """A target in a campaign and its tracked funnel status."""

    # Identity, fixed once the record exists
    id: int
    campaign_id: int
    user_id: int
    rid: str
    email: str
    first_name: str = ""
    last_name: str = ""
    position: str = ""

    # Tracked state
    status: ResultStatus = ResultStatus.QUEUED
    reported: bool = False
    ip: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    send_date: Optional[datetime] = None
    modified_date: Optional[datetime] = None

    # Optimistic concurrency counter, bumped by every successful save
    version: int = 0

    def with_status(self, status: ResultStatus, timestamp: datetime) -> 'Result':
        """New record with the status moved and modified_date stamped."""
        return replace(self, status=status, modified_date=timestamp)

    def with_retry(self, send_date: datetime, timestamp: datetime) -> 'Result':
        """New record scheduled for another delivery attempt."""
        return replace(
            self,
            status=ResultStatus.RETRY,
            send_date=send_date,
            modified_date=timestamp,
        )

    def with_reported(self, timestamp: datetime) -> 'Result':
        """New record flagged as reported; status is left alone."""
        return replace(self, reported=True, modified_date=timestamp)

    def with_geo(self, ip: str, latitude: float, longitude: float) -> 'Result':
        """New record carrying the resolved address and coordinates."""
        return replace(self, ip=ip, latitude=latitude, longitude=longitude)

    def with_version(self, version: int) -> 'Result':
        return replace(self, version=version)

    def format_address(self) -> str:
        """Address to use in the To header of the outgoing message."""
        return format_address(self.email, self.first_name, self.last_name)

    def to_dict(self) -> dict[str, Any]:
        """Public representation; internal identity is not exposed."""
        return {
            "id": self.rid,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "position": self.position,
            "status": self.status.value,
            "ip": self.ip,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "send_date": self.send_date.isoformat() if self.send_date else None,
            "reported": self.reported,
            "modified_date": self.modified_date.isoformat() if self.modified_date else None,
        }
