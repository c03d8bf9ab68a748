"""
Event recorder for campaign event logs.

Every result transition starts by appending an event to the campaign that
owns the result. The recorder resolves that campaign, encodes the detail
payload and stamps the event time that the transition later copies into
the record's modified_date.
"""

from typing import Optional, Protocol

from ..logging.config import get_logger
from ..state.models import Event, EventDetails, EventKind, Result, encode_details
from ..utils.time import Clock, utc_now

logger = get_logger(__name__)


class Campaign(Protocol):
    """Campaign aggregate owning an append-only event log."""

    id: int

    def add_event(self, event: Event) -> None:
        """Append an event; raises PersistenceError on storage failure."""
        ...


class CampaignLookup(Protocol):
    """Resolves the campaign owning a result."""

    def get_campaign(self, campaign_id: int, user_id: int) -> Campaign:
        """Return the campaign or raise NotFound."""
        ...


class EventRecorder:
    """Appends result events to campaign event logs."""

    def __init__(self, campaigns: CampaignLookup, clock: Clock = utc_now):
        self.campaigns = campaigns
        self.clock = clock
        self.logger = logger

    def record(
        self,
        result: Result,
        kind: EventKind,
        details: Optional[EventDetails] = None
    ) -> Event:
        """
        Append an event for ``result`` and return it.

        Args:
            result: Target record the event concerns
            kind: Event kind
            details: Payload variant matching ``kind``

        Returns:
            The recorded event, carrying its recorded time

        Raises:
            InvalidDetailsError: payload does not fit the event kind
            NotFound: owning campaign does not exist
            PersistenceError: event log could not be written
        """
        encoded = encode_details(kind, details)
        campaign = self.campaigns.get_campaign(result.campaign_id, result.user_id)

        event = Event(
            campaign_id=campaign.id,
            email=result.email,
            kind=kind,
            time=self.clock(),
            details=encoded,
        )
        campaign.add_event(event)

        self.logger.debug(
            "Event recorded",
            result_id=result.rid,
            campaign_id=campaign.id,
            kind=kind.value,
            event_time=event.time.isoformat()
        )

        return event
