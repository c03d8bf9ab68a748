"""Campaign aggregate persistence and its append-only event log."""

import sqlite3
from dataclasses import dataclass, field
from typing import Any

from ..errors import NotFound
from ..state.models import Event, EventKind
from ..utils.time import format_timestamp, parse_timestamp, utc_now
from .base import SQLiteStore


@dataclass
class StoredCampaign:
    """Campaign row bound to the store that appends its events."""
    id: int
    user_id: int
    name: str
    created_date: str
    store: "CampaignStore" = field(repr=False, compare=False)

    def add_event(self, event: Event) -> None:
        """Append an event to this campaign's log."""
        self.store.append_event(event)

    def events(self) -> list[Event]:
        return self.store.list_events(self.id)


class CampaignStore(SQLiteStore):
    """SQLite-backed campaign lookup and event log."""

    def create_campaign(self, user_id: int, name: str) -> StoredCampaign:
        """Insert a campaign owned by ``user_id``."""
        created_date = format_timestamp(utc_now())

        with self._lock:
            with self._get_connection("create_campaign") as conn:
                cursor = conn.execute("""
                    INSERT INTO campaigns (user_id, name, created_date)
                    VALUES (?, ?, ?)
                """, (user_id, name, created_date))
                conn.commit()
                campaign_id = cursor.lastrowid

        self.logger.info("Campaign created", campaign_id=campaign_id, user_id=user_id)

        return StoredCampaign(
            id=campaign_id,
            user_id=user_id,
            name=name,
            created_date=created_date,
            store=self,
        )

    def get_campaign(self, campaign_id: int, user_id: int) -> StoredCampaign:
        """
        Return the campaign owned by ``user_id``.

        Raises:
            NotFound: no such campaign for that user
        """
        with self._get_connection("get_campaign") as conn:
            row = conn.execute("""
                SELECT * FROM campaigns WHERE id = ? AND user_id = ?
            """, (campaign_id, user_id)).fetchone()

        if row is None:
            raise NotFound(
                f"Campaign {campaign_id} not found for user {user_id}",
                entity="campaign",
                key=campaign_id,
                context={"user_id": user_id},
            )

        return StoredCampaign(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            created_date=row["created_date"],
            store=self,
        )

    def append_event(self, event: Event) -> None:
        """Append one event row. Events are never updated or deleted."""
        with self._lock:
            with self._get_connection("append_event") as conn:
                conn.execute("""
                    INSERT INTO events (campaign_id, email, message, details, time)
                    VALUES (?, ?, ?, ?, ?)
                """, (
                    event.campaign_id,
                    event.email,
                    event.kind.value,
                    event.details,
                    format_timestamp(event.time),
                ))
                conn.commit()

    def list_events(self, campaign_id: int) -> list[Event]:
        """Events of a campaign in append order."""
        with self._get_connection("list_events") as conn:
            rows = conn.execute("""
                SELECT * FROM events WHERE campaign_id = ? ORDER BY id
            """, (campaign_id,)).fetchall()

        return [self._row_to_event(row) for row in rows]

    def get_stats(self, campaign_id: int) -> dict[str, Any]:
        """Event counts by kind for a campaign."""
        with self._get_connection("get_stats") as conn:
            rows = conn.execute("""
                SELECT message, COUNT(*) FROM events
                WHERE campaign_id = ? GROUP BY message
            """, (campaign_id,)).fetchall()

        return {row[0]: row[1] for row in rows}

    def _row_to_event(self, row: sqlite3.Row) -> Event:
        """Convert database row to Event object."""
        return Event(
            campaign_id=row["campaign_id"],
            email=row["email"],
            kind=EventKind(row["message"]),
            time=parse_timestamp(row["time"]),
            details=row["details"],
        )
