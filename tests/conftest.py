"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import pytest

from campaign_results.events.recorder import EventRecorder
from campaign_results.persistence.campaign_store import CampaignStore, StoredCampaign
from campaign_results.persistence.result_store import ResultStore
from campaign_results.state.machine import ResultStateMachine
from campaign_results.state.models import Result, ResultStatus, TrackingDetails


class SteppingClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: Optional[datetime] = None):
        self.current = start or datetime(2024, 3, 1, 9, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(seconds=1)
        return now


class FakeGeoReader:
    """Stands in for maxminddb.Reader with a fixed address table."""

    def __init__(self, records: Dict[str, Any]):
        self.records = records
        self.closed = False
        self.lookups = []

    def get(self, ip_address):
        self.lookups.append(str(ip_address))
        return self.records.get(str(ip_address))

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "results.db")


@pytest.fixture
def campaign_store(db_path) -> CampaignStore:
    return CampaignStore(db_path)


@pytest.fixture
def result_store(db_path) -> ResultStore:
    return ResultStore(db_path)


@pytest.fixture
def campaign(campaign_store) -> StoredCampaign:
    return campaign_store.create_campaign(user_id=1, name="Q1 awareness")


@pytest.fixture
def recorder(campaign_store, clock) -> EventRecorder:
    return EventRecorder(campaign_store, clock=clock)


@pytest.fixture
def machine(recorder, result_store) -> ResultStateMachine:
    return ResultStateMachine(recorder, result_store, max_save_attempts=3)


@pytest.fixture
def make_result(result_store, campaign):
    """Insert results into the seeded campaign."""
    counter = {"n": 0}

    def _make(status: ResultStatus = ResultStatus.QUEUED, **fields) -> Result:
        counter["n"] += 1
        values = dict(
            id=0,
            campaign_id=campaign.id,
            user_id=campaign.user_id,
            rid=f"rid{counter['n']:04d}",
            email=f"target{counter['n']}@example.com",
            first_name="Jane",
            last_name="Doe",
            position="Analyst",
            status=status,
        )
        values.update(fields)
        return result_store.insert(Result(**values))

    return _make


@pytest.fixture
def result(make_result) -> Result:
    return make_result()


@pytest.fixture
def tracking_details() -> TrackingDetails:
    return TrackingDetails(
        payload={"rid": ["rid0001"]},
        browser={"address": "203.0.113.7", "user-agent": "Mozilla/5.0"},
    )


@pytest.fixture
def geo_records() -> Dict[str, Any]:
    return {
        "203.0.113.7": {"location": {"latitude": 51.5074, "longitude": -0.1278}},
        "2001:db8::1": {"location": {"latitude": 40.7128, "longitude": -74.006}},
        "198.51.100.9": {"country": {"iso_code": "US"}},
    }


@pytest.fixture
def fake_reader(geo_records) -> FakeGeoReader:
    return FakeGeoReader(geo_records)
