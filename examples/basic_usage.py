#!/usr/bin/env python3
"""
Basic Usage Example - Campaign Result Tracker

Walks one target through a campaign:
- Create a campaign and a queued result
- Record a bounce, a retry and a successful send
- Record open, click and submission events, including a late duplicate open
- Report the message and print the event log

Run: python examples/basic_usage.py
"""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

from campaign_results.state.models import TrackingDetails
from campaign_results.tracker import ResultTracker


def main():
    with tempfile.TemporaryDirectory() as tmp:
        overrides = {
            "store": {"database_path": str(Path(tmp) / "example.db")},
            "geo": {"enabled": False},
            "logging": {"level": "INFO"},
        }

        with ResultTracker(config_dir=tmp, overrides=overrides) as tracker:
            campaign = tracker.campaigns.create_campaign(user_id=1, name="Password expiry notice")
            result = tracker.create_result(
                campaign.id, 1, "jane@example.com", "Jane", "Doe", "Engineer"
            )
            print(f"Created result {result.rid} for {result.format_address()}")

            browser = {"address": "203.0.113.7", "user-agent": "Mozilla/5.0"}
            retry_at = datetime.now(timezone.utc) + timedelta(minutes=5)

            result = tracker.mark_send_error(result, RuntimeError("421 service not available"))
            result = tracker.mark_backoff(result, RuntimeError("421 service not available"), retry_at)
            result = tracker.mark_sent(result)
            result = tracker.mark_opened(result, TrackingDetails(browser=browser))
            result = tracker.mark_clicked(result, TrackingDetails(browser=browser))
            result = tracker.mark_opened(result, TrackingDetails(browser=browser))
            result = tracker.mark_submitted(
                result, TrackingDetails(payload={"username": ["jdoe"]}, browser=browser)
            )
            result = tracker.mark_reported(result, TrackingDetails(browser=browser))

            print(f"Final status: {result.status.value}, reported: {result.reported}")
            for event in campaign.events():
                print(f"  {event.time.isoformat()}  {event.kind.value:15}  {event.details or ''}")


if __name__ == "__main__":
    main()
