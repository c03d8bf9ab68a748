"""Tests for clock helpers."""

from datetime import datetime, timedelta, timezone

from campaign_results.utils.time import ensure_utc, format_timestamp, parse_timestamp, utc_now


class TestTimeHelpers:
    """UTC normalisation and storage format."""

    def test_utc_now_is_aware(self):
        assert utc_now().tzinfo == timezone.utc

    def test_naive_treated_as_utc(self):
        assert ensure_utc(datetime(2024, 1, 1, 12)) == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)

    def test_offset_converted(self):
        plus_two = timezone(timedelta(hours=2))

        converted = ensure_utc(datetime(2024, 1, 1, 12, tzinfo=plus_two))

        assert converted == datetime(2024, 1, 1, 10, tzinfo=timezone.utc)
        assert converted.tzinfo == timezone.utc

    def test_round_trip(self):
        ts = datetime(2024, 5, 6, 7, 8, 9, 123456, tzinfo=timezone.utc)

        assert format_timestamp(ts) == "2024-05-06T07:08:09.123456+00:00"
        assert parse_timestamp(format_timestamp(ts)) == ts

    def test_none_passes_through(self):
        assert format_timestamp(None) is None
        assert parse_timestamp(None) is None
