"""Tests for recipient address formatting."""

import pytest

from campaign_results.utils.address import format_address


class TestFormatAddress:
    """Display name handling."""

    def test_full_name(self):
        assert format_address("jane@example.com", "Jane", "Doe") == '"Jane Doe" <jane@example.com>'

    def test_no_names(self):
        assert format_address("jane@example.com", "", "") == "jane@example.com"

    @pytest.mark.parametrize("first,last", [("Jane", ""), ("", "Doe")])
    def test_partial_name(self, first, last):
        assert format_address("jane@example.com", first, last) == "jane@example.com"

    def test_special_characters_escaped(self):
        assert format_address("jd@example.com", 'J. "JD"', "Doe, Jr") == \
            '"J. \\"JD\\" Doe, Jr" <jd@example.com>'

    def test_non_ascii_name_encoded(self):
        formatted = format_address("jurgen@example.com", "Jürgen", "Müller")

        assert formatted.startswith("=?utf-8?")
        assert formatted.endswith(" <jurgen@example.com>")

    def test_malformed_email_passed_through(self):
        assert format_address("not an email", "", "") == "not an email"
        assert format_address("not an email", "A", "B") == '"A B" <not an email>'
