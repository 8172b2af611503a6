"""
Tests for src/utils/duration.py

Covers parsing of duration tokens used by mutes, kicks and temporary roles.
"""

import pytest

from src.utils.duration import (
    DURATION_SUGGESTIONS,
    MS_PER_DAY,
    MS_PER_HOUR,
    MS_PER_MINUTE,
    MS_PER_SECOND,
    ParsedDuration,
    format_label,
    parse_duration,
)


# =============================================================================
# parse_duration() Tests
# =============================================================================

class TestParseDuration:
    """Tests for parse_duration function."""

    def test_minutes(self):
        assert parse_duration("10m") == ParsedDuration(600000, "10 minutes")

    def test_single_hour_is_singular(self):
        assert parse_duration("1h") == ParsedDuration(3600000, "1 hour")

    def test_seconds_and_days(self):
        assert parse_duration("45s") == ParsedDuration(45 * MS_PER_SECOND, "45 seconds")
        assert parse_duration("7d") == ParsedDuration(7 * MS_PER_DAY, "7 days")

    def test_zero_is_valid(self):
        parsed = parse_duration("0d")
        assert parsed is not None
        assert parsed.milliseconds == 0
        assert parsed.label == "0 days"

    def test_unit_is_case_insensitive(self):
        assert parse_duration("2H") == ParsedDuration(2 * MS_PER_HOUR, "2 hours")

    def test_surrounding_whitespace_is_ignored(self):
        assert parse_duration("  30m ") == ParsedDuration(30 * MS_PER_MINUTE, "30 minutes")

    def test_seconds_property(self):
        assert parse_duration("1h").seconds == 3600

    @pytest.mark.parametrize("token", [
        "1",
        "",
        None,
        "m",
        "10",
        "10x",
        "1w",
        "1h30m",
        "-5m",
        "1.5h",
        "ten minutes",
    ])
    def test_invalid_tokens_return_none(self, token):
        assert parse_duration(token) is None


# =============================================================================
# Helpers
# =============================================================================

class TestFormatLabel:
    def test_pluralizes(self):
        assert format_label(1, "minute") == "1 minute"
        assert format_label(2, "minute") == "2 minutes"
        assert format_label(0, "minute") == "0 minutes"


class TestSuggestions:
    def test_every_suggestion_parses(self):
        for _, token in DURATION_SUGGESTIONS:
            assert parse_duration(token) is not None
