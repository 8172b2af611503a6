"""
Duration Utilities
==================

Parses the duration tokens moderators type into /mute, /role temp and
/kick, e.g. "10m", "1h", "2d".

Usage:
    from src.utils.duration import parse_duration

    parsed = parse_duration("1h")
    parsed.milliseconds  # 3600000
    parsed.label         # "1 hour"

    parse_duration("1")  # None (no unit)

DESIGN:
    A failed parse returns None, never raises, so callers can tell a bad
    token apart from a platform error. "0m" is a valid token and parses to
    a zero-length span.
"""

import re
from typing import NamedTuple, Optional


# =============================================================================
# Time Constants
# =============================================================================

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR

DURATION_PATTERN = re.compile(r"^(\d+)(s|m|h|d)$", re.IGNORECASE)

UNITS = {
    "s": (MS_PER_SECOND, "second"),
    "m": (MS_PER_MINUTE, "minute"),
    "h": (MS_PER_HOUR, "hour"),
    "d": (MS_PER_DAY, "day"),
}


# =============================================================================
# Duration Suggestions for Autocomplete
# =============================================================================

DURATION_SUGGESTIONS = [
    ("10 Minutes", "10m"),
    ("30 Minutes", "30m"),
    ("1 Hour", "1h"),
    ("6 Hours", "6h"),
    ("12 Hours", "12h"),
    ("1 Day", "1d"),
    ("3 Days", "3d"),
    ("7 Days", "7d"),
]


# =============================================================================
# Parsing
# =============================================================================

class ParsedDuration(NamedTuple):
    """A parsed duration token."""

    milliseconds: int
    label: str

    @property
    def seconds(self) -> float:
        return self.milliseconds / MS_PER_SECOND


def parse_duration(token: Optional[str]) -> Optional[ParsedDuration]:
    """
    Parse a duration token into a millisecond span and display label.

    Args:
        token: Text like "10m", "1H" or "3d".

    Returns:
        ParsedDuration, or None if the token is empty or malformed.

    Examples:
        >>> parse_duration("10m")
        ParsedDuration(milliseconds=600000, label='10 minutes')
        >>> parse_duration("1h")
        ParsedDuration(milliseconds=3600000, label='1 hour')
        >>> parse_duration("1") is None
        True
    """
    if not token:
        return None

    match = DURATION_PATTERN.match(token.strip())
    if not match:
        return None

    amount = int(match.group(1))
    multiplier, unit_name = UNITS[match.group(2).lower()]
    return ParsedDuration(
        milliseconds=amount * multiplier,
        label=format_label(amount, unit_name),
    )


def format_label(amount: int, unit_name: str) -> str:
    """Pluralize a unit: format_label(1, "hour") -> "1 hour"."""
    return f"{amount} {unit_name}{'' if amount == 1 else 's'}"


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "MS_PER_SECOND",
    "MS_PER_MINUTE",
    "MS_PER_HOUR",
    "MS_PER_DAY",
    "DURATION_SUGGESTIONS",
    "ParsedDuration",
    "parse_duration",
    "format_label",
]
