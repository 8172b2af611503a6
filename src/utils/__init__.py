"""
CaseKeeper - Utils Package
==========================

Stateless helpers.

Available Utilities:
    duration: Duration token parsing ("10m", "1h", "7d")
    error_handler: Error categorization and the slash-command catch-all
"""

from .duration import DURATION_SUGGESTIONS, ParsedDuration, parse_duration

__all__ = [
    "DURATION_SUGGESTIONS",
    "ParsedDuration",
    "parse_duration",
]
