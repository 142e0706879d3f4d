"""
Lenient query-string parsing.
Bad input never raises; callers get the default back instead.
"""

from typing import Optional


def parse_optional_int(value: Optional[str]) -> Optional[int]:
    """Parse an integer query param. Returns None if missing or not an integer."""
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def parse_limit(value: Optional[str], default: int) -> int:
    """Parse a row limit. Anything but a positive integer falls back to default."""
    limit = parse_optional_int(value)
    if limit is None or limit <= 0:
        return default
    return limit
