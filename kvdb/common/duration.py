"""
Duration Parsing

Parses interval text such as "6 months", "1 hour" or "1 day 12 hours" into a
timedelta. Months count as 30 days and years as 365 days.
"""

import re
from datetime import timedelta

_TERM_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*([a-z]+)")

_UNIT_SECONDS = {
    "us": 1e-6,
    "microsecond": 1e-6,
    "microseconds": 1e-6,
    "ms": 1e-3,
    "millisecond": 1e-3,
    "milliseconds": 1e-3,
    "s": 1,
    "sec": 1,
    "secs": 1,
    "second": 1,
    "seconds": 1,
    "m": 60,
    "min": 60,
    "mins": 60,
    "minute": 60,
    "minutes": 60,
    "h": 3600,
    "hr": 3600,
    "hrs": 3600,
    "hour": 3600,
    "hours": 3600,
    "d": 86400,
    "day": 86400,
    "days": 86400,
    "w": 7 * 86400,
    "week": 7 * 86400,
    "weeks": 7 * 86400,
    "mon": 30 * 86400,
    "mons": 30 * 86400,
    "month": 30 * 86400,
    "months": 30 * 86400,
    "y": 365 * 86400,
    "year": 365 * 86400,
    "years": 365 * 86400,
}


def parse_duration(text: str) -> timedelta:
    """
    Parse a duration string.

    Args:
        text: One or more "<number> <unit>" terms

    Returns:
        timedelta: Total duration

    Raises:
        ValueError: If the text is empty, has an unknown unit, or contains anything
            other than duration terms
    """
    normalized = text.strip().lower()
    if not normalized:
        raise ValueError("Duration must not be empty")

    total = 0.0
    position = 0
    for match in _TERM_PATTERN.finditer(normalized):
        if normalized[position:match.start()].strip():
            raise ValueError(f"Invalid duration: {text!r}")
        amount, unit = match.groups()
        if unit not in _UNIT_SECONDS:
            raise ValueError(f"Unknown time unit in duration: {unit}")
        total += float(amount) * _UNIT_SECONDS[unit]
        position = match.end()

    if position == 0 or normalized[position:].strip():
        raise ValueError(f"Invalid duration: {text!r}")
    if total <= 0:
        raise ValueError(f"Duration must be positive: {text!r}")

    return timedelta(seconds=total)
