"""Parsing of human-friendly duration strings.

Token lifetimes are configured as short strings such as ``"24h"`` or
``"30d"``. A bare integer is interpreted as a number of seconds.
"""

import re
from datetime import timedelta

_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$", re.IGNORECASE)

_UNIT_SECONDS = {
    "": 1,
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 24 * 60 * 60,
    "w": 7 * 24 * 60 * 60,
}


def parse_duration(value: str | int) -> timedelta:
    """Convert a duration string into a timedelta.

    Args:
        value: Either an integer number of seconds or a string made of a
            number followed by an optional unit (s, m, h, d, w).

    Returns:
        The parsed duration.

    Raises:
        ValueError: If the value cannot be parsed or is not positive.

    Example:
        >>> parse_duration("24h")
        datetime.timedelta(days=1)
        >>> parse_duration("90")
        datetime.timedelta(seconds=90)
    """
    if isinstance(value, int):
        seconds = value
    else:
        match = _DURATION_PATTERN.match(value)
        if match is None:
            raise ValueError(f"Invalid duration: {value!r}")
        amount, unit = match.groups()
        seconds = int(amount) * _UNIT_SECONDS[unit.lower()]

    if seconds <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")
    return timedelta(seconds=seconds)
