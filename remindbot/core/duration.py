"""
Remind Bot — Duration Parser.

Turns compact offsets such as "10m" or "2d" into a timedelta. The unit is the
last character and is case-sensitive: "m" is minutes, "M" is months.
"""

from __future__ import annotations

import re
from datetime import timedelta

UNIT_SECONDS: dict[str, int] = {
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 24 * 60 * 60,
    "w": 7 * 24 * 60 * 60,
    "M": 30 * 24 * 60 * 60,
    "y": 365 * 24 * 60 * 60,
}

# ASCII digits only, optional sign
_MAGNITUDE_RE = re.compile(r"[+-]?[0-9]+")


class InvalidFormat(ValueError):
    """Raised when a duration string cannot be parsed."""


def parse_duration(text: str) -> timedelta:
    """Parse "<integer><unit>" into a timedelta.

    Args:
        text: e.g. "30s", "10m", "2h", "1d", "3w", "6M", "1y".

    Raises:
        InvalidFormat: empty input, unknown unit, or non-integer magnitude.
    """
    if not text:
        raise InvalidFormat("empty duration")

    magnitude, unit = text[:-1], text[-1]
    if unit not in UNIT_SECONDS:
        raise InvalidFormat(f"unknown time unit {unit!r}")

    if not _MAGNITUDE_RE.fullmatch(magnitude):
        raise InvalidFormat(f"invalid magnitude {magnitude!r}")

    return timedelta(seconds=int(magnitude) * UNIT_SECONDS[unit])
