from __future__ import annotations

import re

from accesssim.core.policy.exceptions import InvalidTimeError

MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def time_to_minutes(value: str) -> int:
    """Convert a wall-clock "HH:MM" string to minutes since midnight.

    Raises InvalidTimeError for anything that is not a valid time of day.
    """

    if not isinstance(value, str):
        raise InvalidTimeError(f"time must be a string, got {type(value).__name__}")

    m = _TIME_RE.match(value.strip())
    if m is None:
        raise InvalidTimeError(f"invalid time of day: {value!r} (expected HH:MM)")

    hours, minutes = int(m.group(1)), int(m.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidTimeError(f"time of day out of range: {value!r}")

    return hours * 60 + minutes


def format_minutes(minutes: int) -> str:
    """Render minutes since midnight as zero-padded "HH:MM"."""

    if not isinstance(minutes, int) or not 0 <= minutes < MINUTES_PER_DAY:
        raise InvalidTimeError(f"minutes out of range: {minutes!r}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
