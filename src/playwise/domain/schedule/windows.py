"""
Daily time windows in 24-hour "HH:MM" notation.

Windows are compared as minute-of-day values and may wrap midnight
(e.g., 22:00-02:00). Both ends are inclusive.
"""

import re
from datetime import datetime, time
from typing import Union

from ..exceptions import InvalidScheduleError

TIME_PATTERN = re.compile(r"^\d{2}:\d{2}$")

MINUTES_PER_DAY = 24 * 60

TimeOfDay = Union[str, time, datetime]


def validate_time_format(time_str: str) -> None:
    """Validate time string is in HH:MM format.

    Raises:
        InvalidScheduleError: If the string is not a valid 24-hour time
    """
    if not isinstance(time_str, str) or not TIME_PATTERN.match(time_str):
        raise InvalidScheduleError(
            f"Invalid time format: '{time_str}'. Expected 'HH:MM' (e.g., '09:00')"
        )
    hour, minute = int(time_str[:2]), int(time_str[3:])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise InvalidScheduleError(
            f"Invalid time: '{time_str}'. Hour must be 00-23 and minute 00-59"
        )


def parse_minutes(value: TimeOfDay) -> int:
    """Convert a time of day to minutes since midnight.

    Args:
        value: "HH:MM" string, datetime.time or datetime.datetime

    Returns:
        Minute of day (0-1439)

    Raises:
        InvalidScheduleError: If a string is not valid HH:MM

    Examples:
        parse_minutes("00:00")       # 0
        parse_minutes("22:30")       # 1350
        parse_minutes(time(1, 5))    # 65
    """
    if isinstance(value, datetime):
        return value.hour * 60 + value.minute
    if isinstance(value, time):
        return value.hour * 60 + value.minute

    validate_time_format(value)
    return int(value[:2]) * 60 + int(value[3:])


def format_minutes(minutes: int) -> str:
    """Format a minute of day as "HH:MM"."""
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def in_window(now: TimeOfDay, start: TimeOfDay, end: TimeOfDay) -> bool:
    """Check if a time falls within a window, handling midnight wrap.

    Args:
        now: Time to check
        start: Window start (inclusive)
        end: Window end (inclusive)

    Returns:
        True if now is within [start, end]

    Examples:
        in_window("12:00", "09:00", "17:00")  # True
        in_window("17:00", "09:00", "17:00")  # True (end is inclusive)
        in_window("23:30", "22:00", "02:00")  # True (overnight)
        in_window("01:00", "22:00", "02:00")  # True (overnight)
        in_window("10:00", "22:00", "02:00")  # False
    """
    now_minutes = parse_minutes(now)
    start_minutes = parse_minutes(start)
    end_minutes = parse_minutes(end)

    if end_minutes < start_minutes:
        # Overnight window (e.g., 22:00 to 02:00)
        return now_minutes >= start_minutes or now_minutes <= end_minutes

    return start_minutes <= now_minutes <= end_minutes
