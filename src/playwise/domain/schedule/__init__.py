"""
Schedule domain module.

Provides time-window matching and priority-based selection of playback
rules.
"""

from .models import SCHEDULE_KINDS, ScheduleRule
from .rules import (
    active_rules,
    matching_rules,
    rule_matches,
    select_active,
    select_active_at,
    weekday_number,
)
from .windows import format_minutes, in_window, parse_minutes, validate_time_format

__all__ = [
    # Models
    "SCHEDULE_KINDS",
    "ScheduleRule",
    # Time windows
    "validate_time_format",
    "parse_minutes",
    "format_minutes",
    "in_window",
    # Selection
    "weekday_number",
    "rule_matches",
    "matching_rules",
    "select_active",
    "select_active_at",
    "active_rules",
]
