"""
Priority-based schedule selection.

Filters rules down to those covering the current moment (active, scheduled
for today, inside their time window) and greedily picks the highest
priority. Ties keep the rule listed first. Callers supply "now" and "today"
already localized; no time zone conversion happens here.
"""

from datetime import datetime
from typing import Any, Optional, Sequence

from loguru import logger

from ...utils.records import get_field
from ..search.sorting import merge_sort
from .windows import TimeOfDay, format_minutes, in_window, parse_minutes


def weekday_number(moment: datetime) -> int:
    """Day of week with Sunday as 0 (Python's weekday() has Monday as 0)."""
    return (moment.weekday() + 1) % 7


def rule_matches(rule: Any, now: TimeOfDay, today: int) -> bool:
    """Check whether a single rule covers the given moment."""
    if not get_field(rule, "is_active", True):
        return False
    if today not in (get_field(rule, "days_of_week") or ()):
        return False
    return in_window(now, get_field(rule, "start"), get_field(rule, "end"))


def matching_rules(rules: Sequence[Any], now: TimeOfDay, today: int) -> list[Any]:
    """Return every rule covering the moment, in input order."""
    return [rule for rule in rules if rule_matches(rule, now, today)]


def select_active(rules: Sequence[Any], now: TimeOfDay, today: int) -> Optional[Any]:
    """
    Select the rule that should drive playback right now.

    Args:
        rules: Schedule rules snapshot
        now: Current local time ("HH:MM", time or datetime)
        today: Current day of week (0 = Sunday ... 6 = Saturday)

    Returns:
        Highest-priority matching rule (first listed wins ties), or None if
        no rule matches

    Examples:
        select_active([morning, workout], "07:15", 1)  # workout if its priority is higher
    """
    best = None
    best_priority = None

    for rule in matching_rules(rules, now, today):
        priority = get_field(rule, "priority", 1)
        if best is None or priority > best_priority:
            best, best_priority = rule, priority

    if best is None:
        logger.debug(f"No schedule covers {format_minutes(parse_minutes(now))} on day {today}")
    else:
        logger.debug(
            f"Schedule '{get_field(best, 'name')}' (priority {best_priority}) covers "
            f"{format_minutes(parse_minutes(now))} on day {today}"
        )
    return best


def select_active_at(rules: Sequence[Any], moment: datetime) -> Optional[Any]:
    """Select the active rule for a caller-localized datetime."""
    return select_active(rules, moment, weekday_number(moment))


def active_rules(rules: Sequence[Any]) -> list[Any]:
    """Return enabled rules by descending priority, keeping input order on ties."""
    enabled = [rule for rule in rules if get_field(rule, "is_active", True)]
    return merge_sort(enabled, "priority", "desc")
