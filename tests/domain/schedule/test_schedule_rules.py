"""Tests for priority-based schedule selection."""

from datetime import datetime

import pytest

from playwise.domain.schedule.models import ScheduleRule
from playwise.domain.schedule.rules import (
    active_rules,
    matching_rules,
    rule_matches,
    select_active,
    select_active_at,
    weekday_number,
)

EVERY_DAY = frozenset(range(7))


def make_rule(rule_id: str, start: str = "00:00", end: str = "23:59", **overrides) -> ScheduleRule:
    """Build a mood rule covering the whole day by default."""
    fields = {
        "id": rule_id,
        "owner_id": "u1",
        "name": f"Rule {rule_id}",
        "start": start,
        "end": end,
        "days_of_week": EVERY_DAY,
        "kind": "mood",
        "mood": "Relaxed",
    }
    fields.update(overrides)
    return ScheduleRule(**fields)


class TestWeekdayNumber:
    """Tests for weekday_number function."""

    def test_sunday_is_zero(self) -> None:
        """Test Sunday maps to 0 and Saturday to 6."""
        assert weekday_number(datetime(2024, 1, 7)) == 0  # Sunday
        assert weekday_number(datetime(2024, 1, 8)) == 1  # Monday
        assert weekday_number(datetime(2024, 1, 13)) == 6  # Saturday


class TestRuleMatches:
    """Tests for rule_matches function."""

    def test_inactive_never_matches(self) -> None:
        """Test disabled rules are ignored."""
        assert not rule_matches(make_rule("r", is_active=False), "12:00", 1)

    def test_wrong_day(self) -> None:
        """Test rules only match on their days."""
        rule = make_rule("r", days_of_week={1, 2})
        assert rule_matches(rule, "12:00", 2)
        assert not rule_matches(rule, "12:00", 3)

    def test_outside_window(self) -> None:
        """Test rules only match inside their window."""
        rule = make_rule("r", start="09:00", end="17:00")
        assert not rule_matches(rule, "18:00", 1)

    def test_dict_rules(self) -> None:
        """Test rules may come as plain dicts from a store."""
        rule = {
            "start": "22:00",
            "end": "02:00",
            "days_of_week": [5],
            "is_active": True,
            "priority": 2,
        }
        assert rule_matches(rule, "01:00", 5)


class TestSelectActive:
    """Tests for select_active function."""

    def test_overnight_window(self) -> None:
        """Test a 22:00-02:00 rule at different times."""
        rules = [make_rule("late", start="22:00", end="02:00")]
        assert select_active(rules, "23:30", 1) is rules[0]
        assert select_active(rules, "01:00", 1) is rules[0]
        assert select_active(rules, "10:00", 1) is None

    def test_highest_priority_wins(self) -> None:
        """Test priority 5 beats priority 1."""
        low = make_rule("low", priority=1)
        high = make_rule("high", priority=5)
        assert select_active([low, high], "12:00", 3) is high
        assert select_active([high, low], "12:00", 3) is high

    def test_equal_priority_keeps_first(self) -> None:
        """Test ties resolve to the rule listed first."""
        first = make_rule("first", priority=3)
        second = make_rule("second", priority=3)
        assert select_active([first, second], "12:00", 3) is first
        assert select_active([second, first], "12:00", 3) is second

    def test_higher_priority_outside_window_ignored(self) -> None:
        """Test a non-matching rule never wins on priority."""
        evening = make_rule("evening", start="18:00", end="23:00", priority=10)
        allday = make_rule("allday", priority=1)
        assert select_active([evening, allday], "12:00", 0) is allday

    def test_inactive_ignored(self) -> None:
        """Test disabled rules never win."""
        disabled = make_rule("off", priority=9, is_active=False)
        enabled = make_rule("on", priority=1)
        assert select_active([disabled, enabled], "12:00", 0) is enabled

    def test_no_rules(self) -> None:
        """Test empty input returns None."""
        assert select_active([], "12:00", 0) is None

    def test_accepts_datetime_now(self) -> None:
        """Test now may be a datetime."""
        rule = make_rule("r", start="09:00", end="17:00")
        assert select_active([rule], datetime(2024, 1, 8, 9, 0), 1) is rule

    def test_invalid_now(self) -> None:
        """Test an invalid now string is rejected."""
        with pytest.raises(ValueError):
            select_active([make_rule("r")], "noon", 1)


class TestSelectActiveAt:
    """Tests for select_active_at function."""

    def test_uses_moment_weekday(self) -> None:
        """Test the day of week comes from the moment."""
        weekend = make_rule("weekend", days_of_week={0, 6}, priority=2)
        weekday = make_rule("weekday", days_of_week={1, 2, 3, 4, 5})
        rules = [weekend, weekday]

        assert select_active_at(rules, datetime(2024, 1, 7, 10, 0)) is weekend
        assert select_active_at(rules, datetime(2024, 1, 8, 10, 0)) is weekday


class TestMatchingAndActiveRules:
    """Tests for matching_rules and active_rules functions."""

    def test_matching_keeps_order(self) -> None:
        """Test all matching rules are returned in input order."""
        a = make_rule("a", priority=1)
        b = make_rule("b", start="13:00", end="14:00")
        c = make_rule("c", priority=4)
        assert matching_rules([a, b, c], "12:00", 2) == [a, c]

    def test_active_rules_by_priority(self) -> None:
        """Test enabled rules are listed by descending priority, ties stable."""
        a = make_rule("a", priority=1)
        b = make_rule("b", priority=3)
        c = make_rule("c", priority=3)
        d = make_rule("d", priority=9, is_active=False)
        assert active_rules([a, b, c, d]) == [b, c, a]
