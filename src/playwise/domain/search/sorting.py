"""
Stable merge sort for catalog records.

Pure functional implementation: inputs are never mutated and every call
returns a new list. Equal keys keep their input order in both directions,
so sorting an already-sorted list reproduces it unchanged.
"""

from datetime import date, datetime, timezone
from typing import Any, Sequence, TypeVar

from ...utils.records import get_field

T = TypeVar("T")

SORT_ORDERS = ("asc", "desc")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_utc(value: datetime) -> datetime:
    """Naive timestamps are taken to be UTC so they compare with aware ones."""
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def compare_values(left: Any, right: Any) -> float:
    """
    Compare two field values the way catalog listings expect.

    - Strings: collation order (case-folded first, raw value as tie-break)
    - Numbers: numeric difference
    - Timestamps: chronological difference in seconds (naive values as UTC)

    Values of different or unsupported types compare equal so that the
    merge keeps their input order.

    Returns:
        Negative if left sorts first, positive if right sorts first, 0 if equal
    """
    if isinstance(left, str) and isinstance(right, str):
        left_key, right_key = left.casefold(), right.casefold()
        if left_key != right_key:
            return -1 if left_key < right_key else 1
        if left != right:
            # Lower-case before upper-case for otherwise identical strings
            return -1 if left.swapcase() < right.swapcase() else 1
        return 0

    if isinstance(left, datetime) and isinstance(right, datetime):
        return (_as_utc(left) - _as_utc(right)).total_seconds()

    if (
        isinstance(left, date)
        and isinstance(right, date)
        and not isinstance(left, datetime)
        and not isinstance(right, datetime)
    ):
        return (left - right).days

    if _is_number(left) and _is_number(right):
        return left - right

    return 0


def _merge(left: list[T], right: list[T], key: str, order: str) -> list[T]:
    result: list[T] = []
    i = j = 0

    while i < len(left) and j < len(right):
        comparison = compare_values(get_field(left[i], key), get_field(right[j], key))
        take_left = comparison <= 0 if order == "asc" else comparison >= 0

        if take_left:
            result.append(left[i])
            i += 1
        else:
            result.append(right[j])
            j += 1

    result.extend(left[i:])
    result.extend(right[j:])
    return result


def merge_sort(records: Sequence[T], key: str, order: str = "asc") -> list[T]:
    """
    Sort records by one field using a recursive merge sort.

    Args:
        records: Tracks, objects or dicts to sort
        key: Field to sort by (e.g., 'title', 'duration', 'play_count', 'created_at')
        order: 'asc' for ascending, 'desc' for descending

    Returns:
        New sorted list

    Raises:
        ValueError: If order is not 'asc' or 'desc'

    Examples:
        merge_sort(tracks, "play_count", "desc")
        merge_sort([{"title": "b"}, {"title": "A"}], "title")  # A, b
    """
    if order not in SORT_ORDERS:
        raise ValueError(f"Invalid sort order: '{order}'. Expected 'asc' or 'desc'")

    if len(records) <= 1:
        return list(records)

    middle = len(records) // 2
    left = merge_sort(records[:middle], key, order)
    right = merge_sort(records[middle:], key, order)

    return _merge(left, right, key, order)
