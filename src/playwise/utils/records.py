"""
Record field access utilities.

The algorithms accept tracks as dataclasses, plain objects or dicts coming
straight from a store, so field lookups go through one helper.
"""

from collections.abc import Mapping
from typing import Any


def get_field(record: Any, name: str, default: Any = None) -> Any:
    """
    Read a field from a record regardless of its shape.

    Args:
        record: Mapping (key lookup) or any object (attribute lookup)
        name: Field name
        default: Value returned when the field is absent

    Returns:
        The field value, or default

    Example:
        get_field({"title": "Song"}, "title")  -> "Song"
        get_field(Track(id="1", title="Song", artist="A"), "title")  -> "Song"
    """
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)
