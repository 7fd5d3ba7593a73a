"""
Cross-cutting utilities for Playwise.

Contains:
- records: field access over dataclasses, objects and mappings
"""

from .records import get_field

__all__ = [
    'get_field',
]
