"""
Playback domain module.

Provides uniform shuffling for playlists and queues.
"""

from .shuffle import RandomSource, shuffle_in_place, shuffled

__all__ = [
    "RandomSource",
    "shuffle_in_place",
    "shuffled",
]
