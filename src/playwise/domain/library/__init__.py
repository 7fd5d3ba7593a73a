"""
Library domain module.

Contains the catalog data model: tracks, moods and heuristic audio features.
"""

from .models import GENRES, AudioFeatures, Mood, Track

__all__ = [
    "GENRES",
    "AudioFeatures",
    "Mood",
    "Track",
]
