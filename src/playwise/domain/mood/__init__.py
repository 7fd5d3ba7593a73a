"""
Mood domain module.

Provides heuristic audio feature estimation and rule-based mood
classification, plus the batch helpers built on them.
"""

from .classifier import (
    DEFAULT_MOOD,
    GENRE_MOOD_BUCKETS,
    MOOD_RULES,
    MoodAssignment,
    MoodBackfillResult,
    MoodRule,
    assign_moods,
    classify_by_features,
    classify_by_genre,
    detect_mood,
    filter_by_mood,
)
from .features import (
    DEFAULT_FEATURES,
    GENRE_FEATURES,
    estimate_energy,
    estimate_features,
    estimate_tempo,
    estimate_valence,
)

__all__ = [
    # Feature estimation
    "DEFAULT_FEATURES",
    "GENRE_FEATURES",
    "estimate_features",
    "estimate_tempo",
    "estimate_energy",
    "estimate_valence",
    # Classification
    "DEFAULT_MOOD",
    "GENRE_MOOD_BUCKETS",
    "MOOD_RULES",
    "MoodRule",
    "classify_by_genre",
    "classify_by_features",
    "detect_mood",
    # Batch helpers
    "MoodAssignment",
    "MoodBackfillResult",
    "assign_moods",
    "filter_by_mood",
]
