"""
Recommendation domain module.

Ranks catalog tracks by blended popularity and genre preference.
"""

from .scorer import (
    DEFAULT_WEIGHTS,
    RecommendationWeights,
    RecommendedTrack,
    derive_top_genre,
    genre_matches,
    normalized_play_count,
    rank_tracks,
    recommend,
    score_track,
)

__all__ = [
    "DEFAULT_WEIGHTS",
    "RecommendationWeights",
    "RecommendedTrack",
    "normalized_play_count",
    "genre_matches",
    "score_track",
    "rank_tracks",
    "recommend",
    "derive_top_genre",
]
