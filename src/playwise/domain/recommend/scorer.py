"""
Popularity/preference recommendation scoring.

Pure functional implementation with no side effects or storage access.

Score = play popularity (60%) + preferred-genre match (40%), where play
popularity is the play count normalized by the most played track in the
candidate set. Without a preferred genre the genre weight is redistributed
onto the play term, so ranking degrades to pure popularity. Liked tracks can
optionally earn a small bonus on top.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Any, Collection, NamedTuple, Optional, Sequence

from loguru import logger

from ...utils.records import get_field
from ..search.sorting import merge_sort


@dataclass(frozen=True)
class RecommendationWeights:
    """Blend weights for recommendation scoring."""

    play: float = 0.6
    genre: float = 0.4
    liked: float = 0.1  # Only applied when a liked set is passed

    def validate(self) -> None:
        """Validate weight values.

        Raises:
            ValueError: If a weight is negative or the play weight is zero
        """
        if min(self.play, self.genre, self.liked) < 0:
            raise ValueError(f"Recommendation weights must be non-negative: {self}")
        if self.play == 0:
            raise ValueError("Play weight must be greater than zero")


DEFAULT_WEIGHTS = RecommendationWeights()


class RecommendedTrack(NamedTuple):
    """A candidate track paired with its recommendation score."""

    track: Any
    score: float


def _play_count(track: Any) -> int:
    return get_field(track, "play_count") or 0


def normalized_play_count(play_count: int, max_play_count: int) -> float:
    """Play count scaled into 0-1 against the most played track."""
    return min(play_count / max(max_play_count, 1), 1.0)


def genre_matches(track: Any, preferred_genre: Optional[str]) -> bool:
    """Case-insensitive genre equality."""
    genre = get_field(track, "genre")
    if not genre or not preferred_genre:
        return False
    return genre.lower() == preferred_genre.lower()


def score_track(
    track: Any,
    max_play_count: int,
    preferred_genre: Optional[str] = None,
    liked: Optional[Collection[Any]] = None,
    weights: RecommendationWeights = DEFAULT_WEIGHTS,
) -> float:
    """
    Score one track for recommendation.

    Args:
        track: Track, object or dict with 'play_count' and 'genre'
        max_play_count: Highest play count in the candidate set
        preferred_genre: Genre the listener prefers (None or '' = no preference)
        liked: Optional ids of tracks the listener liked
        weights: Blend weights

    Returns:
        Score; without liked bonus it lies in 0.0-1.0

    Examples:
        score_track({"play_count": 50, "genre": "Pop"}, 100)         # ~0.5 (0.3 + 0.2 redistributed)
        score_track({"play_count": 50, "genre": "Pop"}, 100, "pop")  # ~0.7 (0.3 + 0.4 genre match)
    """
    popularity = normalized_play_count(_play_count(track), max_play_count)
    play_score = weights.play * popularity

    if preferred_genre:
        genre_score = weights.genre if genre_matches(track, preferred_genre) else 0.0
    else:
        # Genre weight moves onto the play term in proportion to it
        genre_score = weights.genre * play_score / weights.play

    liked_score = 0.0
    if liked and get_field(track, "id") in liked:
        liked_score = weights.liked

    return play_score + genre_score + liked_score


def rank_tracks(
    tracks: Sequence[Any],
    preferred_genre: Optional[str] = None,
    exclude: Optional[Collection[Any]] = None,
    liked: Optional[Collection[Any]] = None,
    weights: RecommendationWeights = DEFAULT_WEIGHTS,
) -> list[RecommendedTrack]:
    """
    Score every candidate and order by descending score.

    Excluded track ids are dropped before scoring. Ties keep input order.
    """
    candidates = [
        t for t in tracks if not exclude or get_field(t, "id") not in exclude
    ]
    if not candidates:
        return []

    max_play_count = max(max(_play_count(t) for t in candidates), 1)
    scored = [
        RecommendedTrack(
            t, score_track(t, max_play_count, preferred_genre, liked, weights)
        )
        for t in candidates
    ]
    return merge_sort(scored, "score", "desc")


def recommend(
    tracks: Sequence[Any],
    preferred_genre: Optional[str] = None,
    limit: int = 10,
    exclude: Optional[Collection[Any]] = None,
    liked: Optional[Collection[Any]] = None,
    weights: RecommendationWeights = DEFAULT_WEIGHTS,
) -> list[Any]:
    """
    Recommend up to limit tracks, best first.

    Args:
        tracks: Candidate tracks
        preferred_genre: Genre to favour (None = pure popularity)
        limit: Maximum number of tracks to return
        exclude: Track ids to leave out (e.g., what is already queued)
        liked: Track ids the listener liked
        weights: Blend weights

    Returns:
        List of tracks (empty for empty input or non-positive limit)
    """
    if limit <= 0:
        return []

    ranked = rank_tracks(tracks, preferred_genre, exclude, liked, weights)
    logger.debug(
        f"Recommend: {len(ranked)} candidates, genre={preferred_genre!r}, limit={limit}"
    )
    return [item.track for item in ranked[:limit]]


def derive_top_genre(liked_tracks: Sequence[Any]) -> Optional[str]:
    """
    Find the most frequent genre among a listener's liked tracks.

    Genres are compared case-insensitively; ties go to the genre seen first.
    The label is returned as first seen.

    Returns:
        Genre label, or None when no liked track has a genre
    """
    counts: Counter[str] = Counter()
    labels: dict[str, str] = {}

    for track in liked_tracks:
        genre = get_field(track, "genre")
        if not genre or not isinstance(genre, str):
            continue
        key = genre.lower()
        counts[key] += 1
        labels.setdefault(key, genre)

    if not counts:
        return None

    # Counter.most_common keeps insertion order among equal counts
    top_key, _ = counts.most_common(1)[0]
    return labels[top_key]
