"""
Rule-based mood classification.

Two entry points:
- classify_by_genre: substring buckets over the genre label (always answers)
- classify_by_features: ordered decision list over tempo/energy/valence

The feature rules overlap on purpose and are evaluated top to bottom with
the first match winning, so MOOD_RULES order is part of the contract.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, NamedTuple, Optional, Sequence

from loguru import logger

from ...utils.records import get_field
from ..exceptions import InvalidInputError
from ..library.models import AudioFeatures, Mood
from ..search.sorting import merge_sort
from .features import estimate_features

# Genre keyword buckets, checked in this order
GENRE_MOOD_BUCKETS: tuple[tuple[Mood, tuple[str, ...]], ...] = (
    (
        Mood.HAPPY,
        ("pop", "dance", "electronic", "edm", "rock", "hip-hop", "hip hop",
         "rap", "reggae", "country", "funk", "disco"),
    ),
    (
        Mood.SAD,
        ("blues", "ballad", "indie", "alternative", "emo", "goth", "punk", "metal"),
    ),
    (
        Mood.RELAXED,
        ("jazz", "acoustic", "ambient", "chill", "lounge", "soul", "r&b", "rnb", "folk"),
    ),
    (
        Mood.FOCUSED,
        ("instrumental", "lo-fi", "lofi", "classical", "piano", "study", "background"),
    ),
)

DEFAULT_MOOD = Mood.HAPPY


class MoodRule(NamedTuple):
    """One step of the feature decision list."""

    name: str
    predicate: Callable[[float, float, float], bool]  # (tempo, energy, valence)
    mood: Mood


MOOD_RULES: tuple[MoodRule, ...] = (
    MoodRule("very-low-valence", lambda t, e, v: v <= 0.3, Mood.SAD),
    MoodRule("low-valence-slow", lambda t, e, v: v <= 0.4 and t <= 90, Mood.SAD),
    MoodRule(
        "low-energy-moderate-tempo",
        lambda t, e, v: e <= 0.45 and 70 <= t <= 120,
        Mood.FOCUSED,
    ),
    MoodRule(
        "neutral-valence-calm",
        lambda t, e, v: 0.4 <= v <= 0.7 and e <= 0.7 and 80 <= t <= 115,
        Mood.RELAXED,
    ),
    MoodRule("high-valence", lambda t, e, v: v >= 0.75, Mood.HAPPY),
    MoodRule(
        "positive-energetic-fast",
        lambda t, e, v: v >= 0.6 and e >= 0.65 and t >= 100,
        Mood.HAPPY,
    ),
    MoodRule("positive-very-energetic", lambda t, e, v: v >= 0.6 and e >= 0.85, Mood.HAPPY),
    MoodRule(
        "moderate-energy-steady-tempo",
        lambda t, e, v: e <= 0.7 and 80 <= t <= 120,
        Mood.FOCUSED,
    ),
)


def classify_by_genre(genre: Optional[str]) -> Mood:
    """
    Classify mood from a genre label by keyword buckets.

    Happy keywords are checked first, then Sad, Relaxed and Focused; a genre
    matching none of them is Happy.

    Examples:
        classify_by_genre("Indie")       # Mood.SAD
        classify_by_genre("Classical")   # Mood.FOCUSED
        classify_by_genre("Polka")       # Mood.HAPPY (default)
    """
    normalized = (genre or "").lower().strip()

    for mood, keywords in GENRE_MOOD_BUCKETS:
        if any(keyword in normalized for keyword in keywords):
            return mood

    return DEFAULT_MOOD


def classify_by_features(
    tempo: Optional[float], energy: Optional[float], valence: Optional[float]
) -> Mood:
    """
    Classify mood from heuristic audio features.

    Args:
        tempo: Beats per minute
        energy: Intensity, 0-1
        valence: Positivity, 0-1

    Returns:
        Mood of the first rule in MOOD_RULES that matches, else Happy

    Raises:
        InvalidInputError: If any feature is missing

    Examples:
        classify_by_features(90, 0.4, 0.25)   # Mood.SAD
        classify_by_features(95, 0.4, 0.5)    # Mood.FOCUSED
        classify_by_features(130, 0.9, 0.65)  # Mood.HAPPY
    """
    missing = [
        name
        for name, value in (("tempo", tempo), ("energy", energy), ("valence", valence))
        if value is None
    ]
    if missing:
        raise InvalidInputError(
            f"Mood classification needs tempo, energy and valence; missing: {', '.join(missing)}"
        )

    for rule in MOOD_RULES:
        if rule.predicate(tempo, energy, valence):
            return rule.mood

    return DEFAULT_MOOD


def _track_features(track: Any) -> Optional[AudioFeatures]:
    tempo = get_field(track, "tempo")
    energy = get_field(track, "energy")
    valence = get_field(track, "valence")
    if tempo is None and energy is None and valence is None:
        return None
    return AudioFeatures(tempo, energy, valence)


def detect_mood(track: Any) -> Mood:
    """
    Resolve the mood for a track.

    An authored mood wins. Otherwise tracks carrying features are classified
    by features, and tracks without any are classified by genre.

    Raises:
        InvalidInputError: If the track carries a partial feature set
    """
    authored = Mood.parse(get_field(track, "mood"))
    if authored is not None:
        return authored

    features = _track_features(track)
    if features is not None:
        return classify_by_features(*features)

    return classify_by_genre(get_field(track, "genre"))


@dataclass(frozen=True)
class MoodAssignment:
    """Derived mood (and features) for one track."""

    track_id: Any
    mood: Mood
    features: Optional[AudioFeatures] = None  # Set when features were estimated


@dataclass
class MoodBackfillResult:
    """Outcome of a mood backfill pass."""

    assignments: list[MoodAssignment] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    skipped: int = 0  # Tracks left alone because they already had a mood

    @property
    def features_estimated(self) -> int:
        return sum(1 for a in self.assignments if a.features is not None)


def assign_moods(
    tracks: Sequence[Any], overwrite: bool = True, estimate: bool = True
) -> MoodBackfillResult:
    """
    Compute moods (and optionally estimated features) for a batch of tracks.

    Nothing is mutated; callers persist the returned assignments.

    Args:
        tracks: Catalog snapshot
        overwrite: Recompute tracks that already have a valid mood
        estimate: Estimate features from genre and classify from those;
            when False, existing features are used instead

    Returns:
        MoodBackfillResult with one assignment per updated track and a
        message per track that could not be classified
    """
    result = MoodBackfillResult()

    for track in tracks:
        track_id = get_field(track, "id")

        if not overwrite and Mood.parse(get_field(track, "mood")) is not None:
            result.skipped += 1
            continue

        genre = get_field(track, "genre")
        try:
            if estimate and genre:
                features = estimate_features(genre)
                mood = classify_by_features(*features)
                result.assignments.append(MoodAssignment(track_id, mood, features))
                continue

            existing = _track_features(track)
            if existing is None:
                result.errors.append(f"Track {track_id} has no genre or features")
                continue
            mood = classify_by_features(*existing)
            result.assignments.append(MoodAssignment(track_id, mood))
        except InvalidInputError as e:
            result.errors.append(f"Failed to detect mood for track {track_id}: {e}")

    if result.errors:
        logger.warning(
            f"Mood backfill: {len(result.errors)} of {len(tracks)} tracks could not be classified"
        )
    logger.info(
        f"Mood backfill: {len(result.assignments)} assigned, "
        f"{result.features_estimated} with estimated features, {result.skipped} skipped"
    )
    return result


def filter_by_mood(
    tracks: Sequence[Any],
    mood: str,
    limit: int = 20,
    auto_detect: bool = True,
) -> list[Any]:
    """
    Select tracks for a mood, most played first.

    Tracks already labelled with the mood come first in catalog order; when
    auto_detect is on and there are fewer than limit of them, unlabelled
    tracks whose genre classifies to the mood top the list up.

    Raises:
        InvalidInputError: If mood is not one of the four labels
    """
    wanted = Mood.parse(mood)
    if wanted is None:
        valid = ", ".join(m.value for m in Mood)
        raise InvalidInputError(f"Invalid mood: '{mood}'. Must be one of: {valid}")

    if limit <= 0:
        return []

    selected = [t for t in tracks if get_field(t, "mood") == wanted.value]

    if auto_detect and len(selected) < limit:
        for track in tracks:
            if len(selected) >= limit:
                break
            if get_field(track, "mood"):
                continue
            if classify_by_genre(get_field(track, "genre")) == wanted:
                selected.append(track)

    by_plays = merge_sort(selected, "play_count", "desc")
    return by_plays[:limit]
