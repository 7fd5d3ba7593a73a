"""Tests for rule-based mood classification."""

import pytest

from playwise.domain.exceptions import InvalidInput, InvalidInputError, PlaywiseError
from playwise.domain.library.models import Mood, Track
from playwise.domain.mood.classifier import (
    MOOD_RULES,
    MoodAssignment,
    assign_moods,
    classify_by_features,
    classify_by_genre,
    detect_mood,
    filter_by_mood,
)
from playwise.domain.mood.features import DEFAULT_FEATURES, estimate_features


class TestClassifyByGenre:
    """Tests for classify_by_genre function."""

    @pytest.mark.parametrize(
        "genre,expected",
        [
            ("Pop", Mood.HAPPY),
            ("Rock", Mood.HAPPY),
            ("Hip Hop", Mood.HAPPY),
            ("Electronic", Mood.HAPPY),
            ("Country", Mood.HAPPY),
            ("Indie", Mood.SAD),
            ("Jazz", Mood.RELAXED),
            ("R&B", Mood.RELAXED),
            ("Classical", Mood.FOCUSED),
        ],
    )
    def test_catalog_genres(self, genre: str, expected: Mood) -> None:
        """Test every catalog genre lands in its bucket."""
        assert classify_by_genre(genre) == expected

    def test_substring_membership(self) -> None:
        """Test buckets match keywords inside longer labels."""
        assert classify_by_genre("Delta Blues") == Mood.SAD
        assert classify_by_genre("lo-fi beats") == Mood.FOCUSED

    def test_happy_bucket_checked_first(self) -> None:
        """Test a label matching two buckets takes the earlier one."""
        assert classify_by_genre("Indie Pop") == Mood.HAPPY

    @pytest.mark.parametrize("genre", ["Polka", "", None])
    def test_default_is_happy(self, genre) -> None:
        """Test unmatched genres default to Happy."""
        assert classify_by_genre(genre) == Mood.HAPPY

    def test_returns_plain_label(self) -> None:
        """Test moods compare equal to their string labels."""
        assert classify_by_genre("Jazz") == "Relaxed"
        assert str(classify_by_genre("Jazz")) == "Relaxed"


class TestClassifyByFeatures:
    """Tests for classify_by_features function."""

    def test_documented_examples(self) -> None:
        """Test the reference inputs."""
        assert classify_by_features(90, 0.4, 0.25) == Mood.SAD
        assert classify_by_features(95, 0.4, 0.5) == Mood.FOCUSED
        assert classify_by_features(130, 0.9, 0.65) == Mood.HAPPY

    def test_rule_count_and_order(self) -> None:
        """Test the decision list is pinned in order."""
        assert [rule.name for rule in MOOD_RULES] == [
            "very-low-valence",
            "low-valence-slow",
            "low-energy-moderate-tempo",
            "neutral-valence-calm",
            "high-valence",
            "positive-energetic-fast",
            "positive-very-energetic",
            "moderate-energy-steady-tempo",
        ]
        assert [rule.mood for rule in MOOD_RULES] == [
            Mood.SAD,
            Mood.SAD,
            Mood.FOCUSED,
            Mood.RELAXED,
            Mood.HAPPY,
            Mood.HAPPY,
            Mood.HAPPY,
            Mood.FOCUSED,
        ]

    def test_very_low_valence_beats_energy(self) -> None:
        """Test rule 1 wins even for fast energetic tracks."""
        assert classify_by_features(130, 0.9, 0.3) == Mood.SAD

    def test_low_valence_slow(self) -> None:
        """Test rule 2 for slow, slightly negative tracks."""
        assert classify_by_features(85, 0.5, 0.35) == Mood.SAD

    def test_low_valence_fast_is_not_sad(self) -> None:
        """Test rule 2 requires a slow tempo."""
        assert classify_by_features(100, 0.9, 0.35) != Mood.SAD

    def test_focused_checked_before_relaxed(self) -> None:
        """Test an input matching rules 3 and 4 resolves to Focused."""
        tempo, energy, valence = 100, 0.4, 0.5
        assert MOOD_RULES[2].predicate(tempo, energy, valence)
        assert MOOD_RULES[3].predicate(tempo, energy, valence)
        assert classify_by_features(tempo, energy, valence) == Mood.FOCUSED

    def test_relaxed(self) -> None:
        """Test rule 4 for moderate tracks."""
        assert classify_by_features(100, 0.6, 0.6) == Mood.RELAXED

    def test_relaxed_checked_before_steady_tempo(self) -> None:
        """Test an input matching rules 4 and 8 resolves to Relaxed."""
        assert classify_by_features(110, 0.5, 0.55) == Mood.RELAXED

    def test_high_valence(self) -> None:
        """Test rule 5 for very positive tracks outside the calm window."""
        assert classify_by_features(60, 0.3, 0.8) == Mood.HAPPY

    def test_moderate_energy_steady_tempo(self) -> None:
        """Test rule 8 catches steady tracks that missed earlier rules."""
        assert classify_by_features(118, 0.7, 0.55) == Mood.FOCUSED

    def test_default_happy(self) -> None:
        """Test inputs matching no rule default to Happy."""
        assert classify_by_features(140, 0.5, 0.5) == Mood.HAPPY

    @pytest.mark.parametrize(
        "tempo,energy,valence,missing",
        [
            (None, 0.5, 0.5, "tempo"),
            (100, None, 0.5, "energy"),
            (100, 0.5, None, "valence"),
            (None, None, None, "tempo, energy, valence"),
        ],
    )
    def test_missing_feature_raises(self, tempo, energy, valence, missing) -> None:
        """Test any missing feature is an InvalidInput error."""
        with pytest.raises(InvalidInputError, match=f"missing: {missing}$"):
            classify_by_features(tempo, energy, valence)

    def test_invalid_input_hierarchy(self) -> None:
        """Test the error is catchable as ValueError and under its short name."""
        assert InvalidInput is InvalidInputError
        with pytest.raises(ValueError):
            classify_by_features(None, 0.5, 0.5)
        with pytest.raises(PlaywiseError):
            classify_by_features(None, 0.5, 0.5)

    @pytest.mark.parametrize(
        "genre,expected",
        [
            ("Pop", Mood.HAPPY),
            ("Rock", Mood.HAPPY),
            ("Electronic", Mood.HAPPY),
            ("Jazz", Mood.RELAXED),
            ("Country", Mood.RELAXED),
            ("Hip Hop", Mood.RELAXED),
            ("R&B", Mood.RELAXED),
            ("Classical", Mood.FOCUSED),
            ("Indie", Mood.SAD),
        ],
    )
    def test_estimated_genre_features(self, genre: str, expected: Mood) -> None:
        """Test classification of each genre's estimated features."""
        assert classify_by_features(*estimate_features(genre)) == expected


class TestDetectMood:
    """Tests for detect_mood function."""

    def test_authored_mood_wins(self) -> None:
        """Test a stored mood is returned unchanged."""
        track = Track(id="1", title="T", artist="A", genre="Pop", mood="Sad",
                      tempo=120, energy=0.8, valence=0.9)
        assert detect_mood(track) == Mood.SAD

    def test_features_before_genre(self) -> None:
        """Test tracks with features are classified by features."""
        track = Track(id="1", title="T", artist="A", genre="Pop",
                      tempo=95, energy=0.4, valence=0.5)
        assert detect_mood(track) == Mood.FOCUSED

    def test_genre_when_no_features(self) -> None:
        """Test tracks without features are classified by genre."""
        track = Track(id="1", title="T", artist="A", genre="Classical")
        assert detect_mood(track) == Mood.FOCUSED

    def test_invalid_stored_mood_ignored(self) -> None:
        """Test an unknown stored label falls through to classification."""
        assert detect_mood({"genre": "Indie", "mood": "Angry"}) == Mood.SAD

    def test_partial_features_raise(self) -> None:
        """Test a partial feature set is rejected."""
        with pytest.raises(InvalidInputError):
            detect_mood({"genre": "Pop", "tempo": 120})

    def test_unknown_genre_paths_agree(self) -> None:
        """Test an unrecognized genre without features resolves to Happy.

        The fallback feature values themselves sit in the Relaxed window, so
        tracks without authored features are classified by genre.
        """
        assert classify_by_features(*DEFAULT_FEATURES) == Mood.RELAXED

        track = Track(id="1", title="T", artist="A", genre="Polka")
        assert detect_mood(track) == classify_by_genre("Polka") == Mood.HAPPY


class TestAssignMoods:
    """Tests for assign_moods function."""

    @pytest.fixture
    def tracks(self) -> list[Track]:
        """Tracks with and without existing moods."""
        return [
            Track(id="1", title="A", artist="X", genre="Indie"),
            Track(id="2", title="B", artist="X", genre="Pop", mood="Sad"),
            Track(id="3", title="C", artist="X", genre="Classical"),
        ]

    def test_estimates_features(self, tracks: list[Track]) -> None:
        """Test every track gets estimated features and a mood."""
        result = assign_moods(tracks)
        assert result.assignments == [
            MoodAssignment("1", Mood.SAD, estimate_features("Indie")),
            MoodAssignment("2", Mood.HAPPY, estimate_features("Pop")),
            MoodAssignment("3", Mood.FOCUSED, estimate_features("Classical")),
        ]
        assert result.features_estimated == 3
        assert result.errors == []
        assert result.skipped == 0

    def test_keep_existing(self, tracks: list[Track]) -> None:
        """Test tracks with a mood are skipped when not overwriting."""
        result = assign_moods(tracks, overwrite=False)
        assert [a.track_id for a in result.assignments] == ["1", "3"]
        assert result.skipped == 1

    def test_does_not_mutate_tracks(self, tracks: list[Track]) -> None:
        """Test input tracks keep their stored values."""
        assign_moods(tracks)
        assert tracks[0].mood is None
        assert tracks[0].tempo is None

    def test_existing_features_without_estimation(self) -> None:
        """Test stored features are used when estimation is off."""
        track = Track(id="9", title="T", artist="A", genre="Pop",
                      tempo=85, energy=0.5, valence=0.35)
        result = assign_moods([track], estimate=False)
        assert result.assignments == [MoodAssignment("9", Mood.SAD)]
        assert result.features_estimated == 0

    def test_errors_collected(self) -> None:
        """Test unclassifiable tracks are reported without stopping the batch."""
        tracks = [
            {"id": "a"},
            {"id": "b", "tempo": 100},
            {"id": "c", "genre": "Jazz"},
        ]
        result = assign_moods(tracks, estimate=False)
        assert [a.track_id for a in result.assignments] == []
        assert len(result.errors) == 3
        assert "Track a has no genre or features" in result.errors[0]
        assert "track b" in result.errors[1]

    def test_empty(self) -> None:
        """Test an empty batch."""
        result = assign_moods([])
        assert result.assignments == []
        assert result.errors == []


class TestFilterByMood:
    """Tests for filter_by_mood function."""

    @pytest.fixture
    def tracks(self) -> list[Track]:
        """Catalog mixing labelled and unlabelled tracks."""
        return [
            Track(id="a", title="A", artist="X", genre="Pop", mood="Happy", play_count=5),
            Track(id="b", title="B", artist="X", genre="Rock", play_count=50),
            Track(id="c", title="C", artist="X", genre="Indie", play_count=100),
            Track(id="d", title="D", artist="X", genre="Jazz", mood="Sad", play_count=1),
            Track(id="e", title="E", artist="X", genre="Electronic", mood="Relaxed",
                  play_count=99),
        ]

    def test_auto_detect_tops_up(self, tracks: list[Track]) -> None:
        """Test unlabelled tracks are added by genre and ordered by plays."""
        assert [t.id for t in filter_by_mood(tracks, "Happy")] == ["b", "a"]
        assert [t.id for t in filter_by_mood(tracks, "Sad")] == ["c", "d"]

    def test_labelled_only(self, tracks: list[Track]) -> None:
        """Test auto detection can be turned off."""
        assert [t.id for t in filter_by_mood(tracks, "Happy", auto_detect=False)] == ["a"]

    def test_labelled_tracks_fill_limit_first(self, tracks: list[Track]) -> None:
        """Test no top-up happens once labelled tracks reach the limit."""
        assert [t.id for t in filter_by_mood(tracks, "Happy", limit=1)] == ["a"]

    def test_other_labels_not_redetected(self, tracks: list[Track]) -> None:
        """Test a track labelled with another mood is never auto-detected."""
        assert "e" not in [t.id for t in filter_by_mood(tracks, "Happy")]

    def test_accepts_enum(self, tracks: list[Track]) -> None:
        """Test the mood can be passed as a Mood member."""
        assert [t.id for t in filter_by_mood(tracks, Mood.RELAXED)] == ["e"]

    def test_non_positive_limit(self, tracks: list[Track]) -> None:
        """Test a zero limit returns nothing."""
        assert filter_by_mood(tracks, "Happy", limit=0) == []

    def test_invalid_mood(self, tracks: list[Track]) -> None:
        """Test unknown moods are rejected."""
        with pytest.raises(InvalidInputError, match="Invalid mood"):
            filter_by_mood(tracks, "Angry")
