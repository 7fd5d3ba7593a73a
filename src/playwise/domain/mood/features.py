"""
Heuristic audio feature estimation.

Maps a genre label to typical tempo, energy and valence values. Nothing is
measured from audio; the numbers are rule-of-thumb values per genre so that
mood classification has something to work with before real analysis exists.
"""

from types import MappingProxyType
from typing import Mapping, Optional

from ..library.models import AudioFeatures

# Genre -> typical features (BPM, energy 0-1, valence 0-1)
GENRE_FEATURES: Mapping[str, AudioFeatures] = MappingProxyType(
    {
        "Pop": AudioFeatures(tempo=120, energy=0.8, valence=0.75),
        "Rock": AudioFeatures(tempo=130, energy=0.9, valence=0.65),
        "Hip Hop": AudioFeatures(tempo=95, energy=0.7, valence=0.6),
        "Jazz": AudioFeatures(tempo=110, energy=0.5, valence=0.55),
        "Electronic": AudioFeatures(tempo=128, energy=0.85, valence=0.8),
        "Classical": AudioFeatures(tempo=90, energy=0.4, valence=0.5),
        "Country": AudioFeatures(tempo=115, energy=0.7, valence=0.7),
        "R&B": AudioFeatures(tempo=100, energy=0.6, valence=0.6),
        "Indie": AudioFeatures(tempo=85, energy=0.55, valence=0.35),
    }
)

# Moderate values used for any genre missing from the table
DEFAULT_FEATURES = AudioFeatures(tempo=110, energy=0.6, valence=0.6)

_FEATURES_BY_FOLDED_GENRE: Mapping[str, AudioFeatures] = MappingProxyType(
    {genre.casefold(): features for genre, features in GENRE_FEATURES.items()}
)


def estimate_features(genre: Optional[str]) -> AudioFeatures:
    """
    Estimate tempo, energy and valence for a genre.

    Total function: unknown or empty genres get DEFAULT_FEATURES.

    Examples:
        estimate_features("Pop")      # AudioFeatures(tempo=120, energy=0.8, valence=0.75)
        estimate_features("Polka")    # AudioFeatures(tempo=110, energy=0.6, valence=0.6)
    """
    if not genre:
        return DEFAULT_FEATURES
    return _FEATURES_BY_FOLDED_GENRE.get(genre.strip().casefold(), DEFAULT_FEATURES)


def estimate_tempo(genre: Optional[str]) -> float:
    """Estimated tempo in BPM."""
    return estimate_features(genre).tempo


def estimate_energy(genre: Optional[str]) -> float:
    """Estimated energy on a 0-1 scale (higher = more intense)."""
    return estimate_features(genre).energy


def estimate_valence(genre: Optional[str]) -> float:
    """Estimated valence on a 0-1 scale (higher = more positive)."""
    return estimate_features(genre).valence
