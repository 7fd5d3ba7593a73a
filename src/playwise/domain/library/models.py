"""
Catalog domain models.

Contains data structures for representing tracks, moods and heuristic
audio features. Tracks are immutable snapshots handed over by the catalog
store; the core derives values from them but never writes them back.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import NamedTuple, Optional


# Fixed genre enumeration accepted by the catalog store
GENRES: tuple[str, ...] = (
    "Pop",
    "Rock",
    "Hip Hop",
    "Jazz",
    "Electronic",
    "Classical",
    "Country",
    "R&B",
    "Indie",
)


class Mood(str, Enum):
    """Four-label mood taxonomy.

    Members compare equal to their plain-string labels, so
    ``Mood.HAPPY == "Happy"`` holds.
    """

    HAPPY = "Happy"
    SAD = "Sad"
    RELAXED = "Relaxed"
    FOCUSED = "Focused"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, label: Optional[str]) -> Optional["Mood"]:
        """Return the Mood for a label, or None if the label is not a mood."""
        if label is None:
            return None
        try:
            return cls(label)
        except ValueError:
            return None


class AudioFeatures(NamedTuple):
    """Heuristic audio features (estimated from genre, not measured)."""

    tempo: float  # BPM
    energy: float  # 0-1
    valence: float  # 0-1


@dataclass(frozen=True)
class Track:
    """Represents a playable catalog track.

    Features are either all present or all absent; ``has_features`` tells
    which case applies.
    """

    id: str
    title: str
    artist: str
    duration: float = 0.0  # seconds
    genre: str = ""
    play_count: int = 0
    tempo: Optional[float] = None
    energy: Optional[float] = None
    valence: Optional[float] = None
    mood: Optional[str] = None  # 'Happy' | 'Sad' | 'Relaxed' | 'Focused'
    created_at: Optional[datetime] = None

    @property
    def has_features(self) -> bool:
        return (
            self.tempo is not None
            and self.energy is not None
            and self.valence is not None
        )

    @property
    def features(self) -> Optional[AudioFeatures]:
        if not self.has_features:
            return None
        return AudioFeatures(self.tempo, self.energy, self.valence)
