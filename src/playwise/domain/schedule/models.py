"""
Schedule domain models.

Contains the data structure for time-based playback rules. Rules are owned
and persisted by the schedule store; the scheduler only reads snapshots.
"""

from dataclasses import dataclass
from typing import Any, FrozenSet, Optional

from ..exceptions import InvalidScheduleError
from ..library.models import Mood
from .windows import validate_time_format

SCHEDULE_KINDS = ("playlist", "mood")

# 0 = Sunday ... 6 = Saturday
WEEKDAYS = range(0, 7)


@dataclass(frozen=True)
class ScheduleRule:
    """Represents a time-and-day bounded playback directive.

    A rule of kind 'playlist' points at a playlist; a rule of kind 'mood'
    names a mood. When several rules match the current moment, the one with
    the highest priority wins.
    """

    id: Any
    owner_id: Any
    name: str
    start: str  # "HH:MM"
    end: str  # "HH:MM"
    days_of_week: FrozenSet[int]
    kind: str  # 'playlist' | 'mood'
    playlist_id: Optional[Any] = None  # Required when kind == 'playlist'
    mood: Optional[str] = None  # Required when kind == 'mood'
    priority: int = 1
    is_active: bool = True

    def __post_init__(self) -> None:
        # Accept any iterable of days but store an immutable set
        object.__setattr__(self, "days_of_week", frozenset(self.days_of_week))
        self.validate()

    def validate(self) -> None:
        """Check rule invariants.

        Raises:
            InvalidScheduleError: If times, days, kind or priority are invalid
        """
        validate_time_format(self.start)
        validate_time_format(self.end)

        if not self.days_of_week:
            raise InvalidScheduleError(f"Schedule '{self.name}' has no days of week")
        invalid_days = sorted(d for d in self.days_of_week if d not in WEEKDAYS)
        if invalid_days:
            raise InvalidScheduleError(
                f"Days must be between 0 (Sunday) and 6 (Saturday), got {invalid_days}"
            )

        if self.kind not in SCHEDULE_KINDS:
            raise InvalidScheduleError(
                f"Invalid schedule kind: '{self.kind}'. Valid kinds are: {SCHEDULE_KINDS}"
            )
        if self.kind == "playlist" and self.playlist_id is None:
            raise InvalidScheduleError("playlist_id is required when kind is 'playlist'")
        if self.kind == "mood" and Mood.parse(self.mood) is None:
            raise InvalidScheduleError("mood is required when kind is 'mood'")

        if isinstance(self.priority, bool) or not isinstance(self.priority, int):
            raise InvalidScheduleError(f"Priority must be an integer, got {self.priority!r}")
        if self.priority < 1:
            raise InvalidScheduleError("Priority must be at least 1")
