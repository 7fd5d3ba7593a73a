"""
Pydantic schemas for catalog snapshots.

Snapshots arrive from the catalog and schedule stores as JSON using either
the stores' camelCase field names or snake_case. These models validate them
at the boundary and convert them into the immutable domain objects the
algorithms work on.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Literal, Optional, Union

from loguru import logger
from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from .domain.exceptions import SnapshotError
from .domain.library.models import GENRES, Mood, Track
from .domain.schedule.models import ScheduleRule

TIME_REGEX = r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$"


def _to_str_id(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class TrackPayload(BaseModel):
    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    title: str = Field(min_length=1)
    artist: str = Field(min_length=1)
    duration: float = Field(default=0.0, ge=0)
    genre: str = Field(validation_alias=AliasChoices("genre", "category"))
    play_count: int = Field(
        default=0, ge=0, validation_alias=AliasChoices("play_count", "playCount")
    )
    tempo: Optional[float] = Field(default=None, ge=0)
    energy: Optional[float] = Field(default=None, ge=0, le=1)
    valence: Optional[float] = Field(default=None, ge=0, le=1)
    mood: Optional[Mood] = None
    created_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("created_at", "createdAt")
    )

    model_config = {"frozen": True}

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return _to_str_id(value)

    @field_validator("title", "artist", "genre", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("genre")
    @classmethod
    def check_genre(cls, value: str) -> str:
        if value not in GENRES:
            raise ValueError(f"Invalid genre '{value}'. Valid genres are: {', '.join(GENRES)}")
        return value

    @model_validator(mode="after")
    def check_features(self) -> "TrackPayload":
        present = [v is not None for v in (self.tempo, self.energy, self.valence)]
        if any(present) and not all(present):
            raise ValueError("tempo, energy and valence must be given together or not at all")
        return self

    def to_domain(self) -> Track:
        return Track(
            id=self.id,
            title=self.title,
            artist=self.artist,
            duration=self.duration,
            genre=self.genre,
            play_count=self.play_count,
            tempo=self.tempo,
            energy=self.energy,
            valence=self.valence,
            mood=self.mood.value if self.mood else None,
            created_at=self.created_at,
        )


class ScheduleRulePayload(BaseModel):
    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    owner_id: str = Field(validation_alias=AliasChoices("owner_id", "userId", "user_id"))
    name: str = Field(min_length=1)
    start: str = Field(pattern=TIME_REGEX)
    end: str = Field(pattern=TIME_REGEX)
    days_of_week: list[int] = Field(
        min_length=1, validation_alias=AliasChoices("days_of_week", "daysOfWeek")
    )
    kind: Literal["playlist", "mood"] = Field(validation_alias=AliasChoices("kind", "type"))
    playlist_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("playlist_id", "playlistId")
    )
    mood: Optional[Mood] = None
    priority: int = Field(default=1, ge=1)
    is_active: bool = Field(
        default=True, validation_alias=AliasChoices("is_active", "isActive")
    )

    model_config = {"frozen": True}

    @field_validator("id", "owner_id", "playlist_id", mode="before")
    @classmethod
    def coerce_ids(cls, value: Any) -> Any:
        return _to_str_id(value)

    @model_validator(mode="before")
    @classmethod
    def flatten_time_range(cls, data: Any) -> Any:
        # Stores nest the window as {"timeRange": {"start": ..., "end": ...}}
        if isinstance(data, dict) and isinstance(data.get("timeRange"), dict):
            data = dict(data)
            time_range = data.pop("timeRange")
            data.setdefault("start", time_range.get("start"))
            data.setdefault("end", time_range.get("end"))
        return data

    @field_validator("days_of_week")
    @classmethod
    def check_days(cls, days: list[int]) -> list[int]:
        if any(day < 0 or day > 6 for day in days):
            raise ValueError("Days must be between 0 (Sunday) and 6 (Saturday)")
        return days

    @model_validator(mode="after")
    def check_target(self) -> "ScheduleRulePayload":
        if self.kind == "playlist" and not self.playlist_id:
            raise ValueError("playlistId is required when type is 'playlist'")
        if self.kind == "mood" and self.mood is None:
            raise ValueError("mood is required when type is 'mood'")
        return self

    def to_domain(self) -> ScheduleRule:
        return ScheduleRule(
            id=self.id,
            owner_id=self.owner_id,
            name=self.name,
            start=self.start,
            end=self.end,
            days_of_week=frozenset(self.days_of_week),
            kind=self.kind,
            playlist_id=self.playlist_id,
            mood=self.mood.value if self.mood else None,
            priority=self.priority,
            is_active=self.is_active,
        )


class SnapshotPayload(BaseModel):
    tracks: list[TrackPayload] = Field(default_factory=list)
    schedules: list[ScheduleRulePayload] = Field(default_factory=list)


@dataclass(frozen=True)
class Snapshot:
    """Validated catalog snapshot as domain objects."""

    tracks: list[Track] = field(default_factory=list)
    schedules: list[ScheduleRule] = field(default_factory=list)


def parse_snapshot(data: Union[str, bytes, dict[str, Any]]) -> Snapshot:
    """Validate raw snapshot data (JSON text or an already-decoded dict).

    Raises:
        pydantic.ValidationError: If the data does not match the schema
    """
    if isinstance(data, (str, bytes)):
        payload = SnapshotPayload.model_validate_json(data)
    else:
        payload = SnapshotPayload.model_validate(data)

    return Snapshot(
        tracks=[t.to_domain() for t in payload.tracks],
        schedules=[s.to_domain() for s in payload.schedules],
    )


def load_snapshot(path: Union[str, Path]) -> Snapshot:
    """Load and validate a JSON catalog snapshot file.

    Raises:
        SnapshotError: If the file cannot be read or fails validation
    """
    snapshot_path = Path(path).expanduser()
    try:
        raw = snapshot_path.read_bytes()
    except OSError as e:
        raise SnapshotError(str(snapshot_path), f"Cannot read snapshot {snapshot_path}: {e}") from e

    try:
        snapshot = parse_snapshot(raw)
    except ValidationError as e:
        raise SnapshotError(
            str(snapshot_path),
            f"Invalid snapshot {snapshot_path}: {e.error_count()} error(s)\n{e}",
        ) from e

    logger.info(
        f"Loaded snapshot {snapshot_path}: {len(snapshot.tracks)} tracks, "
        f"{len(snapshot.schedules)} schedules"
    )
    return snapshot
