"""Domain models for crying sessions."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID


class Intensity(StrEnum):
    """How hard a session was."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


@dataclass(frozen=True)
class CryLogRecord:
    """Represents a persisted crying session."""

    id: UUID
    owner_id: UUID
    day: date
    start_time: str
    duration_minutes: int
    intensity: Intensity
    mood_after: str
    reason: str
    estimated_volume_ml: float
    created_at: datetime | None = None


@dataclass(frozen=True)
class CryLogDraft:
    """Validated, normalized fields for a new session."""

    day: date
    start_time: str
    duration_minutes: int
    intensity: Intensity
    mood_after: str
    reason: str


@dataclass(frozen=True)
class CryLogChanges:
    """Validated partial update of the mutable session fields."""

    duration_minutes: int | None = None
    intensity: Intensity | None = None
    mood_after: str | None = None
    reason: str | None = None

    def is_empty(self) -> bool:
        """Return True when no field is being changed."""
        return (
            self.duration_minutes is None
            and self.intensity is None
            and self.mood_after is None
            and self.reason is None
        )

    def affects_volume(self) -> bool:
        """Return True when the estimated volume must be re-derived."""
        return self.duration_minutes is not None or self.intensity is not None
