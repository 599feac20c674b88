"""Pydantic models for the cry log HTTP API."""

from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field

from weepify.domain.cry_logs import CryLogRecord
from weepify.domain.stats import CryStats, RollupBucket

# Raw JSON values; type checks happen in the validator.
RawValue = object | None
_DURATION_ALIASES = AliasChoices("duration", "durationMinutes", "duration_minutes")


class CryLogCreateRequest(BaseModel):
    """Submitted crying session; field checks happen in the validator."""

    date: RawValue = None
    start_time: RawValue = Field(
        default=None, validation_alias=AliasChoices("startTime", "start_time")
    )
    duration_minutes: RawValue = Field(
        default=None, validation_alias=_DURATION_ALIASES
    )
    mood_after: RawValue = Field(
        default=None, validation_alias=AliasChoices("moodAfter", "mood_after")
    )
    reason: RawValue = None
    intensity: RawValue = None


class CryLogUpdateRequest(BaseModel):
    """Partial update of the mutable session fields."""

    duration_minutes: RawValue = Field(
        default=None, validation_alias=_DURATION_ALIASES
    )
    intensity: RawValue = None
    mood_after: RawValue = Field(
        default=None, validation_alias=AliasChoices("moodAfter", "mood_after")
    )
    reason: RawValue = None


class CryLogOut(BaseModel):
    """Crying session as returned to clients."""

    id: UUID
    date: str
    start_time: str
    duration_minutes: int
    intensity: str
    mood_after: str
    reason: str
    estimated_volume_ml: float
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, record: CryLogRecord) -> "CryLogOut":
        return cls(
            id=record.id,
            date=record.day.isoformat(),
            start_time=record.start_time,
            duration_minutes=record.duration_minutes,
            intensity=record.intensity.value,
            mood_after=record.mood_after,
            reason=record.reason,
            estimated_volume_ml=record.estimated_volume_ml,
            created_at=record.created_at,
        )


class RollupOut(BaseModel):
    """One chart bucket."""

    period_label: str
    start: str
    end: str
    total_volume_ml: float
    session_count: int

    @classmethod
    def from_bucket(cls, bucket: RollupBucket) -> "RollupOut":
        return cls(
            period_label=bucket.period_label,
            start=bucket.start.isoformat(),
            end=bucket.end.isoformat(),
            total_volume_ml=bucket.total_volume_ml,
            session_count=bucket.session_count,
        )


class CryStatsOut(BaseModel):
    """Dashboard metrics."""

    lifetime_total_ml: float
    plants_watered: float
    rehydration_water_ml: float
    longest_streak: int
    total_sessions: int
    mood_trend: str
    therapeutic_score: int
    daily_rollup: list[RollupOut]
    weekly_rollup: list[RollupOut]
    monthly_rollup: list[RollupOut]

    @classmethod
    def from_stats(cls, stats: CryStats) -> "CryStatsOut":
        return cls(
            lifetime_total_ml=stats.lifetime_total_ml,
            plants_watered=stats.plants_watered,
            rehydration_water_ml=stats.rehydration_water_ml,
            longest_streak=stats.longest_streak,
            total_sessions=stats.total_sessions,
            mood_trend=stats.mood_trend,
            therapeutic_score=stats.therapeutic_score,
            daily_rollup=[RollupOut.from_bucket(b) for b in stats.daily_rollup],
            weekly_rollup=[RollupOut.from_bucket(b) for b in stats.weekly_rollup],
            monthly_rollup=[RollupOut.from_bucket(b) for b in stats.monthly_rollup],
        )


class CryLogResponse(BaseModel):
    data: CryLogOut


class CryLogListResponse(BaseModel):
    data: list[CryLogOut]
    count: int


class CryLogDayResponse(BaseModel):
    date: str
    data: list[CryLogOut]
    count: int


class CryStatsResponse(BaseModel):
    data: CryStatsOut
