"""Domain models for crying statistics."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class RollupBucket:
    """Volume and session count for one chart period."""

    period_label: str
    start: date
    end: date
    total_volume_ml: float
    session_count: int


@dataclass(frozen=True)
class CryStats:
    """Aggregated metrics over a user's full history."""

    lifetime_total_ml: float
    plants_watered: float
    rehydration_water_ml: float
    longest_streak: int
    total_sessions: int
    mood_trend: str
    therapeutic_score: int
    daily_rollup: list[RollupBucket]
    weekly_rollup: list[RollupBucket]
    monthly_rollup: list[RollupBucket]
