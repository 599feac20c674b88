"""Statistics over a user's crying history."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from uuid import UUID

from weepify.domain.cry_logs import CryLogRecord
from weepify.domain.stats import CryStats, RollupBucket
from weepify.services.cry_logs import CryLogRepository
from weepify.services.validation import today_in_timezone
from weepify.services.volume import plants_watered, rehydration_water

DAILY_BUCKETS = 7
WEEKLY_BUCKETS = 4
MONTHLY_BUCKETS = 6
MONTHS_PER_YEAR = 12
MOOD_TREND_WINDOW = 5
MOOD_TREND_THRESHOLD = 0.5
NEUTRAL_MOOD = 5
SCORE_PER_SESSION = 5
SCORE_PER_REASON = 3
# Session count -> bonus points.
REGULARITY_BONUSES = ((5, 10), (10, 15))
MAX_THERAPEUTIC_SCORE = 100

# Higher is a better mood.
MOOD_SCORES: dict[str, int] = {
    "devastated": 1,
    "very sad": 2,
    "sad": 3,
    "angry": 3,
    "disappointed": 3,
    "melancholy": 3,
    "worse": 3,
    "upset": 4,
    "overwhelmed": 4,
    "frustrated": 4,
    "neutral": 5,
    "same": 5,
    "relieved": 6,
    "better": 7,
    "content": 7,
    "happy": 8,
    "joyful": 9,
    "ecstatic": 10,
}

_logger = logging.getLogger(__name__)


@dataclass
class StatsService:
    """Service for computing crying stats in the configured timezone."""

    repository: CryLogRepository
    timezone_name: str = "UTC"

    def today(self) -> date:
        """Return the current calendar day in the configured timezone."""
        return today_in_timezone(self.timezone_name)

    def get_stats(self, owner_id: UUID) -> CryStats:
        """Return stats over every session the owner has logged."""
        records = self.repository.list_cry_logs(owner_id)
        _logger.info("Computing stats: owner_id=%s records=%s", owner_id, len(records))
        return compute_stats(records, self.today())


def compute_stats(records: Sequence[CryLogRecord], today: date) -> CryStats:
    """Aggregate a full record set into dashboard metrics.

    An empty record set yields zero values and fully shaped rollups.
    """
    lifetime_total = round(sum(record.estimated_volume_ml for record in records), 2)
    return CryStats(
        lifetime_total_ml=lifetime_total,
        plants_watered=plants_watered(lifetime_total),
        rehydration_water_ml=rehydration_water(lifetime_total),
        longest_streak=longest_streak(record.day for record in records),
        total_sessions=len(records),
        mood_trend=mood_trend(records),
        therapeutic_score=therapeutic_score(records),
        daily_rollup=daily_rollup(records, today),
        weekly_rollup=weekly_rollup(records, today),
        monthly_rollup=monthly_rollup(records, today),
    )


def longest_streak(days: Iterable[date]) -> int:
    """Return the longest run of consecutive calendar days."""
    best = 0
    current = 0
    previous: date | None = None
    for day in sorted(set(days)):
        if previous is not None and day - previous == timedelta(days=1):
            current += 1
        else:
            current = 1
        best = max(best, current)
        previous = day
    return best


def daily_rollup(records: Sequence[CryLogRecord], today: date) -> list[RollupBucket]:
    """Return the last 7 days, oldest first, ending with today."""
    buckets = []
    for offset in range(DAILY_BUCKETS - 1, -1, -1):
        day = today - timedelta(days=offset)
        buckets.append(_bucket(day.isoformat(), day, day, records))
    return buckets


def weekly_rollup(records: Sequence[CryLogRecord], today: date) -> list[RollupBucket]:
    """Return the last 4 Sunday-start weeks, oldest first."""
    days_since_sunday = (today.weekday() + 1) % 7
    current_week_start = today - timedelta(days=days_since_sunday)
    buckets = []
    for offset in range(WEEKLY_BUCKETS - 1, -1, -1):
        start = current_week_start - timedelta(weeks=offset)
        end = start + timedelta(days=6)
        buckets.append(_bucket(start.isoformat(), start, end, records))
    return buckets


def monthly_rollup(
    records: Sequence[CryLogRecord], today: date
) -> list[RollupBucket]:
    """Return the last 6 calendar months, oldest first, labeled ``YYYY-MM``."""
    buckets = []
    for offset in range(MONTHLY_BUCKETS - 1, -1, -1):
        start = _shift_month(today.replace(day=1), -offset)
        end = _shift_month(start, 1) - timedelta(days=1)
        buckets.append(_bucket(start.strftime("%Y-%m"), start, end, records))
    return buckets


def mood_trend(records: Sequence[CryLogRecord]) -> str:
    """Compare recent moods against slightly older ones.

    Returns ``improving``, ``declining`` or ``stable``.
    """
    if len(records) < 2:
        return "stable"
    recent = sorted(
        records, key=lambda record: (record.day, record.start_time), reverse=True
    )[:MOOD_TREND_WINDOW]
    scores = [_mood_score(record.mood_after) for record in recent]
    midpoint = len(scores) // 2
    newer = scores[:midpoint]
    older = scores[midpoint:]
    difference = sum(newer) / len(newer) - sum(older) / len(older)
    if difference > MOOD_TREND_THRESHOLD:
        return "improving"
    if difference < -MOOD_TREND_THRESHOLD:
        return "declining"
    return "stable"


def therapeutic_score(records: Sequence[CryLogRecord]) -> int:
    """Return a 0-100 score rewarding regular, varied sessions."""
    if not records:
        return 0
    reasons = {record.reason.strip().lower() for record in records}
    score = len(records) * SCORE_PER_SESSION + len(reasons) * SCORE_PER_REASON
    for threshold, bonus in REGULARITY_BONUSES:
        if len(records) >= threshold:
            score += bonus
    return min(MAX_THERAPEUTIC_SCORE, score)


def _bucket(
    label: str, start: date, end: date, records: Sequence[CryLogRecord]
) -> RollupBucket:
    matching = [record for record in records if start <= record.day <= end]
    return RollupBucket(
        period_label=label,
        start=start,
        end=end,
        total_volume_ml=round(sum(r.estimated_volume_ml for r in matching), 2),
        session_count=len(matching),
    )


def _shift_month(first_of_month: date, months: int) -> date:
    index = first_of_month.year * MONTHS_PER_YEAR + first_of_month.month - 1 + months
    return date(index // MONTHS_PER_YEAR, index % MONTHS_PER_YEAR + 1, 1)


def _mood_score(mood: str) -> int:
    return MOOD_SCORES.get(mood.strip().lower(), NEUTRAL_MOOD)
