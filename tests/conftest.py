"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from weepify.config import Settings
from weepify.containers import AppContainer
from weepify.domain.cry_logs import CryLogDraft, CryLogRecord, Intensity
from weepify.domain.errors import StoreUnavailableError
from weepify.services.cry_logs import CryLogRepository, CryLogService
from weepify.services.identity import IdentityProvider
from weepify.services.stats import StatsService
from weepify.services.volume import estimate_tear_volume

OWNER_TOKEN = "owner-token"
OTHER_TOKEN = "other-token"


def make_record(  # noqa: PLR0913
    day: date,
    *,
    owner_id: UUID | None = None,
    duration_minutes: int = 10,
    intensity: Intensity = Intensity.HIGH,
    mood_after: str = "better",
    reason: str = "movie",
    start_time: str = "20:00",
) -> CryLogRecord:
    """Build a stored record with a consistent estimated volume."""
    return CryLogRecord(
        id=uuid4(),
        owner_id=owner_id or uuid4(),
        day=day,
        start_time=start_time,
        duration_minutes=duration_minutes,
        intensity=intensity,
        mood_after=mood_after,
        reason=reason,
        estimated_volume_ml=estimate_tear_volume(duration_minutes, intensity),
    )


@dataclass
class InMemoryCryLogRepository(CryLogRepository):
    """In-memory cry log repository for tests."""

    records: dict[UUID, CryLogRecord] = field(default_factory=dict)
    available: bool = True

    def add(self, record: CryLogRecord) -> CryLogRecord:
        self.records[record.id] = record
        return record

    def list_cry_logs(self, owner_id: UUID) -> list[CryLogRecord]:
        self._check_available()
        owned = [r for r in self.records.values() if r.owner_id == owner_id]
        return sorted(owned, key=lambda r: r.day, reverse=True)

    def list_cry_logs_for_day(self, owner_id: UUID, day: date) -> list[CryLogRecord]:
        self._check_available()
        owned = [
            r for r in self.records.values() if r.owner_id == owner_id and r.day == day
        ]
        return sorted(owned, key=lambda r: r.start_time)

    def get_cry_log(self, log_id: UUID, owner_id: UUID) -> CryLogRecord | None:
        self._check_available()
        record = self.records.get(log_id)
        if record is None or record.owner_id != owner_id:
            return None
        return record

    def create_cry_log(
        self, owner_id: UUID, draft: CryLogDraft, estimated_volume_ml: float
    ) -> CryLogRecord:
        self._check_available()
        return self.add(
            CryLogRecord(
                id=uuid4(),
                owner_id=owner_id,
                day=draft.day,
                start_time=draft.start_time,
                duration_minutes=draft.duration_minutes,
                intensity=draft.intensity,
                mood_after=draft.mood_after,
                reason=draft.reason,
                estimated_volume_ml=estimated_volume_ml,
                created_at=datetime.now(tz=UTC),
            )
        )

    def update_cry_log(
        self, log_id: UUID, owner_id: UUID, fields: dict[str, object]
    ) -> CryLogRecord | None:
        current = self.get_cry_log(log_id, owner_id)
        if current is None:
            return None
        updated = replace(current, **fields)
        self.records[log_id] = updated
        return updated

    def delete_cry_log(self, log_id: UUID, owner_id: UUID) -> bool:
        if self.get_cry_log(log_id, owner_id) is None:
            return False
        del self.records[log_id]
        return True

    def _check_available(self) -> None:
        if not self.available:
            raise StoreUnavailableError("cry_logs list failed")


@dataclass
class FakeIdentityProvider(IdentityProvider):
    """Identity provider backed by a static token table."""

    tokens: dict[str, UUID] = field(default_factory=dict)

    def resolve_owner(self, access_token: str) -> UUID | None:
        return self.tokens.get(access_token)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        timezone="UTC",
        environment="test",
    )


@pytest.fixture
def owner_id() -> UUID:
    return uuid4()


@pytest.fixture
def other_owner_id() -> UUID:
    return uuid4()


@pytest.fixture
def cry_log_repository() -> InMemoryCryLogRepository:
    return InMemoryCryLogRepository()


@pytest.fixture
def identity_provider(owner_id: UUID, other_owner_id: UUID) -> FakeIdentityProvider:
    return FakeIdentityProvider(
        tokens={OWNER_TOKEN: owner_id, OTHER_TOKEN: other_owner_id}
    )


@pytest.fixture
def container(
    settings: Settings,
    cry_log_repository: InMemoryCryLogRepository,
    identity_provider: FakeIdentityProvider,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        identity_provider=identity_provider,
        cry_log_service=CryLogService(
            cry_log_repository, timezone_name=settings.timezone
        ),
        stats_service=StatsService(
            cry_log_repository, timezone_name=settings.timezone
        ),
    )
