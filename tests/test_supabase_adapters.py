"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import date
from types import SimpleNamespace
from uuid import UUID, uuid4

import httpx
import pytest
from postgrest.exceptions import APIError

from weepify.adapters.supabase_cry_log_repository import SupabaseCryLogRepository
from weepify.adapters.supabase_identity_provider import SupabaseIdentityProvider
from weepify.domain.cry_logs import CryLogDraft, Intensity
from weepify.domain.errors import ConstraintViolationError, StoreUnavailableError


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "update": [], "delete": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_order: tuple[str, bool] | None = None
    error: Exception | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order = (column, desc)
        return self

    def execute(self) -> FakeResponse:
        if self.error is not None:
            raise self.error
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _row(owner_id: UUID, **overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": str(uuid4()),
        "user_id": str(owner_id),
        "date": "2024-04-02",
        "start_time": "21:45:00",
        "duration": 12,
        "intensity": "moderate",
        "mood_after": "better",
        "reason": "wedding",
        "tears_ml": 6.0,
        "created_at": "2024-04-02T21:50:00+00:00",
    }
    row.update(overrides)
    return row


def test_list_cry_logs_parses_rows_newest_first() -> None:
    client = FakeSupabaseClient()
    table = client.table("cry_logs")
    owner_id = uuid4()
    table.queue("select", [_row(owner_id), _row(owner_id, date="2024-04-01")])

    records = SupabaseCryLogRepository(client).list_cry_logs(owner_id)

    assert [record.day for record in records] == [date(2024, 4, 2), date(2024, 4, 1)]
    assert records[0].start_time == "21:45"
    assert records[0].intensity is Intensity.MODERATE
    assert records[0].estimated_volume_ml == 6.0
    assert records[0].created_at is not None
    assert ("user_id", str(owner_id)) in table.last_filters
    assert table.last_order == ("date", True)


def test_rows_with_malformed_columns_are_skipped() -> None:
    client = FakeSupabaseClient()
    owner_id = uuid4()
    missing_owner = _row(owner_id)
    del missing_owner["user_id"]
    valid = _row(owner_id)
    client.table("cry_logs").queue(
        "select",
        [
            _row(owner_id, date="not-a-date"),
            _row(owner_id, created_at="not-a-timestamp"),
            _row(owner_id, id="not-a-uuid"),
            _row(owner_id, duration="ten"),
            missing_owner,
            valid,
        ],
    )

    records = SupabaseCryLogRepository(client).list_cry_logs(owner_id)

    assert [str(record.id) for record in records] == [valid["id"]]


def test_create_cry_log_maps_columns() -> None:
    client = FakeSupabaseClient()
    table = client.table("custom_logs")
    owner_id = uuid4()
    table.queue("insert", [_row(owner_id, intensity="high", tears_ml=12.0)])
    draft = CryLogDraft(
        day=date(2024, 4, 2),
        start_time="21:45",
        duration_minutes=12,
        intensity=Intensity.HIGH,
        mood_after="better",
        reason="wedding",
    )

    repository = SupabaseCryLogRepository(client, table_name="custom_logs")
    record = repository.create_cry_log(owner_id, draft, 12.0)

    assert table.last_payload == {
        "user_id": str(owner_id),
        "date": "2024-04-02",
        "start_time": "21:45",
        "duration": 12,
        "intensity": "high",
        "mood_after": "better",
        "reason": "wedding",
        "tears_ml": 12.0,
    }
    assert record.owner_id == owner_id
    assert record.estimated_volume_ml == 12.0


def test_create_without_returned_row_fails() -> None:
    client = FakeSupabaseClient()
    draft = CryLogDraft(
        day=date(2024, 4, 2),
        start_time="21:45",
        duration_minutes=12,
        intensity=Intensity.HIGH,
        mood_after="better",
        reason="wedding",
    )

    with pytest.raises(StoreUnavailableError):
        SupabaseCryLogRepository(client).create_cry_log(uuid4(), draft, 12.0)


def test_update_cry_log_maps_fields_and_scopes_owner() -> None:
    client = FakeSupabaseClient()
    table = client.table("cry_logs")
    owner_id = uuid4()
    log_id = uuid4()
    table.queue("update", [_row(owner_id, id=str(log_id), intensity="low")])

    updated = SupabaseCryLogRepository(client).update_cry_log(
        log_id,
        owner_id,
        {"intensity": Intensity.LOW, "estimated_volume_ml": 2.4},
    )

    assert table.last_payload == {"intensity": "low", "tears_ml": 2.4}
    assert table.last_filters == [("id", str(log_id)), ("user_id", str(owner_id))]
    assert updated is not None
    assert updated.id == log_id


def test_get_update_and_delete_report_missing_rows() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseCryLogRepository(client)

    assert repository.get_cry_log(uuid4(), uuid4()) is None
    assert repository.update_cry_log(uuid4(), uuid4(), {"reason": "x"}) is None
    assert repository.delete_cry_log(uuid4(), uuid4()) is False


def test_delete_cry_log_returns_true_when_row_removed() -> None:
    client = FakeSupabaseClient()
    owner_id = uuid4()
    client.table("cry_logs").queue("delete", [_row(owner_id)])

    assert SupabaseCryLogRepository(client).delete_cry_log(uuid4(), owner_id)


def test_list_for_day_filters_by_date() -> None:
    client = FakeSupabaseClient()
    table = client.table("cry_logs")
    owner_id = uuid4()

    SupabaseCryLogRepository(client).list_cry_logs_for_day(owner_id, date(2024, 4, 2))

    assert ("date", "2024-04-02") in table.last_filters
    assert table.last_order == ("start_time", False)


def test_constraint_errors_are_translated() -> None:
    client = FakeSupabaseClient()
    client.table("cry_logs").error = APIError(
        {"message": "violates check constraint", "code": "23514"}
    )

    with pytest.raises(ConstraintViolationError):
        SupabaseCryLogRepository(client).delete_cry_log(uuid4(), uuid4())


def test_backend_errors_are_translated() -> None:
    client = FakeSupabaseClient()
    table = client.table("cry_logs")
    repository = SupabaseCryLogRepository(client)

    table.error = APIError({"message": "relation does not exist", "code": "42P01"})
    with pytest.raises(StoreUnavailableError):
        repository.list_cry_logs(uuid4())

    table.error = httpx.ConnectError("connection refused")
    with pytest.raises(StoreUnavailableError):
        repository.list_cry_logs(uuid4())


@dataclass
class FakeAuth:
    user_id: str | None = None
    error: Exception | None = None

    def get_user(self, jwt: str | None = None) -> SimpleNamespace | None:
        if self.error is not None:
            raise self.error
        if self.user_id is None:
            return None
        return SimpleNamespace(user=SimpleNamespace(id=self.user_id))


def test_identity_provider_resolves_supabase_user() -> None:
    user_id = uuid4()
    client = SimpleNamespace(auth=FakeAuth(user_id=str(user_id)))

    assert SupabaseIdentityProvider(client).resolve_owner("token") == user_id


def test_identity_provider_rejects_invalid_tokens() -> None:
    rejected = SimpleNamespace(auth=FakeAuth(error=RuntimeError("invalid JWT")))
    missing = SimpleNamespace(auth=FakeAuth())
    malformed = SimpleNamespace(auth=FakeAuth(user_id="not-a-uuid"))

    assert SupabaseIdentityProvider(rejected).resolve_owner("token") is None
    assert SupabaseIdentityProvider(missing).resolve_owner("token") is None
    assert SupabaseIdentityProvider(malformed).resolve_owner("token") is None
