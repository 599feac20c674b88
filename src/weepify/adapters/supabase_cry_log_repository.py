"""Supabase repository for crying sessions."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from weepify.domain.cry_logs import CryLogDraft, CryLogRecord, Intensity
from weepify.domain.errors import ConstraintViolationError, StoreUnavailableError
from weepify.services.cry_logs import CryLogRepository

_COLUMNS = (
    "id, user_id, date, start_time, duration, intensity, mood_after, reason, "
    "tears_ml, created_at"
)
# Domain field name -> cry_logs column.
_FIELD_COLUMNS = {
    "duration_minutes": "duration",
    "intensity": "intensity",
    "mood_after": "mood_after",
    "reason": "reason",
    "estimated_volume_ml": "tears_ml",
}
# Postgres integrity constraint SQLSTATE codes.
_CONSTRAINT_CODES = {"23502", "23503", "23505", "23514"}

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseCryLogRepository(CryLogRepository):
    """Supabase implementation for crying sessions."""

    client: Client
    table_name: str = "cry_logs"

    def list_cry_logs(self, owner_id: UUID) -> list[CryLogRecord]:
        """Return all sessions of the owner, newest day first."""
        with _store_errors("list"):
            response = (
                self.client.table(self.table_name)
                .select(_COLUMNS)
                .eq("user_id", str(owner_id))
                .order("date", desc=True)
                .execute()
            )
        return _parse_rows(response.data)

    def list_cry_logs_for_day(self, owner_id: UUID, day: date) -> list[CryLogRecord]:
        """Return the owner's sessions on a day, earliest first."""
        with _store_errors("list by date"):
            response = (
                self.client.table(self.table_name)
                .select(_COLUMNS)
                .eq("user_id", str(owner_id))
                .eq("date", day.isoformat())
                .order("start_time", desc=False)
                .execute()
            )
        return _parse_rows(response.data)

    def get_cry_log(self, log_id: UUID, owner_id: UUID) -> CryLogRecord | None:
        """Return a session by id if it belongs to the owner."""
        with _store_errors("get"):
            response = (
                self.client.table(self.table_name)
                .select(_COLUMNS)
                .eq("id", str(log_id))
                .eq("user_id", str(owner_id))
                .limit(1)
                .execute()
            )
        records = _parse_rows(response.data)
        return records[0] if records else None

    def create_cry_log(
        self, owner_id: UUID, draft: CryLogDraft, estimated_volume_ml: float
    ) -> CryLogRecord:
        """Insert a session row and return it."""
        with _store_errors("insert"):
            response = (
                self.client.table(self.table_name)
                .insert(
                    {
                        "user_id": str(owner_id),
                        "date": draft.day.isoformat(),
                        "start_time": draft.start_time,
                        "duration": draft.duration_minutes,
                        "intensity": draft.intensity.value,
                        "mood_after": draft.mood_after,
                        "reason": draft.reason,
                        "tears_ml": estimated_volume_ml,
                    }
                )
                .execute()
            )
        records = _parse_rows(response.data)
        if not records:
            raise StoreUnavailableError("Failed to create cry log")
        return records[0]

    def update_cry_log(
        self, log_id: UUID, owner_id: UUID, fields: dict[str, object]
    ) -> CryLogRecord | None:
        """Update mutable columns and return the updated row."""
        payload = {
            _FIELD_COLUMNS[name]: _column_value(value)
            for name, value in fields.items()
            if name in _FIELD_COLUMNS
        }
        with _store_errors("update"):
            response = (
                self.client.table(self.table_name)
                .update(payload)
                .eq("id", str(log_id))
                .eq("user_id", str(owner_id))
                .execute()
            )
        records = _parse_rows(response.data)
        return records[0] if records else None

    def delete_cry_log(self, log_id: UUID, owner_id: UUID) -> bool:
        """Delete a session row and report whether one matched."""
        with _store_errors("delete"):
            response = (
                self.client.table(self.table_name)
                .delete()
                .eq("id", str(log_id))
                .eq("user_id", str(owner_id))
                .execute()
            )
        return bool(response.data)


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Translate Supabase client failures into store errors."""
    try:
        yield
    except APIError as exc:
        if str(exc.code) in _CONSTRAINT_CODES:
            raise ConstraintViolationError(
                f"cry_logs {operation} violated a constraint: {exc.message}"
            ) from exc
        _logger.warning("Supabase %s failed: code=%s", operation, exc.code)
        raise StoreUnavailableError(f"cry_logs {operation} failed") from exc
    except httpx.HTTPError as exc:
        _logger.warning("Supabase %s request failed: %s", operation, exc)
        raise StoreUnavailableError(f"cry_logs {operation} failed") from exc


def _column_value(value: object) -> object:
    if isinstance(value, Intensity):
        return value.value
    return value


def _parse_rows(rows: list[dict[str, object]] | None) -> list[CryLogRecord]:
    records = []
    for row in rows or []:
        record = _parse_row(row)
        if record is not None:
            records.append(record)
    return records


def _parse_row(row: dict[str, object]) -> CryLogRecord | None:
    try:
        created_raw = row.get("created_at")
        created_at = (
            datetime.fromisoformat(created_raw)
            if isinstance(created_raw, str) and created_raw
            else None
        )
        return CryLogRecord(
            id=UUID(str(row["id"])),
            owner_id=UUID(str(row["user_id"])),
            day=date.fromisoformat(str(row.get("date", ""))[:10]),
            start_time=str(row.get("start_time") or "")[:5],
            duration_minutes=int(row.get("duration") or 0),
            intensity=_parse_intensity(row.get("intensity")),
            mood_after=str(row.get("mood_after") or ""),
            reason=str(row.get("reason") or ""),
            estimated_volume_ml=float(row.get("tears_ml") or 0.0),
            created_at=created_at,
        )
    except (ValueError, KeyError, TypeError) as exc:
        _logger.warning("Skipping malformed cry log: id=%s (%s)", row.get("id"), exc)
        return None


def _parse_intensity(raw: object) -> Intensity:
    try:
        return Intensity(str(raw).lower())
    except ValueError:
        return Intensity.MODERATE
