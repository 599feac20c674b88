"""Crying session logging service."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from weepify.domain.cry_logs import CryLogDraft, CryLogRecord
from weepify.domain.errors import CryLogNotFoundError
from weepify.services.validation import (
    today_in_timezone,
    validate_cry_log_changes,
    validate_new_cry_log,
)
from weepify.services.volume import estimate_tear_volume

_logger = logging.getLogger(__name__)


class CryLogRepository(Protocol):
    """Persistence interface for crying sessions, always scoped by owner."""

    def list_cry_logs(self, owner_id: UUID) -> list[CryLogRecord]:
        """Return every session of the owner, newest day first."""

    def list_cry_logs_for_day(self, owner_id: UUID, day: date) -> list[CryLogRecord]:
        """Return the owner's sessions on a day, ordered by start time."""

    def get_cry_log(self, log_id: UUID, owner_id: UUID) -> CryLogRecord | None:
        """Return a session by id if the owner has it."""

    def create_cry_log(
        self, owner_id: UUID, draft: CryLogDraft, estimated_volume_ml: float
    ) -> CryLogRecord:
        """Persist a new session and return it with its assigned id."""

    def update_cry_log(
        self, log_id: UUID, owner_id: UUID, fields: dict[str, object]
    ) -> CryLogRecord | None:
        """Apply field changes and return the updated session, if found."""

    def delete_cry_log(self, log_id: UUID, owner_id: UUID) -> bool:
        """Delete a session and return whether one was removed."""


@dataclass
class CryLogService:
    """Service that validates, estimates and persists crying sessions."""

    repository: CryLogRepository
    timezone_name: str = "UTC"

    def log_session(
        self, owner_id: UUID, raw: Mapping[str, object], today: date | None = None
    ) -> CryLogRecord:
        """Validate a submission and store it with its estimated volume.

        ``today`` defaults to the current day in the configured timezone.
        """
        resolved_today = today or today_in_timezone(self.timezone_name)
        draft = validate_new_cry_log(raw, resolved_today)
        volume = estimate_tear_volume(draft.duration_minutes, draft.intensity)
        record = self.repository.create_cry_log(owner_id, draft, volume)
        _logger.info(
            "Cry log created: owner_id=%s log_id=%s volume_ml=%s",
            owner_id,
            record.id,
            volume,
        )
        return record

    def list_sessions(self, owner_id: UUID) -> list[CryLogRecord]:
        """Return all of the owner's sessions, newest first."""
        return self.repository.list_cry_logs(owner_id)

    def list_sessions_for_day(self, owner_id: UUID, day: date) -> list[CryLogRecord]:
        """Return the owner's sessions on the given day."""
        return self.repository.list_cry_logs_for_day(owner_id, day)

    def get_session(self, owner_id: UUID, log_id: UUID) -> CryLogRecord:
        """Return one session or raise ``CryLogNotFoundError``."""
        record = self.repository.get_cry_log(log_id, owner_id)
        if record is None:
            raise CryLogNotFoundError(f"Cry log {log_id} not found")
        return record

    def update_session(
        self, owner_id: UUID, log_id: UUID, raw: Mapping[str, object]
    ) -> CryLogRecord:
        """Update mutable fields, re-deriving the volume when needed."""
        changes = validate_cry_log_changes(raw)
        current = self.get_session(owner_id, log_id)
        if changes.is_empty():
            return current

        fields: dict[str, object] = {}
        if changes.duration_minutes is not None:
            fields["duration_minutes"] = changes.duration_minutes
        if changes.intensity is not None:
            fields["intensity"] = changes.intensity
        if changes.mood_after is not None:
            fields["mood_after"] = changes.mood_after
        if changes.reason is not None:
            fields["reason"] = changes.reason
        if changes.affects_volume():
            fields["estimated_volume_ml"] = estimate_tear_volume(
                changes.duration_minutes or current.duration_minutes,
                changes.intensity or current.intensity,
            )

        updated = self.repository.update_cry_log(log_id, owner_id, fields)
        if updated is None:
            raise CryLogNotFoundError(f"Cry log {log_id} not found")
        return updated

    def delete_session(self, owner_id: UUID, log_id: UUID) -> None:
        """Delete one session or raise ``CryLogNotFoundError``."""
        if not self.repository.delete_cry_log(log_id, owner_id):
            raise CryLogNotFoundError(f"Cry log {log_id} not found")
        _logger.info("Cry log deleted: owner_id=%s log_id=%s", owner_id, log_id)
