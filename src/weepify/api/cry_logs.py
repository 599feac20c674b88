"""Cry log endpoints scoped to the authenticated user."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from weepify.api.auth import require_session
from weepify.api.models import (
    CryLogCreateRequest,
    CryLogDayResponse,
    CryLogListResponse,
    CryLogOut,
    CryLogResponse,
    CryLogUpdateRequest,
    CryStatsOut,
    CryStatsResponse,
)
from weepify.services.identity import SessionContext  # noqa: TC001
from weepify.services.validation import parse_day

if TYPE_CHECKING:
    from weepify.containers import AppContainer

router = APIRouter(prefix="/api/crylogs", tags=["crylogs"])


@router.get("")
async def list_cry_logs(
    request: Request, session: SessionContext = Depends(require_session)
) -> CryLogListResponse:
    """Return all of the user's sessions, newest first."""
    container: AppContainer = request.app.state.container
    records = container.cry_log_service.list_sessions(session.owner_id)
    return CryLogListResponse(
        data=[CryLogOut.from_record(record) for record in records],
        count=len(records),
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_cry_log(
    payload: CryLogCreateRequest,
    request: Request,
    session: SessionContext = Depends(require_session),
) -> CryLogResponse:
    """Validate and store a new session."""
    container: AppContainer = request.app.state.container
    record = container.cry_log_service.log_session(
        session.owner_id, payload.model_dump()
    )
    return CryLogResponse(data=CryLogOut.from_record(record))


@router.get("/stats")
async def cry_log_stats(
    request: Request, session: SessionContext = Depends(require_session)
) -> CryStatsResponse:
    """Return dashboard statistics over the user's full history."""
    container: AppContainer = request.app.state.container
    stats = container.stats_service.get_stats(session.owner_id)
    return CryStatsResponse(data=CryStatsOut.from_stats(stats))


@router.get("/date/{day}")
async def cry_logs_for_day(
    day: str, request: Request, session: SessionContext = Depends(require_session)
) -> CryLogDayResponse:
    """Return the user's sessions on one day."""
    container: AppContainer = request.app.state.container
    parsed_day = parse_day(day)
    records = container.cry_log_service.list_sessions_for_day(
        session.owner_id, parsed_day
    )
    return CryLogDayResponse(
        date=parsed_day.isoformat(),
        data=[CryLogOut.from_record(record) for record in records],
        count=len(records),
    )


@router.get("/{log_id}")
async def get_cry_log(
    log_id: UUID, request: Request, session: SessionContext = Depends(require_session)
) -> CryLogResponse:
    """Return a single session."""
    container: AppContainer = request.app.state.container
    record = container.cry_log_service.get_session(session.owner_id, log_id)
    return CryLogResponse(data=CryLogOut.from_record(record))


@router.put("/{log_id}")
async def update_cry_log(
    log_id: UUID,
    payload: CryLogUpdateRequest,
    request: Request,
    session: SessionContext = Depends(require_session),
) -> CryLogResponse:
    """Update duration, intensity, mood or reason of a session."""
    container: AppContainer = request.app.state.container
    record = container.cry_log_service.update_session(
        session.owner_id, log_id, payload.model_dump()
    )
    return CryLogResponse(data=CryLogOut.from_record(record))


@router.delete("/{log_id}")
async def delete_cry_log(
    log_id: UUID, request: Request, session: SessionContext = Depends(require_session)
) -> dict[str, str]:
    """Delete a session."""
    container: AppContainer = request.app.state.container
    container.cry_log_service.delete_session(session.owner_id, log_id)
    return {"status": "ok"}
