"""Bearer token authentication for user endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Header, HTTPException, Request, status

from weepify.services.identity import SessionContext

if TYPE_CHECKING:
    from weepify.containers import AppContainer


async def require_session(
    request: Request,
    authorization: str | None = Header(default=None),
) -> SessionContext:
    """Resolve the bearer token into the caller's session context."""
    token = _parse_bearer(authorization)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
        )
    container: AppContainer = request.app.state.container
    owner_id = container.identity_provider.resolve_owner(token)
    if owner_id is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token",
        )
    return SessionContext(owner_id=owner_id)


def _parse_bearer(header: str | None) -> str | None:
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
