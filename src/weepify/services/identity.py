"""Per-request identity resolution."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID


class IdentityProvider(Protocol):
    """Interface for verifying access tokens."""

    def resolve_owner(self, access_token: str) -> UUID | None:
        """Return the owner id for a valid token, or None when it is rejected."""


@dataclass(frozen=True)
class SessionContext:
    """Verified identity passed explicitly into each request handler."""

    owner_id: UUID
