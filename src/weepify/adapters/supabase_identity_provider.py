"""Supabase Auth identity provider."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from weepify.services.identity import IdentityProvider

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Verify access tokens against Supabase Auth."""

    client: Client

    def resolve_owner(self, access_token: str) -> UUID | None:
        """Return the Supabase user id for the token, if it is valid."""
        try:
            response = self.client.auth.get_user(access_token)
        except Exception:
            _logger.warning("Supabase rejected access token", exc_info=True)
            return None
        user = getattr(response, "user", None) if response else None
        if user is None:
            return None
        try:
            return UUID(str(user.id))
        except ValueError:
            _logger.warning("Supabase returned a malformed user id: %s", user.id)
            return None
