"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from weepify.adapters.supabase_cry_log_repository import SupabaseCryLogRepository
from weepify.adapters.supabase_identity_provider import SupabaseIdentityProvider
from weepify.config import Settings
from weepify.services.cry_logs import CryLogService
from weepify.services.identity import IdentityProvider
from weepify.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    identity_provider: IdentityProvider
    cry_log_service: CryLogService
    stats_service: StatsService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    cry_log_repository = SupabaseCryLogRepository(
        supabase_client, table_name=resolved_settings.cry_logs_table
    )

    return AppContainer(
        settings=resolved_settings,
        identity_provider=SupabaseIdentityProvider(supabase_client),
        cry_log_service=CryLogService(
            cry_log_repository, timezone_name=resolved_settings.timezone
        ),
        stats_service=StatsService(
            cry_log_repository, timezone_name=resolved_settings.timezone
        ),
    )
