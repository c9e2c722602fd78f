"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from delivery_kpi.adapters.supabase_daily_record_repository import (
    SupabaseDailyRecordRepository,
)
from delivery_kpi.adapters.supabase_kitchen_record_repository import (
    SupabaseKitchenRecordRepository,
)
from delivery_kpi.config import Settings, parse_kitchen_sites
from delivery_kpi.services.kitchen_records import KitchenRecordService
from delivery_kpi.services.records import DailyRecordService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    kitchen_sites: tuple[str, ...]
    daily_record_service: DailyRecordService
    kitchen_record_service: KitchenRecordService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    kitchen_sites = parse_kitchen_sites(resolved_settings.kitchen_sites)
    daily_repository = SupabaseDailyRecordRepository(
        supabase_client, table=resolved_settings.daily_records_table
    )
    kitchen_repository = SupabaseKitchenRecordRepository(
        supabase_client,
        table=resolved_settings.kitchen_records_table,
        sites=kitchen_sites,
    )

    async def close_resources() -> None:
        """The Supabase client holds no connections that need closing."""
        return None

    return AppContainer(
        settings=resolved_settings,
        kitchen_sites=kitchen_sites,
        daily_record_service=DailyRecordService(daily_repository),
        kitchen_record_service=KitchenRecordService(kitchen_repository, kitchen_sites),
        close_resources=close_resources,
    )
