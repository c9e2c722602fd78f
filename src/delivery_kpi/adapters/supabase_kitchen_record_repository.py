"""Supabase repository for multi-site kitchen records."""

from collections.abc import Sequence
from dataclasses import dataclass

from supabase import Client

from delivery_kpi.config import DEFAULT_KITCHEN_SITES
from delivery_kpi.domain.kitchens import MultiSiteRecord
from delivery_kpi.services.kitchen_records import KitchenRecordRepository
from delivery_kpi.services.kitchens import parse_multi_site_record


@dataclass
class SupabaseKitchenRecordRepository(KitchenRecordRepository):
    """Supabase implementation for kitchen records, one row per date."""

    client: Client
    table: str = "kitchen_records"
    sites: Sequence[str] = DEFAULT_KITCHEN_SITES

    def list_records(self) -> list[MultiSiteRecord]:
        """Return stored records ordered by date."""
        response = (
            self.client.table(self.table)
            .select("date, payload")
            .order("date", desc=False)
            .execute()
        )
        return [_parse_row(row, self.sites) for row in response.data or []]

    def save_record(self, record: MultiSiteRecord) -> None:
        """Upsert the nested per-site row under its date."""
        response = (
            self.client.table(self.table)
            .upsert(
                {"date": record.date, "payload": record.to_row()},
                on_conflict="date",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError(f"Failed to save kitchen record {record.date}")


def _parse_row(row: dict, sites: Sequence[str]) -> MultiSiteRecord:
    payload = row.get("payload") if isinstance(row.get("payload"), dict) else {}
    return parse_multi_site_record(
        {**payload, "date": row.get("date") or payload.get("date")}, sites
    )
