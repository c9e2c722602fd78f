"""Supabase repository for daily logistics records."""

import logging
from dataclasses import dataclass

from supabase import Client

from delivery_kpi.domain.daily import DailyInput, DerivedRecord
from delivery_kpi.services.derivation import parse_daily_input
from delivery_kpi.services.records import DailyRecordRepository

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseDailyRecordRepository(DailyRecordRepository):
    """Supabase implementation for daily records, one row per date."""

    client: Client
    table: str = "daily_records"

    def list_records(self) -> list[DailyInput]:
        """Return stored inputs ordered by date."""
        response = (
            self.client.table(self.table)
            .select("date, payload")
            .order("date", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def save_record(self, record: DerivedRecord) -> None:
        """Upsert the record's row under its date."""
        response = (
            self.client.table(self.table)
            .upsert(
                {"date": record.date, "payload": record.to_row()},
                on_conflict="date",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError(f"Failed to save daily record {record.date}")


def _parse_row(row: dict) -> DailyInput:
    payload = row.get("payload")
    if not isinstance(payload, dict):
        _logger.warning("Daily record %s has no payload", row.get("date"))
        payload = {}
    day = row.get("date") or payload.get("date")
    return parse_daily_input({**payload, "date": day})
