"""Daily logistics records: store access and the dashboard pipeline."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol

from delivery_kpi.domain.aggregates import DailyDashboard
from delivery_kpi.domain.daily import DailyInput, DerivedRecord
from delivery_kpi.domain.periods import ViewMode
from delivery_kpi.services.aggregation import (
    aggregate_records,
    merge_live_record,
    summarize_reference_period,
)
from delivery_kpi.services.derivation import derive, hydrate
from delivery_kpi.services.feed import RecordFeed
from delivery_kpi.services.parsing import parse_record_date
from delivery_kpi.services.trends import find_week_ago

_logger = logging.getLogger(__name__)


class RecordDateError(ValueError):
    """Raised when a record cannot be stored because its date is invalid."""


class DailyRecordRepository(Protocol):
    """Persistence interface for daily records keyed by date."""

    def list_records(self) -> list[DailyInput]:
        """Return the stored inputs of every day."""

    def save_record(self, record: DerivedRecord) -> None:
        """Store a derived record under its date, replacing any previous one."""


@dataclass
class DailyRecordService:
    """Service running derive, merge, aggregate and compare for daily records."""

    repository: DailyRecordRepository
    exclude_weekends: bool = False
    feed: RecordFeed[DerivedRecord] = field(default_factory=RecordFeed)

    def load_history(self) -> list[DerivedRecord]:
        """Return stored records, re-derived from their inputs."""
        return hydrate(self.repository.list_records())

    def subscribe(
        self, listener: Callable[[list[DerivedRecord]], None]
    ) -> Callable[[], None]:
        """Receive the full record set whenever it changes."""
        return self.feed.subscribe(listener)

    def refresh(self) -> list[DerivedRecord]:
        """Reload the store and notify subscribers."""
        history = self.load_history()
        _logger.info("Loaded %s daily records", len(history))
        self.feed.publish(history)
        return history

    def preview(self, raw: Mapping[str, object]) -> DerivedRecord:
        """Derive a record without storing it."""
        return derive(raw)

    def save(self, raw: Mapping[str, object]) -> DerivedRecord:
        """Derive and store a record, then publish the new snapshot."""
        record = derive(raw)
        if parse_record_date(record.date) is None:
            raise RecordDateError(f"Invalid record date: {record.date!r}")
        try:
            self.repository.save_record(record)
        except Exception:
            _logger.exception("Failed to save daily record %s", record.date)
            raise
        _logger.info("Saved daily record %s", record.date)
        self.refresh()
        return record

    def dashboard(
        self,
        view_mode: ViewMode,
        *,
        reference: date | None = None,
        live_inputs: Mapping[str, object] | None = None,
    ) -> DailyDashboard:
        """Build the dashboard for the stored history plus the edited record."""
        history = self.load_history()
        live = derive(live_inputs) if live_inputs is not None else None
        records = merge_live_record(history, live)
        reference_day = _reference_day(live, reference)
        return DailyDashboard(
            live=live,
            series=aggregate_records(
                records, view_mode, exclude_weekends=self.exclude_weekends
            ),
            reference=summarize_reference_period(records, reference_day),
            week_ago=find_week_ago(history, reference_day),
        )


def _reference_day(live: DerivedRecord | None, reference: date | None) -> date:
    if live is not None:
        live_day = parse_record_date(live.date)
        if live_day is not None:
            return live_day
    return reference or date.today()
