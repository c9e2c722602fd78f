"""Multi-site kitchen records: drafts, saves and the dashboard pipeline."""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Protocol

from delivery_kpi.domain.aggregates import KitchenDashboard
from delivery_kpi.domain.kitchens import MultiSiteRecord
from delivery_kpi.domain.periods import ViewMode
from delivery_kpi.services.carry_over import resolve_record
from delivery_kpi.services.feed import RecordFeed
from delivery_kpi.services.kitchens import (
    aggregate_kitchens,
    current_kitchen_stats,
    merge_live_kitchen_record,
    parse_multi_site_record,
)
from delivery_kpi.services.parsing import parse_record_date
from delivery_kpi.services.records import RecordDateError
from delivery_kpi.services.trends import compare_sites, find_week_ago, global_wow_growth

_logger = logging.getLogger(__name__)


class KitchenRecordRepository(Protocol):
    """Persistence interface for multi-site records keyed by date."""

    def list_records(self) -> list[MultiSiteRecord]:
        """Return every stored multi-site record."""

    def save_record(self, record: MultiSiteRecord) -> None:
        """Store a record under its date, replacing any previous one."""


@dataclass
class KitchenRecordService:
    repository: KitchenRecordRepository
    sites: Sequence[str]
    feed: RecordFeed[MultiSiteRecord] = field(default_factory=RecordFeed)

    def load_history(self) -> list[MultiSiteRecord]:
        return self.repository.list_records()

    def subscribe(
        self, listener: Callable[[list[MultiSiteRecord]], None]
    ) -> Callable[[], None]:
        """Receive the full record set whenever it changes."""
        return self.feed.subscribe(listener)

    def refresh(self) -> list[MultiSiteRecord]:
        """Reload the store and notify subscribers."""
        history = self.load_history()
        _logger.info("Loaded %s kitchen records", len(history))
        self.feed.publish(history)
        return history

    def draft(self, day: str) -> MultiSiteRecord:
        """Return the record to edit for a date, seeding targets when new."""
        if parse_record_date(day) is None:
            raise RecordDateError(f"Invalid record date: {day!r}")
        return resolve_record(day, self.load_history(), self.sites)

    def save(self, raw: Mapping[str, object]) -> MultiSiteRecord:
        """Store a record with its week-over-week growth attached."""
        record = parse_multi_site_record(raw, self.sites)
        day = parse_record_date(record.date)
        if day is None:
            raise RecordDateError(f"Invalid record date: {record.date!r}")
        week_ago = find_week_ago(self.load_history(), day)
        record = replace(record, global_wow_growth=global_wow_growth(record, week_ago))
        try:
            self.repository.save_record(record)
        except Exception:
            _logger.exception("Failed to save kitchen record %s", record.date)
            raise
        _logger.info(
            "Saved kitchen record %s (revenue=%.2f)",
            record.date,
            record.total_global_revenue,
        )
        self.refresh()
        return record

    def dashboard(
        self,
        view_mode: ViewMode,
        *,
        selected: date | None = None,
        live_raw: Mapping[str, object] | None = None,
    ) -> KitchenDashboard:
        """Build the multi-site dashboard for the history plus the edited record."""
        history = self.load_history()
        live = (
            parse_multi_site_record(live_raw, self.sites)
            if live_raw is not None
            else None
        )
        records = merge_live_kitchen_record(history, live)
        series = aggregate_kitchens(records, view_mode, self.sites)

        focus = _focus_record(records, live, selected)
        focus_day = parse_record_date(focus.date) if focus is not None else None
        if selected is None:
            selected = focus_day
        week_ago = find_week_ago(history, focus_day) if focus_day else None
        comparisons = (
            compare_sites(focus, week_ago, self.sites) if focus is not None else []
        )
        return KitchenDashboard(
            live=live,
            series=series,
            current=current_kitchen_stats(series, view_mode, selected),
            comparisons=comparisons,
            week_ago=week_ago,
        )


def _focus_record(
    records: Sequence[MultiSiteRecord],
    live: MultiSiteRecord | None,
    selected: date | None,
) -> MultiSiteRecord | None:
    """The edited record, else the selected date, else the latest valid one."""
    if live is not None and parse_record_date(live.date) is not None:
        return live
    dated = [
        (day, record)
        for record in records
        if (day := parse_record_date(record.date)) is not None
    ]
    if not dated:
        return None
    if selected is not None:
        for day, record in dated:
            if day == selected:
                return record
        return None
    return max(dated, key=lambda item: item[0])[1]
