"""Week-over-week, target and sequential comparisons."""

from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from delivery_kpi.domain.kitchens import MultiSiteRecord
from delivery_kpi.domain.periods import RecordT
from delivery_kpi.domain.trends import Growth, SiteComparison
from delivery_kpi.services.parsing import parse_record_date

DAYS_PER_WEEK = 7
TOTAL = "total"


def find_week_ago(records: Iterable[RecordT], current: date) -> RecordT | None:
    """Return the record dated exactly seven days before ``current``."""
    target = current - timedelta(days=DAYS_PER_WEEK)
    for record in records:
        if parse_record_date(record.date) == target:
            return record
    return None


def week_over_week(current: float, previous: float | None) -> Growth | None:
    """Compare against last week's total; ``None`` without a positive baseline."""
    if previous is None or previous <= 0:
        return None
    diff = current - previous
    return Growth(previous=previous, current=current, diff=diff, growth=diff / previous)


def expected_delta(actual: float, expected: float) -> float | None:
    """Return ``actual / expected - 1``, ``None`` without a positive target."""
    if expected <= 0:
        return None
    return actual / expected - 1


def sequential_beta(current: float, previous: float) -> float:
    """Return the drop against the preceding bucket, ``0`` without a baseline."""
    if previous <= 0:
        return 0.0
    return 1 - current / previous


def global_wow_growth(
    record: MultiSiteRecord, week_ago: MultiSiteRecord | None
) -> float:
    """Growth stored on save; ``0`` unless both totals are positive."""
    current = record.total_global_revenue
    if week_ago is None or current <= 0:
        return 0.0
    growth = week_over_week(current, week_ago.total_global_revenue)
    return growth.growth if growth is not None else 0.0


def compare_sites(
    record: MultiSiteRecord,
    week_ago: MultiSiteRecord | None,
    sites: Sequence[str],
) -> list[SiteComparison]:
    """Compare every site and the total against targets and last week."""
    comparisons = []
    for name in sites:
        metrics = record.site(name)
        previous = week_ago.site(name) if week_ago is not None else None
        comparisons.append(
            SiteComparison(
                name=name,
                revenue=metrics.total_revenue,
                expected=metrics.expected_total,
                delta=expected_delta(metrics.total_revenue, metrics.expected_total),
                revenue_wow=week_over_week(
                    metrics.total_revenue,
                    previous.total_revenue if previous is not None else None,
                ),
                dishes_wow=week_over_week(
                    metrics.dishes_ordered,
                    previous.dishes_ordered if previous is not None else None,
                ),
            )
        )
    comparisons.append(
        SiteComparison(
            name=TOTAL,
            revenue=record.total_global_revenue,
            expected=record.total_expected,
            delta=expected_delta(record.total_global_revenue, record.total_expected),
            revenue_wow=week_over_week(
                record.total_global_revenue,
                week_ago.total_global_revenue if week_ago is not None else None,
            ),
            dishes_wow=week_over_week(
                record.total_dishes,
                week_ago.total_dishes if week_ago is not None else None,
            ),
        )
    )
    return comparisons
