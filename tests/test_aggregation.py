"""Tests for weighted aggregation of daily records."""

from datetime import date

import pytest

from delivery_kpi.domain.daily import DerivedRecord
from delivery_kpi.domain.periods import ViewMode
from delivery_kpi.services.aggregation import (
    aggregate_records,
    merge_live_record,
    period_totals,
    summarize_reference_period,
)
from delivery_kpi.services.derivation import derive


def _day(
    day: str, revenue: float, extra_cost: float = 0.0, **values: float
) -> DerivedRecord:
    return derive(
        {"date": day, "totalRevenue": revenue, "extraCost": extra_cost, **values}
    )


def test_weekly_cost_percentage_is_weighted() -> None:
    records = [_day("2024-03-04", 100, 20), _day("2024-03-05", 300, 90)]

    (week,) = aggregate_records(records, ViewMode.WEEK)

    assert week.key == "2024-W10"
    assert week.record_count == 2
    assert week.logistic_cost_percentage == pytest.approx(0.275)
    assert week.total_logistic_cost == 110.0
    assert week.total_overall_revenue == 400.0


def test_aggregates_sum_to_record_totals() -> None:
    records = [
        _day("2024-03-04", 100, 20, meals=40, samirStops=5),
        _day("2024-03-11", 250, 0, meals=60, catering=30),
        _day("2024-04-01", 80, 5, serviceFee=10),
    ]

    series = aggregate_records(records, ViewMode.MONTH)

    assert [stats.label for stats in series] == ["Mar 2024", "Apr 2024"]
    assert sum(stats.net_profit for stats in series) == pytest.approx(
        sum(record.net_profit for record in records)
    )
    assert sum(stats.total_logistic_cost for stats in series) == pytest.approx(
        sum(record.total_logistic_cost for record in records)
    )
    march = series[0]
    assert march.meals == 100.0
    assert march.split_main_revenue == 350.0
    assert march.split_catering_revenue == 30.0
    assert march.samir_total == 85.0


def test_week_spanning_months_groups_by_week_key() -> None:
    records = [_day("2024-01-31", 100), _day("2024-02-01", 100)]

    weekly = aggregate_records(records, ViewMode.WEEK)
    monthly = aggregate_records(records, ViewMode.MONTH)

    assert [stats.key for stats in weekly] == ["2024-W5"]
    assert [stats.key for stats in monthly] == ["2024-01", "2024-02"]


def test_invalid_dates_are_skipped() -> None:
    records = [_day("2024-03-04", 100), _day("garbage", 999)]

    (day,) = aggregate_records(records, ViewMode.DAY)

    assert day.total_revenue == 100.0


def test_weekends_can_be_excluded() -> None:
    records = [_day("2024-03-08", 100), _day("2024-03-09", 50)]

    series = aggregate_records(records, ViewMode.WEEK, exclude_weekends=True)

    assert series[0].total_revenue == 100.0


def test_merge_live_record_replaces_stored_date() -> None:
    history = [_day("2024-03-04", 100), _day("2024-03-05", 200)]
    live = _day("2024-03-05", 500)

    merged = merge_live_record(history, live)

    assert len(merged) == 2
    assert merged[-1] is live
    assert len(merge_live_record(history, _day("2024-03-06", 1))) == 3
    assert merge_live_record(history, None) == history


def test_reference_week_stops_at_month_boundary() -> None:
    records = [
        _day("2024-01-29", 100, jozefStops=3),
        _day("2024-01-31", 100, aliStops=2),
        _day("2024-02-01", 200, ali2Stops=4, samirStops=5),
        _day("2024-02-02", 300),
    ]

    summary = summarize_reference_period(records, date(2024, 2, 1))

    assert summary.week_label == "2024-W5"
    assert summary.month_label == "February"
    assert summary.weekly.total_overall_revenue == 500.0
    assert summary.weekly.combined_fixed_stops == 4.0
    assert summary.weekly.payable_samir == 85.0
    assert summary.monthly.total_overall_revenue == 500.0


def test_period_totals_weighted_percentages() -> None:
    totals = period_totals(
        [
            _day("2024-03-04", 100, 20, gygCateringRevenue=100),
            _day("2024-03-05", 300, 90),
        ]
    )

    assert totals.total_overall_revenue == 500.0
    assert totals.main_revenue_total == 400.0
    assert totals.gyg_catering_revenue_total == 100.0
    assert totals.avg_overall_logistic_cost_percentage == pytest.approx(110 / 500)
    assert totals.avg_main_revenue_percentage == pytest.approx(0.8)
    assert period_totals([]).total_overall_revenue == 0.0
