"""Tests for multi-site kitchen records and aggregates."""

from datetime import date

import pytest

from delivery_kpi.domain.kitchens import (
    KITCHEN_EXPORT_FIELDS,
    KitchenMetrics,
    MultiSiteRecord,
)
from delivery_kpi.domain.periods import ViewMode
from delivery_kpi.services.kitchens import (
    aggregate_kitchens,
    current_kitchen_stats,
    merge_live_kitchen_record,
    parse_kitchen_metrics,
    parse_multi_site_record,
)
from tests.conftest import SITES, site_entry


def _record(day: str, **sites: dict[str, float]) -> MultiSiteRecord:
    return parse_multi_site_record({"date": day, **sites}, SITES)


def test_parse_kitchen_metrics_accepts_expressions() -> None:
    metrics = parse_kitchen_metrics(
        {
            "mainBusiness": "=100+20",
            "serviceFee": "5*3",
            "catering_charges": "",
            "cogs": "40abc",
        }
    )

    assert metrics.main_business == 120.0
    assert metrics.service_fee == 15.0
    assert metrics.catering_charges == 0.0
    assert metrics.cogs == 40.0
    assert metrics.total_revenue == 135.0


def test_metrics_percentages() -> None:
    metrics = KitchenMetrics(
        main_business=300,
        service_fee=50,
        catering_charges=50,
        cogs=100,
        dishes_ordered=40,
        leftover_count=4,
    )

    assert metrics.cogs_percentage == 0.25
    assert metrics.leftover_percentage == 0.1
    assert KitchenMetrics().cogs_percentage == 0.0
    assert KitchenMetrics().leftover_percentage == 0.0


def test_parse_multi_site_record_fills_missing_sites() -> None:
    record = _record("2024-03-04", berlin=site_entry(main_business=100))

    assert set(record.sites) == set(SITES)
    assert record.site("munich") == KitchenMetrics()
    assert record.total_global_revenue == 100.0


def test_record_row_is_nested_per_site() -> None:
    record = _record("2024-03-04", koln=site_entry(main_business=80, service_fee=20))

    row = record.to_row()

    assert row["date"] == "2024-03-04"
    assert row["koln"]["totalRevenue"] == 100.0
    assert set(KITCHEN_EXPORT_FIELDS) <= set(row["koln"])
    assert row["totalGlobalRevenue"] == 100.0
    assert parse_multi_site_record(row, SITES) == record


def test_aggregate_kitchens_excludes_weekends_and_weights_ratios() -> None:
    records = [
        _record(
            "2024-03-04",
            berlin=site_entry(
                main_business=100, cogs=10, dishes_ordered=10, leftover_count=1
            ),
        ),
        _record(
            "2024-03-05",
            berlin=site_entry(
                main_business=300, cogs=90, dishes_ordered=30, leftover_count=9
            ),
            munich=site_entry(main_business=100, expected_main_business=200),
        ),
        _record("2024-03-09", berlin=site_entry(main_business=1000)),
    ]

    (week,) = aggregate_kitchens(records, ViewMode.WEEK, SITES)

    berlin = week.sites["berlin"]
    assert berlin.revenue == 400.0
    assert berlin.cogs_percentage == pytest.approx(0.25)
    assert berlin.leftover_percentage == pytest.approx(0.25)
    assert berlin.share == pytest.approx(0.8)
    assert berlin.revenue_per_dish == 10.0
    assert week.global_revenue == 500.0
    assert week.global_expected == 200.0
    assert week.global_delta == pytest.approx(1.5)
    assert week.stream_main == 500.0


def test_global_delta_is_none_without_targets() -> None:
    records = [_record("2024-03-04", berlin=site_entry(main_business=10))]

    (day,) = aggregate_kitchens(records, ViewMode.DAY, SITES)

    assert day.global_delta is None


def test_current_stats_pick_selected_bucket_and_beta() -> None:
    records = [
        _record("2024-03-04", berlin=site_entry(main_business=200)),
        _record("2024-03-11", berlin=site_entry(main_business=150)),
        _record("2024-03-18", berlin=site_entry(main_business=300)),
    ]
    series = aggregate_kitchens(records, ViewMode.WEEK, SITES)

    latest = current_kitchen_stats(series, ViewMode.WEEK)
    selected = current_kitchen_stats(series, ViewMode.WEEK, date(2024, 3, 13))
    first = current_kitchen_stats(series, ViewMode.WEEK, date(2024, 3, 4))

    assert latest is not None and latest.current.key == "2024-W12"
    assert latest.beta == pytest.approx(1 - 300 / 150)
    assert selected is not None and selected.beta == pytest.approx(0.25)
    assert first is not None and first.previous is None and first.beta == 0.0
    assert current_kitchen_stats([], ViewMode.DAY) is None


def test_merge_live_kitchen_record() -> None:
    history = [_record("2024-03-04"), _record("2024-03-05")]
    live = _record("2024-03-05", berlin=site_entry(main_business=5))

    merged = merge_live_kitchen_record(history, live)

    assert len(merged) == 2
    assert merged[-1] == live


def test_parse_kitchen_metrics_survives_long_sign_runs() -> None:
    metrics = parse_kitchen_metrics(
        {"cogs": "-" * 5000 + "1", "mainBusiness": "(" * 5000 + "1" + ")" * 5000}
    )

    assert metrics.cogs == 1.0
    assert metrics.main_business == 0.0
