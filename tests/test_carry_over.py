"""Tests for carrying expected targets into new kitchen records."""

from delivery_kpi.domain.kitchens import MultiSiteRecord
from delivery_kpi.services.carry_over import resolve_record
from delivery_kpi.services.kitchens import parse_multi_site_record
from tests.conftest import SITES, site_entry


def _monday(day: str, expected: float, actual: float = 0.0) -> MultiSiteRecord:
    return parse_multi_site_record(
        {
            "date": day,
            "berlin": site_entry(
                main_business=actual,
                expected_main_business=expected,
                expected_service_fee=expected / 10,
            ),
        },
        SITES,
    )


def test_new_record_copies_most_recent_same_weekday_targets() -> None:
    history = [_monday("2024-02-26", 500), _monday("2024-03-04", 800, actual=750)]

    record = resolve_record("2024-03-11", history, SITES)

    berlin = record.site("berlin")
    assert record.date == "2024-03-11"
    assert berlin.expected_main_business == 800.0
    assert berlin.expected_service_fee == 80.0
    assert berlin.main_business == 0.0
    assert record.site("munich").expected_total == 0.0


def test_existing_record_is_returned_unchanged() -> None:
    existing = _monday("2024-03-11", 100, actual=90)
    history = [_monday("2024-03-04", 800), existing]

    assert resolve_record("2024-03-11", history, SITES) is existing


def test_no_same_weekday_history_gives_zero_targets() -> None:
    history = [_monday("2024-03-04", 800)]

    record = resolve_record("2024-03-12", history, SITES)

    assert record.total_expected == 0.0
    assert record.total_global_revenue == 0.0


def test_later_records_are_never_used() -> None:
    history = [_monday("2024-03-18", 999)]

    record = resolve_record("2024-03-11", history, SITES)

    assert record.total_expected == 0.0


def test_existing_record_matches_by_calendar_date() -> None:
    existing = _monday("2024-03-11T00:00:00", 100, actual=90)
    history = [_monday("2024-03-04", 800), existing]

    assert resolve_record("2024-03-11", history, SITES) is existing
