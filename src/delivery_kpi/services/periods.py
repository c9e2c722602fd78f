"""Period keys and grouping for day, week and month views."""

import math
from collections.abc import Iterable
from datetime import date, timedelta

from delivery_kpi.domain.periods import PeriodGroup, RecordT, ViewMode
from delivery_kpi.services.parsing import parse_record_date

THURSDAY = 4
SATURDAY = 6
SUNDAY = 7


def day_key(day: date) -> str:
    """Return the ``YYYY-MM-DD`` key of a day."""
    return day.isoformat()


def week_key(day: date) -> str:
    """Return the ISO week key, e.g. ``2024-W1``.

    The week belongs to the year of its Thursday; the week number counts
    seven-day blocks from January 1st of that year.
    """
    thursday = day + timedelta(days=THURSDAY - day.isoweekday())
    year_start = date(thursday.year, 1, 1)
    week = math.ceil(((thursday - year_start).days + 1) / 7)
    return f"{thursday.year}-W{week}"


def month_key(day: date) -> str:
    """Return the ``YYYY-MM`` key of a day."""
    return f"{day.year}-{day.month:02d}"


def period_key(day: date, view_mode: ViewMode) -> str:
    """Return the grouping key of a day for a view mode."""
    if view_mode == ViewMode.WEEK:
        return week_key(day)
    if view_mode == ViewMode.MONTH:
        return month_key(day)
    return day_key(day)


def month_label(key: str) -> str:
    """Return a short human label such as ``Jan 2024`` for a month key."""
    year, month = key.split("-")
    return date(int(year), int(month), 1).strftime("%b %Y")


def period_label(key: str, view_mode: ViewMode) -> str:
    """Return the display label of a period key."""
    if view_mode == ViewMode.MONTH:
        return month_label(key)
    return key


def is_weekend(day: date) -> bool:
    """Return whether the day is a Saturday or Sunday."""
    return day.isoweekday() in {SATURDAY, SUNDAY}


def in_reference_week(day: date, reference: date) -> bool:
    """Return whether a day counts toward the reference date's week.

    Weeks are cut at month boundaries: a day must share both the ISO week
    and the calendar month of the reference date.
    """
    return (
        week_key(day) == week_key(reference)
        and day.month == reference.month
        and day.year == reference.year
    )


def in_reference_month(day: date, reference: date) -> bool:
    """Return whether a day falls in the reference date's month."""
    return month_key(day) == month_key(reference)


def sort_valid(
    records: Iterable[RecordT], *, exclude_weekends: bool = False
) -> list[tuple[date, RecordT]]:
    """Drop undated records (and weekends if asked) and sort by date."""
    dated = []
    for record in records:
        day = parse_record_date(record.date)
        if day is None:
            continue
        if exclude_weekends and is_weekend(day):
            continue
        dated.append((day, record))
    dated.sort(key=lambda item: item[0])
    return dated


def group_by_period(
    dated: Iterable[tuple[date, RecordT]], view_mode: ViewMode
) -> list[PeriodGroup[RecordT]]:
    """Group date-sorted records by period key, keeping first-seen order."""
    buckets: dict[str, list[tuple[date, RecordT]]] = {}
    for day, record in dated:
        buckets.setdefault(period_key(day, view_mode), []).append((day, record))
    return [
        PeriodGroup(
            key=key,
            label=period_label(key, view_mode),
            start=members[0][0],
            members=tuple(record for _, record in members),
        )
        for key, members in buckets.items()
    ]
