"""Multi-site kitchen records and their period aggregates."""

from collections.abc import Iterable, Mapping, Sequence
from datetime import date

from delivery_kpi.domain.aggregates import (
    KitchenCurrentStats,
    KitchenPeriodStats,
    KitchenSiteStats,
)
from delivery_kpi.domain.kitchens import (
    KITCHEN_INPUT_FIELDS,
    KitchenMetrics,
    MultiSiteRecord,
)
from delivery_kpi.domain.periods import PeriodGroup, ViewMode
from delivery_kpi.domain.rows import lookup
from delivery_kpi.services.derivation import ratio
from delivery_kpi.services.parsing import coerce_number, parse_amount
from delivery_kpi.services.periods import group_by_period, period_key, sort_valid
from delivery_kpi.services.trends import sequential_beta


def parse_kitchen_metrics(raw: Mapping[str, object] | None) -> KitchenMetrics:
    """Normalize one site's raw entries; amounts may be typed as sums."""
    if not raw:
        return KitchenMetrics()
    values = dict(raw)
    return KitchenMetrics(
        **{name: parse_amount(lookup(values, name)) for name in KITCHEN_INPUT_FIELDS}
    )


def parse_multi_site_record(
    raw: Mapping[str, object], sites: Sequence[str]
) -> MultiSiteRecord:
    """Build a record with an entry for every configured site."""
    date_value = raw.get("date")
    metrics = {}
    for name in sites:
        site_raw = raw.get(name)
        metrics[name] = parse_kitchen_metrics(
            site_raw if isinstance(site_raw, Mapping) else None
        )
    return MultiSiteRecord(
        date=date_value.strip() if isinstance(date_value, str) else "",
        sites=metrics,
        global_wow_growth=coerce_number(lookup(dict(raw), "global_wow_growth")),
    )


def empty_record(day: str, sites: Sequence[str]) -> MultiSiteRecord:
    """Return a zero-valued record for a date."""
    return MultiSiteRecord(date=day, sites={name: KitchenMetrics() for name in sites})


def merge_live_kitchen_record(
    history: Sequence[MultiSiteRecord], live: MultiSiteRecord | None
) -> list[MultiSiteRecord]:
    """Return history with the edited record replacing its stored date."""
    if live is None or not live.date:
        return list(history)
    merged = [record for record in history if record.date != live.date]
    merged.append(live)
    return merged


def aggregate_kitchens(
    records: Iterable[MultiSiteRecord], view_mode: ViewMode, sites: Sequence[str]
) -> list[KitchenPeriodStats]:
    """Aggregate weekday records per period with weighted site ratios."""
    dated = sort_valid(records, exclude_weekends=True)
    return [
        summarize_kitchen_group(group, sites)
        for group in group_by_period(dated, view_mode)
    ]


def summarize_kitchen_group(
    group: PeriodGroup[MultiSiteRecord], sites: Sequence[str]
) -> KitchenPeriodStats:
    """Sum one bucket; COGS and leftover shares use summed totals."""
    partial: dict[str, dict[str, float]] = {}
    for name in sites:
        metrics = [record.site(name) for record in group.members]
        main_business = sum(item.main_business for item in metrics)
        service_fee = sum(item.service_fee for item in metrics)
        catering_charges = sum(item.catering_charges for item in metrics)
        partial[name] = {
            "main_business": main_business,
            "service_fee": service_fee,
            "catering_charges": catering_charges,
            "revenue": main_business + service_fee + catering_charges,
            "expected": sum(item.expected_total for item in metrics),
            "dishes": sum(item.dishes_ordered for item in metrics),
            "cogs": sum(item.cogs for item in metrics),
            "leftovers": sum(item.leftover_count for item in metrics),
        }

    global_revenue = sum(values["revenue"] for values in partial.values())
    global_expected = sum(values["expected"] for values in partial.values())
    total_dishes = sum(values["dishes"] for values in partial.values())

    site_stats = {
        name: KitchenSiteStats(
            main_business=values["main_business"],
            service_fee=values["service_fee"],
            catering_charges=values["catering_charges"],
            revenue=values["revenue"],
            expected=values["expected"],
            dishes=values["dishes"],
            cogs_percentage=ratio(values["cogs"], values["revenue"]),
            leftover_percentage=ratio(values["leftovers"], values["dishes"]),
            share=ratio(values["revenue"], global_revenue),
            revenue_per_dish=ratio(values["revenue"], values["dishes"]),
        )
        for name, values in partial.items()
    }

    return KitchenPeriodStats(
        key=group.key,
        label=group.label,
        sites=site_stats,
        global_revenue=global_revenue,
        global_expected=global_expected,
        total_dishes=total_dishes,
        stream_main=sum(values["main_business"] for values in partial.values()),
        stream_service=sum(values["service_fee"] for values in partial.values()),
        stream_catering=sum(values["catering_charges"] for values in partial.values()),
        global_delta=(
            global_revenue / global_expected - 1 if global_expected > 0 else None
        ),
        global_revenue_per_dish=ratio(global_revenue, total_dishes),
    )


def current_kitchen_stats(
    series: Sequence[KitchenPeriodStats],
    view_mode: ViewMode,
    selected: date | None = None,
) -> KitchenCurrentStats | None:
    """Pick the bucket holding the selected date, the latest one otherwise."""
    if not series:
        return None
    index = len(series) - 1
    if selected is not None:
        target_key = period_key(selected, view_mode)
        for position, stats in enumerate(series):
            if stats.key == target_key:
                index = position
                break
    current = series[index]
    previous = series[index - 1] if index > 0 else None
    beta = (
        sequential_beta(current.global_revenue, previous.global_revenue)
        if previous is not None
        else 0.0
    )
    return KitchenCurrentStats(current=current, previous=previous, beta=beta)
