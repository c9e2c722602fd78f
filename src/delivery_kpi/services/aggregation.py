"""Weighted aggregation of derived daily records."""

from collections.abc import Iterable, Sequence
from datetime import date

from delivery_kpi.domain.aggregates import (
    AggregateStats,
    PeriodTotals,
    ReferencePeriodSummary,
)
from delivery_kpi.domain.daily import DerivedRecord
from delivery_kpi.domain.periods import PeriodGroup, ViewMode
from delivery_kpi.services.derivation import ratio
from delivery_kpi.services.periods import (
    group_by_period,
    in_reference_month,
    in_reference_week,
    sort_valid,
    week_key,
)


def merge_live_record(
    history: Sequence[DerivedRecord], live: DerivedRecord | None
) -> list[DerivedRecord]:
    """Return history with the record being edited replacing its stored date."""
    if live is None or not live.date:
        return list(history)
    merged = [record for record in history if record.date != live.date]
    merged.append(live)
    return merged


def aggregate_records(
    records: Iterable[DerivedRecord],
    view_mode: ViewMode,
    *,
    exclude_weekends: bool = False,
) -> list[AggregateStats]:
    """Group records by period and sum them with weighted ratios."""
    dated = sort_valid(records, exclude_weekends=exclude_weekends)
    return [summarize_group(group) for group in group_by_period(dated, view_mode)]


def summarize_group(group: PeriodGroup[DerivedRecord]) -> AggregateStats:
    """Sum one period bucket.

    Ratios are rebuilt from the summed numerators and denominators; the
    members' own ratios are never averaged.
    """
    members = group.members

    def total(name: str) -> float:
        return sum(getattr(record, name) for record in members)

    def total_input(name: str) -> float:
        return sum(getattr(record.inputs, name) for record in members)

    total_revenue = total_input("total_revenue")
    service_fee = total_input("service_fee")
    catering = total_input("catering")
    meals = total_input("meals")
    add_ons = total_input("add_ons")
    gyg_catering_revenue = total_input("gyg_catering_revenue")
    revolute_revenue = total_input("revolute_revenue")
    main_revenue_total = total_revenue + service_fee + catering
    total_overall_revenue = main_revenue_total + gyg_catering_revenue + revolute_revenue

    total_logistic_cost = total("total_logistic_cost")
    total_dispatching_cost = total("total_dispatching_cost")
    total_stops = total("total_stops")
    total_external_stops = total("total_external_stops")
    manual_total_deliveries = total_input("manual_total_deliveries")

    return AggregateStats(
        key=group.key,
        label=group.label,
        record_count=len(members),
        total_revenue=total_revenue,
        service_fee=service_fee,
        catering=catering,
        meals=meals,
        add_ons=add_ons,
        gyg_catering_revenue=gyg_catering_revenue,
        revolute_revenue=revolute_revenue,
        main_revenue_total=main_revenue_total,
        total_overall_revenue=total_overall_revenue,
        split_main_revenue=total_revenue + service_fee,
        split_catering_revenue=catering,
        total_dispatching_cost=total_dispatching_cost,
        internal_staff_cost=total("internal_staff_cost"),
        internal_fuel=total_input("internal_fuel"),
        extra_cost=total_input("extra_cost"),
        total_logistic_cost=total_logistic_cost,
        net_profit=total("net_profit"),
        ali_total=total("total_ali_payable"),
        packator_total=total("total_packator_payable"),
        samir_total=total("total_samir_payable"),
        total_external_stops=total_external_stops,
        total_stops=total_stops,
        manual_total_deliveries=manual_total_deliveries,
        dishes_scanned=total_input("dishes_scanned"),
        deliveries_late=total_input("deliveries_late"),
        minutes_late=total_input("minutes_late"),
        logistic_cost_percentage=ratio(total_logistic_cost, total_overall_revenue),
        main_revenue_percentage=ratio(main_revenue_total, total_overall_revenue),
        addons_meals_percentage=ratio(add_ons, meals),
        logistic_cost_per_stop=ratio(total_logistic_cost, total_stops),
        logistic_cost_per_dish=ratio(meals, total_logistic_cost),
        meals_per_stop=ratio(meals, total_stops),
        meals_per_delivery=ratio(meals, manual_total_deliveries),
        external_cost_per_stop=ratio(total_dispatching_cost, total_external_stops),
    )


def summarize_reference_period(
    records: Iterable[DerivedRecord], reference: date
) -> ReferencePeriodSummary:
    """Return week-to-date and month-to-date totals around a reference date."""
    dated = sort_valid(records)
    weekly = [record for day, record in dated if in_reference_week(day, reference)]
    monthly = [record for day, record in dated if in_reference_month(day, reference)]
    return ReferencePeriodSummary(
        weekly=period_totals(weekly),
        monthly=period_totals(monthly),
        week_label=week_key(reference),
        month_label=reference.strftime("%B"),
    )


def period_totals(records: Sequence[DerivedRecord]) -> PeriodTotals:
    """Sum payables and revenue for a set of records."""
    if not records:
        return PeriodTotals()

    def total(name: str) -> float:
        return sum(getattr(record, name) for record in records)

    total_overall_revenue = total("total_overall_revenue")
    main_revenue_total = total("main_revenue_total")
    total_logistic_cost = total("total_logistic_cost")
    return PeriodTotals(
        payable_ali=total("total_ali_payable"),
        payable_packator=total("total_packator_payable"),
        payable_samir=total("total_samir_payable"),
        combined_fixed_stops=sum(
            record.inputs.ali_stops
            + record.inputs.ali2_stops
            + record.inputs.jozef_stops
            for record in records
        ),
        total_overall_revenue=total_overall_revenue,
        main_revenue_total=main_revenue_total,
        gyg_catering_revenue_total=sum(
            record.inputs.gyg_catering_revenue for record in records
        ),
        revolute_revenue_total=sum(
            record.inputs.revolute_revenue for record in records
        ),
        total_logistic_cost=total_logistic_cost,
        avg_overall_logistic_cost_percentage=ratio(
            total_logistic_cost, total_overall_revenue
        ),
        avg_main_revenue_percentage=ratio(main_revenue_total, total_overall_revenue),
    )
