"""Derivation of daily KPIs from raw operator input."""

from collections.abc import Iterable, Mapping
from datetime import date, datetime

from delivery_kpi.domain.daily import (
    NUMERIC_INPUT_FIELDS,
    CostLine,
    DailyInput,
    DerivedRecord,
)
from delivery_kpi.domain.rows import lookup
from delivery_kpi.services import pricing
from delivery_kpi.services.parsing import coerce_number


def parse_daily_input(raw: Mapping[str, object]) -> DailyInput:
    """Normalize a partial raw mapping into a fully populated input."""
    values = dict(raw)
    numbers = {
        name: coerce_number(lookup(values, name)) for name in NUMERIC_INPUT_FIELDS
    }
    note = lookup(values, "extra_cost_note")
    return DailyInput(
        date=_date_key(values.get("date")),
        extra_cost_note=note if isinstance(note, str) else "",
        **numbers,
    )


def derive(raw: Mapping[str, object] | DailyInput) -> DerivedRecord:
    """Compute every cost, revenue and ratio field for one day."""
    inputs = raw if isinstance(raw, DailyInput) else parse_daily_input(raw)

    packator_stop_cost = (
        pricing.packator_cost(inputs.packator1_stops)
        + pricing.packator_cost(inputs.packator2_stops)
        + pricing.packator_cost(inputs.packator3_stops)
    )
    packator_dispatch_cost = pricing.coordination_cost(
        inputs.packator1_stops, inputs.packator2_stops, inputs.packator3_stops
    )
    packator_cost = packator_stop_cost + packator_dispatch_cost

    samir_pickup_cost = pricing.pickup_cost(inputs.samir_pickup_stops)
    samir_cost = pricing.standard_cost(inputs.samir_stops) + samir_pickup_cost
    jozef_cost = pricing.day_fee(inputs.jozef_stops, pricing.JOZEF_DAY_FEE)
    ali_pickup_cost = pricing.pickup_cost(inputs.ali_pickups)
    ali_cost = pricing.day_fee(inputs.ali_stops, pricing.ALI_DAY_FEE) + ali_pickup_cost
    ali2_cost = pricing.day_fee(inputs.ali2_stops, pricing.ALI_DAY_FEE)
    ali3_cost = pricing.dispatch_cost(inputs.ali3_stops)
    ali4_cost = pricing.dispatch_cost(inputs.ali4_stops)

    internal_staff_cost = (
        inputs.internal_staff_count * pricing.INTERNAL_STAFF_DAY_RATE
        + inputs.internal_fuel
    )
    total_dispatching_cost = (
        packator_cost
        + samir_cost
        + jozef_cost
        + ali_cost
        + ali2_cost
        + ali3_cost
        + ali4_cost
    )
    # Fuel is already inside internal_staff_cost and is added a second time here.
    total_logistic_cost = (
        total_dispatching_cost
        + internal_staff_cost
        + inputs.internal_fuel
        + inputs.extra_cost
    )

    main_revenue_total = inputs.total_revenue + inputs.service_fee + inputs.catering
    total_overall_revenue = (
        main_revenue_total + inputs.gyg_catering_revenue + inputs.revolute_revenue
    )

    total_external_stops = (
        inputs.packator1_stops
        + inputs.packator2_stops
        + inputs.packator3_stops
        + inputs.samir_stops
        + inputs.jozef_stops
        + inputs.ali_stops
        + inputs.ali2_stops
        + inputs.ali3_stops
        + inputs.ali4_stops
    )
    total_stops = total_external_stops + inputs.internal_deliveries

    return DerivedRecord(
        inputs=inputs,
        packator_stop_cost=packator_stop_cost,
        packator_dispatch_cost=packator_dispatch_cost,
        packator_cost=packator_cost,
        samir_pickup_cost=samir_pickup_cost,
        samir_cost=samir_cost,
        jozef_cost=jozef_cost,
        ali_pickup_cost=ali_pickup_cost,
        ali_cost=ali_cost,
        ali2_cost=ali2_cost,
        ali3_cost=ali3_cost,
        ali4_cost=ali4_cost,
        total_dispatching_cost=total_dispatching_cost,
        internal_staff_cost=internal_staff_cost,
        total_logistic_cost=total_logistic_cost,
        main_revenue_total=main_revenue_total,
        total_overall_revenue=total_overall_revenue,
        logistic_cost_percentage=ratio(total_logistic_cost, total_overall_revenue),
        main_revenue_percentage=ratio(main_revenue_total, total_overall_revenue),
        addons_meals_percentage=ratio(inputs.add_ons, inputs.meals),
        net_profit=total_overall_revenue - total_logistic_cost,
        total_ali_payable=(
            ali_cost
            + ali2_cost
            + ali3_cost
            + ali4_cost
            + jozef_cost
            + packator_dispatch_cost
            + inputs.extra_cost
        ),
        total_packator_payable=packator_stop_cost,
        total_samir_payable=samir_cost,
        total_external_stops=total_external_stops,
        total_stops=total_stops,
        external_cost_per_stop=ratio(total_dispatching_cost, total_external_stops),
        # Dishes per unit of cost, kept as the dashboards have always shown it.
        logistic_cost_per_dish=ratio(inputs.meals, total_logistic_cost),
        logistic_cost_per_stop=ratio(total_logistic_cost, total_stops),
        meals_per_delivery=ratio(inputs.meals, inputs.manual_total_deliveries),
        meals_per_stop=ratio(inputs.meals, total_stops),
        cost_breakdown=(
            CostLine("Packator Services", packator_stop_cost),
            CostLine("Packator Dispatch (Ali)", packator_dispatch_cost),
            CostLine("Samir", samir_cost),
            CostLine("Jozef", jozef_cost),
            CostLine("Ali", ali_cost),
            CostLine("Ali 2", ali2_cost),
            CostLine("Ali 3", ali3_cost),
            CostLine("Ali 4", ali4_cost),
            CostLine("Internal Staff", internal_staff_cost),
            CostLine("Internal Fuel", inputs.internal_fuel),
            CostLine("Extra Costs", inputs.extra_cost),
        ),
    )


def hydrate(
    rows: Iterable[Mapping[str, object] | DailyInput],
) -> list[DerivedRecord]:
    """Re-derive stored rows so derived fields always match their inputs."""
    return [derive(row) for row in rows]


def ratio(numerator: float, denominator: float) -> float:
    """Divide, returning ``0`` for a non-positive denominator."""
    return numerator / denominator if denominator > 0 else 0.0


def _date_key(value: object) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return value.strip()
    return ""
