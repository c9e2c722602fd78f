"""Domain models for daily logistics records."""

from dataclasses import asdict, dataclass, fields

from delivery_kpi.domain.rows import camel_case


@dataclass(frozen=True)
class DailyInput:
    """Operator entries for one day with every number already coerced."""

    date: str
    total_revenue: float = 0.0
    service_fee: float = 0.0
    catering: float = 0.0
    meals: float = 0.0
    add_ons: float = 0.0
    packator1_stops: float = 0.0
    packator2_stops: float = 0.0
    packator3_stops: float = 0.0
    samir_stops: float = 0.0
    samir_pickup_stops: float = 0.0
    jozef_stops: float = 0.0
    jozef_pickups: float = 0.0
    ali_stops: float = 0.0
    ali_pickups: float = 0.0
    ali2_stops: float = 0.0
    ali2_pickups: float = 0.0
    ali3_stops: float = 0.0
    ali3_pickups: float = 0.0
    ali4_stops: float = 0.0
    ali4_pickups: float = 0.0
    gyg_catering_revenue: float = 0.0
    revolute_revenue: float = 0.0
    internal_staff_count: float = 0.0
    internal_deliveries: float = 0.0
    internal_pickups: float = 0.0
    internal_fuel: float = 0.0
    extra_cost: float = 0.0
    extra_cost_note: str = ""
    manual_total_deliveries: float = 0.0
    dishes_scanned: float = 0.0
    deliveries_late: float = 0.0
    minutes_late: float = 0.0


NUMERIC_INPUT_FIELDS = tuple(
    field.name
    for field in fields(DailyInput)
    if field.name not in {"date", "extra_cost_note"}
)


@dataclass(frozen=True)
class CostLine:
    """A named cost amount used for breakdown charts."""

    name: str
    value: float


@dataclass(frozen=True)
class DerivedRecord:
    """A daily input together with every value computed from it."""

    inputs: DailyInput
    packator_stop_cost: float
    packator_dispatch_cost: float
    packator_cost: float
    samir_pickup_cost: float
    samir_cost: float
    jozef_cost: float
    ali_pickup_cost: float
    ali_cost: float
    ali2_cost: float
    ali3_cost: float
    ali4_cost: float
    total_dispatching_cost: float
    internal_staff_cost: float
    total_logistic_cost: float
    main_revenue_total: float
    total_overall_revenue: float
    logistic_cost_percentage: float
    main_revenue_percentage: float
    addons_meals_percentage: float
    net_profit: float
    total_ali_payable: float
    total_packator_payable: float
    total_samir_payable: float
    total_external_stops: float
    total_stops: float
    external_cost_per_stop: float
    logistic_cost_per_dish: float
    logistic_cost_per_stop: float
    meals_per_delivery: float
    meals_per_stop: float
    cost_breakdown: tuple[CostLine, ...] = ()

    @property
    def date(self) -> str:
        """Return the record's date key."""
        return self.inputs.date

    def to_row(self) -> dict[str, object]:
        """Return the flat camelCase row used by the store and exporters."""
        row = {camel_case(name): value for name, value in asdict(self.inputs).items()}
        for name in DERIVED_FIELDS:
            row[camel_case(name)] = getattr(self, name)
        row["costBreakdown"] = [
            {"name": line.name, "value": line.value} for line in self.cost_breakdown
        ]
        return row


DERIVED_FIELDS = tuple(
    field.name
    for field in fields(DerivedRecord)
    if field.name not in {"inputs", "cost_breakdown"}
)

DAILY_EXPORT_FIELDS = tuple(
    camel_case(name)
    for name in ("date", *NUMERIC_INPUT_FIELDS, "extra_cost_note", *DERIVED_FIELDS)
)
