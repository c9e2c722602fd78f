"""Aggregated statistics produced from derived records."""

from dataclasses import asdict, dataclass, field

from delivery_kpi.domain.daily import DerivedRecord
from delivery_kpi.domain.kitchens import MultiSiteRecord
from delivery_kpi.domain.rows import camel_case
from delivery_kpi.domain.trends import SiteComparison


@dataclass(frozen=True)
class AggregateStats:
    """Summed financials and weighted ratios for one period bucket."""

    key: str
    label: str
    record_count: int
    total_revenue: float
    service_fee: float
    catering: float
    meals: float
    add_ons: float
    gyg_catering_revenue: float
    revolute_revenue: float
    main_revenue_total: float
    total_overall_revenue: float
    split_main_revenue: float
    split_catering_revenue: float
    total_dispatching_cost: float
    internal_staff_cost: float
    internal_fuel: float
    extra_cost: float
    total_logistic_cost: float
    net_profit: float
    ali_total: float
    packator_total: float
    samir_total: float
    total_external_stops: float
    total_stops: float
    manual_total_deliveries: float
    dishes_scanned: float
    deliveries_late: float
    minutes_late: float
    logistic_cost_percentage: float
    main_revenue_percentage: float
    addons_meals_percentage: float
    logistic_cost_per_stop: float
    logistic_cost_per_dish: float
    meals_per_stop: float
    meals_per_delivery: float
    external_cost_per_stop: float

    def to_row(self) -> dict[str, object]:
        """Return the camelCase row for charts and exports."""
        return {camel_case(name): value for name, value in asdict(self).items()}


@dataclass(frozen=True)
class PeriodTotals:
    """Payables and revenue totals for the period around a reference date."""

    payable_ali: float = 0.0
    payable_packator: float = 0.0
    payable_samir: float = 0.0
    combined_fixed_stops: float = 0.0
    total_overall_revenue: float = 0.0
    main_revenue_total: float = 0.0
    gyg_catering_revenue_total: float = 0.0
    revolute_revenue_total: float = 0.0
    total_logistic_cost: float = 0.0
    avg_overall_logistic_cost_percentage: float = 0.0
    avg_main_revenue_percentage: float = 0.0


@dataclass(frozen=True)
class ReferencePeriodSummary:
    """Week-to-date and month-to-date totals for a reference date."""

    weekly: PeriodTotals = field(default_factory=PeriodTotals)
    monthly: PeriodTotals = field(default_factory=PeriodTotals)
    week_label: str = ""
    month_label: str = ""


@dataclass(frozen=True)
class KitchenSiteStats:
    """One site's totals inside a kitchen period bucket."""

    main_business: float
    service_fee: float
    catering_charges: float
    revenue: float
    expected: float
    dishes: float
    cogs_percentage: float
    leftover_percentage: float
    share: float
    revenue_per_dish: float


@dataclass(frozen=True)
class KitchenPeriodStats:
    """Multi-site totals for one period bucket."""

    key: str
    label: str
    sites: dict[str, KitchenSiteStats]
    global_revenue: float
    global_expected: float
    total_dishes: float
    stream_main: float
    stream_service: float
    stream_catering: float
    global_delta: float | None
    global_revenue_per_dish: float


@dataclass(frozen=True)
class KitchenCurrentStats:
    """The selected kitchen bucket with its sequential beta."""

    current: KitchenPeriodStats
    previous: KitchenPeriodStats | None
    beta: float


@dataclass(frozen=True)
class DailyDashboard:
    """Everything the daily logistics dashboard renders for one snapshot."""

    live: DerivedRecord | None
    series: list[AggregateStats]
    reference: ReferencePeriodSummary
    week_ago: DerivedRecord | None


@dataclass(frozen=True)
class KitchenDashboard:
    """Everything the multi-site dashboard renders for one snapshot."""

    live: MultiSiteRecord | None
    series: list[KitchenPeriodStats]
    current: KitchenCurrentStats | None
    comparisons: list[SiteComparison]
    week_ago: MultiSiteRecord | None
