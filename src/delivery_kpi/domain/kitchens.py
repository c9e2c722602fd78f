"""Domain models for the multi-site kitchen view."""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields

from delivery_kpi.domain.rows import camel_case

EXPECTED_FIELDS = (
    "expected_main_business",
    "expected_service_fee",
    "expected_catering_charges",
)


@dataclass(frozen=True)
class KitchenMetrics:
    """Entries for one kitchen site on one day.

    Totals and percentages are properties so they can never drift from
    the entries they are computed from.
    """

    price_per_dish: float = 0.0
    price_per_dish_with_fee: float = 0.0
    dishes_ordered: float = 0.0
    main_dish_revenue: float = 0.0
    main_business: float = 0.0
    service_fee: float = 0.0
    catering_charges: float = 0.0
    expected_main_business: float = 0.0
    expected_service_fee: float = 0.0
    expected_catering_charges: float = 0.0
    cogs: float = 0.0
    leftover_count: float = 0.0

    @property
    def total_revenue(self) -> float:
        """Kitchen revenue plus service fee plus catering."""
        return self.main_business + self.service_fee + self.catering_charges

    @property
    def expected_total(self) -> float:
        """Sum of the three expected revenue streams."""
        return (
            self.expected_main_business
            + self.expected_service_fee
            + self.expected_catering_charges
        )

    @property
    def cogs_percentage(self) -> float:
        """COGS as a share of total revenue."""
        revenue = self.total_revenue
        return self.cogs / revenue if revenue > 0 else 0.0

    @property
    def leftover_percentage(self) -> float:
        """Leftover dishes as a share of dishes ordered."""
        if self.dishes_ordered > 0:
            return self.leftover_count / self.dishes_ordered
        return 0.0

    def to_row(self) -> dict[str, object]:
        """Return the camelCase row including derived values."""
        row = {camel_case(name): value for name, value in asdict(self).items()}
        row["totalRevenue"] = self.total_revenue
        row["cogsPercentage"] = self.cogs_percentage
        row["leftoverPercentage"] = self.leftover_percentage
        return row


KITCHEN_INPUT_FIELDS = tuple(item.name for item in fields(KitchenMetrics))

KITCHEN_EXPORT_FIELDS = tuple(
    camel_case(name)
    for name in (
        *KITCHEN_INPUT_FIELDS,
        "total_revenue",
        "cogs_percentage",
        "leftover_percentage",
    )
)


@dataclass(frozen=True)
class MultiSiteRecord:
    """One day of entries across every kitchen site."""

    date: str
    sites: Mapping[str, KitchenMetrics] = field(default_factory=dict)
    global_wow_growth: float = 0.0

    def site(self, name: str) -> KitchenMetrics:
        """Return a site's metrics, empty when the site has no entries."""
        return self.sites.get(name) or KitchenMetrics()

    @property
    def total_global_revenue(self) -> float:
        """Sum of every site's total revenue."""
        return sum(metrics.total_revenue for metrics in self.sites.values())

    @property
    def total_expected(self) -> float:
        """Sum of every site's expected revenue."""
        return sum(metrics.expected_total for metrics in self.sites.values())

    @property
    def total_dishes(self) -> float:
        """Sum of dishes ordered across sites."""
        return sum(metrics.dishes_ordered for metrics in self.sites.values())

    def to_row(self) -> dict[str, object]:
        """Return the nested row stored per date."""
        row: dict[str, object] = {"date": self.date}
        for name, metrics in self.sites.items():
            row[name] = metrics.to_row()
        row["totalGlobalRevenue"] = self.total_global_revenue
        row["globalWowGrowth"] = self.global_wow_growth
        return row
