"""Comparison results between periods."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Growth:
    """Change of a total against a baseline."""

    previous: float
    current: float
    diff: float
    growth: float


@dataclass(frozen=True)
class SiteComparison:
    """Week-over-week and target comparison for one site or the total."""

    name: str
    revenue: float
    expected: float
    delta: float | None
    revenue_wow: Growth | None
    dishes_wow: Growth | None
