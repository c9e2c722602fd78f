"""Domain models for period grouping."""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import Generic, Protocol, TypeVar


class ViewMode(StrEnum):
    """Granularity of an aggregated series."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class DatedRecord(Protocol):
    """Anything keyed by a ``YYYY-MM-DD`` date string."""

    @property
    def date(self) -> str:
        """Return the record's date key."""


RecordT = TypeVar("RecordT", bound=DatedRecord)


@dataclass(frozen=True)
class PeriodGroup(Generic[RecordT]):
    """Records sharing one period key, in ascending date order."""

    key: str
    label: str
    start: date
    members: tuple[RecordT, ...]
