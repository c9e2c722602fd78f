"""Carry-over of expected targets into new kitchen records."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace

from delivery_kpi.domain.kitchens import EXPECTED_FIELDS, MultiSiteRecord
from delivery_kpi.services.kitchens import empty_record
from delivery_kpi.services.parsing import parse_record_date

_logger = logging.getLogger(__name__)


def resolve_record(
    day: str, history: Iterable[MultiSiteRecord], sites: Sequence[str]
) -> MultiSiteRecord:
    """Return the stored record for a date or a new one seeded with targets.

    Targets differ per weekday, so a new Monday copies the expected values
    of the most recent earlier Monday. Actual figures are never copied.
    """
    records = list(history)
    target = parse_record_date(day)
    for record in records:
        if record.date == day:
            return record
        if target is not None and parse_record_date(record.date) == target:
            return record

    seeded = empty_record(day, sites)
    if target is None:
        return seeded

    candidates = []
    for record in records:
        record_day = parse_record_date(record.date)
        if record_day is None or record_day >= target:
            continue
        if record_day.weekday() == target.weekday():
            candidates.append((record_day, record))
    if not candidates:
        return seeded

    candidates.sort(key=lambda item: item[0], reverse=True)
    source_day, source = candidates[0]
    _logger.info("Carrying expected values for %s over from %s", day, source_day)
    sites_with_targets = {}
    for name, metrics in seeded.sites.items():
        previous = source.sites.get(name)
        if previous is None:
            sites_with_targets[name] = metrics
            continue
        targets = {field: getattr(previous, field) or 0.0 for field in EXPECTED_FIELDS}
        sites_with_targets[name] = replace(metrics, **targets)
    return replace(seeded, sites=sites_with_targets)
