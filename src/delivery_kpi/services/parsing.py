"""Lenient coercion of operator input into numbers and dates.

Nothing in here raises for bad domain input: unparseable numbers become
``0`` and unparseable dates become ``None``.
"""

import logging
import math
import re
from datetime import date, datetime

from delivery_kpi.services.expressions import ExpressionError, evaluate_expression

_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_DATE_PREFIX = re.compile(r"^\s*(\d{4}-\d{2}-\d{2})")

_logger = logging.getLogger(__name__)


def coerce_number(value: object) -> float:
    """Return a finite float for any input, ``0`` when it is not a number."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        return _leading_number(value)
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def parse_amount(value: object) -> float:
    """Parse an amount that may be typed as an arithmetic expression."""
    if not isinstance(value, str):
        return coerce_number(value)
    text = value.strip()
    if not text:
        return 0.0
    try:
        return evaluate_expression(text)
    except ExpressionError as exc:
        _logger.debug("Falling back to plain number for %r: %s", text, exc)
    return _leading_number(text.removeprefix("="))


def parse_record_date(value: object) -> date | None:
    """Return the calendar date of a record key, or ``None`` if invalid."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    match = _DATE_PREFIX.match(value)
    if match is None:
        return None
    try:
        return date.fromisoformat(match.group(1))
    except ValueError:
        return None


def _leading_number(text: str) -> float:
    match = _LEADING_NUMBER.match(text)
    if match is None:
        return 0.0
    number = float(match.group(1))
    return number if math.isfinite(number) else 0.0
