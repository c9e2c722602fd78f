"""Tests for sandboxed arithmetic and lenient parsing."""

from datetime import date, datetime

import pytest

from delivery_kpi.services.expressions import ExpressionError, evaluate_expression
from delivery_kpi.services.parsing import coerce_number, parse_amount, parse_record_date


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("=120+35.5", 155.5),
        ("(3*40)/2", 60.0),
        ("-5 + 2", -3.0),
        ("2*-3", -6.0),
        (".5*4", 2.0),
        ("1+2*3", 7.0),
    ],
)
def test_evaluate_expression(text: str, expected: float) -> None:
    assert evaluate_expression(text) == pytest.approx(expected)


@pytest.mark.parametrize(
    "text",
    [
        "",
        "=",
        "1/0",
        "2**3",
        "(1+2",
        "1+",
        "__import__('os')",
        "abc",
        "(" * 5000 + "1" + ")" * 5000,
    ],
)
def test_evaluate_expression_rejects_invalid_input(text: str) -> None:
    with pytest.raises(ExpressionError):
        evaluate_expression(text)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("", 0.0),
        ("   ", 0.0),
        ("=10+5", 15.0),
        ("10/0", 10.0),
        ("12abc", 12.0),
        ("abc", 0.0),
        (42, 42.0),
        (None, 0.0),
    ],
)
def test_parse_amount(value: object, expected: float) -> None:
    assert parse_amount(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("3.5", 3.5),
        (" -2e2 ", -200.0),
        ("1,5", 1.0),
        (True, 0.0),
        (float("inf"), 0.0),
        ([1], 0.0),
        (10**400, 0.0),
    ],
)
def test_coerce_number(value: object, expected: float) -> None:
    assert coerce_number(value) == expected


def test_parse_record_date() -> None:
    assert parse_record_date("2024-03-04") == date(2024, 3, 4)
    assert parse_record_date("2024-03-04T10:00:00Z") == date(2024, 3, 4)
    assert parse_record_date(datetime(2024, 3, 4, 9)) == date(2024, 3, 4)
    assert parse_record_date("2024-02-30") is None
    assert parse_record_date("03/04/2024") is None
    assert parse_record_date(None) is None


def test_long_runs_of_signs_are_evaluated() -> None:
    assert evaluate_expression("-" * 5000 + "1") == 1.0
    assert evaluate_expression("-" * 5001 + "1") == -1.0
    assert evaluate_expression("2*--3") == 6.0


def test_parse_amount_survives_deep_nesting() -> None:
    assert parse_amount("(" * 5000 + "1" + ")" * 5000) == 0.0
    assert parse_amount("((2))*3") == 6.0
    assert parse_amount("-" * 5000 + "1") == 1.0
