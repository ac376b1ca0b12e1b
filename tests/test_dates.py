from __future__ import annotations

from datetime import date

import pytest

from pdf_handouts.dates import (
    DateKind,
    format_date,
    parse_date_expression,
    resolve_date,
    resolve_date_text,
)
from pdf_handouts.exceptions import DateExpressionError

# A Wednesday.
TODAY = date(2024, 11, 20)


@pytest.mark.parametrize("text", ["", "   "])
def test_blank_means_no_date(text: str) -> None:
    expr = parse_date_expression(text)
    assert expr.kind is DateKind.NONE
    assert resolve_date(expr, TODAY) is None
    assert resolve_date_text(text, TODAY) is None


def test_none_means_no_date() -> None:
    assert resolve_date_text(None, TODAY) is None


def test_today() -> None:
    assert resolve_date(parse_date_expression("Today"), TODAY) == TODAY


@pytest.mark.parametrize("text", ["2026-01-14", "01/14/2026"])
def test_explicit_dates(text: str) -> None:
    expr = parse_date_expression(text)
    assert expr.kind is DateKind.EXPLICIT
    assert resolve_date(expr, TODAY) == date(2026, 1, 14)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("wednesday", date(2024, 11, 20)),
        ("thursday", date(2024, 11, 21)),
        ("Tue", date(2024, 11, 26)),
        ("sun", date(2024, 11, 24)),
        ("tuesday+1", date(2024, 12, 3)),
        ("wednesday + 2", date(2024, 12, 4)),
        ("friday+0", date(2024, 11, 22)),
    ],
)
def test_weekday_expressions(text: str, expected: date) -> None:
    expr = parse_date_expression(text)
    assert expr.kind is DateKind.WEEKDAY
    assert resolve_date(expr, TODAY) == expected


@pytest.mark.parametrize("text", ["someday", "2024-13-01", "tuesday+x", "tuesday+-1", "funday+1"])
def test_invalid_expressions(text: str) -> None:
    with pytest.raises(DateExpressionError):
        parse_date_expression(text)


def test_format_date() -> None:
    assert format_date(date(2024, 11, 20)) == "November 20, 2024"
    assert format_date(date(2025, 3, 4)) == "March 4, 2025"


def test_resolve_date_text() -> None:
    assert resolve_date_text("thursday", TODAY) == "November 21, 2024"
