"""Human date expressions for the ``[date]`` placeholder.

Accepted forms (case-insensitive)::

    ""              no date
    today
    2024-11-20      ISO
    11/20/2024      US month/day/year
    tuesday, tue    the next Tuesday, counting today
    tuesday+2       two weeks after that
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
import logging
from typing import Optional

from .exceptions import DateExpressionError

LOGGER = logging.getLogger("pdf_handouts.dates")

_EXPLICIT_FORMATS = ("%Y-%m-%d", "%m/%d/%Y")
_WEEKDAYS = {
    "monday": 0, "mon": 0,
    "tuesday": 1, "tue": 1,
    "wednesday": 2, "wed": 2,
    "thursday": 3, "thu": 3,
    "friday": 4, "fri": 4,
    "saturday": 5, "sat": 5,
    "sunday": 6, "sun": 6,
}


class DateKind(Enum):
    NONE = "none"
    TODAY = "today"
    EXPLICIT = "explicit"
    WEEKDAY = "weekday"


@dataclass(frozen=True)
class DateExpression:
    kind: DateKind
    value: Optional[date] = None
    weekday: Optional[int] = None
    weeks: int = 0


def _parse_weekday(text: str) -> int:
    weekday = _WEEKDAYS.get(text.strip().lower())
    if weekday is None:
        raise DateExpressionError(f"Unknown weekday: {text.strip()}")
    return weekday


def parse_date_expression(text: str) -> DateExpression:
    """Parse *text* into a :class:`DateExpression`.

    Raises:
        DateExpressionError: If *text* matches none of the accepted forms.
    """

    expr = text.strip()
    if not expr:
        return DateExpression(DateKind.NONE)
    if expr.lower() == "today":
        return DateExpression(DateKind.TODAY)

    for fmt in _EXPLICIT_FORMATS:
        try:
            return DateExpression(DateKind.EXPLICIT, value=datetime.strptime(expr, fmt).date())
        except ValueError:
            continue

    day, plus, offset = expr.partition("+")
    if plus:
        try:
            weeks = int(offset.strip())
        except ValueError as exc:
            raise DateExpressionError(f"Invalid offset: {offset.strip()}") from exc
        if weeks < 0:
            raise DateExpressionError(f"Invalid offset: {offset.strip()}")
        return DateExpression(DateKind.WEEKDAY, weekday=_parse_weekday(day), weeks=weeks)

    try:
        return DateExpression(DateKind.WEEKDAY, weekday=_parse_weekday(expr))
    except DateExpressionError:
        raise DateExpressionError(f"Unable to parse date expression: {expr}") from None


def resolve_date(expr: DateExpression, today: Optional[date] = None) -> Optional[date]:
    """Turn *expr* into a calendar date relative to *today* (default: local date)."""

    if expr.kind is DateKind.NONE:
        return None
    today = today or date.today()
    if expr.kind is DateKind.TODAY:
        return today
    if expr.kind is DateKind.EXPLICIT:
        return expr.value
    days_until = (expr.weekday - today.weekday()) % 7
    return today + timedelta(days=days_until + 7 * expr.weeks)


def format_date(value: date) -> str:
    """Format *value* as ``November 20, 2024``."""

    return f"{value:%B} {value.day}, {value.year}"


def resolve_date_text(text: Optional[str], today: Optional[date] = None) -> Optional[str]:
    """Parse, resolve and format *text* in one step; ``None`` when there is no date."""

    if text is None:
        return None
    resolved = resolve_date(parse_date_expression(text), today)
    if resolved is None:
        return None
    LOGGER.debug("Resolved date expression %r to %s", text, resolved)
    return format_date(resolved)


__all__ = [
    "DateKind",
    "DateExpression",
    "parse_date_expression",
    "resolve_date",
    "format_date",
    "resolve_date_text",
]
