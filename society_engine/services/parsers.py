"""Input parsing utilities for engine commands.

Handles the loosely-typed values the presentation layer sends:
- Month names ("March"), "MMMM yyyy" labels ("March 2026") and numeric months
- ISO dates ("2026-03-10")
- Status names in display form ("In Progress") or constant form ("IN_PROGRESS")

Example:
    >>> parse_month("March")
    3

    >>> parse_period_label("March 2026")
    (3, 2026)

    >>> parse_iso_date("2026-03-10")
    datetime.date(2026, 3, 10)
"""

import calendar
from datetime import date, datetime
from enum import Enum
from typing import TypeVar

E = TypeVar("E", bound=Enum)

_MONTHS = {name.lower(): index for index, name in enumerate(calendar.month_name) if name}
_MONTHS.update({name.lower(): index for index, name in enumerate(calendar.month_abbr) if name})


def parse_month(value: int | str) -> int:
    """
    Parse a month given as a number (3, "03") or an English name ("March", "Mar").

    Returns:
        Month number 1-12

    Raises:
        ValueError: If the value is not a recognisable month

    Examples:
        >>> parse_month(3)
        3
        >>> parse_month("march")
        3
        >>> parse_month("13")
        Traceback (most recent call last):
        ...
        ValueError: Month out of range: 13
    """
    if isinstance(value, bool):
        raise ValueError(f"Cannot parse month '{value}'")

    if isinstance(value, int):
        month = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.isdigit():
            month = int(text)
        elif text.lower() in _MONTHS:
            return _MONTHS[text.lower()]
        else:
            raise ValueError(f"Cannot parse month '{value}'")
    else:
        raise ValueError(f"Cannot parse month '{value}'")

    if not 1 <= month <= 12:
        raise ValueError(f"Month out of range: {month}")
    return month


def parse_period_label(value: str) -> tuple[int, int]:
    """Parse a "MMMM yyyy" period label into (month, year).

    Examples:
        >>> parse_period_label("March 2026")
        (3, 2026)
        >>> parse_period_label("03/2026")
        (3, 2026)
    """
    if not value or not isinstance(value, str):
        raise ValueError(f"Cannot parse period '{value}'")

    text = value.strip().replace("/", " ").replace("-", " ")
    parts = text.split()
    if len(parts) != 2 or not parts[1].isdigit():
        raise ValueError(f"Cannot parse period '{value}' (expected e.g. 'March 2026')")

    return parse_month(parts[0]), int(parts[1])


def parse_iso_date(value: date | str) -> date:
    """Parse an ISO date ("YYYY-MM-DD"); date objects pass through unchanged.

    A datetime is reduced to its date.

    Raises:
        ValueError: If the value is empty or not an ISO date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        raise ValueError(f"Cannot parse date '{value}'")

    try:
        return date.fromisoformat(value.strip())
    except ValueError as e:
        raise ValueError(f"Cannot parse date '{value}' (expected YYYY-MM-DD): {e}") from e


def parse_enum(enum_cls: type[E], value: E | str) -> E:
    """Parse an enum member from its value ("In Progress") or its name ("IN_PROGRESS").

    Matching is case-insensitive and ignores spaces and underscores, so
    "InProgress", "in progress" and "IN_PROGRESS" all resolve to the same member.
    """
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Cannot parse {enum_cls.__name__} from '{value}'")

    def normalize(text: str) -> str:
        return text.replace(" ", "").replace("_", "").lower()

    wanted = normalize(value)
    for member in enum_cls:
        if wanted in (normalize(member.name), normalize(str(member.value))):
            return member

    raise ValueError(f"Unknown {enum_cls.__name__}: '{value}'")


__all__ = ["parse_month", "parse_period_label", "parse_iso_date", "parse_enum"]
