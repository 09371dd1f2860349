# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Billing period parsing.

Clients send the month as an integer, a numeric string ("3") or a
"YYYY-MM" string. Past this module a period is always the pair
``(month, year)`` of integers.
"""

import re
from datetime import date

from src.domains.billing.errors import InvalidPeriodError
from src.utils.datetime import utc_now

MIN_YEAR = 2000
MAX_YEAR = 2100

_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$", re.ASCII)


def _parse_int(value: int | str, field: str) -> int:
    if isinstance(value, bool):
        raise InvalidPeriodError(f"Invalid {field}: {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not (text.isascii() and text.isdigit()):
        raise InvalidPeriodError(f"Invalid {field}: {value!r}")
    return int(text)


def _check_month(month: int) -> int:
    if not 1 <= month <= 12:
        raise InvalidPeriodError(f"Month must be between 1 and 12, got {month}")
    return month


def _check_year(year: int) -> int:
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidPeriodError(
            f"Year must be between {MIN_YEAR} and {MAX_YEAR}, got {year}"
        )
    return year


def parse_period(
    month: int | str | None = None,
    year: int | str | None = None,
) -> tuple[int | None, int | None]:
    """Parse optional period parts without filling in defaults.

    A "YYYY-MM" month supplies both parts and wins over ``year``.

    Args:
        month: Month number, numeric string or "YYYY-MM" string.
        year: Year number or numeric string.

    Returns:
        Tuple of (month, year); either may be None when not given.

    Raises:
        InvalidPeriodError: If a given part is malformed or out of range.
    """
    parsed_month: int | None = None
    parsed_year: int | None = None

    if year is not None and year != "":
        parsed_year = _parse_int(year, "year")

    if month is not None and month != "":
        match = _YEAR_MONTH_RE.match(month.strip()) if isinstance(month, str) else None
        if match:
            parsed_year = int(match.group(1))
            parsed_month = int(match.group(2))
        else:
            parsed_month = _parse_int(month, "month")

    if parsed_month is not None:
        _check_month(parsed_month)
    if parsed_year is not None:
        _check_year(parsed_year)

    return parsed_month, parsed_year


def resolve_period(
    month: int | str | None = None,
    year: int | str | None = None,
    today: date | None = None,
) -> tuple[int, int]:
    """Resolve a client-supplied period to ``(month, year)``.

    Missing parts default to the current month and year.

    Args:
        month: Month number, numeric string or "YYYY-MM" string.
        year: Year number or numeric string.
        today: Reference date for defaults. Defaults to today (UTC).

    Returns:
        Tuple of (month, year).

    Raises:
        InvalidPeriodError: If a given part is malformed or out of range.

    Example:
        >>> resolve_period("2025-03")
        (3, 2025)
    """
    parsed_month, parsed_year = parse_period(month, year)
    today = today or utc_now().date()

    if parsed_month is None:
        parsed_month = today.month
    if parsed_year is None:
        parsed_year = _check_year(today.year)

    return parsed_month, parsed_year


def current_period(today: date | None = None) -> tuple[int, int]:
    """Get the current ``(month, year)``."""
    today = today or utc_now().date()
    return today.month, today.year


def format_period(month: int, year: int) -> str:
    """Format a period as "YYYY-MM"."""
    return f"{year:04d}-{month:02d}"
