"""Budget month identifiers (``YYYY-MM-DD``, first of month) and their arithmetic."""

from __future__ import annotations

import re
from datetime import date

_MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class AnalysisValidationError(ValueError):
    """Raised when analysis input is rejected before any processing starts."""


def parse_month(month: str) -> date:
    """Parse a ``YYYY-MM-DD`` month identifier.

    Raises :class:`AnalysisValidationError` for anything that is not a
    real calendar date in that exact shape.
    """
    if not isinstance(month, str) or not _MONTH_PATTERN.match(month):
        raise AnalysisValidationError(
            f"Invalid month format: {month!r}. Expected YYYY-MM-DD."
        )
    try:
        return date.fromisoformat(month)
    except ValueError as e:
        raise AnalysisValidationError(f"Invalid month: {month!r} ({e})") from e


def validate_month(month: str) -> str:
    """Return *month* unchanged if valid, else raise :class:`AnalysisValidationError`."""
    parse_month(month)
    return month


def is_valid_month(month: str) -> bool:
    try:
        parse_month(month)
    except AnalysisValidationError:
        return False
    return True


def month_index(d: date) -> int:
    """Months since year 0, so differences count calendar months."""
    return d.year * 12 + (d.month - 1)


def months_between(start: str, end: str) -> int:
    """Whole calendar months from *start* to *end* (negative if *end* is earlier)."""
    return month_index(parse_month(end)) - month_index(parse_month(start))


def first_day_of_month(d: date | None = None) -> str:
    """Format the month containing *d* (default: today) as ``YYYY-MM-01``."""
    d = d or date.today()
    return f"{d.year:04d}-{d.month:02d}-01"


def _shift(month: str, delta: int) -> str:
    idx = month_index(parse_month(month)) + delta
    year, month_zero = divmod(idx, 12)
    return f"{year:04d}-{month_zero + 1:02d}-01"


def previous_month(month: str) -> str:
    return _shift(month, -1)


def next_month(month: str) -> str:
    return _shift(month, 1)
