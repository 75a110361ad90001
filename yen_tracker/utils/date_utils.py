"""Date manipulation utilities"""

import re
from datetime import date, timedelta
from typing import Optional, Tuple

from yen_tracker.domain.exceptions import InvalidMonthError

_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def current_month(today: date | None = None) -> str:
    """YYYY-MM token for today (or the given day)"""
    today = today or date.today()
    return f"{today.year:04d}-{today.month:02d}"


def month_bounds(month: str) -> Tuple[date, date]:
    """
    Half-open date range [first day, first day of next month) for a YYYY-MM token.

    Raises:
        InvalidMonthError: If the token is not zero-padded YYYY-MM or the month is out of range
    """
    match = _MONTH_PATTERN.match(month)
    if not match:
        raise InvalidMonthError(f"Month must be YYYY-MM, got {month!r}")

    year, month_num = int(match.group(1)), int(match.group(2))
    if not 1 <= month_num <= 12:
        raise InvalidMonthError(f"Month out of range: {month!r}")

    try:
        start = date(year, month_num, 1)
        end = date(year + 1, 1, 1) if month_num == 12 else date(year, month_num + 1, 1)
    except ValueError as e:
        raise InvalidMonthError(f"Year out of range: {month!r}") from e
    return start, end


def parse_tax_year_range(tax_year: str, tax_system: str = "uk") -> Optional[Tuple[date, date]]:
    """
    Inclusive date range for a tax year, or None if it can't be parsed.

    - jp: calendar year, "2025" -> 2025-01-01..2025-12-31
    - uk: "2025-2026" -> 2025-04-06..2026-04-05
    """
    try:
        if tax_system == "jp":
            year = int(tax_year)
            return date(year, 1, 1), date(year, 12, 31)

        parts = tax_year.split("-")
        if len(parts) != 2:
            return None
        start_year, end_year = int(parts[0]), int(parts[1])
        return date(start_year, 4, 6), date(end_year, 4, 5)
    except (ValueError, OverflowError):
        return None


def is_weekday(day: date) -> bool:
    return day.weekday() < 5


def is_rate_stale(published: date, today: date) -> bool:
    """Rates are published on weekdays only, so a weekend gap is not stale"""
    return published != today and is_weekday(today)


def days_ago(days: int, today: date | None = None) -> date:
    today = today or date.today()
    return today - timedelta(days=days)
