"""Month Windows - pure helpers for UTC calendar-month ranges used by spend rollups.

Invariants:
    - Windows are half-open [start, end) in UTC
    - parse_month accepts only YYYY-MM with month 1..12, returns None otherwise
"""

import re
from datetime import datetime, timezone

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_month(value: str | None) -> tuple[int, int] | None:
    """Parse "YYYY-MM" into (year, month)."""
    if not value:
        return None
    match = _MONTH_RE.match(value.strip())
    if not match:
        return None
    year, month = int(match.group(1)), int(match.group(2))
    if month < 1 or month > 12:
        return None
    return year, month


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """Start of the month and start of the following month, both UTC."""
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


def current_month_bounds(now: datetime | None = None) -> tuple[datetime, datetime]:
    now = now or datetime.now(timezone.utc)
    return month_bounds(now.year, now.month)


def format_month(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"
