from __future__ import annotations

import calendar
import re
from datetime import date, datetime
from typing import Any, Optional

from ..core.exceptions import ValidationError

_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def coerce_date(value: Any) -> Optional[date]:
    """Accept date, datetime or an ISO string (time part ignored)."""

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return parse_iso_date(value.strip()[:10])
        except ValueError:
            return None
    return None


def require_month(value: Optional[str], field_name: str = "month") -> str:
    v = (value or "").strip()
    if not _MONTH_RE.match(v):
        raise ValidationError(f"{field_name} must be in YYYY-MM format")
    month = int(v[5:7])
    if month < 1 or month > 12:
        raise ValidationError(f"{field_name} must be in YYYY-MM format")
    return v


def month_bounds(month: str) -> tuple[date, date]:
    """First and last calendar day of a YYYY-MM month."""

    month = require_month(month)
    year, mon = int(month[:4]), int(month[5:7])
    last_day = calendar.monthrange(year, mon)[1]
    return date(year, mon, 1), date(year, mon, last_day)


def month_of(d: date) -> str:
    return d.strftime("%Y-%m")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
