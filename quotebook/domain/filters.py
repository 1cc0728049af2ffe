"""
Query/filter/sort engine for the visible quote list.

Pure functions only: the full collection plus the current filter state go
in, the ordered visible subset comes out. ``now`` can be injected so the
time windows are deterministic under test.
"""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Iterable, Optional

from quotebook.core.errors import ValidationError
from quotebook.domain.quotes import Quote

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


class RoleFilter(str, Enum):
    ALL = "All"
    TEACHER = "Teacher"
    STUDENT = "Student"


class TimeFilter(str, Enum):
    ALL = "All"
    SEVEN_DAYS = "7 Days"
    MONTH = "Month"
    YEAR = "Year"


@dataclass(frozen=True)
class QuoteFilters:
    search: str = ""
    role: RoleFilter = RoleFilter.ALL
    time: TimeFilter = TimeFilter.ALL


def parse_filters(search: Optional[str] = None, role: Optional[str] = None, time: Optional[str] = None) -> QuoteFilters:
    """Build QuoteFilters from raw strings, reporting every unknown value at once."""
    errors = []
    role_value = RoleFilter.ALL
    time_value = TimeFilter.ALL
    if role is not None:
        try:
            role_value = RoleFilter(role)
        except ValueError:
            allowed = ", ".join(r.value for r in RoleFilter)
            errors.append({"field": "role", "message": f"must be one of {allowed}"})
    if time is not None:
        try:
            time_value = TimeFilter(time)
        except ValueError:
            allowed = ", ".join(t.value for t in TimeFilter)
            errors.append({"field": "time", "message": f"must be one of {allowed}"})
    if errors:
        raise ValidationError(errors)
    return QuoteFilters(search=search or "", role=role_value, time=time_value)


def to_epoch_ms(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - _EPOCH) // _ONE_MS


def subtract_months(moment: datetime, months: int) -> datetime:
    """Calendar-aware subtraction: keeps the day of month, clipped at month end."""
    total = moment.year * 12 + (moment.month - 1) - months
    year, month_index = divmod(total, 12)
    month = month_index + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def window_start_ms(time_filter: TimeFilter, now: datetime) -> Optional[int]:
    """Exclusive lower bound (epoch ms) for the window, or None when unbounded."""
    if time_filter is TimeFilter.ALL:
        return None
    if time_filter is TimeFilter.SEVEN_DAYS:
        start = now - timedelta(days=7)
    elif time_filter is TimeFilter.MONTH:
        start = subtract_months(now, 1)
    else:
        start = subtract_months(now, 12)
    return to_epoch_ms(now) - (now - start) // _ONE_MS


def _matches_role(quote: Quote, role: RoleFilter) -> bool:
    return role is RoleFilter.ALL or quote.type.value == role.value


def _matches_search(quote: Quote, needle: str) -> bool:
    if not needle:
        return True
    return needle in quote.name.casefold() or needle in quote.text.casefold()


def visible_quotes(
    quotes: Iterable[Quote],
    filters: Optional[QuoteFilters] = None,
    now: Optional[datetime] = None,
) -> list[Quote]:
    """Apply role, search and time predicates (all must hold), then sort newest first."""
    filters = filters or QuoteFilters()
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    needle = filters.search.casefold()
    start = window_start_ms(filters.time, now)

    kept = [
        quote
        for quote in quotes
        if _matches_role(quote, filters.role)
        and _matches_search(quote, needle)
        and (start is None or quote.timestamp > start)
    ]
    # sorted() is stable with reverse=True, equal timestamps keep input order
    return sorted(kept, key=lambda q: q.timestamp, reverse=True)
