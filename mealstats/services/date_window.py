"""
services/date_window.py
-----------------------
Builds the inclusive date windows used by the dashboards.

  today          → [ref, ref]
  this_week      → Monday .. Sunday around ref
  month_to_date  → 1st of ref's month .. ref      (monthly revenue card)
  full_month     → 1st .. last day of ref's month (monthly report)
  custom         → [start, end]; start > end collapses to [start, start]

Pure date arithmetic, no I/O.
"""

import calendar
import datetime
from typing import Optional, Union

from mealstats.schemas.window import DateWindow, WindowKind

DateLike = Union[datetime.date, datetime.datetime, str]


def to_date(value: DateLike) -> datetime.date:
    """Normalise a date, datetime or ISO 'YYYY-MM-DD' string to a date."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    # Accept full ISO timestamps too; only the calendar day matters
    return datetime.date.fromisoformat(str(value)[:10])


def build_window(
    kind: Union[WindowKind, str],
    reference_date: DateLike,
    custom_start: Optional[DateLike] = None,
    custom_end: Optional[DateLike] = None,
) -> DateWindow:
    kind = WindowKind(kind)
    ref = to_date(reference_date)

    if kind is WindowKind.today:
        return DateWindow(start=ref, end=ref)

    if kind is WindowKind.this_week:
        monday = ref - datetime.timedelta(days=ref.weekday())
        return DateWindow(start=monday, end=monday + datetime.timedelta(days=6))

    if kind is WindowKind.month_to_date:
        return DateWindow(start=ref.replace(day=1), end=ref)

    if kind is WindowKind.full_month:
        last_day = calendar.monthrange(ref.year, ref.month)[1]
        return DateWindow(start=ref.replace(day=1), end=ref.replace(day=last_day))

    if custom_start is None:
        raise ValueError("custom window requires a start date")
    start = to_date(custom_start)
    end = to_date(custom_end) if custom_end is not None else start
    if start > end:
        end = start
    return DateWindow(start=start, end=end)


def trailing_days(today: DateLike, days: int) -> list[datetime.date]:
    """The last `days` calendar days ending at `today`, oldest first."""
    end = to_date(today)
    return [end - datetime.timedelta(days=offset) for offset in range(days - 1, -1, -1)]
