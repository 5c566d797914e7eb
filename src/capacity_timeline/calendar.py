"""Layer 1: business calendar: fixed Monday-Friday week, date arithmetic.

Two counting conventions live here and must not be conflated:

- ``business_days_between`` is inclusive on both ends: ``[start, end]``.
- ``business_days_in_span`` is half-open: ``[start, end)``. It is the inverse
  of ``add_business_days``, which counts only the days added *after* start.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterator

_ONE_DAY = timedelta(days=1)

# date.weekday(): 0 = Monday ... 4 = Friday, 5 = Saturday, 6 = Sunday
_SATURDAY = 5
_SUNDAY = 6


def is_business_day(d: date) -> bool:
    """True for Monday through Friday."""
    return d.weekday() < _SATURDAY


def next_business_day(d: date) -> date:
    """Snap forward: Saturday -> Monday (+2), Sunday -> Monday (+1)."""
    weekday = d.weekday()
    if weekday == _SATURDAY:
        return d + timedelta(days=2)
    if weekday == _SUNDAY:
        return d + _ONE_DAY
    return d


def previous_business_day(d: date) -> date:
    """Snap backward: Saturday -> Friday (-1), Sunday -> Friday (-2)."""
    weekday = d.weekday()
    if weekday == _SATURDAY:
        return d - _ONE_DAY
    if weekday == _SUNDAY:
        return d - timedelta(days=2)
    return d


def add_business_days(d: date, n: int) -> date:
    """Forward walk: the n-th business day after ``d``.

    ``n <= 0`` returns ``d`` unchanged. Otherwise ``d`` is first snapped
    forward to a business day; that day is not counted.
    """
    if n <= 0:
        return d

    current = next_business_day(d)
    added = 0
    while added < n:
        current += _ONE_DAY
        if is_business_day(current):
            added += 1
    return current


def subtract_business_days(d: date, n: int) -> date:
    """Backward walk: the n-th business day before ``d``.

    ``n <= 0`` returns ``d`` unchanged. Otherwise ``d`` is first snapped
    back to a business day; that day is not counted.
    """
    if n <= 0:
        return d

    current = previous_business_day(d)
    removed = 0
    while removed < n:
        current -= _ONE_DAY
        if is_business_day(current):
            removed += 1
    return current


def _business_days_before(ordinal: int) -> int:
    """Business days in [date(1, 1, 1), date.fromordinal(ordinal)).

    date(1, 1, 1) is a Monday, so every block of 7 ordinals holds 5
    business days followed by a weekend.
    """
    weeks, rest = divmod(ordinal - 1, 7)
    return weeks * 5 + min(rest, 5)


def business_days_between(start: date, end: date) -> int:
    """Count business days in [start, end], inclusive. 0 if start > end."""
    if start > end:
        return 0
    return _business_days_before(end.toordinal() + 1) - _business_days_before(
        start.toordinal()
    )


def business_days_in_span(start: date, end: date) -> int:
    """Count business days in [start, end), half-open. 0 if end <= start.

    ``business_days_in_span(d, add_business_days(d, n)) == n`` for any
    business day ``d`` and ``n >= 0``.
    """
    if end <= start:
        return 0
    return _business_days_before(end.toordinal()) - _business_days_before(
        start.toordinal()
    )


def calendar_days_between(start: date, end: date) -> int:
    """Count calendar days in [start, end], weekends included."""
    return (end - start).days + 1


def business_days(start: date, end: date) -> Iterator[date]:
    """Yield each business date in [start, end]."""
    current = next_business_day(start)
    while current <= end:
        yield current
        current = next_business_day(current + _ONE_DAY)
