"""ASCII visualisation for development-time verification.

This module is dev-only and not imported by production code.
"""

from __future__ import annotations

from datetime import date, timedelta

from capacity_timeline.calendar import is_business_day
from capacity_timeline.types import Period, ScheduleResult

_DAY_LETTERS = "MTWTFSS"


def show_timeline(
    result: ScheduleResult,
    start: date | None = None,
    end: date | None = None,
) -> str:
    """Print ASCII timeline: one row per period, one column per calendar day.

    Legend: '#' = worked business day, '.' = weekend, ' ' = outside period.
    Periods are half-open, so the end date itself is not marked.
    Returns the string and also prints to stdout.

    Args:
        result: Output of ``schedule``.
        start: First date to show (inclusive). Defaults to earliest start.
        end: Last date to show (inclusive). Defaults to latest end.
    """
    if not result.periods:
        text = "(no periods)"
        print(text)
        return text

    first = start or min(p.start for p in result.periods)
    last = end or max(p.end for p in result.periods)
    days = [first + timedelta(days=n) for n in range((last - first).days + 1)]
    width = max(len(p.item_id) for p in result.periods)

    lines: list[str] = []
    header = "".join(_DAY_LETTERS[d.weekday()] for d in days)
    lines.append(f"{'':>{width}s}  {header}")

    for period in result.periods:
        row = []
        for d in days:
            if not is_business_day(d):
                row.append(".")
            elif period.start <= d < period.end:
                row.append("#")
            else:
                row.append(" ")
        lines.append(
            f"{period.item_id:>{width}s}  {''.join(row)}  "
            f"{period.working_days_duration}d @ {period.effective_capacity:.2f}"
        )

    if result.conflicts:
        lines.append("")
        for conflict in result.conflicts:
            lines.append(
                f"conflict: {', '.join(conflict.item_ids)} "
                f"on {', '.join(conflict.resource_ids)} "
                f"({conflict.start.isoformat()} .. {conflict.end.isoformat()})"
            )

    text = "\n".join(lines)
    print(text)
    return text


def show_segments(period: Period) -> str:
    """Print one period's segments as a table. Returns the string too."""
    lines = [f"{period.item_id}: {period.raw_effort} man-days"]
    for segment in period.segments:
        others = ", ".join(segment.concurrent_item_ids) or "-"
        lines.append(
            f"  {segment.start.isoformat()} -> {segment.end.isoformat()}  "
            f"{segment.working_days:>3d}d  cap={segment.effective_capacity:.3f}  "
            f"work={segment.work_done:.3f}  with={others}"
        )
    lines.append(f"  total work={period.work_done:.3f}")

    text = "\n".join(lines)
    print(text)
    return text
