#!/usr/bin/env python
"""Visual verification report for capacity-timeline.

Run:  uv run python scripts/verify.py

Produces a formatted report showing:
  1. Reference data (the reference fortnight)
  2. Layer 1 tests (snapping, add/subtract, counting)  -- input/output tables
  3. Layer 3 tests (scheduler scenarios)  -- expected vs actual + ASCII timeline
  4. Conflict detection and grouping
  5. The sample planning file, scheduled end to end
"""

from __future__ import annotations

import json
import sys
from datetime import date, datetime
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths and data loading
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
FIXTURES = ROOT / "data" / "fixtures"
SCENARIOS = FIXTURES / "scenarios"

sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT / "tests"))

from capacity_timeline.calendar import (
    add_business_days,
    business_days_between,
    business_days_in_span,
    next_business_day,
    previous_business_day,
    subtract_business_days,
)
from capacity_timeline.conflicts import group_conflicts
from capacity_timeline.debug import show_segments, show_timeline
from capacity_timeline.loaders import load_planning_json
from capacity_timeline.scheduler import schedule
from conftest import make_conflict, make_items, make_resources


def _load(path: Path):
    with open(path) as f:
        return json.load(f)


_ref = _load(FIXTURES / "reference.json")

DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------
WIDTH = 90


def banner(title: str):
    print()
    print("=" * WIDTH)
    print(f"  {title}")
    print("=" * WIDTH)


def heading(title: str):
    print()
    print(f"  {title}")
    print(f"  {'-' * (len(title) + 2)}")


def table(headers: list[str], rows: list[list[str]], indent: int = 4):
    """Print a formatted table with auto-sized columns."""
    col_widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            col_widths[i] = max(col_widths[i], len(cell))

    pad = " " * indent
    fmt = pad + "  ".join(f"{{:<{w}}}" for w in col_widths)
    sep = pad + "  ".join("-" * w for w in col_widths)

    print(fmt.format(*headers))
    print(sep)
    for row in rows:
        # Pad short rows
        padded = row + [""] * (len(headers) - len(row))
        print(fmt.format(*padded))


def _fmt_d(value: date | str) -> str:
    """Format a date (or ISO string) as 'Mon 06 Jan'."""
    d = date.fromisoformat(value) if isinstance(value, str) else value
    return f"{DAY_NAMES[d.weekday()]} {d.strftime('%d %b')}"


def _indent(text: str, n: int = 4) -> str:
    return "\n".join(" " * n + line for line in text.splitlines())


def _quiet(fn, *args, **kwargs) -> str:
    """Call a debug view without letting it print; return its text."""
    import contextlib
    import io

    with contextlib.redirect_stdout(io.StringIO()):
        return fn(*args, **kwargs)


# ---------------------------------------------------------------------------
# Section 1: Reference Data
# ---------------------------------------------------------------------------
def section_reference():
    banner("REFERENCE DATA")
    print(f"\n    Reference Monday: {_ref['reference_monday']}")

    heading("Day names used by fixtures and tests")
    rows = [
        [d["name"], d["date"], DAY_NAMES[d["weekday"]]]
        for d in _ref["days"]
    ]
    table(["Name", "Date", "Day"], rows)


# ---------------------------------------------------------------------------
# Section 2: Layer 1  -- Calendar arithmetic
# ---------------------------------------------------------------------------
def section_calendar_arithmetic():
    banner("LAYER 1: BUSINESS CALENDAR")

    data = _load(SCENARIOS / "calendar_arithmetic.json")

    for key, fn, label in [
        ("next_business_day", next_business_day, "next_business_day(d) -> date"),
        ("previous_business_day", previous_business_day,
         "previous_business_day(d) -> date"),
    ]:
        heading(f"Function: {label}")
        rows = []
        for s in data[key]:
            result = fn(date.fromisoformat(s["date"]))
            match = "OK" if result == date.fromisoformat(s["expected"]) else "FAIL"
            rows.append([s["id"], _fmt_d(s["date"]), _fmt_d(result), match, s["notes"]])
        table(["ID", "Date", "Result", "", "Notes"], rows)

    for key, fn, label in [
        ("add_business_days", add_business_days, "add_business_days(d, n) -> date"),
        ("subtract_business_days", subtract_business_days,
         "subtract_business_days(d, n) -> date"),
    ]:
        heading(f"Function: {label}")
        print("    The start day itself is never counted.\n")
        rows = []
        for s in data[key]:
            result = fn(date.fromisoformat(s["date"]), s["n"])
            match = "OK" if result == date.fromisoformat(s["expected"]) else "FAIL"
            rows.append([
                s["id"], _fmt_d(s["date"]), str(s["n"]),
                _fmt_d(result), match, s["notes"],
            ])
        table(["ID", "Date", "N", "Result", "", "Notes"], rows)

    for key, fn, label, note in [
        ("business_days_between", business_days_between,
         "business_days_between(start, end) -> int", "Counts [start, end]."),
        ("business_days_in_span", business_days_in_span,
         "business_days_in_span(start, end) -> int", "Counts [start, end)."),
    ]:
        heading(f"Function: {label}")
        print(f"    {note}\n")
        rows = []
        for s in data[key]:
            result = fn(date.fromisoformat(s["start"]), date.fromisoformat(s["end"]))
            match = "OK" if result == s["expected"] else "FAIL"
            rows.append([
                s["id"], _fmt_d(s["start"]), _fmt_d(s["end"]),
                str(s["expected"]), str(result), match, s["notes"],
            ])
        table(["ID", "Start", "End", "Expected", "Actual", "", "Notes"], rows)


# ---------------------------------------------------------------------------
# Section 3: Layer 3  -- Scheduler
# ---------------------------------------------------------------------------
def section_scheduler():
    banner("LAYER 3: CAPACITY SCHEDULER")

    data = _load(SCENARIOS / "scheduler.json")
    by_id = {s["id"]: s for s in data["scenarios"]}

    for spec in data["scenarios"]:
        heading(f"Scenario: {spec['id']}")
        print(f"    {spec['notes']}\n")

        result = schedule(make_items(spec["items"]), make_resources(spec["resources"]))

        rows = []
        for item_id, expected in spec["expected_periods"].items():
            period = result.period_for(item_id)
            if period is None:
                rows.append([item_id, "-", "-", "-", "-", "FAIL"])
                continue
            ok = (
                period.start.isoformat() == expected["start"]
                and period.end.isoformat() == expected["end"]
                and period.working_days_duration == expected["working_days"]
                and period.calendar_days_duration == expected["calendar_days"]
                and abs(period.effective_capacity - expected["effective_capacity"]) < 1e-9
            )
            rows.append([
                item_id, _fmt_d(period.start), _fmt_d(period.end),
                str(period.working_days_duration),
                f"{period.effective_capacity:.3f}",
                "OK" if ok else "FAIL",
            ])
        for u in result.unscheduled:
            expected = spec["expected_unscheduled"].get(u.item_id)
            match = "OK" if expected == u.reason.value else "FAIL"
            rows.append([u.item_id, "-", "-", "-", u.reason.value, match])
        table(["Item", "Start", "End", "Days", "Capacity", ""], rows)

        if result.periods:
            print()
            print(_indent(_quiet(show_timeline, result)))
        print(f"\n    iterations={result.iterations} converged={result.converged}")

    heading("Segment breakdowns")
    for spec in data["segments"]:
        result = schedule(
            make_items(by_id[spec["scenario"]]["items"]),
            make_resources(by_id[spec["scenario"]]["resources"]),
        )
        print()
        print(f"    [{spec['id']}]")
        print(_indent(_quiet(show_segments, result.period_for(spec["item"]))))


# ---------------------------------------------------------------------------
# Section 4: Conflicts
# ---------------------------------------------------------------------------
def section_conflicts():
    banner("CONFLICT GROUPING")

    data = _load(SCENARIOS / "conflicts.json")

    heading("Function: group_conflicts(conflicts) -> [Conflict, ...]")
    print("    Merges records that share an item and a resource, transitively.\n")
    rows = []
    for s in data["group"]:
        if "conflicts" not in s:
            continue
        groups = group_conflicts([make_conflict(c) for c in s["conflicts"]])
        actual = [
            (list(g.item_ids), list(g.resource_ids), g.start.isoformat(), g.end.isoformat())
            for g in groups
        ]
        expected = [
            (e["items"], e["resources"], e["start"], e["end"]) for e in s["expected"]
        ]
        match = "OK" if actual == expected else "FAIL"
        summary = "; ".join(
            f"{','.join(g.item_ids)} on {','.join(g.resource_ids)}" for g in groups
        )
        rows.append([s["id"], str(len(groups)), summary, match])
    table(["ID", "Groups", "Members", ""], rows)


# ---------------------------------------------------------------------------
# Section 5: Planning file
# ---------------------------------------------------------------------------
def section_planning():
    banner("PLANNING FILE")

    path = FIXTURES / "planning.json"
    items, resources = load_planning_json(path)
    print(f"\n    {path.relative_to(ROOT)}: {len(items)} use cases, "
          f"{len(resources)} developers\n")

    result = schedule(items, resources)
    print(_indent(_quiet(show_timeline, result)))

    if result.unscheduled:
        heading("Not scheduled")
        table(
            ["Item", "Reason"],
            [[u.item_id, u.reason.value] for u in result.unscheduled],
        )


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def main():
    banner("CAPACITY-TIMELINE   --  VISUAL VERIFICATION REPORT")
    print(f"    Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}")
    print(f"    Fixture data: {FIXTURES.relative_to(ROOT)}/")

    section_reference()
    section_calendar_arithmetic()
    section_scheduler()
    section_conflicts()
    section_planning()

    banner("END OF REPORT")
    print()


if __name__ == "__main__":
    main()
