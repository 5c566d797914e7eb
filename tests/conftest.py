"""Shared test fixtures and data loading for capacity-timeline.

All test data lives in data/fixtures/ as JSON files.  This module loads
that data and exposes helper functions + pytest fixtures for the tests.

Reference fortnight: Mon 2025-01-06 through Wed 2025-01-22.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
FIXTURES_DIR = Path(__file__).resolve().parent.parent / "data" / "fixtures"
SCENARIOS_DIR = FIXTURES_DIR / "scenarios"
PLANNING_JSON = FIXTURES_DIR / "planning.json"


# ---------------------------------------------------------------------------
# Data loaders
# ---------------------------------------------------------------------------
def _load_json(path: Path):
    with open(path) as f:
        return json.load(f)


_reference = _load_json(FIXTURES_DIR / "reference.json")


# ---------------------------------------------------------------------------
# Reference constants derived from reference.json
# ---------------------------------------------------------------------------
REFERENCE_MONDAY = date.fromisoformat(_reference["reference_monday"])

# Day lookup:  DAYS["mon"] → date(2025, 1, 6)
DAYS: dict[str, date] = {
    d["name"]: date.fromisoformat(d["date"]) for d in _reference["days"]
}


# ---------------------------------------------------------------------------
# Convenience helpers (importable by test modules)
# ---------------------------------------------------------------------------
def day(name: str) -> date:
    """Date for a named reference day.

    >>> day("next_mon")
    datetime.date(2025, 1, 13)
    """
    return DAYS[name]


def parse_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


def load_scenarios(name: str):
    """Load a scenario file from data/fixtures/scenarios/{name}.json."""
    return _load_json(SCENARIOS_DIR / f"{name}.json")


# ---------------------------------------------------------------------------
# Record factories
# ---------------------------------------------------------------------------
def make_resources(specs: list[dict]):
    """[{"id": ..., "weekly_hours": ...}] -> list[Resource]."""
    from capacity_timeline.types import Resource

    return [Resource(s["id"], s["weekly_hours"]) for s in specs]


def make_items(specs: list[dict]):
    """[{"id", "effort", "start", "resources"}] -> list[WorkItem]."""
    from capacity_timeline.types import WorkItem

    return [
        WorkItem(
            item_id=s["id"],
            raw_effort=s["effort"],
            requested_start=parse_date(s.get("start")),
            assigned_resource_ids=tuple(s.get("resources", ())),
        )
        for s in specs
    ]


def make_period(item_id: str, start: date, end: date, raw_effort: float = 1.0):
    """A Period with derived fields filled in, for conflict-detector tests."""
    from capacity_timeline.calendar import business_days_in_span, calendar_days_between
    from capacity_timeline.types import Period

    return Period(
        item_id=item_id,
        start=start,
        end=end,
        working_days_duration=business_days_in_span(start, end),
        calendar_days_duration=calendar_days_between(start, end),
        effective_capacity=1.0,
        raw_effort=raw_effort,
    )


def make_conflict(spec: dict):
    """{"items", "resources", "start", "end"} -> Conflict."""
    from capacity_timeline.types import Conflict

    return Conflict(
        item_ids=tuple(spec["items"]),
        resource_ids=tuple(spec["resources"]),
        start=date.fromisoformat(spec["start"]),
        end=date.fromisoformat(spec["end"]),
    )


def run_scenario(spec: dict):
    """Schedule a scheduler.json scenario and return the ScheduleResult."""
    from capacity_timeline.scheduler import schedule

    return schedule(make_items(spec["items"]), make_resources(spec["resources"]))


# ---------------------------------------------------------------------------
# pytest fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def monday() -> date:
    return REFERENCE_MONDAY


@pytest.fixture
def full_time():
    """One 40 h/week resource: 1 man-day per business day."""
    from capacity_timeline.types import Resource

    return Resource("R1", 40)


@pytest.fixture
def planning_path() -> Path:
    return PLANNING_JSON
