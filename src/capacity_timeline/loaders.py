"""Data loading: planning-data JSON -> typed WorkItem / Resource records."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any

from capacity_timeline.types import InvalidInputError, Resource, WorkItem

logger = logging.getLogger(__name__)


def _parse_date(value: Any) -> date:
    """ISO date or datetime string -> date. Time and zone are dropped."""
    if not isinstance(value, str):
        raise ValueError(f"expected ISO date string, got {value!r}")
    return date.fromisoformat(value[:10])


def planning_from_dict(
    data: dict[str, Any],
) -> tuple[list[WorkItem], list[Resource]]:
    """Build items and resources from the planning-data format.

    {
        "developers": [{"id": "dev-1", "name": "...", "capacity": 40}, ...],
        "useCases": [
            {"id": "uc-1", "title": "...", "manDays": 12.5,
             "startDate": "2025-01-06", "assignedDeveloperIds": ["dev-1"]},
            ...
        ]
    }

    ``startDate`` and ``assignedDeveloperIds`` are optional; such use cases
    load fine and are simply not scheduled. Raises InvalidInputError listing
    every missing field or unparsable value.
    """
    errors: list[str] = []
    resources: list[Resource] = []
    items: list[WorkItem] = []

    for i, dev in enumerate(data.get("developers", [])):
        missing = [k for k in ("id", "capacity") if k not in dev]
        if missing:
            errors.append(f"developers[{i}]: missing {', '.join(missing)}")
            continue
        resources.append(
            Resource(
                resource_id=dev["id"],
                weekly_capacity_hours=dev["capacity"],
                name=dev.get("name", ""),
            )
        )

    for i, uc in enumerate(data.get("useCases", [])):
        missing = [k for k in ("id", "manDays") if k not in uc]
        if missing:
            errors.append(f"useCases[{i}]: missing {', '.join(missing)}")
            continue

        start: date | None = None
        if uc.get("startDate"):
            try:
                start = _parse_date(uc["startDate"])
            except ValueError as e:
                errors.append(f"useCases[{i}] ({uc['id']}): invalid startDate - {e}")
                continue

        items.append(
            WorkItem(
                item_id=uc["id"],
                raw_effort=uc["manDays"],
                requested_start=start,
                assigned_resource_ids=tuple(uc.get("assignedDeveloperIds") or ()),
                title=uc.get("title", ""),
            )
        )

    if errors:
        raise InvalidInputError(errors)

    logger.debug(
        "loaded %d use cases and %d developers", len(items), len(resources)
    )
    return items, resources


def load_planning_json(
    path: str | Path,
) -> tuple[list[WorkItem], list[Resource]]:
    """Load items and resources from a planning-data JSON file."""
    path = Path(path)
    with open(path) as f:
        data = json.load(f)
    return planning_from_dict(data)
