"""Input validation for resources and work items."""

from __future__ import annotations

import math
from datetime import date
from numbers import Real
from typing import Iterable, Sequence

from capacity_timeline.types import InvalidInputError, Resource, WorkItem


def _is_number(value: object) -> bool:
    """Real, not bool, not NaN."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return not math.isnan(value)


def validate_resources(resources: Sequence[Resource]) -> list[str]:
    """Validate resources. Returns list of error messages (empty = valid).

    Checks:
    - Ids are non-empty and unique
    - weekly_capacity_hours is a finite number, not negative
    """
    errors: list[str] = []
    seen: set[str] = set()

    for i, resource in enumerate(resources):
        rid = resource.resource_id
        if not rid:
            errors.append(f"Resource {i}: empty resource_id")
        elif rid in seen:
            errors.append(f"Resource {rid!r}: duplicate resource_id")
        seen.add(rid)

        capacity = resource.weekly_capacity_hours
        if not _is_number(capacity):
            errors.append(
                f"Resource {rid!r}: weekly_capacity_hours must be a number, "
                f"got {capacity!r}"
            )
        elif capacity < 0 or math.isinf(capacity):
            errors.append(
                f"Resource {rid!r}: weekly_capacity_hours must be finite and >= 0, "
                f"got {capacity}"
            )

    return errors


def validate_work_items(
    items: Sequence[WorkItem],
    resource_ids: Iterable[str],
) -> list[str]:
    """Validate work items against the known resource ids.

    Checks:
    - Ids are non-empty and unique
    - raw_effort is a positive number
    - requested_start is a date or None
    - Every assigned resource id is known
    """
    errors: list[str] = []
    known = set(resource_ids)
    seen: set[str] = set()

    for i, item in enumerate(items):
        iid = item.item_id
        if not iid:
            errors.append(f"Work item {i}: empty item_id")
        elif iid in seen:
            errors.append(f"Work item {iid!r}: duplicate item_id")
        seen.add(iid)

        effort = item.raw_effort
        if not _is_number(effort):
            errors.append(
                f"Work item {iid!r}: raw_effort must be a number, got {effort!r}"
            )
        elif effort <= 0 or math.isinf(effort):
            errors.append(
                f"Work item {iid!r}: raw_effort must be positive and finite, "
                f"got {effort}"
            )

        start = item.requested_start
        if start is not None and not isinstance(start, date):
            errors.append(
                f"Work item {iid!r}: requested_start must be a date, got {start!r}"
            )

        for rid in item.assigned_resource_ids:
            if rid not in known:
                errors.append(
                    f"Work item {iid!r}: unknown resource_id {rid!r}"
                )

    return errors


def check_inputs(items: Sequence[WorkItem], resources: Sequence[Resource]) -> None:
    """Validate both collections; raise InvalidInputError listing every problem."""
    errors = validate_resources(resources)
    errors.extend(
        validate_work_items(items, (r.resource_id for r in resources))
    )
    if errors:
        raise InvalidInputError(errors)
