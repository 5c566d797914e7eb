"""Layer 3: capacity scheduler: segment simulation iterated to a fixed point.

Each pass reads an immutable snapshot of placements and produces a new one.
For one item, the timeline is cut at every change point (any placement's
start or end at or after the item's start). Within a segment the set of
active placements, and therefore the item's effective capacity, is constant;
the segment delivers ``business_days_in_span * effective_capacity`` man-days.
The pass stops the item at the segment that covers its remaining effort, or
extends past the last change point with whatever is still active.

Cost: O(items x iterations x change_points x items), from the pairwise
active-set check per segment. Fine for item counts in the low hundreds.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Mapping, Sequence

from capacity_timeline.calendar import (
    add_business_days,
    business_days_in_span,
    calendar_days_between,
    next_business_day,
)
from capacity_timeline.concurrency import (
    Placement,
    active_in_window,
    change_points,
    concurrent_with,
    effective_capacity,
    naive_capacity,
    still_active_after,
)
from capacity_timeline.config import DEFAULT_CONFIG, SchedulerConfig
from capacity_timeline.conflicts import detect_conflicts
from capacity_timeline.schema import check_inputs
from capacity_timeline.types import (
    Period,
    Resource,
    ScheduleResult,
    Segment,
    UnscheduledItem,
    UnscheduledReason,
    WorkItem,
)

logger = logging.getLogger(__name__)


def schedule(
    items: Sequence[WorkItem],
    resources: Sequence[Resource],
    config: SchedulerConfig = DEFAULT_CONFIG,
) -> ScheduleResult:
    """Compute a Period per schedulable item and the conflicts between them.

    Args:
        items: Work items in priority/display order. Order is preserved in
            the output and fixes every tie-break.
        resources: Resources referenced by the items.
        config: Unit conversion and iteration limits.

    Returns:
        ScheduleResult. Items without a start, without resources, or whose
        resources have no capacity at all are listed in ``unscheduled``.
        When the iteration cap is reached without convergence the last
        computed periods are returned with ``converged=False``.

    Raises:
        InvalidInputError: Non-positive effort, negative capacity, duplicate
            ids or unknown resource references.
    """
    check_inputs(items, resources)
    by_id = {r.resource_id: r for r in resources}

    snapshot, unscheduled = _seed(items, by_id, config)
    logger.debug(
        "schedule: %d items, %d seeded, %d unscheduled",
        len(items), len(snapshot), len(unscheduled),
    )

    iterations = 0
    converged = not snapshot
    for iterations in range(1, config.max_iterations + 1):
        snapshot, changed = _refine(snapshot, by_id, config)
        if not changed:
            converged = True
            break

    if converged:
        logger.debug("schedule: converged after %d iteration(s)", iterations)
    else:
        logger.warning(
            "schedule: no fixed point after %d iterations; "
            "returning the last pass",
            iterations,
        )

    periods = tuple(_finalize(p, snapshot, by_id, config) for p in snapshot)
    assignments = {p.item_id: p.resource_ids for p in snapshot}
    conflicts = tuple(detect_conflicts(periods, assignments))

    return ScheduleResult(
        periods=periods,
        conflicts=conflicts,
        unscheduled=tuple(unscheduled),
        iterations=iterations,
        converged=converged,
    )


def timeline_for(
    item_id: str,
    items: Sequence[WorkItem],
    resources: Sequence[Resource],
    config: SchedulerConfig = DEFAULT_CONFIG,
) -> Period | None:
    """Schedule everything and return the Period for one item (None if absent)."""
    return schedule(items, resources, config).period_for(item_id)


def _seed(
    items: Sequence[WorkItem],
    resources: Mapping[str, Resource],
    config: SchedulerConfig,
) -> tuple[tuple[Placement, ...], list[UnscheduledItem]]:
    """Initial placements assuming every resource is fully dedicated."""
    placements: list[Placement] = []
    unscheduled: list[UnscheduledItem] = []

    for item in items:
        if item.requested_start is None:
            unscheduled.append(UnscheduledItem(item.item_id, UnscheduledReason.NO_START))
            continue
        if not item.assigned_resource_ids:
            unscheduled.append(
                UnscheduledItem(item.item_id, UnscheduledReason.NO_RESOURCES)
            )
            continue

        capacity = naive_capacity(item.assigned_resource_ids, resources, config)
        if capacity <= 0:
            logger.debug("schedule: %r has no capacity, not scheduled", item.item_id)
            unscheduled.append(
                UnscheduledItem(item.item_id, UnscheduledReason.ZERO_CAPACITY)
            )
            continue

        start = next_business_day(item.requested_start)
        end = add_business_days(start, config.days_needed(item.raw_effort, capacity))
        placements.append(
            Placement(
                item_id=item.item_id,
                start=start,
                end=end,
                raw_effort=item.raw_effort,
                resource_ids=item.assigned_resource_ids,
            )
        )

    return tuple(placements), unscheduled


def _refine(
    snapshot: tuple[Placement, ...],
    resources: Mapping[str, Resource],
    config: SchedulerConfig,
) -> tuple[tuple[Placement, ...], bool]:
    """One pass over every placement against the same snapshot."""
    refined: list[Placement] = []
    changed = False
    for placement in snapshot:
        end, segments = _simulate(placement, snapshot, resources, config)
        if end != placement.end:
            changed = True
        refined.append(replace(placement, end=end, segments=segments))
    return tuple(refined), changed


def _simulate(
    placement: Placement,
    snapshot: Sequence[Placement],
    resources: Mapping[str, Resource],
    config: SchedulerConfig,
) -> tuple[date, tuple[Segment, ...]]:
    """Walk one placement's segments and return its new end and segments."""
    points = change_points(snapshot, placement.start)
    if not points:
        points = [placement.end]

    segments: list[Segment] = []
    segment_start = placement.start
    work_done = 0.0

    for segment_end in points:
        if segment_end <= segment_start:
            continue

        active = active_in_window(placement, snapshot, segment_start, segment_end)
        capacity = _capacity_or_naive(placement, active, resources, config)
        remaining = placement.raw_effort - work_done
        segment_work = business_days_in_span(segment_start, segment_end) * capacity

        if segment_work >= remaining - config.tolerance:
            end = add_business_days(
                segment_start, config.days_needed(remaining, capacity)
            )
            segments.append(
                Segment(
                    start=segment_start,
                    end=end,
                    effective_capacity=capacity,
                    work_done=remaining,
                    concurrent_item_ids=concurrent_with(placement, active),
                )
            )
            return end, tuple(segments)

        segments.append(
            Segment(
                start=segment_start,
                end=segment_end,
                effective_capacity=capacity,
                work_done=segment_work,
                concurrent_item_ids=concurrent_with(placement, active),
            )
        )
        work_done += segment_work
        segment_start = segment_end

    # Change points exhausted: extend with whatever has not ended yet
    remaining = placement.raw_effort - work_done
    active = still_active_after(placement, snapshot, segment_start)
    capacity = _capacity_or_naive(placement, active, resources, config)
    end = add_business_days(segment_start, config.days_needed(remaining, capacity))
    segments.append(
        Segment(
            start=segment_start,
            end=end,
            effective_capacity=capacity,
            work_done=remaining,
            concurrent_item_ids=concurrent_with(placement, active),
        )
    )
    return end, tuple(segments)


def _capacity_or_naive(
    placement: Placement,
    active: Sequence[Placement],
    resources: Mapping[str, Resource],
    config: SchedulerConfig,
) -> float:
    """Effective capacity, falling back to the single-item rate when it is zero.

    Seeding guarantees the single-item rate is positive for every placement.
    """
    capacity = effective_capacity(placement, active, resources, config)
    if capacity > 0:
        return capacity
    return naive_capacity(placement.resource_ids, resources, config)


def _finalize(
    placement: Placement,
    snapshot: Sequence[Placement],
    resources: Mapping[str, Resource],
    config: SchedulerConfig,
) -> Period:
    """Derive the reported Period from a converged placement."""
    active = active_in_window(placement, snapshot, placement.start, placement.end)
    return Period(
        item_id=placement.item_id,
        start=placement.start,
        end=placement.end,
        working_days_duration=business_days_in_span(placement.start, placement.end),
        calendar_days_duration=calendar_days_between(placement.start, placement.end),
        effective_capacity=effective_capacity(placement, active, resources, config),
        raw_effort=placement.raw_effort,
        segments=placement.segments,
    )
