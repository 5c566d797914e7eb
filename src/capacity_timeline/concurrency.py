"""Layer 2: concurrency model: who is active when, and what capacity is left.

A resource shared by N active placements delivers 1/N of its daily hours to
each. These helpers read one immutable snapshot of placements; they never
mutate it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Mapping, Sequence

from capacity_timeline.types import Resource, Segment

if TYPE_CHECKING:
    from capacity_timeline.config import SchedulerConfig


@dataclass(frozen=True)
class Placement:
    """One item's position in a simulation snapshot.

    end is exclusive for capacity purposes: work happens on the business days
    of [start, end).
    """

    item_id: str
    start: date
    end: date
    raw_effort: float
    resource_ids: tuple[str, ...]
    segments: tuple[Segment, ...] = ()
    _resource_set: frozenset[str] = field(
        init=False, repr=False, compare=False, default=frozenset()
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "_resource_set", frozenset(self.resource_ids))

    def uses(self, resource_id: str) -> bool:
        return resource_id in self._resource_set

    def shares_resource_with(self, other: Placement) -> bool:
        return not self._resource_set.isdisjoint(other._resource_set)


def change_points(placements: Sequence[Placement], not_before: date) -> list[date]:
    """Sorted, unique start/end dates of all placements that are >= not_before."""
    points: set[date] = set()
    for placement in placements:
        if placement.start >= not_before:
            points.add(placement.start)
        if placement.end >= not_before:
            points.add(placement.end)
    return sorted(points)


def is_active(other: Placement, start: date, end: date) -> bool:
    """Strict overlap with [start, end).

    A placement ending exactly at ``start`` is not active.
    """
    return other.start < end and other.end > start


def active_in_window(
    subject: Placement,
    placements: Sequence[Placement],
    start: date,
    end: date,
) -> list[Placement]:
    """Subject plus every other placement active in [start, end). Input order."""
    return [
        p for p in placements
        if p.item_id == subject.item_id or is_active(p, start, end)
    ]


def still_active_after(
    subject: Placement,
    placements: Sequence[Placement],
    when: date,
) -> list[Placement]:
    """Subject plus every placement that has not ended by ``when``."""
    return [
        p for p in placements
        if p.item_id == subject.item_id or p.end > when
    ]


def effective_capacity(
    subject: Placement,
    active: Sequence[Placement],
    resources: Mapping[str, Resource],
    config: SchedulerConfig,
) -> float:
    """Man-days per business day delivered to ``subject`` given ``active``.

    ``active`` must contain the subject itself, so the sharing count per
    resource is always at least one.
    """
    hours = 0.0
    for resource_id in subject.resource_ids:
        daily = config.daily_hours(resources[resource_id].weekly_capacity_hours)
        if daily <= 0:
            continue
        sharing = sum(1 for p in active if p.uses(resource_id))
        hours += daily / max(sharing, 1)
    return config.to_man_days(hours)


def naive_capacity(
    resource_ids: Sequence[str],
    resources: Mapping[str, Resource],
    config: SchedulerConfig,
) -> float:
    """Single-item rate: every assigned resource fully dedicated."""
    hours = sum(
        config.daily_hours(resources[rid].weekly_capacity_hours)
        for rid in resource_ids
    )
    return config.to_man_days(hours)


def concurrent_with(subject: Placement, active: Sequence[Placement]) -> tuple[str, ...]:
    """Ids of other active placements sharing at least one resource with subject."""
    return tuple(
        p.item_id for p in active
        if p.item_id != subject.item_id and subject.shares_resource_with(p)
    )
