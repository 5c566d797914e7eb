"""Shared types: inputs, derived timeline records, and InvalidInputError."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from capacity_timeline.calendar import business_days_in_span


@dataclass(frozen=True)
class Resource:
    """A shared resource (developer) with a weekly capacity in hours."""

    resource_id: str
    weekly_capacity_hours: float
    name: str = ""


@dataclass(frozen=True)
class WorkItem:
    """A unit of work with a precomputed raw effort in man-days.

    ``assigned_resource_ids`` is an ordered set: duplicates are dropped,
    first occurrence wins. A ``datetime`` start is reduced to its date.
    """

    item_id: str
    raw_effort: float
    requested_start: date | None = None
    assigned_resource_ids: tuple[str, ...] = ()
    title: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.requested_start, datetime):
            object.__setattr__(self, "requested_start", self.requested_start.date())
        object.__setattr__(
            self,
            "assigned_resource_ids",
            tuple(dict.fromkeys(self.assigned_resource_ids)),
        )

    @property
    def is_schedulable(self) -> bool:
        """Has a requested start and at least one assigned resource."""
        return self.requested_start is not None and bool(self.assigned_resource_ids)


@dataclass(frozen=True)
class Segment:
    """Sub-interval [start, end) of one item's timeline with constant concurrency.

    Invariants:
        - work_done <= working_days * effective_capacity (equal except for
          the final segment of an item)
        - concurrent_item_ids never contains the owning item
    """

    start: date
    end: date
    effective_capacity: float
    work_done: float
    concurrent_item_ids: tuple[str, ...] = ()

    @property
    def working_days(self) -> int:
        """Business days in [start, end)."""
        return business_days_in_span(self.start, self.end)


@dataclass(frozen=True)
class Period:
    """Computed timeline for one scheduled work item.

    Invariants:
        - start is a business day
        - end >= start
        - working_days_duration counts business days in [start, end), end excluded
        - sum(s.work_done for s in segments) == raw_effort (float tolerance)
    """

    item_id: str
    start: date
    end: date
    working_days_duration: int
    calendar_days_duration: int
    effective_capacity: float
    raw_effort: float
    segments: tuple[Segment, ...] = ()

    @property
    def work_done(self) -> float:
        """Man-days delivered across all segments."""
        return sum(segment.work_done for segment in self.segments)

    def overlaps(self, other: Period) -> bool:
        """Inclusive overlap: [start, end] against [other.start, other.end]."""
        return self.start <= other.end and other.start <= self.end


@dataclass(frozen=True)
class Conflict:
    """Two or more items competing for shared resources in an overlap window."""

    item_ids: tuple[str, ...]
    resource_ids: tuple[str, ...]
    start: date
    end: date

    @property
    def key(self) -> tuple[frozenset[str], frozenset[str]]:
        """Identity used for de-duplication: (item set, resource set)."""
        return frozenset(self.item_ids), frozenset(self.resource_ids)

    def involves(self, item_id: str) -> bool:
        return item_id in self.item_ids


class UnscheduledReason(str, Enum):
    """Why an item produced no Period."""

    NO_START = "no_start"
    NO_RESOURCES = "no_resources"
    ZERO_CAPACITY = "zero_capacity"


@dataclass(frozen=True)
class UnscheduledItem:
    item_id: str
    reason: UnscheduledReason


@dataclass(frozen=True)
class ScheduleResult:
    """Output of one scheduling run. Rebuilt from scratch on every call."""

    periods: tuple[Period, ...]
    conflicts: tuple[Conflict, ...]
    unscheduled: tuple[UnscheduledItem, ...] = ()
    iterations: int = 0
    converged: bool = True

    def period_for(self, item_id: str) -> Period | None:
        """The Period for ``item_id``, or None if it was not scheduled."""
        for period in self.periods:
            if period.item_id == item_id:
                return period
        return None

    def conflicts_for(self, item_id: str) -> list[Conflict]:
        """Every conflict record that names ``item_id``."""
        return [c for c in self.conflicts if c.involves(item_id)]


class InvalidInputError(ValueError):
    """Raised at the boundary when items or resources are malformed.

    Carries every validation message, not just the first one found.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(
            "Invalid scheduling input:\n"
            + "\n".join(f"  - {e}" for e in self.errors)
        )
