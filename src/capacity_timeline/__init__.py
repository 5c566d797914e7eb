"""capacity-timeline: concurrency-aware business-day timelines for shared resources."""

from capacity_timeline.calendar import (
    add_business_days,
    business_days_between,
    business_days_in_span,
    is_business_day,
    next_business_day,
    previous_business_day,
    subtract_business_days,
)
from capacity_timeline.config import DEFAULT_CONFIG, SchedulerConfig
from capacity_timeline.conflicts import detect_conflicts, group_conflicts
from capacity_timeline.loaders import load_planning_json, planning_from_dict
from capacity_timeline.scheduler import schedule, timeline_for
from capacity_timeline.types import (
    Conflict,
    InvalidInputError,
    Period,
    Resource,
    ScheduleResult,
    Segment,
    UnscheduledItem,
    UnscheduledReason,
    WorkItem,
)

__all__ = [
    "Conflict",
    "DEFAULT_CONFIG",
    "InvalidInputError",
    "Period",
    "Resource",
    "ScheduleResult",
    "SchedulerConfig",
    "Segment",
    "UnscheduledItem",
    "UnscheduledReason",
    "WorkItem",
    "add_business_days",
    "business_days_between",
    "business_days_in_span",
    "detect_conflicts",
    "group_conflicts",
    "is_business_day",
    "load_planning_json",
    "next_business_day",
    "planning_from_dict",
    "previous_business_day",
    "schedule",
    "subtract_business_days",
    "timeline_for",
]
