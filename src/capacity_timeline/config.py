"""Boundary: SchedulerConfig, hours <-> man-days conversion and loop limits."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class SchedulerConfig:
    """Numeric parameters for a scheduling run. Immutable.

    Set once at the boundary. All capacities inside the simulation are
    expressed in man-days per business day.
    """

    hours_per_man_day: float = 8.0
    business_days_per_week: int = 5
    max_iterations: int = 10
    tolerance: float = 1e-9

    def __post_init__(self) -> None:
        for name in ("hours_per_man_day", "business_days_per_week", "max_iterations"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value!r}")
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {self.tolerance!r}")

    def daily_hours(self, weekly_hours: float) -> float:
        """Hours per business day from a weekly capacity.

        Zero or negative capacity yields 0.0 rather than an error; the caller
        treats such a resource as contributing nothing.
        """
        if weekly_hours <= 0:
            return 0.0
        return weekly_hours / self.business_days_per_week

    def to_man_days(self, hours: float) -> float:
        """Convert hours to man-days."""
        return hours / self.hours_per_man_day

    def days_needed(self, effort: float, capacity: float) -> int:
        """Business days to deliver ``effort`` man-days at ``capacity`` per day.

        Rounded up, never less than one. The tolerance absorbs float noise so
        that e.g. 5.000000000001 days does not become 6.
        """
        return max(1, math.ceil(effort / capacity - self.tolerance))


DEFAULT_CONFIG = SchedulerConfig()
