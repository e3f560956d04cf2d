"""Day-planning core: free-time computation and dynamic task placement."""

from lunite.planner.config import Config
from lunite.planner.day import Day
from lunite.planner.errors import (
    DayIndexError,
    InvalidTaskError,
    PartOfDayError,
    PastDateError,
    PlannerError,
    StaticOverlapError,
    TaskIndexError,
)
from lunite.planner.planner import WEEKDAYS, Planner
from lunite.planner.schedule import Dynamic, DynamicPart, Free, Schedule, Static
from lunite.planner.tasks import DynamicTask, FixedTask, FlexibleTask, PartOfDay, StaticTask, Task, to_fixed
from lunite.planner.time_range import END_OF_DAY, TimeRange

__all__ = [
    "Config",
    "Day",
    "DayIndexError",
    "Dynamic",
    "DynamicPart",
    "DynamicTask",
    "END_OF_DAY",
    "FixedTask",
    "FlexibleTask",
    "Free",
    "InvalidTaskError",
    "PartOfDay",
    "PartOfDayError",
    "PastDateError",
    "Planner",
    "PlannerError",
    "Schedule",
    "Static",
    "StaticOverlapError",
    "StaticTask",
    "Task",
    "TaskIndexError",
    "TimeRange",
    "WEEKDAYS",
    "to_fixed",
]
