"""Task payloads handled by the planner: fixed commitments and dynamic tasks."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, time, timedelta
from enum import Enum
from typing import Tuple, Union
from uuid import UUID, uuid4

from lunite.planner.errors import InvalidTaskError, PartOfDayError
from lunite.planner.time_range import END_OF_DAY, TimeRange, offset


@dataclass(frozen=True)
class Task:
    """Leaf payload; identity is ``id``, name and description are display-only."""

    name: str
    description: str = ""
    id: UUID = field(default_factory=uuid4)

    def renamed(self, name: str) -> Task:
        return replace(self, name=name)


@dataclass(frozen=True)
class StaticTask:
    """A task pinned to a fixed window; sorts by start time only."""

    task: Task
    time: TimeRange

    @property
    def id(self) -> UUID:
        return self.task.id

    def __lt__(self, other: StaticTask) -> bool:
        return offset(self.time.start) < offset(other.time.start)


class PartOfDay(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"

    @property
    def window(self) -> TimeRange:
        """Canonical window for the named part."""
        return _PART_WINDOWS[self]

    @property
    def rank(self) -> int:
        return list(PartOfDay).index(self)


_PART_WINDOWS = {
    PartOfDay.MORNING: TimeRange(time(4, 0), time(12, 0)),
    PartOfDay.AFTERNOON: TimeRange(time(12, 0), time(18, 0)),
    PartOfDay.EVENING: TimeRange(time(18, 0), time(21, 0)),
    PartOfDay.NIGHT: TimeRange(time(21, 0), END_OF_DAY),
}

# A preference is either a named part or an explicit window.
Around = Union[PartOfDay, TimeRange]


def to_fixed(around: Around) -> TimeRange:
    """Convert a named part of day to its window; explicit windows have nothing to derive from."""
    if isinstance(around, TimeRange):
        raise PartOfDayError(f"{around} is already an explicit window")
    return around.window


def around_rank(around: Around) -> Tuple[int, timedelta]:
    if isinstance(around, TimeRange):
        return len(PartOfDay), offset(around.start)
    return around.rank, timedelta(0)


@dataclass(frozen=True)
class FixedTask:
    """Dynamic task that must occupy exactly its window on ``date``."""

    task: StaticTask
    date: date
    priority: int = 0

    @property
    def id(self) -> UUID:
        return self.task.id

    @property
    def name(self) -> str:
        return self.task.task.name

    @property
    def time(self) -> TimeRange:
        return self.task.time


@dataclass(frozen=True)
class FlexibleTask:
    """Dynamic task that needs ``length`` of free time somewhere on ``date``."""

    task: Task
    date: date
    length: timedelta
    around: Around = PartOfDay.MORNING
    can_split: bool = False
    priority: int = 0

    def __post_init__(self) -> None:
        if self.length <= timedelta(0):
            raise InvalidTaskError(f"flexible task '{self.task.name}' needs a positive length")

    @property
    def id(self) -> UUID:
        return self.task.id

    @property
    def name(self) -> str:
        return self.task.name

    def part(self, index: int, length: timedelta) -> FlexibleTask:
        """Fragment ``index`` (1-based) of a split task, holding ``length`` of the total."""
        return replace(self, task=self.task.renamed(f"{self.task.name} #{index}"), length=length)


DynamicTask = Union[FixedTask, FlexibleTask]


def sort_key(task: DynamicTask) -> tuple:
    """Master-list order: date, fixed before flexible, then window/preference, then priority."""
    if isinstance(task, FixedTask):
        return (task.date, 0, offset(task.time.start), task.priority)
    return (task.date, 1, around_rank(task.around), task.priority)
