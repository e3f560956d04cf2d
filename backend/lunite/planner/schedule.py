"""Schedule entries and the placement of dynamic tasks into free time.

A day's schedule is an ordered list of entries covering the waking window.
Placement never edits the list in place: each step folds over the current
entries and returns a fresh list, so indices are never shifted mid-walk.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import List, Optional, Sequence, Tuple, Union

from lunite.planner.tasks import DynamicTask, FixedTask, FlexibleTask, StaticTask
from lunite.planner.time_range import TimeRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Static:
    task: StaticTask

    @property
    def time(self) -> TimeRange:
        return self.task.time


@dataclass(frozen=True)
class Free:
    time: TimeRange


@dataclass(frozen=True)
class Dynamic:
    task: DynamicTask
    time: TimeRange


@dataclass(frozen=True)
class DynamicPart:
    index: int
    task: FlexibleTask
    time: TimeRange


Schedule = Union[Static, Free, Dynamic, DynamicPart]


def free_total(entries: Sequence[Schedule]) -> timedelta:
    return sum((entry.time.duration for entry in entries if isinstance(entry, Free)), timedelta(0))


def place(entries: Sequence[Schedule], task: DynamicTask) -> Tuple[List[Schedule], Optional[str]]:
    """Place one dynamic task; returns the new entries and a diagnostic when it did not fit."""
    if isinstance(task, FixedTask):
        return place_fixed(entries, task)
    if task.can_split:
        return place_split(entries, task)
    return place_first_fit(entries, task)


def place_fixed(entries: Sequence[Schedule], task: FixedTask) -> Tuple[List[Schedule], Optional[str]]:
    """Carve the task's exact window out of the free entry that contains it."""
    window = task.time
    result: List[Schedule] = []
    placed = False
    for entry in entries:
        if placed or not isinstance(entry, Free) or not window.subset(entry.time):
            result.append(entry)
            continue
        if entry.time.start != window.start:
            result.append(Free(TimeRange(entry.time.start, window.start)))
        result.append(Dynamic(task, window))
        if entry.time.end != window.end:
            result.append(Free(TimeRange(window.end, entry.time.end)))
        placed = True

    if not placed:
        return list(entries), f"'{task.name}' ({window}) does not fit in any free time"
    return result, None


def place_split(entries: Sequence[Schedule], task: FlexibleTask) -> Tuple[List[Schedule], Optional[str]]:
    """Fill free entries in order until the task's length is covered."""
    available = free_total(entries)
    if available < task.length:
        return list(entries), (
            f"'{task.name}' needs {_minutes(task.length)} min but only "
            f"{_minutes(available)} min of free time is left"
        )

    remaining = task.length
    index = 0
    result: List[Schedule] = []
    for entry in entries:
        if remaining <= timedelta(0) or not isinstance(entry, Free):
            result.append(entry)
            continue
        index += 1
        duration = entry.time.duration
        if duration <= remaining:
            result.append(DynamicPart(index, task.part(index, duration), entry.time))
            remaining -= duration
            continue
        cut = entry.time.shifted_start(remaining)
        result.append(DynamicPart(index, task.part(index, remaining), TimeRange(entry.time.start, cut)))
        result.append(Free(TimeRange(cut, entry.time.end)))
        remaining = timedelta(0)

    logger.debug("Split '%s' into %d part(s)", task.name, index)
    return result, None


def place_first_fit(entries: Sequence[Schedule], task: FlexibleTask) -> Tuple[List[Schedule], Optional[str]]:
    """Put the whole task into the first free entry long enough to hold it."""
    result: List[Schedule] = []
    placed = False
    for entry in entries:
        if placed or not isinstance(entry, Free) or entry.time.duration < task.length:
            result.append(entry)
            continue
        cut = entry.time.shifted_start(task.length)
        result.append(Dynamic(task, TimeRange(entry.time.start, cut)))
        if entry.time.duration > task.length:
            result.append(Free(TimeRange(cut, entry.time.end)))
        placed = True

    if not placed:
        return list(entries), f"'{task.name}' needs {_minutes(task.length)} min in one block and no free gap is that long"
    return result, None


def _minutes(delta: timedelta) -> int:
    return int(delta.total_seconds() // 60)
