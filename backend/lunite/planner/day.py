"""One weekday: its recurring fixed tasks, their completion log, and assigned dynamic tasks."""
from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List, Set, Tuple
from uuid import UUID

from lunite.planner.config import Config
from lunite.planner.errors import StaticOverlapError, TaskIndexError
from lunite.planner.schedule import Free, Schedule, Static
from lunite.planner.tasks import StaticTask
from lunite.planner.time_range import TimeRange, offset

logger = logging.getLogger(__name__)


@dataclass
class Day:
    static_tasks: List[StaticTask] = field(default_factory=list)
    static_done: Set[Tuple[UUID, datetime]] = field(default_factory=set)
    dynamic_refs: List[UUID] = field(default_factory=list)

    def add_static(self, task: StaticTask) -> None:
        """Insert a fixed task keeping the list sorted by start time."""
        for existing in self.static_tasks:
            if task.time.overlap(existing.time) or existing.time.overlap(task.time):
                raise StaticOverlapError(
                    f"'{task.task.name}' ({task.time}) overlaps '{existing.task.name}' ({existing.time})"
                )
        bisect.insort_right(self.static_tasks, task)

    def remove_static(self, index: int) -> StaticTask:
        task = self.static_tasks.pop(self._check_index(index))
        self.static_done = {entry for entry in self.static_done if entry[0] != task.id}
        return task

    def complete_static(self, index: int, when: datetime) -> StaticTask:
        """Log a completion for this occurrence; the task itself stays on the day."""
        task = self.static_tasks[self._check_index(index)]
        self.static_done.add((task.id, when))
        return task

    def is_done(self, task: StaticTask) -> bool:
        return any(task_id == task.id for task_id, _ in self.static_done)

    def forget_completions_before(self, occurrence: date) -> int:
        """Drop completions that belong to an occurrence earlier than ``occurrence``.

        A completion belongs to the first date on this weekday on or after the
        day it was logged, so ticking off Friday's task on Wednesday still
        counts for that Friday. Returns how many entries were dropped.
        """
        weekday = occurrence.weekday()
        kept = {
            entry
            for entry in self.static_done
            if _occurrence_on_or_after(entry[1].date(), weekday) >= occurrence
        }
        dropped = len(self.static_done) - len(kept)
        self.static_done = kept
        return dropped

    def get_freetime(self, config: Config) -> List[Schedule]:
        """Alternate fixed tasks and free gaps across [wake_time, bed_time).

        Completed fixed tasks count as free time, so finishing a commitment
        early hands its window back to the day.
        """
        pending = [task for task in self.static_tasks if not self.is_done(task)]
        if not pending:
            return [Free(config.window)]

        entries: List[Schedule] = []
        cursor = config.wake_time
        for task in pending:
            gap_end = min(task.time.start, config.bed_time, key=offset)
            if offset(cursor) < offset(gap_end):
                entries.append(Free(TimeRange(cursor, gap_end)))
            entries.append(Static(task))
            cursor = max(cursor, task.time.end, key=offset)
        if offset(cursor) < offset(config.bed_time):
            entries.append(Free(TimeRange(cursor, config.bed_time)))
        return entries

    def _check_index(self, index: int) -> int:
        if not 0 <= index < len(self.static_tasks):
            raise TaskIndexError(f"no fixed task at index {index} (day has {len(self.static_tasks)})")
        return index


def _occurrence_on_or_after(day: date, weekday: int) -> date:
    return day + timedelta(days=(weekday - day.weekday()) % 7)
