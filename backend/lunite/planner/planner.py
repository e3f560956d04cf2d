"""Week planner: seven days of fixed tasks plus the master list of dynamic tasks."""
from __future__ import annotations

import bisect
import logging
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, List, Optional, Tuple

from lunite.planner.config import Config
from lunite.planner.day import Day
from lunite.planner.errors import DayIndexError, InvalidTaskError, PastDateError, TaskIndexError
from lunite.planner.schedule import Schedule, place
from lunite.planner.tasks import DynamicTask, StaticTask, sort_key

logger = logging.getLogger(__name__)

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


class Planner:
    """Owns the week and places dynamic tasks into each day's free time.

    Days are indexed 0 (Monday) to 6 (Sunday). Each day references its
    dynamic tasks by task id, so completing one task never disturbs the
    references held by other days.
    """

    def __init__(
        self,
        config: Config,
        *,
        days: Optional[List[Day]] = None,
        dynamic_tasks: Optional[Iterable[DynamicTask]] = None,
        dynamic_done: Optional[Iterable[Tuple[DynamicTask, datetime]]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        if days is not None and len(days) != len(WEEKDAYS):
            raise InvalidTaskError(f"a planner holds exactly {len(WEEKDAYS)} days, got {len(days)}")
        self.config = config
        self.days: List[Day] = days if days is not None else [Day() for _ in WEEKDAYS]
        self.dynamic_tasks: List[DynamicTask] = sorted(dynamic_tasks or [], key=sort_key)
        self.dynamic_done: List[Tuple[DynamicTask, datetime]] = list(dynamic_done or [])
        self._clock = clock or datetime.now

    # ------------------------------------------------------------------
    # Calendar helpers
    # ------------------------------------------------------------------

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return self.now().date()

    def today_index(self) -> int:
        return self.today().weekday()

    def day(self, index: int) -> Day:
        return self.days[_check_day(index)]

    def current_day(self) -> Day:
        return self.days[self.today_index()]

    def upcoming_date(self, index: int) -> date:
        """Calendar date of weekday ``index`` in what is left of the current week."""
        delta = _check_day(index) - self.today_index()
        if delta < 0:
            raise DayIndexError(f"{WEEKDAYS[index]} has already passed this week")
        return self.today() + timedelta(days=delta)

    def set_config(self, config: Config) -> None:
        self.config = config
        logger.debug("Planner window set to %s-%s", config.wake_time, config.bed_time)

    # ------------------------------------------------------------------
    # Fixed tasks
    # ------------------------------------------------------------------

    def add_static(self, day: int, task: StaticTask) -> None:
        self.day(day).add_static(task)
        logger.debug("Added fixed task '%s' (%s) on %s", task.task.name, task.time, WEEKDAYS[day])

    def remove_static(self, day: int, index: int) -> StaticTask:
        task = self.day(day).remove_static(index)
        logger.debug("Removed fixed task '%s' from %s", task.task.name, WEEKDAYS[day])
        return task

    def complete_static(self, day: int, index: int) -> StaticTask:
        return self.day(day).complete_static(index, self.now())

    # ------------------------------------------------------------------
    # Dynamic tasks
    # ------------------------------------------------------------------

    def add_dynamic(self, task: DynamicTask) -> None:
        """Insert into the sorted master list and reassign this week's remaining days."""
        today = self.today()
        if task.date < today:
            logger.warning("Rejected '%s': dated %s, before today (%s)", task.name, task.date, today)
            raise PastDateError(f"'{task.name}' is dated {task.date}, before today ({today})")
        if self.find_dynamic(task.id) is not None:
            raise InvalidTaskError(f"task {task.id} is already planned")
        bisect.insort_right(self.dynamic_tasks, task, key=sort_key)
        self.update_dynamics()

    def update_dynamics(self) -> None:
        """Rebuild the references of today through Sunday; earlier days are left alone."""
        today = self.today()
        start = today.weekday()
        for index in range(start, len(WEEKDAYS)):
            target = today + timedelta(days=index - start)
            self.days[index].dynamic_refs = [task.id for task in self.dynamic_tasks if task.date == target]

    def complete_dynamic(self, index: int) -> DynamicTask:
        """Complete the ``index``-th dynamic task assigned to today."""
        day = self.current_day()
        if not 0 <= index < len(day.dynamic_refs):
            raise TaskIndexError(f"no dynamic task at index {index} today (day has {len(day.dynamic_refs)})")
        task = self.find_dynamic(day.dynamic_refs[index])
        if task is None:
            raise TaskIndexError(f"dynamic task {day.dynamic_refs[index]} is no longer planned")
        del day.dynamic_refs[index]
        self.dynamic_tasks.remove(task)
        self.dynamic_done.append((task, self.now()))
        logger.debug("Completed dynamic task '%s'", task.name)
        return task

    def find_dynamic(self, task_id) -> Optional[DynamicTask]:
        for task in self.dynamic_tasks:
            if task.id == task_id:
                return task
        return None

    def dynamic_tasks_for(self, day: int) -> List[DynamicTask]:
        """Resolve a day's references in their stored order."""
        by_id = {task.id: task for task in self.dynamic_tasks}
        return [by_id[ref] for ref in self.day(day).dynamic_refs if ref in by_id]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_freetime(self, day: int) -> List[Schedule]:
        return self.day(day).get_freetime(self.config)

    def get_schedule_with_dynamics(self, day: int) -> Tuple[List[Schedule], List[str]]:
        """Overlay the day's dynamic tasks onto its free time.

        Tasks that cannot be placed leave the schedule untouched and add a
        diagnostic; the remaining tasks are still placed.
        """
        entries = self.get_freetime(day)
        diagnostics: List[str] = []
        for task in self.dynamic_tasks_for(day):
            entries, diagnostic = place(entries, task)
            if diagnostic:
                logger.info("%s: %s", WEEKDAYS[day], diagnostic)
                diagnostics.append(diagnostic)
        return entries, diagnostics

    def roll_over(self) -> int:
        """Start each weekday's current occurrence afresh.

        Completion entries logged before a weekday's most recent occurrence
        are dropped so recurring fixed tasks occupy their window again, then
        dynamic references are rebuilt. Returns the number of dropped entries.
        """
        today = self.today()
        start = today.weekday()
        dropped = 0
        for index, day in enumerate(self.days):
            occurrence = today - timedelta(days=(start - index) % len(WEEKDAYS))
            dropped += day.forget_completions_before(occurrence)
        self.update_dynamics()
        return dropped


def _check_day(index: int) -> int:
    if not 0 <= index < len(WEEKDAYS):
        raise DayIndexError(f"day index must be between 0 and {len(WEEKDAYS) - 1}, got {index}")
    return index
