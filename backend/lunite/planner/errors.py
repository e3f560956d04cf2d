"""Exceptions raised by the planning core."""
from __future__ import annotations


class PlannerError(Exception):
    """Base class for planner failures surfaced to callers."""


class DayIndexError(PlannerError, IndexError):
    """Weekday index outside 0 (Monday) .. 6 (Sunday) or already passed."""


class TaskIndexError(PlannerError, IndexError):
    """Local task index outside a day's task list."""


class PastDateError(PlannerError, ValueError):
    """A dynamic task was dated before today."""


class InvalidTaskError(PlannerError, ValueError):
    """A task or config value cannot be represented (empty window, zero length...)."""


class StaticOverlapError(PlannerError):
    """A fixed task collides with one already on the same day."""


class PartOfDayError(PlannerError, ValueError):
    """An explicit window has no named part of day to derive from."""
