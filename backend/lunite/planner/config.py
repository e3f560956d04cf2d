"""Schedulable window of a day."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from lunite.planner.errors import InvalidTaskError
from lunite.planner.time_range import TimeRange, offset


@dataclass(frozen=True)
class Config:
    wake_time: time
    bed_time: time

    def __post_init__(self) -> None:
        if offset(self.wake_time) >= offset(self.bed_time):
            raise InvalidTaskError(f"wake time {self.wake_time} must be before bed time {self.bed_time}")

    @property
    def window(self) -> TimeRange:
        return TimeRange(self.wake_time, self.bed_time)
