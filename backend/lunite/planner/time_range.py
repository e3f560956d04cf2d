"""Wall-clock intervals within a single day."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import time, timedelta

from lunite.planner.errors import InvalidTaskError

# 24:00 cannot be expressed as a datetime.time; time.max stands in for it.
END_OF_DAY = time.max
_DAY = timedelta(hours=24)


def offset(value: time) -> timedelta:
    """Return the distance from midnight, treating END_OF_DAY as exactly 24:00."""
    if value == END_OF_DAY:
        return _DAY
    return timedelta(hours=value.hour, minutes=value.minute, seconds=value.second, microseconds=value.microsecond)


def from_offset(delta: timedelta) -> time:
    """Inverse of offset(); clamps anything at or past 24:00 to END_OF_DAY."""
    if delta >= _DAY:
        return END_OF_DAY
    if delta < timedelta(0):
        raise InvalidTaskError(f"negative time offset {delta}")
    seconds, micro = divmod(int(delta / timedelta(microseconds=1)), 1_000_000)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return time(hours, minutes, secs, micro)


@dataclass(frozen=True, order=True)
class TimeRange:
    """Half-open interval [start, end) of one day; no wraparound past midnight."""

    start: time
    end: time

    def __post_init__(self) -> None:
        if offset(self.start) >= offset(self.end):
            raise InvalidTaskError(f"time range must start before it ends ({self.start} -> {self.end})")

    @property
    def duration(self) -> timedelta:
        return offset(self.end) - offset(self.start)

    def overlap(self, other: TimeRange) -> bool:
        """True when either endpoint of ``other`` falls inside this interval."""
        start, end = offset(self.start), offset(self.end)
        return start <= offset(other.start) < end or start < offset(other.end) <= end

    def subset(self, other: TimeRange) -> bool:
        """True when this interval lies entirely inside ``other`` (boundaries may coincide)."""
        return offset(other.start) <= offset(self.start) and offset(self.end) <= offset(other.end)

    def shifted_start(self, delta: timedelta) -> time:
        """Return the time ``delta`` after this range's start."""
        return from_offset(offset(self.start) + delta)

    def __str__(self) -> str:
        end = "24:00" if self.end == END_OF_DAY else self.end.strftime("%H:%M")
        return f"{self.start.strftime('%H:%M')}-{end}"
