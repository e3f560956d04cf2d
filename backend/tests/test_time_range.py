from __future__ import annotations

from datetime import time, timedelta

import pytest

from lunite.planner import END_OF_DAY, InvalidTaskError, TimeRange


def _range(start: int, end: int) -> TimeRange:
    return TimeRange(time(start), time(end))


def test_duration() -> None:
    assert TimeRange(time(10, 15), time(12, 0)).duration == timedelta(minutes=105)


def test_end_of_day_counts_as_midnight() -> None:
    night = TimeRange(time(21), END_OF_DAY)
    assert night.duration == timedelta(hours=3)
    assert str(night) == "21:00-24:00"


def test_start_must_precede_end() -> None:
    with pytest.raises(InvalidTaskError):
        _range(10, 10)
    with pytest.raises(InvalidTaskError):
        _range(12, 9)


def test_overlap_detects_endpoints_inside() -> None:
    base = _range(9, 12)
    assert base.overlap(_range(10, 14))
    assert base.overlap(_range(7, 10))
    assert base.overlap(_range(9, 12))


def test_overlap_ignores_touching_ranges() -> None:
    base = _range(9, 12)
    assert not base.overlap(_range(12, 14))
    assert not base.overlap(_range(7, 9))


def test_subset() -> None:
    outer = _range(8, 18)
    assert _range(9, 10).subset(outer)
    assert _range(8, 18).subset(outer)
    assert not _range(7, 10).subset(outer)
    assert not _range(17, 19).subset(outer)
    assert not outer.subset(_range(9, 10))


def test_shifted_start_clamps_to_end_of_day() -> None:
    night = TimeRange(time(22), END_OF_DAY)
    assert night.shifted_start(timedelta(minutes=30)) == time(22, 30)
    assert night.shifted_start(timedelta(hours=2)) == END_OF_DAY
