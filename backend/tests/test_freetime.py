from __future__ import annotations

from datetime import datetime, time, timedelta

import pytest

from lunite.planner import Config, Day, Free, Static, StaticOverlapError, StaticTask, Task, TaskIndexError, TimeRange

CONFIG = Config(time(8), time(21))
DONE_AT = datetime(2026, 10, 21, 10, 30)


def _static(name: str, start: time, end: time) -> StaticTask:
    return StaticTask(Task(name), TimeRange(start, end))


def _day(*tasks: StaticTask) -> Day:
    day = Day()
    for task in tasks:
        day.add_static(task)
    return day


def _ranges(entries) -> list[tuple[str, time, time]]:
    return [(type(entry).__name__, entry.time.start, entry.time.end) for entry in entries]


def test_example_day() -> None:
    day = _day(_static("standup", time(8), time(10)), _static("lunch", time(11), time(12)))

    assert _ranges(day.get_freetime(CONFIG)) == [
        ("Static", time(8), time(10)),
        ("Free", time(10), time(11)),
        ("Static", time(11), time(12)),
        ("Free", time(12), time(21)),
    ]


def test_empty_day_is_one_free_window() -> None:
    assert Day().get_freetime(CONFIG) == [Free(TimeRange(time(8), time(21)))]


def test_gaps_before_and_after() -> None:
    day = _day(_static("gym", time(9), time(10)))

    assert _ranges(day.get_freetime(CONFIG)) == [
        ("Free", time(8), time(9)),
        ("Static", time(9), time(10)),
        ("Free", time(10), time(21)),
    ]


def test_back_to_back_tasks_have_no_gap() -> None:
    day = _day(_static("a", time(9), time(10)), _static("b", time(10), time(21)))

    assert _ranges(day.get_freetime(CONFIG)) == [
        ("Free", time(8), time(9)),
        ("Static", time(9), time(10)),
        ("Static", time(10), time(21)),
    ]


def test_entries_cover_the_window_exactly() -> None:
    day = _day(
        _static("c", time(17), time(18, 30)),
        _static("a", time(8, 45), time(9, 15)),
        _static("b", time(13), time(14)),
    )
    entries = day.get_freetime(CONFIG)

    assert entries[0].time.start == CONFIG.wake_time
    assert entries[-1].time.end == CONFIG.bed_time
    for previous, current in zip(entries, entries[1:]):
        assert previous.time.end == current.time.start
    assert sum((entry.time.duration for entry in entries), timedelta(0)) == timedelta(hours=13)


def test_tasks_are_kept_sorted() -> None:
    day = _day(_static("late", time(15), time(16)), _static("early", time(9), time(10)))
    assert [task.task.name for task in day.static_tasks] == ["early", "late"]


def test_completed_task_frees_its_window() -> None:
    day = _day(_static("standup", time(8), time(10)), _static("lunch", time(11), time(12)))
    day.complete_static(1, DONE_AT)

    entries = day.get_freetime(CONFIG)

    assert not any(isinstance(entry, Static) and entry.task.task.name == "lunch" for entry in entries)
    assert _ranges(entries) == [
        ("Static", time(8), time(10)),
        ("Free", time(10), time(21)),
    ]
    assert len(day.static_tasks) == 2


def test_all_completed_yields_whole_window() -> None:
    day = _day(_static("only", time(12), time(13)))
    day.complete_static(0, DONE_AT)
    assert day.get_freetime(CONFIG) == [Free(CONFIG.window)]


def test_complete_static_rejects_bad_index() -> None:
    day = _day(_static("only", time(12), time(13)))
    with pytest.raises(TaskIndexError):
        day.complete_static(1, DONE_AT)
    with pytest.raises(TaskIndexError):
        day.complete_static(-1, DONE_AT)


def test_overlapping_static_task_is_rejected() -> None:
    day = _day(_static("meeting", time(9), time(11)))
    with pytest.raises(StaticOverlapError):
        day.add_static(_static("clash", time(10), time(12)))
    with pytest.raises(StaticOverlapError):
        day.add_static(_static("around", time(8), time(12)))
    assert len(day.static_tasks) == 1


def test_remove_static_drops_completions() -> None:
    day = _day(_static("a", time(9), time(10)), _static("b", time(11), time(12)))
    day.complete_static(0, DONE_AT)

    removed = day.remove_static(0)

    assert removed.task.name == "a"
    assert day.static_done == set()
    assert [task.task.name for task in day.static_tasks] == ["b"]


def test_forget_completions_before() -> None:
    day = _day(_static("a", time(9), time(10)))
    day.complete_static(0, DONE_AT - timedelta(days=7))
    day.complete_static(0, DONE_AT)

    assert day.forget_completions_before(DONE_AT.date()) == 1
    assert {when for _, when in day.static_done} == {DONE_AT}


def test_task_before_wake_time_leaves_window_intact() -> None:
    day = _day(_static("run", time(6), time(7)), _static("a", time(9), time(10)))

    assert _ranges(day.get_freetime(CONFIG)) == [
        ("Static", time(6), time(7)),
        ("Free", time(8), time(9)),
        ("Static", time(9), time(10)),
        ("Free", time(10), time(21)),
    ]


def test_task_after_bed_time_does_not_extend_free_time() -> None:
    day = _day(_static("late shift", time(22), time(23)))

    assert _ranges(day.get_freetime(CONFIG)) == [
        ("Free", time(8), time(21)),
        ("Static", time(22), time(23)),
    ]


def test_task_straddling_bed_time_clips_the_gap() -> None:
    day = _day(_static("a", time(9), time(10)), _static("movie", time(20), time(22)))

    assert _ranges(day.get_freetime(CONFIG)) == [
        ("Free", time(8), time(9)),
        ("Static", time(9), time(10)),
        ("Free", time(10), time(20)),
        ("Static", time(20), time(22)),
    ]


def test_early_completion_survives_until_its_occurrence() -> None:
    day = _day(_static("gym", time(9), time(10)))
    # logged on Wednesday for the coming Friday
    day.complete_static(0, DONE_AT)

    friday = DONE_AT.date() + timedelta(days=2)
    assert day.forget_completions_before(friday) == 0
    assert day.forget_completions_before(friday + timedelta(days=7)) == 1
