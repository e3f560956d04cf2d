from __future__ import annotations

from datetime import datetime, time, timedelta
from uuid import uuid4

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from lunite.db.models.planner_state import PlannerState
from lunite.db.models.user import User
from lunite.planner import Config, Planner, StaticTask, Task, TimeRange
from lunite.services import job_runner
from lunite.services.job_runner import roll_over_all_planners, roll_over_planner
from lunite.services.planner_store import load_planner, save_planner

# Wednesday
NOW = datetime(2026, 10, 21, 9, 0)


def _session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    User.__table__.create(bind=engine)
    PlannerState.__table__.create(bind=engine)
    return TestingSession


def _seed_planner(db_session, *, completed: bool = True):
    user_id = uuid4()
    planner = Planner(Config(time(8), time(21)), clock=lambda: NOW)
    planner.add_static(2, StaticTask(Task("standup"), TimeRange(time(9), time(10))))
    if completed:
        planner.complete_static(2, 0)
    session = db_session()
    try:
        save_planner(session, user_id, planner)
    finally:
        session.close()
    return user_id


def test_roll_over_planner_next_week_clears_completion() -> None:
    db_session = _session()
    user_id = _seed_planner(db_session)
    next_week = NOW + timedelta(days=7)

    with db_session() as db:
        dropped = roll_over_planner(db, user_id, clock=lambda: next_week)
        reloaded = load_planner(db, user_id, clock=lambda: next_week)

    assert dropped == 1
    assert reloaded.days[2].static_done == set()


def test_roll_over_all_planners_counts_users() -> None:
    db_session = _session()
    first = _seed_planner(db_session)
    _seed_planner(db_session, completed=False)

    with db_session() as db:
        result = roll_over_all_planners(db, clock=lambda: NOW + timedelta(days=7))

    assert result.users_processed == 2
    assert result.completions_cleared == 1
    assert result.failures == 0

    with db_session() as db:
        only_first = roll_over_all_planners(db, user_ids=[first, first], clock=lambda: NOW)
    assert only_first.users_processed == 1


def test_roll_over_failure_is_counted(monkeypatch) -> None:
    db_session = _session()
    user_id = _seed_planner(db_session)

    def explode(db, uid, *, clock=None):
        raise RuntimeError("boom")

    monkeypatch.setattr(job_runner, "roll_over_planner", explode)
    with db_session() as db:
        result = roll_over_all_planners(db, user_ids=[user_id])

    assert result.users_processed == 0
    assert result.failures == 1
