from __future__ import annotations

from apscheduler.schedulers.background import BackgroundScheduler

from lunite.core.clock import local_now
from lunite.core.config import settings
from lunite.services.job_runner import JobRunResult
from lunite.worker import scheduler_main


def test_register_jobs_adds_daily_rollover() -> None:
    scheduler = BackgroundScheduler(timezone=settings.scheduler_timezone)

    scheduler_main.register_jobs(scheduler)

    job = scheduler.get_job("daily_rollover_job")
    assert job is not None
    assert job.func is scheduler_main.run_rollover_job


def test_run_rollover_job_closes_session(monkeypatch) -> None:
    closed = []

    class _Session:
        def close(self) -> None:
            closed.append(True)

    calls = []
    monkeypatch.setattr(scheduler_main, "SessionLocal", _Session)
    monkeypatch.setattr(
        scheduler_main,
        "roll_over_all_planners",
        lambda db, clock=None: calls.append(clock) or JobRunResult(0, 0),
    )

    scheduler_main.run_rollover_job()

    assert calls == [local_now]
    assert closed == [True]
