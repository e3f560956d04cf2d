"""Dedicated APScheduler worker process running the daily rollover."""
from __future__ import annotations

import logging
import signal
import threading

from apscheduler.schedulers.background import BackgroundScheduler

from lunite.core.clock import local_now
from lunite.core.config import settings
from lunite.core.logging import configure_logging
from lunite.db.session import SessionLocal, init_db
from lunite.services.job_runner import roll_over_all_planners

logger = logging.getLogger(__name__)


def main() -> None:
    configure_logging(log_level=settings.log_level)
    init_db()
    logger.info("Scheduler worker starting (enabled=%s)", settings.scheduler_enabled)

    scheduler = BackgroundScheduler(timezone=settings.scheduler_timezone)

    if settings.scheduler_enabled:
        register_jobs(scheduler)
        scheduler.start()
        if settings.jobs_run_on_startup:
            logger.info("Running rollover once on startup")
            run_rollover_job()
    else:
        logger.warning("Scheduler disabled via config; worker will idle")

    stop_event = threading.Event()

    def shutdown(signum, frame):  # pragma: no cover - signal handler
        logger.info("Scheduler worker shutting down (signal=%s)", signum)
        if scheduler.running:
            scheduler.shutdown(wait=False)
        stop_event.set()

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    try:
        stop_event.wait()
    except KeyboardInterrupt:  # pragma: no cover - manual stop
        shutdown(signal.SIGINT, None)


def register_jobs(scheduler: BackgroundScheduler) -> None:
    scheduler.add_job(
        run_rollover_job,
        trigger="cron",
        hour=settings.rollover_hour,
        minute=settings.rollover_minute,
        id="daily_rollover_job",
        replace_existing=True,
    )
    logger.info(
        "Registered daily rollover at %02d:%02d %s",
        settings.rollover_hour,
        settings.rollover_minute,
        settings.scheduler_timezone,
    )


def run_rollover_job() -> None:
    session = SessionLocal()
    try:
        result = roll_over_all_planners(session, clock=local_now)
        logger.info(
            "Rollover job complete: users=%s, completions_cleared=%s, failures=%s",
            result.users_processed,
            result.completions_cleared,
            result.failures,
        )
    except Exception:
        logger.exception("Rollover job failed")
    finally:
        session.close()


if __name__ == "__main__":  # pragma: no cover - manual launch
    main()
