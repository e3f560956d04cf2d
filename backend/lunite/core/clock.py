"""Wall clock in the configured scheduler timezone."""
from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from lunite.core.config import settings


def local_now() -> datetime:
    """Naive local time in ``settings.scheduler_timezone``.

    Planner dates and completion timestamps are naive, so the API and the
    rollover worker both read "now" through this function.
    """
    return datetime.now(ZoneInfo(settings.scheduler_timezone)).replace(tzinfo=None)
