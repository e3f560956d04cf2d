"""Batch jobs over every stored planner."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from lunite.services.planner_store import load_planner, save_planner, stored_user_ids

logger = logging.getLogger(__name__)


@dataclass
class JobRunResult:
    users_processed: int
    completions_cleared: int
    failures: int = 0


def roll_over_planner(
    db: Session,
    user_id: UUID,
    *,
    clock: Optional[Callable[[], datetime]] = None,
) -> int:
    """Start the new day for one user's planner; returns the completion entries dropped."""
    planner = load_planner(db, user_id, clock=clock)
    dropped = planner.roll_over()
    save_planner(db, user_id, planner)
    return dropped


def roll_over_all_planners(
    db: Session,
    *,
    user_ids: Optional[Iterable[UUID]] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> JobRunResult:
    ids = _normalize_user_ids(user_ids, db)
    processed = 0
    cleared = 0
    failures = 0
    for uid in ids:
        try:
            cleared += roll_over_planner(db, uid, clock=clock)
        except Exception:
            logger.exception("Rollover failed for user %s", uid)
            failures += 1
            continue
        processed += 1
    return JobRunResult(users_processed=processed, completions_cleared=cleared, failures=failures)


def _normalize_user_ids(user_ids: Optional[Iterable[UUID]], db: Session) -> List[UUID]:
    if user_ids is None:
        return stored_user_ids(db)
    return list(dict.fromkeys(user_ids))
