"""Load and save whole planners as JSON snapshots."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from lunite.api.schemas.planner import (
    CompletionModel,
    ConfigModel,
    DayModel,
    DynamicCompletionModel,
    FixedTaskModel,
    FlexibleTaskModel,
    PlannerStateModel,
    StaticTaskModel,
    TaskModel,
    TimeRangeModel,
)
from lunite.core.config import settings
from lunite.db.models.planner_state import PlannerState
from lunite.db.models.user import User
from lunite.planner import (
    Config,
    Day,
    DynamicTask,
    FixedTask,
    FlexibleTask,
    Planner,
    StaticTask,
    Task,
    TimeRange,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def default_config() -> Config:
    return Config(settings.default_wake_time, settings.default_bed_time)


def load_planner(db: Session, user_id: UUID, *, clock: Optional[Clock] = None) -> Planner:
    """Return the user's planner, or a fresh one with the default window.

    Dynamic references are rebuilt on load so a planner saved on an earlier
    day still assigns tasks to the right weekdays.
    """
    row = _get_state_row(db, user_id)
    if row is None:
        return Planner(default_config(), clock=clock)

    planner = planner_from_state(PlannerStateModel.model_validate(row.state), clock=clock)
    planner.update_dynamics()
    return planner


def save_planner(db: Session, user_id: UUID, planner: Planner) -> PlannerState:
    """Persist the whole planner, creating the user and state rows on first save."""
    payload = planner_to_state(planner).model_dump(mode="json")
    try:
        if db.get(User, user_id) is None:
            db.add(User(id=user_id))
            db.flush()
        row = _get_state_row(db, user_id)
        if row is None:
            row = PlannerState(user_id=user_id, state=payload)
        else:
            row.state = payload
        db.add(row)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(row)
    logger.debug("Saved planner for user %s (%d pending dynamic tasks)", user_id, len(planner.dynamic_tasks))
    return row


def stored_user_ids(db: Session) -> list[UUID]:
    return [row[0] for row in db.query(PlannerState.user_id).all()]


def _get_state_row(db: Session, user_id: UUID) -> PlannerState | None:
    return db.query(PlannerState).filter(PlannerState.user_id == user_id).one_or_none()


# ---------------------------------------------------------------------------
# Domain <-> schema conversion
# ---------------------------------------------------------------------------

def planner_to_state(planner: Planner) -> PlannerStateModel:
    return PlannerStateModel(
        config=ConfigModel(wake_time=planner.config.wake_time, bed_time=planner.config.bed_time),
        days=[
            DayModel(
                static_tasks=[_static_to_model(task) for task in day.static_tasks],
                static_done=[
                    CompletionModel(task_id=task_id, completed_at=when)
                    for task_id, when in sorted(day.static_done, key=lambda entry: entry[1])
                ],
                dynamic_refs=list(day.dynamic_refs),
            )
            for day in planner.days
        ],
        dynamic_tasks=[dynamic_to_model(task) for task in planner.dynamic_tasks],
        dynamic_done=[
            DynamicCompletionModel(task=dynamic_to_model(task), completed_at=when)
            for task, when in planner.dynamic_done
        ],
    )


def planner_from_state(state: PlannerStateModel, *, clock: Optional[Clock] = None) -> Planner:
    days = [
        Day(
            static_tasks=sorted(_static_from_model(task) for task in day.static_tasks),
            static_done={(entry.task_id, entry.completed_at) for entry in day.static_done},
            dynamic_refs=list(day.dynamic_refs),
        )
        for day in state.days
    ]
    return Planner(
        Config(state.config.wake_time, state.config.bed_time),
        days=days,
        dynamic_tasks=[dynamic_from_model(task) for task in state.dynamic_tasks],
        dynamic_done=[(dynamic_from_model(done.task), done.completed_at) for done in state.dynamic_done],
        clock=clock,
    )


def dynamic_to_model(task: DynamicTask) -> FixedTaskModel | FlexibleTaskModel:
    if isinstance(task, FixedTask):
        return FixedTaskModel(task=_static_to_model(task.task), date=task.date, priority=task.priority)
    around = task.around
    if isinstance(around, TimeRange):
        around = TimeRangeModel(start=around.start, end=around.end)
    return FlexibleTaskModel(
        task=_task_to_model(task.task),
        date=task.date,
        length=task.length,
        around=around,
        can_split=task.can_split,
        priority=task.priority,
    )


def dynamic_from_model(model: FixedTaskModel | FlexibleTaskModel) -> DynamicTask:
    if isinstance(model, FixedTaskModel):
        return FixedTask(_static_from_model(model.task), model.date, model.priority)
    around = model.around
    if isinstance(around, TimeRangeModel):
        around = TimeRange(around.start, around.end)
    return FlexibleTask(
        _task_from_model(model.task),
        model.date,
        model.length,
        around=around,
        can_split=model.can_split,
        priority=model.priority,
    )


def _task_to_model(task: Task) -> TaskModel:
    return TaskModel(id=task.id, name=task.name, description=task.description)


def _task_from_model(model: TaskModel) -> Task:
    return Task(model.name, model.description, model.id)


def _static_to_model(task: StaticTask) -> StaticTaskModel:
    return StaticTaskModel(
        task=_task_to_model(task.task),
        time=TimeRangeModel(start=task.time.start, end=task.time.end),
    )


def _static_from_model(model: StaticTaskModel) -> StaticTask:
    return StaticTask(_task_from_model(model.task), TimeRange(model.time.start, model.time.end))
