"""Planner API routes."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from time import perf_counter
from typing import Callable, Dict, NoReturn
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from lunite.api.schemas.planner import (
    ConfigUpdateRequest,
    DynamicTaskCreateRequest,
    FreetimeResponse,
    PlannerStateResponse,
    ScheduleEntryModel,
    ScheduleResponse,
    StaticTaskCreateRequest,
    TaskCompletedResponse,
    TaskCreatedResponse,
    UserActionRequest,
)
from lunite.core.clock import local_now
from lunite.db.deps import get_db
from lunite.observability.tracing import log_metric, trace
from lunite.planner import (
    WEEKDAYS,
    Config,
    DayIndexError,
    Dynamic,
    DynamicPart,
    FixedTask,
    FlexibleTask,
    Free,
    InvalidTaskError,
    PartOfDayError,
    PastDateError,
    PlannerError,
    Schedule,
    Static,
    StaticOverlapError,
    StaticTask,
    Task,
    TaskIndexError,
    TimeRange,
)
from lunite.services.planner_store import load_planner, planner_to_state, save_planner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/planner", tags=["planner"])


def get_clock() -> Callable[[], datetime]:
    """Clock used for 'today' and completion timestamps."""
    return local_now


@router.get("", response_model=PlannerStateResponse)
def get_planner(
    http_request: Request,
    user_id: UUID = Query(..., description="User owning the planner"),
    db: Session = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> PlannerStateResponse:
    """Return the whole planner state."""
    request_id = _request_id(http_request)
    with trace("planner.get", metadata={"route": "/planner"}, user_id=str(user_id), request_id=request_id):
        planner = load_planner(db, user_id, clock=clock)
    return PlannerStateResponse(user_id=user_id, state=planner_to_state(planner), request_id=request_id)


@router.put("/config", response_model=PlannerStateResponse)
def update_config(
    payload: ConfigUpdateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> PlannerStateResponse:
    """Set the wake and bed times bounding every day."""
    request_id = _request_id(http_request)
    metadata = {"wake_time": payload.wake_time.isoformat(), "bed_time": payload.bed_time.isoformat()}
    with trace("planner.config", metadata=metadata, user_id=str(payload.user_id), request_id=request_id):
        planner = load_planner(db, payload.user_id, clock=clock)
        try:
            planner.set_config(Config(payload.wake_time, payload.bed_time))
        except PlannerError as exc:
            _raise_http(exc)
        save_planner(db, payload.user_id, planner)
    return PlannerStateResponse(user_id=payload.user_id, state=planner_to_state(planner), request_id=request_id)


@router.post("/days/{day}/static", response_model=TaskCreatedResponse, status_code=status.HTTP_201_CREATED)
def add_static_task(
    day: int,
    payload: StaticTaskCreateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> TaskCreatedResponse:
    """Add a weekly fixed task to a weekday."""
    request_id = _request_id(http_request)
    with trace("planner.static.add", metadata={"day": day}, user_id=str(payload.user_id), request_id=request_id):
        planner = load_planner(db, payload.user_id, clock=clock)
        try:
            task = StaticTask(Task(payload.name, payload.description), TimeRange(payload.start, payload.end))
            planner.add_static(day, task)
        except PlannerError as exc:
            _raise_http(exc)
        save_planner(db, payload.user_id, planner)

    log_metric("planner.static.add.success", 1, metadata={"user_id": str(payload.user_id), "day": day})
    return TaskCreatedResponse(id=task.id, name=task.task.name, request_id=request_id)


@router.delete("/days/{day}/static/{index}", response_model=TaskCreatedResponse)
def remove_static_task(
    day: int,
    index: int,
    http_request: Request,
    user_id: UUID = Query(..., description="User owning the planner"),
    db: Session = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> TaskCreatedResponse:
    """Remove a fixed task from a weekday."""
    request_id = _request_id(http_request)
    with trace("planner.static.remove", metadata={"day": day, "index": index}, user_id=str(user_id), request_id=request_id):
        planner = load_planner(db, user_id, clock=clock)
        try:
            task = planner.remove_static(day, index)
        except PlannerError as exc:
            _raise_http(exc)
        save_planner(db, user_id, planner)
    return TaskCreatedResponse(id=task.id, name=task.task.name, request_id=request_id)


@router.post("/days/{day}/static/{index}/complete", response_model=TaskCompletedResponse)
def complete_static_task(
    day: int,
    index: int,
    payload: UserActionRequest,
    http_request: Request,
    db: Session = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> TaskCompletedResponse:
    """Mark this occurrence of a fixed task done; its window becomes free time."""
    request_id = _request_id(http_request)
    with trace("planner.static.complete", metadata={"day": day, "index": index}, user_id=str(payload.user_id), request_id=request_id):
        planner = load_planner(db, payload.user_id, clock=clock)
        try:
            task = planner.complete_static(day, index)
        except PlannerError as exc:
            _raise_http(exc)
        completed_at = max(when for task_id, when in planner.day(day).static_done if task_id == task.id)
        save_planner(db, payload.user_id, planner)

    log_metric("planner.static.complete.success", 1, metadata={"user_id": str(payload.user_id), "day": day})
    return TaskCompletedResponse(id=task.id, name=task.task.name, completed_at=completed_at, request_id=request_id)


@router.post("/dynamic", response_model=TaskCreatedResponse, status_code=status.HTTP_201_CREATED)
def add_dynamic_task(
    payload: DynamicTaskCreateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> TaskCreatedResponse:
    """Add a fixed-window or flexible task for a specific date."""
    request_id = _request_id(http_request)
    metadata = {"kind": payload.kind, "date": payload.date.isoformat(), "priority": payload.priority}
    with trace("planner.dynamic.add", metadata=metadata, user_id=str(payload.user_id), request_id=request_id):
        planner = load_planner(db, payload.user_id, clock=clock)
        try:
            task = _build_dynamic(payload)
            planner.add_dynamic(task)
        except PlannerError as exc:
            _raise_http(exc)
        save_planner(db, payload.user_id, planner)

    log_metric(
        "planner.dynamic.add.success",
        1,
        metadata={"user_id": str(payload.user_id), "kind": payload.kind},
    )
    return TaskCreatedResponse(id=task.id, name=task.name, request_id=request_id)


@router.post("/dynamic/{index}/complete", response_model=TaskCompletedResponse)
def complete_dynamic_task(
    index: int,
    payload: UserActionRequest,
    http_request: Request,
    db: Session = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> TaskCompletedResponse:
    """Complete the ``index``-th dynamic task assigned to today."""
    request_id = _request_id(http_request)
    with trace("planner.dynamic.complete", metadata={"index": index}, user_id=str(payload.user_id), request_id=request_id):
        planner = load_planner(db, payload.user_id, clock=clock)
        try:
            task = planner.complete_dynamic(index)
        except PlannerError as exc:
            _raise_http(exc)
        _, completed_at = planner.dynamic_done[-1]
        save_planner(db, payload.user_id, planner)

    log_metric("planner.dynamic.complete.success", 1, metadata={"user_id": str(payload.user_id)})
    return TaskCompletedResponse(id=task.id, name=task.name, completed_at=completed_at, request_id=request_id)


@router.get("/days/{day}/freetime", response_model=FreetimeResponse)
def get_freetime(
    day: int,
    http_request: Request,
    user_id: UUID = Query(..., description="User owning the planner"),
    db: Session = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> FreetimeResponse:
    """Fixed tasks and the free gaps between them."""
    request_id = _request_id(http_request)
    with trace("planner.freetime", metadata={"day": day}, user_id=str(user_id), request_id=request_id):
        planner = load_planner(db, user_id, clock=clock)
        try:
            entries = planner.get_freetime(day)
        except PlannerError as exc:
            _raise_http(exc)
    return FreetimeResponse(
        day=day,
        weekday=WEEKDAYS[day],
        entries=[_serialize_entry(entry) for entry in entries],
        request_id=request_id,
    )


@router.get("/days/{day}/schedule", response_model=ScheduleResponse)
def get_schedule(
    day: int,
    http_request: Request,
    user_id: UUID = Query(..., description="User owning the planner"),
    db: Session = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> ScheduleResponse:
    """Free time with the day's dynamic tasks placed into it."""
    request_id = _request_id(http_request)
    start = perf_counter()
    with trace("planner.schedule", metadata={"day": day}, user_id=str(user_id), request_id=request_id) as schedule_trace:
        planner = load_planner(db, user_id, clock=clock)
        try:
            entries, diagnostics = planner.get_schedule_with_dynamics(day)
        except PlannerError as exc:
            _raise_http(exc)
        if schedule_trace is not None:
            schedule_trace.update(metadata={"entries": len(entries), "diagnostics": len(diagnostics)})

    metric_metadata: Dict[str, object] = {"user_id": str(user_id), "day": day}
    log_metric("planner.schedule.unplaced", len(diagnostics), metadata=metric_metadata)
    log_metric("planner.schedule.latency_ms", (perf_counter() - start) * 1000, metadata=metric_metadata)

    return ScheduleResponse(
        day=day,
        weekday=WEEKDAYS[day],
        entries=[_serialize_entry(entry) for entry in entries],
        diagnostics=diagnostics,
        request_id=request_id,
    )


def _request_id(http_request: Request) -> str:
    return getattr(http_request.state, "request_id", None) or ""


def _build_dynamic(payload: DynamicTaskCreateRequest) -> FixedTask | FlexibleTask:
    task = Task(payload.name, payload.description)
    if payload.kind == "fixed":
        return FixedTask(StaticTask(task, TimeRange(payload.start, payload.end)), payload.date, payload.priority)
    around = payload.around
    if payload.around_window is not None:
        around = TimeRange(payload.around_window.start, payload.around_window.end)
    return FlexibleTask(
        task,
        payload.date,
        timedelta(minutes=payload.duration_min),
        around=around,
        can_split=payload.can_split,
        priority=payload.priority,
    )


def _raise_http(exc: PlannerError) -> NoReturn:
    if isinstance(exc, (DayIndexError, TaskIndexError)):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, StaticOverlapError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(exc, (PastDateError, InvalidTaskError, PartOfDayError)):
        code = status.HTTP_422_UNPROCESSABLE_ENTITY
    else:
        code = status.HTTP_400_BAD_REQUEST
    logger.warning("Planner request rejected: %s", exc)
    raise HTTPException(status_code=code, detail=str(exc)) from exc


def _serialize_entry(entry: Schedule) -> ScheduleEntryModel:
    if isinstance(entry, Free):
        return ScheduleEntryModel(kind="free", start=entry.time.start, end=entry.time.end)
    if isinstance(entry, Static):
        return ScheduleEntryModel(
            kind="static",
            start=entry.time.start,
            end=entry.time.end,
            task_id=entry.task.id,
            name=entry.task.task.name,
        )
    if isinstance(entry, DynamicPart):
        return ScheduleEntryModel(
            kind="dynamic_part",
            start=entry.time.start,
            end=entry.time.end,
            task_id=entry.task.id,
            name=entry.task.name,
            part=entry.index,
        )
    if isinstance(entry, Dynamic):
        return ScheduleEntryModel(
            kind="dynamic",
            start=entry.time.start,
            end=entry.time.end,
            task_id=entry.task.id,
            name=entry.task.name,
        )
    raise TypeError(f"unknown schedule entry {entry!r}")
