"""Schemas for the planner API and the persisted planner snapshot."""
from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Annotated, List, Literal, Optional, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, model_validator

from lunite.planner import PartOfDay


class TimeRangeModel(BaseModel):
    start: time
    end: time


class TaskModel(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    description: str = ""


class StaticTaskModel(BaseModel):
    task: TaskModel
    time: TimeRangeModel


class FixedTaskModel(BaseModel):
    kind: Literal["fixed"] = "fixed"
    task: StaticTaskModel
    date: date
    priority: int = 0


class FlexibleTaskModel(BaseModel):
    kind: Literal["flexible"] = "flexible"
    task: TaskModel
    date: date
    length: timedelta
    around: Union[PartOfDay, TimeRangeModel] = PartOfDay.MORNING
    can_split: bool = False
    priority: int = 0


DynamicTaskModel = Annotated[Union[FixedTaskModel, FlexibleTaskModel], Field(discriminator="kind")]


class CompletionModel(BaseModel):
    task_id: UUID
    completed_at: datetime


class DayModel(BaseModel):
    static_tasks: List[StaticTaskModel] = []
    static_done: List[CompletionModel] = []
    dynamic_refs: List[UUID] = []


class ConfigModel(BaseModel):
    wake_time: time
    bed_time: time


class DynamicCompletionModel(BaseModel):
    task: DynamicTaskModel
    completed_at: datetime


class PlannerStateModel(BaseModel):
    config: ConfigModel
    days: List[DayModel] = Field(min_length=7, max_length=7)
    dynamic_tasks: List[DynamicTaskModel] = []
    dynamic_done: List[DynamicCompletionModel] = []


class PlannerStateResponse(BaseModel):
    user_id: UUID
    state: PlannerStateModel
    request_id: str


class ConfigUpdateRequest(BaseModel):
    user_id: UUID
    wake_time: time
    bed_time: time


class UserActionRequest(BaseModel):
    user_id: UUID


class StaticTaskCreateRequest(BaseModel):
    user_id: UUID
    name: str = Field(min_length=1)
    description: str = ""
    start: time
    end: time


class DynamicTaskCreateRequest(BaseModel):
    user_id: UUID
    kind: Literal["fixed", "flexible"]
    name: str = Field(min_length=1)
    description: str = ""
    date: date
    priority: int = 0
    start: Optional[time] = None
    end: Optional[time] = None
    duration_min: Optional[int] = Field(default=None, gt=0)
    around: PartOfDay = PartOfDay.MORNING
    around_window: Optional[TimeRangeModel] = None
    can_split: bool = False

    @model_validator(mode="after")
    def _check_kind_fields(self) -> DynamicTaskCreateRequest:
        if self.kind == "fixed" and (self.start is None or self.end is None):
            raise ValueError("fixed tasks need start and end")
        if self.kind == "flexible" and self.duration_min is None:
            raise ValueError("flexible tasks need duration_min")
        return self


class TaskCreatedResponse(BaseModel):
    id: UUID
    name: str
    request_id: str


class TaskCompletedResponse(BaseModel):
    id: UUID
    name: str
    completed_at: datetime
    request_id: str


class ScheduleEntryModel(BaseModel):
    kind: Literal["static", "free", "dynamic", "dynamic_part"]
    start: time
    end: time
    task_id: Optional[UUID] = None
    name: Optional[str] = None
    part: Optional[int] = None


class FreetimeResponse(BaseModel):
    day: int
    weekday: str
    entries: List[ScheduleEntryModel]
    request_id: str


class ScheduleResponse(BaseModel):
    day: int
    weekday: str
    entries: List[ScheduleEntryModel]
    diagnostics: List[str]
    request_id: str
