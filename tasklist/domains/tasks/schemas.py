from pydantic import BaseModel, Field, field_validator
from typing import List
from datetime import date
import uuid

from tasklist.core.formatting import render_inline
from tasklist.domains.tasks.entities import TaskState, TaskView, ViewSnapshot


class TaskCreate(BaseModel):
    """Схема для создания задачи"""
    content: str = Field(..., min_length=1, max_length=10000)

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        if not v.strip():
            raise ValueError('Content cannot be empty')
        return v


class TaskCreated(BaseModel):
    task_id: uuid.UUID


class TaskStateUpdate(BaseModel):
    """Схема для смены состояния задачи"""
    state: TaskState


class TaskStateResponse(BaseModel):
    task_id: uuid.UUID
    state: TaskState


class TaskItemResponse(BaseModel):
    """Задача в списке, содержимое уже отформатировано"""
    task_id: uuid.UUID
    content: str
    state: TaskState

    @classmethod
    def from_view(cls, view: TaskView) -> "TaskItemResponse":
        return cls(task_id=view.task_id, content=render_inline(view.content), state=view.state)


class IndexResponse(BaseModel):
    """Схема для главного списка задач за день"""
    as_of: date
    unchecked: List[TaskItemResponse]
    checked: List[TaskItemResponse]

    @classmethod
    def from_snapshot(cls, snapshot: ViewSnapshot) -> "IndexResponse":
        return cls(
            as_of=snapshot.as_of,
            unchecked=[TaskItemResponse.from_view(view) for view in snapshot.unchecked],
            checked=[TaskItemResponse.from_view(view) for view in snapshot.checked]
        )
