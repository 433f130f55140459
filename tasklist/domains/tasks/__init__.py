from tasklist.domains.tasks.entities import Task, TaskState, TaskView, ViewSnapshot
from tasklist.domains.tasks.schemas import (
    TaskCreate, TaskCreated, TaskStateUpdate, TaskStateResponse,
    TaskItemResponse, IndexResponse
)

__all__ = [
    "Task", "TaskState", "TaskView", "ViewSnapshot",
    "TaskCreate", "TaskCreated", "TaskStateUpdate", "TaskStateResponse",
    "TaskItemResponse", "IndexResponse"
]
