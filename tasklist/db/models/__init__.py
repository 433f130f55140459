from tasklist.db.models.account import Account
from tasklist.db.models.task import Task, TaskEvent

__all__ = [
    "Account",
    "Task",
    "TaskEvent",
]
