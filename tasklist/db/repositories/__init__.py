from tasklist.db.repositories.account_repository import AccountRepository
from tasklist.db.repositories.task_repository import TaskRepository

__all__ = [
    "AccountRepository",
    "TaskRepository"
]
