import enum
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Optional, Tuple

from tasklist.core.clock import utcnow


class TaskState(str, enum.Enum):
    UNCHECKED = "Unchecked"
    CHECKED = "Checked"
    DELETED = "Deleted"


class Task:
    """Сущность задачи, содержимое неизменно после создания"""

    def __init__(
        self,
        uuid: uuid.UUID,
        account_id: uuid.UUID,
        content: str,
        created_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.account_id = account_id
        self.content = content
        self.created_at = created_at or utcnow()

    def is_owned_by(self, account_id: uuid.UUID) -> bool:
        return self.account_id == account_id

    @classmethod
    def create_task(cls, account_id: uuid.UUID, content: str, created_at: Optional[datetime] = None) -> "Task":
        """Создание новой задачи"""
        return cls(
            uuid=uuid.uuid4(),
            account_id=account_id,
            content=content,
            created_at=created_at
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Task):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"Task(uuid={self.uuid}, account_id={self.account_id})"


@dataclass(frozen=True)
class TaskView:
    """Задача в текущем состоянии, как ее видит владелец"""

    task_id: uuid.UUID
    content: str
    state: TaskState


@dataclass(frozen=True)
class ViewSnapshot:
    """Задачи аккаунта за день, сгруппированные по состоянию"""

    as_of: date
    unchecked: Tuple[TaskView, ...] = field(default_factory=tuple)
    checked: Tuple[TaskView, ...] = field(default_factory=tuple)

    @classmethod
    def from_views(cls, as_of: date, views: Iterable[TaskView]) -> "ViewSnapshot":
        unchecked = []
        checked = []

        for view in views:
            if view.state == TaskState.CHECKED:
                checked.append(view)
            elif view.state == TaskState.UNCHECKED:
                unchecked.append(view)

        return cls(as_of=as_of, unchecked=tuple(unchecked), checked=tuple(checked))
