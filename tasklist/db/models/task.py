from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import relationship

from tasklist.core.clock import utcnow
from tasklist.db.base import Base, BaseModel
from tasklist.domains.tasks.entities import TaskState


class Task(BaseModel):
    __tablename__ = "tasks"

    account_id = Column(Uuid(as_uuid=True), ForeignKey("accounts.uuid"), nullable=False, index=True)
    content = Column(Text, nullable=False)

    # Relationships
    account = relationship("Account", back_populates="tasks")
    events = relationship("TaskEvent", back_populates="task", order_by="TaskEvent.id")


class TaskEvent(Base):
    """Запись журнала событий задачи, только добавление"""

    __tablename__ = "task_events"

    # порядок вставки разрешает совпадения occurred_at
    id = Column(Integer, primary_key=True, autoincrement=True)
    task_id = Column(Uuid(as_uuid=True), ForeignKey("tasks.uuid"), nullable=False, index=True)
    kind = Column(Enum(TaskState, name="task_event_kind"), nullable=False)
    occurred_at = Column(DateTime, nullable=False, default=utcnow)

    # Relationships
    task = relationship("Task", back_populates="events")
