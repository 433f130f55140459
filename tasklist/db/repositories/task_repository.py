import logging
import uuid
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from sqlalchemy import and_, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tasklist.core.clock import utcnow
from tasklist.core.errors import Forbidden, NotFound, StoreError
from tasklist.db.models.task import Task as TaskModel, TaskEvent as TaskEventModel
from tasklist.domains.tasks.entities import Task, TaskState, TaskView

logger = logging.getLogger(__name__)


def _latest_events(*task_conditions):
    """
    Последнее событие каждой задачи: группировка по task_id и выбор
    максимума по ключу (occurred_at, id). Условия сужают набор задач
    до ранжирования.
    """
    rank = func.row_number().over(
        partition_by=TaskEventModel.task_id,
        order_by=(TaskEventModel.occurred_at.desc(), TaskEventModel.id.desc())
    ).label("rank")

    ranked = (
        select(TaskEventModel.task_id, TaskEventModel.kind, rank)
        .join(TaskModel, TaskModel.uuid == TaskEventModel.task_id)
        .where(*task_conditions)
        .subquery("ranked_events")
    )

    return (
        select(ranked.c.task_id, ranked.c.kind)
        .where(ranked.c.rank == 1)
        .subquery("latest_events")
    )


class TaskRepository:
    """Хранилище задач на основе журнала событий"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_task(
        self,
        account_id: uuid.UUID,
        content: str,
        created_at: Optional[datetime] = None
    ) -> uuid.UUID:
        """Создание задачи вместе с начальным событием Unchecked в одной транзакции"""
        task = Task.create_task(account_id, content, created_at)

        self.session.add(TaskModel(
            uuid=task.uuid,
            account_id=task.account_id,
            content=task.content,
            created_at=task.created_at
        ))
        self.session.add(TaskEventModel(
            task_id=task.uuid,
            kind=TaskState.UNCHECKED,
            occurred_at=task.created_at
        ))

        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StoreError("Could not create task") from e

        return task.uuid

    async def list_current(self, account_id: uuid.UUID, as_of_date: date) -> List[TaskView]:
        """Текущее состояние задач аккаунта, созданных в указанный день, без удаленных"""
        day_start = datetime.combine(as_of_date, time.min)
        day_end = day_start + timedelta(days=1)
        owned_that_day = and_(
            TaskModel.account_id == account_id,
            TaskModel.created_at >= day_start,
            TaskModel.created_at < day_end
        )
        latest = _latest_events(owned_that_day)

        query = (
            select(TaskModel.uuid, TaskModel.content, latest.c.kind)
            .join(latest, latest.c.task_id == TaskModel.uuid)
            .where(owned_that_day, latest.c.kind != TaskState.DELETED)
            .order_by(TaskModel.created_at, TaskModel.id)
        )

        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            raise StoreError("Could not list tasks") from e

        return [
            TaskView(task_id=task_id, content=content, state=kind)
            for task_id, content, kind in result.all()
        ]

    async def append_event(self, account_id: uuid.UUID, task_id: uuid.UUID, new_kind: TaskState) -> None:
        """Добавление события задачи после проверки владельца"""
        try:
            task = await self._lock_task(task_id)

            if task is None:
                await self.session.rollback()
                raise NotFound(task_id)

            if not task.is_owned_by(account_id):
                await self.session.rollback()
                raise Forbidden(task_id)

            current = await self._current_kind(task_id)
            if current == TaskState.DELETED:
                # удаление окончательно, для владельца задачи больше нет
                await self.session.rollback()
                raise NotFound(task_id)

            self.session.add(TaskEventModel(
                task_id=task_id,
                kind=new_kind,
                occurred_at=utcnow()
            ))
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StoreError("Could not append task event") from e

        logger.info(f"Task {task_id} moved to {new_kind.value}")

    async def _lock_task(self, task_id: uuid.UUID) -> Optional[Task]:
        result = await self.session.execute(
            select(TaskModel).where(TaskModel.uuid == task_id).with_for_update()
        )
        db_task = result.scalar_one_or_none()
        return self._to_domain(db_task) if db_task else None

    async def _current_kind(self, task_id: uuid.UUID) -> Optional[TaskState]:
        result = await self.session.execute(
            select(TaskEventModel.kind)
            .where(TaskEventModel.task_id == task_id)
            .order_by(TaskEventModel.occurred_at.desc(), TaskEventModel.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    def _to_domain(self, db_task: TaskModel) -> Task:
        """Преобразование модели БД в доменную сущность"""
        return Task(
            uuid=db_task.uuid,
            account_id=db_task.account_id,
            content=db_task.content,
            created_at=db_task.created_at
        )
