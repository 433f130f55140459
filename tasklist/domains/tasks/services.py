import logging
import uuid
from datetime import date
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tasklist.core.cache import AccountViewCache
from tasklist.core.clock import today
from tasklist.db.repositories.task_repository import TaskRepository
from tasklist.domains.tasks.entities import TaskState, ViewSnapshot

logger = logging.getLogger(__name__)


class TaskService:
    """Сервис задач: запись в журнал событий и кэш представлений аккаунта"""

    def __init__(
        self,
        session: AsyncSession,
        view_cache: AccountViewCache,
        session_factory: Optional[async_sessionmaker] = None
    ):
        self.session = session
        self.view_cache = view_cache
        self.session_factory = session_factory
        self.task_repository = TaskRepository(session)

    async def get_view(self, account_id: uuid.UUID, as_of: Optional[date] = None) -> ViewSnapshot:
        """Сгруппированные задачи аккаунта за день, через кэш"""
        as_of = as_of or today()

        async def build() -> ViewSnapshot:
            if self.session_factory is None:
                views = await self.task_repository.list_current(account_id, as_of)
            else:
                # сборка может пережить запрос, который ее начал
                async with self.session_factory() as session:
                    views = await TaskRepository(session).list_current(account_id, as_of)
            return ViewSnapshot.from_views(as_of, views)

        snapshot = await self.view_cache.get_or_build(account_id, build)

        if snapshot.as_of != as_of:
            # в кэше остался прошлый день
            self.view_cache.invalidate(account_id)
            snapshot = await self.view_cache.get_or_build(account_id, build)

        return snapshot

    async def create_task(self, account_id: uuid.UUID, content: str) -> uuid.UUID:
        """Создание задачи и сброс кэша аккаунта"""
        task_id = await self.task_repository.create_task(account_id, content)
        self.view_cache.invalidate(account_id)

        logger.info(f"Account {account_id} created task {task_id}")
        return task_id

    async def set_state(self, account_id: uuid.UUID, task_id: uuid.UUID, state: TaskState) -> None:
        """Смена состояния задачи, кэш сбрасывается только после успешной записи"""
        await self.task_repository.append_event(account_id, task_id, state)
        self.view_cache.invalidate(account_id)
