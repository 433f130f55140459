import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from tasklist.core.auth import get_current_account
from tasklist.core.db import get_db
from tasklist.core.errors import TaskAccessError
from tasklist.domains.tasks.schemas import (
    IndexResponse, TaskCreate, TaskCreated, TaskStateResponse, TaskStateUpdate
)
from tasklist.domains.tasks.services import TaskService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tasks"])


def get_task_service(request: Request, db: AsyncSession = Depends(get_db)) -> TaskService:
    return TaskService(db, request.app.state.view_cache, request.app.state.session_factory)


@router.get("/", response_model=IndexResponse)
async def index(
    account_id: uuid.UUID = Depends(get_current_account),
    task_service: TaskService = Depends(get_task_service)
):
    """Задачи текущего аккаунта за сегодня"""
    snapshot = await task_service.get_view(account_id)
    return IndexResponse.from_snapshot(snapshot)


@router.post("/tasks", response_model=TaskCreated, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    account_id: uuid.UUID = Depends(get_current_account),
    task_service: TaskService = Depends(get_task_service)
):
    """Создание новой задачи"""
    task_id = await task_service.create_task(account_id, task_data.content)
    return TaskCreated(task_id=task_id)


@router.patch("/tasks/{task_id}", response_model=TaskStateResponse)
async def update_task_state(
    task_id: uuid.UUID,
    update_data: TaskStateUpdate,
    account_id: uuid.UUID = Depends(get_current_account),
    task_service: TaskService = Depends(get_task_service)
):
    """Смена состояния задачи"""
    try:
        await task_service.set_state(account_id, task_id, update_data.state)
    except TaskAccessError as e:
        # чужая и несуществующая задача снаружи неотличимы
        logger.info(f"Account {account_id} denied on task {task_id}: {type(e).__name__}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )

    return TaskStateResponse(task_id=task_id, state=update_data.state)
