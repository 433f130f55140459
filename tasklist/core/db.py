from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from tasklist.db.base import Base


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Асинхронный движок"""
    return create_async_engine(database_url, future=True, echo=echo)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Фабрика сессий"""
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def init_models(engine: AsyncEngine) -> None:
    """Создание таблиц, если их еще нет"""
    # импорт регистрирует модели в Base.metadata
    import tasklist.db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Функция для dependency injection в FastAPI
async def get_db(request: Request):
    async with request.app.state.session_factory() as session:
        yield session
