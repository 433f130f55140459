import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from tasklist.api.http import auth_router, health_router, tasks_router
from tasklist.core.cache import AccountViewCache
from tasklist.core.config import Settings, get_settings
from tasklist.core.db import create_engine, create_session_factory, init_models
from tasklist.core.errors import HashingFailure, StoreError
from tasklist.core.security import PasswordHasher, SessionAuthenticator, SessionKeys

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings

    engine = create_engine(settings.database_url, echo=settings.sql_echo)
    if settings.create_schema:
        await init_models(engine)

    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    logger.info("Database engine ready")

    try:
        yield
    finally:
        app.state.view_cache.clear()
        await engine.dispose()
        logger.info("Database engine disposed")


async def _internal_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{type(exc).__name__} while handling {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Сборка приложения: ключи сессий и кэш создаются один раз на процесс"""
    settings = settings or get_settings()

    app = FastAPI(
        title="Tasklist",
        description="Многопользовательский список задач на журнале событий",
        version="1.0.0",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.authenticator = SessionAuthenticator(SessionKeys.from_settings(settings))
    app.state.view_cache = AccountViewCache(max_entries=settings.view_cache_max_entries)

    app.add_exception_handler(StoreError, _internal_error)
    app.add_exception_handler(HashingFailure, _internal_error)

    # Подключаем роутеры
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(tasks_router)

    return app
