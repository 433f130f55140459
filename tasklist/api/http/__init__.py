from tasklist.api.http.health import router as health_router
from tasklist.api.http.auth import router as auth_router
from tasklist.api.http.tasks import router as tasks_router

__all__ = [
    "health_router",
    "auth_router",
    "tasks_router"
]
