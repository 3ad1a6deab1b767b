"""Route handlers for the Web API."""

from scoremanager.web.routes.auth import router as auth_router
from scoremanager.web.routes.exports import router as exports_router
from scoremanager.web.routes.health import router as health_router
from scoremanager.web.routes.periods import router as periods_router
from scoremanager.web.routes.students import router as students_router

__all__ = [
    "auth_router",
    "exports_router",
    "health_router",
    "periods_router",
    "students_router",
]
