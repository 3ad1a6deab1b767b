"""FastAPI application factory.

Main entry point for the Score Manager Web API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scoremanager import __version__
from scoremanager.auth.access import AccessGate, AllowList, IdentityProvider, LocalIdentityProvider
from scoremanager.config.app_config import AppConfig, load_app_config
from scoremanager.core.board import StudentStoreProtocol
from scoremanager.db.students_repository import StudentStore
from scoremanager.web.routes import (
    auth_router,
    exports_router,
    health_router,
    periods_router,
    students_router,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup/shutdown events."""
    config: AppConfig = app.state.config
    logger.info(
        "api_startup",
        store=config.store.path,
        allowed_identities=len(app.state.gate.allow_list),
    )
    yield


def create_app(
    config: AppConfig | None = None,
    store: StudentStoreProtocol | None = None,
    provider: IdentityProvider | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Settings; loaded from the config file when omitted
        store: Students document store; SQLite at config.store.path when omitted
        provider: Identity provider; LocalIdentityProvider when omitted

    Returns:
        Configured FastAPI app instance
    """
    config = config or load_app_config()

    app = FastAPI(
        title="Score Manager API",
        description="Student score tracker with charts and exports",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.store = store or StudentStore(config.store.db_path)
    app.state.gate = AccessGate(
        provider or LocalIdentityProvider(),
        AllowList(config.access.allowed_emails),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(periods_router)
    app.include_router(students_router)
    app.include_router(exports_router)

    return app
