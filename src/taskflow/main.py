# File: src/taskflow/main.py
"""FastAPI application factory."""

import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from taskflow.api import activities, auth, health, pomodoro, tasks
from taskflow.core.exception_handlers import register_exception_handlers
from taskflow.core.logging import configure_logging, get_logger
from taskflow.core.sentry import init_sentry
from taskflow.middleware.logging import RequestIDMiddleware
from taskflow.middleware.sentry import SentryContextMiddleware

configure_logging()
logger = get_logger(__name__)

DEV_SESSION_SECRET = "dev-secret-key-change-in-production"
SESSION_MAX_AGE = 14 * 24 * 60 * 60

ROUTERS = (
    health.router,
    auth.router,
    pomodoro.router,
    tasks.router,
    activities.router,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Record start time for /health and log startup/shutdown."""
    started = datetime.now()
    health.set_app_start_time(started)
    logger.info("app.startup", timestamp=started.isoformat())

    yield

    logger.info("app.shutdown", uptime_seconds=health.get_uptime_seconds())


def _session_secret(environment: str) -> str:
    secret = os.getenv("SESSION_SECRET_KEY", DEV_SESSION_SECRET)
    if secret == DEV_SESSION_SECRET and environment == "production":
        logger.warning("app.insecure_session_secret", environment=environment)
    return secret


def _setup_middleware(app: FastAPI, environment: str) -> None:
    # Added innermost first; requests pass RequestID -> Session -> SentryContext
    app.add_middleware(SentryContextMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=_session_secret(environment),
        max_age=SESSION_MAX_AGE,
        https_only=environment == "production",
        same_site="lax",
    )
    app.add_middleware(RequestIDMiddleware)


def create_app() -> FastAPI:
    """Build the TaskFlow app: error handlers, middleware and all routers."""
    environment = os.getenv("ENVIRONMENT", "development")

    app = FastAPI(
        title="TaskFlow API",
        description="Personal task manager with a server-reconciled Pomodoro timer",
        version="0.1.0",
        lifespan=lifespan,
    )

    init_sentry()
    register_exception_handlers(app)
    _setup_middleware(app, environment)
    for router in ROUTERS:
        app.include_router(router)

    logger.info("app.configured", environment=environment, routers=len(ROUTERS))
    return app


def run() -> None:
    """Server entrypoint for the `taskflow-server` script."""
    environment = os.getenv("ENVIRONMENT", "development")
    uvicorn.run(
        "taskflow.main:create_app",
        factory=True,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=environment == "development",
        log_config=None,
    )
