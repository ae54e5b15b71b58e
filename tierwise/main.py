"""Main module of the FastAPI application.

This module sets up the FastAPI application and the middleware to log incoming requests
and unhandled exceptions.
"""

import os
import subprocess
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from tierwise.api.middleware import (
    add_request_id,
    conflict_exception_handler,
    exception_logging_middleware,
    invalid_input_exception_handler,
    log_requests,
    not_found_exception_handler,
    permission_exception_handler,
    tierwise_exception_handler,
    validation_exception_handler,
)
from tierwise.api.router import TrailingSlashRouter
from tierwise.api.v1.api import api_router
from tierwise.core.config import settings
from tierwise.core.exceptions import (
    InvalidInputError,
    NameConflictError,
    NotFoundException,
    PermissionException,
    SubscriptionConflictError,
    TierwiseException,
)
from tierwise.core.logging import logger
from tierwise.db.init_db import init_db
from tierwise.db.session import AsyncSessionLocal


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events.

    Runs alembic migrations and creates the first superuser.
    """
    if settings.RUN_ALEMBIC_MIGRATIONS:
        logger.info("Running alembic migrations...")
        env = os.environ.copy()
        project_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        env["PYTHONPATH"] = project_dir
        subprocess.run(
            ["alembic", "upgrade", "head"],
            check=True,
            cwd=project_dir,
            env=env,
        )
    if settings.RUN_DB_INIT:
        async with AsyncSessionLocal() as db:
            await init_db(db)

    yield


# Create FastAPI app with our custom router and disable FastAPI's built-in redirects
app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url="/openapi.json",
    lifespan=lifespan,
    router=TrailingSlashRouter(),
    redirect_slashes=False,  # Critical: disable FastAPI's built-in slash redirects
)

app.include_router(api_router)

# Register middleware directly
app.middleware("http")(add_request_id)
app.middleware("http")(log_requests)
app.middleware("http")(exception_logging_middleware)

# Register exception handlers
app.exception_handler(RequestValidationError)(validation_exception_handler)
app.exception_handler(ValidationError)(validation_exception_handler)
app.exception_handler(PermissionException)(permission_exception_handler)
app.exception_handler(NotFoundException)(not_found_exception_handler)
app.exception_handler(InvalidInputError)(invalid_input_exception_handler)
app.exception_handler(NameConflictError)(conflict_exception_handler)
app.exception_handler(SubscriptionConflictError)(conflict_exception_handler)

# Everything else raised by the domain layer
app.exception_handler(TierwiseException)(tierwise_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
