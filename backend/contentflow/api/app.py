"""FastAPI application setup with lifespan and exception handlers."""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from contentflow import __version__
from contentflow.config import settings
from contentflow.db import async_session, init_database, shutdown
from contentflow.orchestrator import EventDispatcher, SqlJobStore
from contentflow.api.routes import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Startup:
        - Initialize database schema
        - Build the event dispatcher over the SQL job store

    Shutdown:
        - Close database connections
    """
    logger.info("Starting contentflow API...")
    await init_database()

    if settings.webhook.secret is None:
        logger.warning(
            "No webhook secret configured (CONTENTFLOW_WEBHOOK__SECRET); "
            "all webhook calls will be admitted"
        )
    if settings.webhook.strict_transitions:
        logger.info("Strict transition mode enabled")

    app.state.dispatcher = EventDispatcher(
        SqlJobStore(async_session),
        strict=settings.webhook.strict_transitions,
        logger=logging.getLogger("contentflow.webhooks"),
    )
    logger.info("API startup complete")

    yield

    logger.info("Shutting down contentflow API...")
    await shutdown()
    logger.info("API shutdown complete")


app = FastAPI(
    title="contentflow API",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(router)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler to prevent stack traces in API responses."""
    logger.error(f"Unhandled exception in {request.method} {request.url.path}: {type(exc).__name__}: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
        }
    )
