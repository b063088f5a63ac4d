"""StudyFront API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map StudyFrontError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup and disposed on shutdown via lifespan;
      remote API clients closed on shutdown
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studyfront.api.deps import close_remote_clients
from studyfront.api.error_handlers import register_error_handlers
from studyfront.api.routes import (
    answers, health, listings, migrations, posts, quizzes, reports,
)
from studyfront.config import get_settings
from studyfront.infrastructure import database
from studyfront.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("StudyFront API started")
    yield
    await close_remote_clients()
    if database.db_manager is not None:
        await database.db_manager.dispose()
    logger.info("StudyFront API shutting down")


app = FastAPI(title="StudyFront API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(quizzes.router)
app.include_router(posts.router)
app.include_router(answers.router)
app.include_router(listings.router)
app.include_router(reports.router)
app.include_router(migrations.router)

register_error_handlers(app)
