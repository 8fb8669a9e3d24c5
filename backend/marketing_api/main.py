"""Marketing API - FastAPI application entry point.

Invariants:
    - Routers registered explicitly under settings.api_prefix (no auto-discovery)
    - Global error handlers map MarketingError to the {"error": ...} envelope
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via the lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: cleanup lives next to startup
    - Health checks stay outside the marketing prefix (/api/v1/health)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from marketing_api import __version__
from marketing_api.api.error_handlers import register_error_handlers
from marketing_api.api.routes import (
    activity_types, campaign_types, campaigns, config, expenses, health, links,
    plan_type_budgets, plan_types, plans, summary, vendors,
)
from marketing_api.config import get_settings
from marketing_api.infrastructure import database
from marketing_api.infrastructure.observability import setup_logging

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
    logger.info("Marketing API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Marketing API shutting down")


app = FastAPI(title="Marketing API", version=__version__, lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
prefix = settings.api_prefix
app.include_router(campaigns.router, prefix=prefix)
app.include_router(campaign_types.router, prefix=prefix)
app.include_router(plans.router, prefix=prefix)
app.include_router(plan_type_budgets.router, prefix=prefix)
app.include_router(expenses.router, prefix=prefix)
app.include_router(vendors.router, prefix=prefix)
app.include_router(plan_types.router, prefix=prefix)
app.include_router(activity_types.router, prefix=prefix)
app.include_router(links.router, prefix=prefix)
app.include_router(summary.router, prefix=prefix)
app.include_router(config.router, prefix=prefix)

register_error_handlers(app)
