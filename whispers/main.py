"""
Main Application Entry Point

This module sets up the FastAPI application with:
- Logging configuration
- Database initialization on startup
- Rate limiting
- Route registration
- Landing page with every author's published whispers
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Depends, Query
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.ext.asyncio import AsyncSession

from whispers.config import settings
from whispers.database import engine, get_db, init_models
from whispers.limiter import limiter
from whispers.routes import posts, profiles
from whispers.routes.profiles import focused_viewer_html
from whispers.services.posts import list_published
from whispers.templating import templates


# Development gets debug output (viewer transitions, rollovers)
logging.basicConfig(
    level=logging.DEBUG if settings.ENVIRONMENT == "development" else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager - runs on startup and shutdown.

    Startup creates database tables that don't exist yet.
    Shutdown releases the connection pool.
    """
    await init_models()
    logger.info(f"Whispers started ({settings.ENVIRONMENT}, dwell {settings.dwell_ms}ms)")

    yield

    await engine.dispose()


# Create FastAPI application instance
app = FastAPI(title="Whispers", lifespan=lifespan)

# slowapi looks the limiter up on app.state and needs a handler for 429s
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.include_router(posts.router)
app.include_router(profiles.router)


@app.get("/")
async def root(
    request: Request,
    whisper: str | None = Query(None),  # Optional whisper to expand: ?whisper=12
    db: AsyncSession = Depends(get_db)
):
    """
    Landing page - every author's published whispers, newest first.

    Args:
        request: FastAPI request object (needed for templates)
        whisper: Id of a whisper to render already expanded
        db: Database session (injected by FastAPI)
    """
    whispers = await list_published(db)

    return templates.TemplateResponse(request, "index.html", {
        "site_title": settings.SITE_TITLE,
        "whispers": whispers,
        "viewer_html": focused_viewer_html(whispers, whisper, settings.SITE_TITLE),
    })
