"""
Posts API Routes

JSON endpoints consumed by the whisper viewer's data-fetch layer:
- GET /api/posts: Published whispers, newest first (optionally one author)
- GET /api/health: Liveness and database status

The listing is the only contract the viewer depends on; everything it needs
(ids, content, dates, icon and colour tags, author label) is in each entry.
"""

import logging
from datetime import datetime, timezone
from importlib.metadata import PackageNotFoundError, version

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from whispers.config import settings
from whispers.database import get_db, ping
from whispers.limiter import LISTING_LIMIT, limiter
from whispers.schemas import PostOut
from whispers.services.posts import get_author, list_published

logger = logging.getLogger(__name__)

# Router with /api prefix
router = APIRouter(prefix="/api", tags=["posts"])


def _app_version() -> str:
    try:
        return version("whispers")
    except PackageNotFoundError:
        return "1.0.0"


@router.get("/posts", response_model=list[PostOut])
@limiter.limit(LISTING_LIMIT)
async def get_posts(
    request: Request,
    author: str | None = Query(None),  # Optional nickname filter: ?author=luna
    db: AsyncSession = Depends(get_db)
):
    """
    List published whispers.

    Args:
        request: FastAPI request (required by the rate limiter)
        author: Nickname to restrict the listing to (case-insensitive)
        db: Database session

    Returns:
        Whisper entries ordered newest first; an empty list for an
        unknown author
    """
    try:
        author_user = None
        if author:
            author_user = await get_author(db, author)
            if author_user is None:
                return []

        return await list_published(db, author_user)
    except SQLAlchemyError as e:
        logger.error(f"Get posts error: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to fetch posts"})


@router.get("/health")
async def health(db: AsyncSession = Depends(get_db)):
    """Report service health and whether the database answers."""
    db_status = "connected" if await ping(db) else "disconnected"

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.ENVIRONMENT,
        "database": db_status,
        "version": _app_version(),
    }
