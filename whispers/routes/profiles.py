"""
Profile Routes

Server-rendered profile feed: one author's published whispers as cards.
Like the landing page it accepts ?whisper=<id> to show one whisper already
expanded in the viewer.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from whispers.config import settings
from whispers.database import get_db
from whispers.services.posts import get_author, list_published
from whispers.templating import templates
from whispers.viewer import WhisperStore, render_viewer

router = APIRouter(prefix="/u", tags=["profiles"])


def focused_viewer_html(whispers, whisper_id: str | None, site_name: str) -> str:
    """
    Render the viewer for ?whisper=<id>.

    An id that isn't among the listed whispers renders nothing, the same way
    the live viewer treats a dangling selection as closed.
    """
    if not whisper_id:
        return ""
    whisper = WhisperStore(whispers).find_by_id(whisper_id)
    return render_viewer(whisper, site_name=site_name)


@router.get("/{nickname}")
async def profile_feed(
    request: Request,
    nickname: str,
    whisper: str | None = Query(None),  # Optional whisper to expand: ?whisper=12
    db: AsyncSession = Depends(get_db)
):
    """
    Profile page listing one author's whispers.

    Raises:
        HTTPException: 404 if no author has this nickname
    """
    owner = await get_author(db, nickname)
    if owner is None:
        raise HTTPException(status_code=404, detail="Profile not found")

    whispers = await list_published(db, owner)

    return templates.TemplateResponse(request, "profile.html", {
        "site_title": settings.SITE_TITLE,
        "owner": owner,
        "whispers": whispers,
        "viewer_html": focused_viewer_html(whispers, whisper, owner.display_name),
    })
