"""
Posts Service - Published Whisper Listing

This module turns stored posts into the whisper records every consumer sees
(the JSON API, the landing page and the profile feed), so they all share one
ordering and one normalisation:
- drafts never appear
- newest first, by the post's display date
- ids as strings, blank icons as None, unknown colours as the default colour
"""

from sqlalchemy import desc, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from whispers.models import Post, User
from whispers.schemas import PostAuthor, PostOut


async def get_author(db: AsyncSession, nickname: str) -> User | None:
    """Look up an author by nickname, case-insensitively."""
    result = await db.execute(
        select(User).filter(func.lower(User.nickname) == nickname.lower())
    )
    return result.scalars().first()


def serialize_post(post: Post) -> PostOut:
    """
    Build the listing entry for a post.

    The author relationship must already be loaded (selectinload), lazy
    loading isn't available in async sessions.
    """
    author = None
    if post.user is not None:
        author = PostAuthor(display_name=post.user.display_name, nickname=post.user.nickname)

    return PostOut(
        id=post.id,
        content=post.content,
        date=post.date,
        icon=post.icon,
        color=post.color,
        author_name=author.display_name if author else None,
        is_draft=bool(post.is_draft),
        author=author,
    )


async def list_published(db: AsyncSession, author: User | None = None) -> list[PostOut]:
    """
    Fetch published whispers, newest first.

    Args:
        db: Database session
        author: Restrict the listing to this author's whispers

    Returns:
        Normalised listing entries
    """
    query = (
        select(Post)
        .options(selectinload(Post.user))
        .filter(Post.is_draft == False)  # Published only
        .order_by(desc(Post.date), desc(Post.id))
    )
    if author is not None:
        query = query.filter(Post.user_id == author.id)

    result = await db.execute(query)
    return [serialize_post(post) for post in result.scalars().all()]
