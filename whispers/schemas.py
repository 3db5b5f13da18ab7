"""
Whisper Schemas

Pydantic models describing whispers as they travel between the posts API,
the feed client and the viewer:
- Whisper: the read-only record the viewer displays
- PostAuthor / PostOut: the listing payload of GET /api/posts

Field aliases keep the JSON shape used by the existing front end
(`_id`, `authorName`, `isDraft`, `displayName`).
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from whispers.utils.text import format_date
from whispers.utils.validators import DEFAULT_ICON_COLOR, normalize_icon, normalize_icon_color


class Whisper(BaseModel):
    """
    A single short post as shown by the viewer.

    Instances are immutable: a refreshed feed produces new records rather
    than editing the ones currently on screen.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(alias="_id")
    content: str
    date: datetime
    icon: str | None = None
    color: str = DEFAULT_ICON_COLOR
    author_name: str | None = Field(default=None, alias="authorName")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        # Database ids are integers, the viewer treats them as opaque strings
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("icon", mode="before")
    @classmethod
    def _normalize_icon(cls, value):
        return normalize_icon(value)

    @field_validator("color", mode="before")
    @classmethod
    def _normalize_color(cls, value):
        return normalize_icon_color(value)

    @property
    def formatted_date(self) -> str:
        return format_date(self.date)


class PostAuthor(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    display_name: str = Field(alias="displayName")
    nickname: str


class PostOut(Whisper):
    """Listing entry returned by GET /api/posts."""

    is_draft: bool = Field(default=False, alias="isDraft")
    author: PostAuthor | None = None
