"""
Database Models for the Whispers Application

This module defines the SQLAlchemy ORM models backing the posts listing:
- User: Authors owning a profile page
- Post: Whispers, either published or kept as drafts

Only the columns the listing and the pages read are modelled here.
"""

from sqlalchemy import Boolean, Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import declarative_base, relationship, backref
from datetime import datetime

from whispers.utils.validators import DEFAULT_ICON_COLOR


# Base class for all ORM models
Base = declarative_base()

# Maximum whisper length accepted by the compose form
MAX_CONTENT_LENGTH = 1000


class User(Base):
    """
    Author of whispers.

    The nickname is the public handle used in profile URLs (/u/<nickname>)
    and is stored lowercase.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # Unique lowercase handle, indexed for profile lookups
    nickname = Column(String, unique=True, index=True, nullable=False)

    # Name shown as the author label on whisper cards
    display_name = Column(String, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)


class Post(Base):
    """
    A whisper.

    `date` is the display timestamp chosen by the author (it may differ from
    created_at) and defines the feed order. Drafts never leave the database
    through the public listing.
    """
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)

    content = Column(String(MAX_CONTENT_LENGTH), nullable=False)

    date = Column(DateTime, default=datetime.utcnow, index=True, nullable=False)

    # Presentational tags, opaque to the viewer
    icon = Column(String, nullable=True)
    color = Column(String, default=DEFAULT_ICON_COLOR, nullable=False)

    is_draft = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Many-to-one relationship with User
    # cascade="all, delete-orphan": deleting an author deletes their whispers
    user = relationship("User", backref=backref("posts", cascade="all, delete-orphan"))
