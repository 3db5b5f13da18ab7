import heapq
import itertools
import os
from datetime import datetime, timedelta

import pytest

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "development")

from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from whispers.models import Base, Post, User
from whispers.schemas import Whisper


class FakeHandle:
    def __init__(self, when_ms, seq, callback, args):
        self.when_ms = when_ms
        self.seq = seq
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    def __lt__(self, other):
        return (self.when_ms, self.seq) < (other.when_ms, other.seq)


class FakeScheduler:
    """Deterministic stand-in for the event loop's call_later, in whole milliseconds."""

    def __init__(self):
        self.now_ms = 0
        self._queue = []
        self._seq = itertools.count()

    def call_later(self, delay, callback, *args):
        handle = FakeHandle(self.now_ms + round(delay * 1000), next(self._seq), callback, args)
        heapq.heappush(self._queue, handle)
        return handle

    @property
    def pending(self):
        return [h for h in self._queue if not h.cancelled]

    def advance(self, ms):
        target = self.now_ms + ms
        while self._queue and self._queue[0].when_ms <= target:
            handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now_ms = handle.when_ms
            handle.callback(*handle.args)
        self.now_ms = target


@pytest.fixture()
def scheduler():
    return FakeScheduler()


def make_whisper(whisper_id, content=None, days_ago=0, **extra):
    return Whisper(
        id=str(whisper_id),
        content=content or f"Whisper {whisper_id}",
        date=datetime(2026, 10, 19, 23, 0) - timedelta(days=days_ago),
        **extra,
    )


@pytest.fixture()
def whispers():
    return [make_whisper(letter, days_ago=i) for i, letter in enumerate("ABC")]


@pytest.fixture()
def db_path(tmp_path):
    """SQLite database seeded with two authors, published posts and a draft."""
    path = tmp_path / "whispers.db"
    engine = create_engine(f"sqlite:///{path}", future=True)
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    with Session() as session:
        luna = User(nickname="luna", display_name="Luna")
        orion = User(nickname="orion", display_name="Orion")
        session.add_all([luna, orion])
        session.flush()
        session.add_all([
            Post(user_id=luna.id, content="oldest", date=datetime(2026, 10, 1), icon="  moon ", color="indigo"),
            Post(user_id=orion.id, content="newest", date=datetime(2026, 10, 18), icon="   ", color="teal"),
            Post(user_id=luna.id, content="middle", date=datetime(2026, 10, 10)),
            Post(user_id=luna.id, content="secret draft", date=datetime(2026, 10, 19), is_draft=True),
        ])
        session.commit()
    engine.dispose()
    return path


@pytest.fixture()
def client(db_path):
    from fastapi.testclient import TestClient

    from whispers.database import get_db
    from whispers.main import app

    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    TestSession = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with TestSession() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def whisper_factory():
    return make_whisper
