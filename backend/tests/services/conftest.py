"""Service test fixtures — async DB, FastAPI test client, seeded rows, local store.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB sessions
    - Remote collaborators overridden: keyword moderation, seeded fallback quiz
    - Requests carry identity via the X-User-Id header (see fakes.as_user)
    - SQLite in-memory with StaticPool: all sessions share one connection
"""

import random
import uuid

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from studyfront.api.deps import get_moderation_gate, get_quiz_generator
from studyfront.db.base import Base
from studyfront.infrastructure.database import get_db
from studyfront.infrastructure.local_medium import InMemoryMedium
from studyfront.main import app
from studyfront.models.course import Course
from studyfront.services.draft_store import LocalDraftStore
from studyfront.services.moderation_gate import ModerationGate
from studyfront.services.quiz_generator import QuizGenerator
import studyfront.models  # noqa: F401


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_session_factory):
    """FastAPI test client with DB and remote collaborators overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_moderation_gate] = lambda: ModerationGate()
    app.dependency_overrides[get_quiz_generator] = (
        lambda: QuizGenerator(rng=random.Random(7))
    )

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
async def seed_course(test_db):
    course = Course(code="CS101", title="Intro to Computer Science")
    test_db.add(course)
    await test_db.commit()
    return course


@pytest.fixture
def store():
    return LocalDraftStore(InMemoryMedium())


@pytest.fixture
def missing_course_id() -> str:
    return str(uuid.uuid4())
