"""Pytest configuration and shared fixtures."""

import os

# Settings are read at import time; point them at a throwaway database first.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["LOG_TO_FILE"] = "false"
os.environ["DATABASE_CREATE_TABLES"] = "true"
os.environ["DATABASE_SEED_SAMPLE_DATA"] = "false"

from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from educourse.config import get_settings
from educourse.core.database import create_tables
from educourse.core.database.session import build_engine
from educourse.courses.models import (
    Course,
    Lesson,
    LessonType,
    Module,
    courses_modules,
    modules_lessons,
)


# Small catalog used by the service tests:
#   course 1: module 1 (lessons 1-4) + module 2 (lessons 5-6)  -> 6 lessons
#   course 2: module 3 (lessons 7-8) + module 4 (empty)        -> 2 lessons
#   course 3: no modules                                        -> 0 lessons
#   course 4: module 1 + module 5 (lessons 4, 8)               -> 5 lessons
TEST_COURSES = [
    {"id": 1, "title": "Bem Estar com o Dr. Jô", "description": "Saúde física e mental.",
     "instructor": "Dr. Jô Furlan", "category": "Saúde", "duration": "1h 25min",
     "featured": True, "in_progress": True},
    {"id": 2, "title": "Cérebro de Resultados", "description": "Foco e memória.",
     "instructor": "Dr. Jô Furlan", "category": "Produtividade", "duration": "2h 02min",
     "featured": True, "in_progress": False},
    {"id": 3, "title": "Nutrição Inteligente", "description": "Para comer bem todos os dias.",
     "instructor": "Dra. Ana Silva", "category": "Saúde", "duration": "1h 45min",
     "featured": False, "in_progress": False},
    {"id": 4, "title": "Sono 100% Reparador", "description": "Durma melhor.",
     "instructor": "Dr. Carlos Mendes", "category": "Bem-estar", "duration": "1h 15min",
     "featured": False, "in_progress": True},
]

TEST_MODULES = [
    {"id": 1, "title": "Fundamentos", "order": 1, "duration": "55 min"},
    {"id": 2, "title": "Práticas Diárias", "order": 2, "duration": "30 min"},
    {"id": 3, "title": "Produtividade e Foco", "order": 1, "duration": "44 min"},
    {"id": 4, "title": "Em breve", "order": 2, "duration": ""},
    {"id": 5, "title": "Rotina Noturna", "order": 1, "duration": "20 min"},
]

TEST_MODULE_LESSONS = {1: [1, 2, 3, 4], 2: [5, 6], 3: [7, 8], 5: [4, 8]}
TEST_COURSE_MODULES = {1: [1, 2], 2: [3, 4], 4: [1, 5]}


async def _load_test_catalog(session_factory: async_sessionmaker[AsyncSession]) -> None:
    async with session_factory() as session:
        session.add_all(
            Lesson(
                id=i,
                title=f"Aula {i}",
                type=(LessonType.TEXT if i % 4 == 0 else LessonType.VIDEO).value,
                duration="10 min",
                content_url=f"https://videos.example.com/{i}.mp4",
            )
            for i in range(1, 9)
        )
        session.add_all(Module(**row) for row in TEST_MODULES)
        session.add_all(Course(**row) for row in TEST_COURSES)
        await session.flush()

        await session.execute(
            insert(modules_lessons),
            [
                {"module_id": m, "lesson_id": lesson}
                for m, lessons in TEST_MODULE_LESSONS.items()
                for lesson in lessons
            ],
        )
        await session.execute(
            insert(courses_modules),
            [
                {"course_id": c, "module_id": m}
                for c, modules in TEST_COURSE_MODULES.items()
                for m in modules
            ],
        )
        await session.commit()


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database with every table created."""
    engine = build_engine(get_settings())
    await create_tables(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def catalog(
    session_factory: async_sessionmaker[AsyncSession],
) -> async_sessionmaker[AsyncSession]:
    """Session factory over a database holding the test catalog."""
    await _load_test_catalog(session_factory)
    return session_factory


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> Generator[TestClient, None, None]:
    """Test client over the sample catalog, one fresh database per test."""
    monkeypatch.setattr(get_settings(), "database_seed_sample_data", True)

    from educourse.main import app

    with TestClient(app) as test_client:
        yield test_client
