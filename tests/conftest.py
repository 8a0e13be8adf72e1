"""
Shared fixtures: an in-memory SQLite database per test and an app bound to it.
"""
import os

# Must be set before app modules read the environment
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DEEPSEEK_API_KEY"] = ""

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.db.base import Base, create_db_engine, create_session_factory
from app.db.init_db import init_db
from app.main import create_app
from app.services.lesson_store import LessonStore

# Reply of the fake chat model for a generated lesson
LESSON_REPLY = {
    "topic": "Quantum Entanglement",
    "chapters": [
        {
            "title": "Chapter 1: Basics",
            "steps": [
                {
                    "type": "CONCEPT",
                    "title": "Spooky Action",
                    "content": {"visual_type": "SLIDE", "title": "What is it?", "content": "# Linked particles"},
                },
                {
                    "type": "QUIZ",
                    "title": "Check",
                    "content": {
                        "visual_type": "ANIMATION",
                        "title": "Flip",
                        "content": {"type": "sorting", "steps": []},
                    },
                    "quizConfig": {"template_id": "T1_DragSort", "data": {"items": ["A", "B"]}},
                },
            ],
        }
    ],
}


def make_settings(**overrides) -> Settings:
    values = {"DATABASE_URL": "sqlite://", "DEEPSEEK_API_KEY": "", "LOG_LEVEL": "DEBUG"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def engine(settings: Settings):
    engine = create_db_engine(settings)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine, settings: Settings) -> Generator[Session, None, None]:
    session = create_session_factory(engine)()
    init_db(session, settings)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db: Session) -> LessonStore:
    return LessonStore(db, default_user_id=1)


@pytest.fixture
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Test client; entering it runs startup (tables, default user)."""
    with TestClient(app) as c:
        yield c
