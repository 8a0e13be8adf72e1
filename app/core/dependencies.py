"""
Dependency injection for FastAPI endpoints.
"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.agents.lesson import LessonGenerator, MockLessonGenerator
from app.core.config import Settings
from app.db.base import get_db
from app.services.lesson_orchestrator import LessonOrchestrator
from app.services.lesson_store import LessonStore


def get_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_lesson_store(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> LessonStore:
    """
    Lesson store bound to the request's database session.

    Args:
        db: Database session
        settings: Application settings

    Returns:
        Lesson store
    """
    return LessonStore(db, default_user_id=settings.DEFAULT_USER_ID)


def get_lesson_generator(request: Request) -> LessonGenerator:
    """Remote lesson generator shared by the application."""
    return request.app.state.lesson_generator


def get_mock_generator(request: Request) -> MockLessonGenerator:
    """Local template generator shared by the application."""
    return request.app.state.mock_generator


def get_lesson_orchestrator(
    store: LessonStore = Depends(get_lesson_store),
    generator: LessonGenerator = Depends(get_lesson_generator),
    fallback: MockLessonGenerator = Depends(get_mock_generator),
) -> LessonOrchestrator:
    """Orchestrator for cache lookup, generation and persistence."""
    return LessonOrchestrator(store=store, generator=generator, fallback=fallback)
