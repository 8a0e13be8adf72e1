"""
Learning history endpoints.
"""
from typing import Any, List

from fastapi import APIRouter, Depends

from app.core.dependencies import get_lesson_store
from app.schemas.history import HistoryItem
from app.services.lesson_store import LessonStore

router = APIRouter()


@router.get("/{user_id}", response_model=List[HistoryItem])
def get_history(
    user_id: int,
    store: LessonStore = Depends(get_lesson_store),
) -> Any:
    """
    Get a user's lessons with their progress, most recently accessed first.

    Args:
        user_id: User ID
        store: Lesson store

    Returns:
        List of history rows with lesson topic and mode
    """
    return store.get_history(user_id)
