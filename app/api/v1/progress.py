"""
API endpoint for lesson progress updates.
"""
from typing import Any

from fastapi import APIRouter, Depends

from app.core.dependencies import get_lesson_store
from app.schemas.common import Message
from app.schemas.history import ProgressUpdate
from app.services.lesson_store import LessonStore

router = APIRouter()


@router.post("", response_model=Message)
def update_progress(
    update: ProgressUpdate,
    store: LessonStore = Depends(get_lesson_store),
) -> Any:
    """
    Record progress, score and status of a lesson for a user.

    Lessons the user never saved are ignored, no history row is created.
    """
    store.update_progress(
        user_id=update.user_id,
        lesson_id=update.lesson_id,
        progress=update.progress,
        score=update.score,
        status=update.status.value,
    )
    return {"message": "Progress updated"}
