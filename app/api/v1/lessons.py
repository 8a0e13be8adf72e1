"""
Lesson endpoints: save, cache lookup, generation and fetch.
"""
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from app.core.dependencies import get_lesson_orchestrator, get_lesson_store
from app.core.exceptions import LessonNotFound
from app.schemas.common import ErrorResponse, Message
from app.schemas.lesson import GeneratedLesson, LessonGenerate, LessonMode, LessonSave
from app.services.lesson_orchestrator import LessonOrchestrator
from app.services.lesson_store import LessonStore

router = APIRouter()


@router.post("", response_model=Message)
def save_lesson(
    lesson: LessonSave,
    store: LessonStore = Depends(get_lesson_store),
) -> Any:
    """
    Save a lesson, overwriting content and creation time if the id exists.

    Args:
        lesson: Lesson id, topic, mode, serialized content, timestamp and owner
        store: Lesson store

    Returns:
        Confirmation message
    """
    store.save_lesson(
        lesson_id=lesson.id,
        user_id=lesson.user_id,
        topic=lesson.topic,
        mode=lesson.mode.value,
        content=lesson.content,
        created_at=lesson.created_at,
    )
    return {"message": "Lesson saved successfully"}


# Registered before /{lesson_id} so "find" is not taken for an id
@router.get("/find")
def find_lesson(
    topic: str = Query(..., description="Substring of the lesson topic"),
    mode: LessonMode = Query(...),
    user_id: Optional[int] = Query(None, alias="userId"),
    store: LessonStore = Depends(get_lesson_store),
) -> Any:
    """
    Find the newest matching lesson of a user.

    A 404 here is the normal cache miss answer.
    """
    try:
        return store.find_lesson(topic, mode.value, user_id)
    except LessonNotFound:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"message": "Lesson not found"},
        )


@router.post("/generate", response_model=GeneratedLesson)
def generate_lesson(
    request: LessonGenerate,
    orchestrator: LessonOrchestrator = Depends(get_lesson_orchestrator),
) -> Any:
    """
    Return a cached lesson for the query, or generate (and save) a new one.

    The response says whether the lesson came from the cache, the remote
    model, or the local mock generator.
    """
    lesson, source = orchestrator.get_or_create(
        query=request.query,
        mode=request.mode,
        user_id=request.user_id,
        document_content=request.document_content,
    )
    return {"source": source, "lesson": lesson}


@router.get("/{lesson_id}", responses={404: {"model": ErrorResponse}})
def get_lesson(
    lesson_id: str,
    store: LessonStore = Depends(get_lesson_store),
) -> Any:
    """
    Get a lesson document by id.

    Falls back to the raw database row when the stored content is not JSON.
    """
    return store.get_lesson(lesson_id)
