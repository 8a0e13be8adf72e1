"""
Pydantic schemas for learning history and progress updates.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.lesson import LessonStatus


class ProgressUpdate(BaseModel):
    """Body of POST /progress."""
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[int] = Field(None, alias="userId")
    lesson_id: str = Field(..., alias="lessonId")
    progress: int = Field(..., ge=0, le=100, description="Percentage of the lesson completed")
    score: int = 0
    status: LessonStatus


class HistoryItem(BaseModel):
    """A learning history row joined with its lesson's topic and mode."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    lesson_id: str
    last_accessed: int
    status: str
    progress: int
    score: int
    topic: str
    mode: str
