"""Schemas module - Import all schemas."""
from app.schemas.common import Message, ErrorResponse
from app.schemas.history import HistoryItem, ProgressUpdate
from app.schemas.lesson import (
    ContentRequest,
    GeneratedLesson,
    LessonGenerate,
    LessonMode,
    LessonPlan,
    LessonSave,
    LessonStatus,
    VisualAsset,
    VisualGenerate,
)

__all__ = [
    "Message",
    "ErrorResponse",
    "HistoryItem",
    "ProgressUpdate",
    "ContentRequest",
    "GeneratedLesson",
    "LessonGenerate",
    "LessonMode",
    "LessonPlan",
    "LessonSave",
    "LessonStatus",
    "VisualAsset",
    "VisualGenerate",
]
