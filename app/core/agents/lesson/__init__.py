"""
Lesson generation agents.
"""
from .lesson_generator import LessonGenerator
from .mock_generator import MockLessonGenerator

__all__ = [
    "LessonGenerator",
    "MockLessonGenerator",
]
