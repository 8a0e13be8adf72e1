"""
Single visual asset generation.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends

from app.core.agents.lesson import LessonGenerator, MockLessonGenerator
from app.core.dependencies import get_lesson_generator, get_mock_generator
from app.core.exceptions import GenerationError
from app.schemas.lesson import ContentRequest, VisualAsset, VisualGenerate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/generate", response_model=VisualAsset)
def generate_visual(
    request: VisualGenerate,
    generator: LessonGenerator = Depends(get_lesson_generator),
    fallback: MockLessonGenerator = Depends(get_mock_generator),
) -> Any:
    """
    Generate one visual asset (slide, diagram or animation) for a query.

    Uses the local mock assets when the remote model is unavailable.
    """
    content_request = ContentRequest(query=request.query, mode=request.mode)
    try:
        return generator.generate_visual(content_request)
    except GenerationError as e:
        logger.warning(f"Visual generation failed ({e.message}), using mock asset")
        return fallback.generate_visual(content_request)
