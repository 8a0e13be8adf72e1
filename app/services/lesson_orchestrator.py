"""
Lesson orchestration: cache lookup, generation and persistence for one request.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from app.core.agents.lesson import LessonGenerator, MockLessonGenerator
from app.core.exceptions import GenerationError, LessonNotFound, StorageFault
from app.schemas.lesson import ContentRequest, LessonMode
from app.services.lesson_store import LessonStore
from app.utils.timestamps import now_ms

logger = logging.getLogger(__name__)

SOURCE_CACHE = "cache"
SOURCE_GENERATED = "generated"
SOURCE_MOCK = "mock"


class LessonOrchestrator:
    """
    Returns a lesson for a query, generating one only when none is cached.

    Steps run sequentially with no deduplication of concurrent identical
    requests: two simultaneous misses both generate and both save.
    """

    def __init__(
        self,
        store: LessonStore,
        generator: LessonGenerator,
        fallback: MockLessonGenerator,
    ):
        self.store = store
        self.generator = generator
        self.fallback = fallback

    def get_or_create(
        self,
        query: str,
        mode: LessonMode,
        user_id: Optional[int] = None,
        document_content: Optional[str] = None,
    ) -> Tuple[Dict[str, Any], str]:
        """
        Find a cached lesson or generate a new one.

        Args:
            query: Topic typed by the user
            mode: Lesson mode
            user_id: Requesting user
            document_content: Optional context document for the generator

        Returns:
            The lesson document and its source ("cache", "generated" or "mock")

        Raises:
            GenerationError: If even the local generator fails
        """
        # 1. Cache lookup, a storage fault counts as a miss
        try:
            cached = self.store.find_lesson(query, mode.value, user_id)
            logger.info(f"Found cached lesson for '{query}' ({mode.value})")
            return cached, SOURCE_CACHE
        except LessonNotFound:
            pass
        except StorageFault as e:
            logger.error(f"Cache lookup failed, generating instead: {e.message} {e.details}")

        request = ContentRequest(
            query=query,
            mode=mode,
            document_content=document_content,
            timestamp=now_ms(),
        )

        # 2. Remote generation, persisted on success
        try:
            lesson = self.generator.generate_lesson(request)
        except GenerationError as e:
            logger.warning(f"Remote generation failed ({e.message}), falling back to mock lessons")
        else:
            document = lesson.model_dump(mode="json", exclude_none=True)
            try:
                self.store.save_lesson(
                    lesson_id=lesson.id,
                    user_id=user_id,
                    topic=lesson.topic,
                    mode=lesson.mode.value,
                    content=document,
                    created_at=lesson.createdAt,
                )
            except StorageFault as e:
                logger.error(f"Generated lesson {lesson.id} could not be saved: {e.details}")
            return document, SOURCE_GENERATED

        # 3. Local template, not persisted
        try:
            lesson = self.fallback.generate_lesson(request)
        except Exception as e:
            logger.error(f"Mock generation also failed: {e}")
            raise GenerationError("Failed to generate lesson. Please try again.", str(e)) from e
        return lesson.model_dump(mode="json", exclude_none=True), SOURCE_MOCK
