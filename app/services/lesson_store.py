"""
Lesson persistence: save, fetch, cache lookup, progress and history.
"""
import json
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import LessonNotFound, StorageFault
from app.models.lesson import LESSON_STATUS_IN_PROGRESS, LearningHistory, Lesson
from app.utils.timestamps import now_ms

logger = logging.getLogger(__name__)


class LessonStore:
    """
    Reads and writes lessons and learning history through one session.

    Lesson content is an opaque serialized document: it is stored as given
    and only parsed on the way out.
    """

    def __init__(self, db: Session, default_user_id: int = 1):
        self.db = db
        self.default_user_id = default_user_id

    def save_lesson(
        self,
        lesson_id: str,
        user_id: Optional[int],
        topic: str,
        mode: str,
        content: Any,
        created_at: Optional[int] = None,
    ) -> None:
        """
        Insert a lesson, or overwrite content and created_at of an existing id.

        Also records the lesson in the user's learning history. Both writes
        commit together.

        Args:
            lesson_id: Client generated lesson id
            user_id: Owner, defaults to the default user
            topic: Lesson topic
            mode: FEYNMAN or INTERVIEW
            content: Serialized document, or a JSON value to serialize
            created_at: Epoch milliseconds, defaults to now

        Raises:
            StorageFault: If the database rejects the write
        """
        user_id = user_id or self.default_user_id
        content_str = content if isinstance(content, str) else json.dumps(content)
        created_at = created_at if created_at is not None else now_ms()

        try:
            lesson_stmt = self._upsert(
                Lesson,
                {
                    "id": lesson_id,
                    "user_id": user_id,
                    "topic": topic,
                    "mode": mode,
                    "content": content_str,
                    "created_at": created_at,
                },
                conflict_columns=["id"],
                update_columns=["content", "created_at"],
            )
            history_stmt = self._upsert(
                LearningHistory,
                {
                    "user_id": user_id,
                    "lesson_id": lesson_id,
                    "last_accessed": now_ms(),
                    "status": LESSON_STATUS_IN_PROGRESS,
                    "progress": 0,
                    "score": 0,
                },
                conflict_columns=["user_id", "lesson_id"],
                update_columns=["last_accessed"],
            )

            self.db.execute(lesson_stmt)
            self.db.execute(history_stmt)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving lesson {lesson_id}: {e}")
            raise StorageFault("Failed to save lesson", str(e)) from e

        logger.info(f"Saved lesson {lesson_id} for user {user_id}")

    def get_lesson(self, lesson_id: str) -> Any:
        """
        Fetch a lesson document by id.

        Returns:
            The parsed document, or the raw row as a dict when the stored
            content is not valid JSON

        Raises:
            LessonNotFound: If no lesson has this id
            StorageFault: If the query fails
        """
        try:
            lesson = self.db.get(Lesson, lesson_id)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching lesson {lesson_id}: {e}")
            raise StorageFault("Failed to fetch lesson", str(e)) from e

        if lesson is None:
            raise LessonNotFound()

        try:
            return json.loads(lesson.content)  # type: ignore
        except ValueError as e:
            logger.warning(f"Lesson {lesson_id} content is not valid JSON, returning raw row: {e}")
            return self._row_to_dict(lesson)

    def find_lesson(self, topic: str, mode: str, user_id: Optional[int]) -> Any:
        """
        Find the newest lesson of a user whose topic contains ``topic``.

        Args:
            topic: Substring to look for in lesson topics
            mode: Exact lesson mode
            user_id: Owner, defaults to the default user

        Returns:
            The parsed lesson document

        Raises:
            LessonNotFound: On a cache miss, including a hit with unparsable content
            StorageFault: If the query fails
        """
        user_id = user_id or self.default_user_id

        try:
            lesson = (
                self.db.query(Lesson)
                .filter(
                    Lesson.user_id == user_id,
                    Lesson.mode == mode,
                    Lesson.topic.contains(topic, autoescape=True),
                )
                .order_by(Lesson.created_at.desc())
                .first()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error searching for lesson '{topic}' ({mode}): {e}")
            raise StorageFault("Database error", str(e)) from e

        if lesson is None:
            logger.info(f"Cache miss for '{topic}' ({mode}), user {user_id}")
            raise LessonNotFound()

        try:
            return json.loads(lesson.content)  # type: ignore
        except ValueError as e:
            logger.error(f"Error parsing cached lesson {lesson.id}: {e}")
            raise LessonNotFound() from e

    def update_progress(
        self,
        user_id: Optional[int],
        lesson_id: str,
        progress: int,
        score: int,
        status: str,
    ) -> int:
        """
        Update progress of an existing history row.

        Does nothing when the user has no history for the lesson.

        Returns:
            Number of rows updated (0 or 1)

        Raises:
            StorageFault: If the update fails
        """
        user_id = user_id or self.default_user_id

        try:
            updated = (
                self.db.query(LearningHistory)
                .filter(
                    LearningHistory.user_id == user_id,
                    LearningHistory.lesson_id == lesson_id,
                )
                .update(
                    {
                        LearningHistory.progress: progress,
                        LearningHistory.score: score,
                        LearningHistory.status: status,
                        LearningHistory.last_accessed: now_ms(),
                    },
                    synchronize_session=False,
                )
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating progress of lesson {lesson_id}: {e}")
            raise StorageFault("Failed to update progress", str(e)) from e

        if not updated:
            logger.info(f"No history for user {user_id} and lesson {lesson_id}, progress ignored")
        return updated

    def get_history(self, user_id: int) -> List[Dict[str, Any]]:
        """
        Learning history of a user, most recently accessed first.

        Returns:
            History rows with the topic and mode of their lesson

        Raises:
            StorageFault: If the query fails
        """
        try:
            rows = (
                self.db.query(LearningHistory, Lesson.topic, Lesson.mode)
                .join(Lesson, LearningHistory.lesson_id == Lesson.id)
                .filter(LearningHistory.user_id == user_id)
                .order_by(LearningHistory.last_accessed.desc(), LearningHistory.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error fetching history of user {user_id}: {e}")
            raise StorageFault("Failed to fetch history", str(e)) from e

        return [
            {
                "id": history.id,
                "user_id": history.user_id,
                "lesson_id": history.lesson_id,
                "last_accessed": history.last_accessed,
                "status": history.status,
                "progress": history.progress,
                "score": history.score,
                "topic": topic,
                "mode": mode,
            }
            for history, topic, mode in rows
        ]

    def _upsert(self, model, values: Dict[str, Any], conflict_columns: List[str], update_columns: List[str]):
        """
        INSERT that overwrites ``update_columns`` when a row with the same key exists.

        Concurrent saves of one key resolve in the database, the last write wins.
        """
        dialect = self.db.get_bind().dialect.name
        if dialect == "mysql":
            stmt = mysql_insert(model).values(**values)
            return stmt.on_duplicate_key_update(
                {column: stmt.inserted[column] for column in update_columns}
            )

        if dialect == "postgresql":
            stmt = postgresql_insert(model).values(**values)
        elif dialect == "sqlite":
            stmt = sqlite_insert(model).values(**values)
        else:
            raise StorageFault("Unsupported database", f"No upsert for dialect '{dialect}'")
        return stmt.on_conflict_do_update(
            index_elements=conflict_columns,
            set_={column: stmt.excluded[column] for column in update_columns},
        )

    @staticmethod
    def _row_to_dict(lesson: Lesson) -> Dict[str, Any]:
        return {
            "id": lesson.id,
            "user_id": lesson.user_id,
            "topic": lesson.topic,
            "mode": lesson.mode,
            "content": lesson.content,
            "created_at": lesson.created_at,
        }
