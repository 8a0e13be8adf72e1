"""
Lesson and learning history models.
"""
from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects import mysql
from sqlalchemy.orm import relationship

from app.db.base import Base

LESSON_STATUS_IN_PROGRESS = "IN_PROGRESS"
LESSON_STATUS_COMPLETED = "COMPLETED"


class Lesson(Base):
    """A generated lesson, stored as one serialized JSON document."""

    __tablename__ = "lessons"

    id = Column(String(255), primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)  # plain id, no foreign key to users
    topic = Column(String(512), nullable=False, index=True)
    mode = Column(String(32), nullable=False)  # FEYNMAN, INTERVIEW
    # Opaque lesson document; LONGTEXT on MySQL
    content = Column(Text().with_variant(mysql.LONGTEXT(), "mysql"), nullable=False)
    created_at = Column(BigInteger, nullable=False)  # epoch milliseconds

    # Relationships
    history = relationship("LearningHistory", back_populates="lesson")


class LearningHistory(Base):
    """Per-user progress on a lesson."""

    __tablename__ = "learning_history"
    __table_args__ = (UniqueConstraint("user_id", "lesson_id", name="uq_learning_history_user_lesson"),)

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, nullable=False)
    lesson_id = Column(String(255), ForeignKey("lessons.id"), nullable=False)
    last_accessed = Column(BigInteger, nullable=False)  # epoch milliseconds
    status = Column(String(32), default=LESSON_STATUS_IN_PROGRESS, nullable=False)  # IN_PROGRESS, COMPLETED
    progress = Column(Integer, default=0, nullable=False)  # percentage
    score = Column(Integer, default=0, nullable=False)

    # Relationships
    lesson = relationship("Lesson", back_populates="history")
