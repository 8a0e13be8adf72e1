"""Models module - Import all models here for Alembic."""
from app.db.base import Base
from app.models.user import User
from app.models.lesson import Lesson, LearningHistory

__all__ = ["Base", "User", "Lesson", "LearningHistory"]
