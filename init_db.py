"""
Script to initialize the database with tables and seed data.

Usage:
    python init_db.py                 # tables and default user
    python init_db.py --seed-lessons  # also the sample lessons
"""
import argparse
import logging

from app.core.config import settings
from app.db.base import Base, create_db_engine, create_session_factory
from app.db.init_db import init_db, seed_lessons
from app.models import Lesson, LearningHistory, User  # noqa: F401  register tables
from app.services.lesson_store import LessonStore

logging.basicConfig(level=logging.INFO, format="%(levelname)s:\t%(name)s\t%(message)s")


def init(with_lessons: bool = False) -> None:
    """Initialize database."""
    engine = create_db_engine(settings)

    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("✅ Database tables created")

    print("Seeding initial data...")
    db = create_session_factory(engine)()
    try:
        init_db(db, settings)
        if with_lessons:
            count = seed_lessons(LessonStore(db, settings.DEFAULT_USER_ID), settings.DEFAULT_USER_ID)
            print(f"✅ {count} sample lessons seeded")
        print("✅ Initial data seeded")
    finally:
        db.close()
        engine.dispose()

    print("🎉 Database initialization complete!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create tables and seed data.")
    parser.add_argument("--seed-lessons", action="store_true", help="also save the sample lessons")
    args = parser.parse_args()
    init(with_lessons=args.seed_lessons)
