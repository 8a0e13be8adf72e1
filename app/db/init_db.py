"""
Database initialization and seeding.
"""
import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.core.config import Settings
from app.models.user import User
from app.services.lesson_store import LessonStore
from app.utils.timestamps import now_ms

logger = logging.getLogger(__name__)


def init_db(db: Session, settings: Settings) -> None:
    """
    Initialize database with default data.

    Lessons saved without a user belong to the default user, so it must exist.

    Args:
        db: Database session
        settings: Application settings
    """
    user = db.get(User, settings.DEFAULT_USER_ID)
    if not user:
        user = User(
            id=settings.DEFAULT_USER_ID,
            username=settings.DEFAULT_USERNAME,
            total_xp=0,
        )
        db.add(user)
        db.commit()
        logger.info("Default user created successfully")
    else:
        logger.info("Default user verified")


def sample_lessons() -> List[Dict[str, Any]]:
    """Sample lessons with the progress to record for each."""
    now = now_ms()
    return [
        {
            "lesson": {
                "id": "seed-lesson-quantum",
                "topic": "Quantum Entanglement",
                "mode": "FEYNMAN",
                "createdAt": now - 10000000,
                "steps": [
                    {
                        "id": "step-q1",
                        "type": "CONCEPT",
                        "title": "The Spooky Action",
                        "content": {
                            "id": "vis-q1",
                            "visual_type": "SLIDE",
                            "title": "What is Entanglement?",
                            "content": (
                                "Quantum entanglement is a phenomenon where two particles become linked, "
                                "such that the state of one cannot be described independently of the other, "
                                "even when separated by large distances."
                            ),
                            "status": "READY",
                            "generator_version": "1.0",
                        },
                    },
                    {
                        "id": "step-q2",
                        "type": "ANALOGY",
                        "title": "The Magic Coins",
                        "content": {
                            "id": "vis-q2",
                            "visual_type": "SLIDE",
                            "title": "Coin Flip Analogy",
                            "content": (
                                "Imagine two magic coins. No matter how far apart they are, if you flip one "
                                "and it lands Heads, the other one INSTANTLY lands Tails."
                            ),
                            "status": "READY",
                            "generator_version": "1.0",
                        },
                    },
                    {
                        "id": "step-q3",
                        "type": "QUIZ",
                        "title": "Check Understanding",
                        "content": {
                            "id": "vis-q3",
                            "visual_type": "SLIDE",
                            "title": "Quiz",
                            "content": "Test your knowledge on entanglement.",
                            "status": "READY",
                            "generator_version": "1.0",
                        },
                        "quizConfig": {
                            "template_id": "T1_DragSort",
                            "data": {
                                "question": "Order the steps of creating an entangled pair:",
                                "options": ["Generate Pair", "Separate Particles", "Measure State"],
                                "correctOrder": ["Generate Pair", "Separate Particles", "Measure State"],
                            },
                        },
                    },
                ],
            },
            "progress": {"progress": 100, "score": 80, "status": "COMPLETED"},
        },
        {
            "lesson": {
                "id": "seed-lesson-react",
                "topic": "React useEffect",
                "mode": "INTERVIEW",
                "createdAt": now - 5000000,
                "steps": [
                    {
                        "id": "step-r1",
                        "type": "CONCEPT",
                        "title": "The Lifecycle Hook",
                        "content": {
                            "id": "vis-r1",
                            "visual_type": "SLIDE",
                            "title": "useEffect Explained",
                            "content": (
                                "`useEffect` lets you perform side effects in function components. It serves "
                                "the same purpose as `componentDidMount`, `componentDidUpdate`, and "
                                "`componentWillUnmount` in React classes."
                            ),
                            "status": "READY",
                            "generator_version": "1.0",
                        },
                    },
                    {
                        "id": "step-r2",
                        "type": "FLASHCARD",
                        "title": "Interview Question",
                        "content": {
                            "id": "vis-r2",
                            "visual_type": "SLIDE",
                            "title": "Dependency Array",
                            "content": "What happens if the dependency array is empty?",
                            "status": "READY",
                            "generator_version": "1.0",
                        },
                        "flashcard": {
                            "front": "What does an empty dependency array `[]` mean in useEffect?",
                            "back": "The effect runs only ONCE after the initial render, like `componentDidMount`.",
                        },
                    },
                ],
            },
            "progress": {"progress": 50, "score": 0, "status": "IN_PROGRESS"},
        },
        {
            "lesson": {
                "id": "seed-lesson-photo",
                "topic": "Photosynthesis",
                "mode": "FEYNMAN",
                "createdAt": now - 2000000,
                "steps": [
                    {
                        "id": "step-p1",
                        "type": "CONCEPT",
                        "title": "Solar Power Plant",
                        "content": {
                            "id": "vis-p1",
                            "visual_type": "DIAGRAM",
                            "title": "The Process",
                            "content": (
                                "graph LR\n  Sun[Sunlight] --> Leaf\n  CO2[Carbon Dioxide] --> Leaf\n"
                                "  Water --> Leaf\n  Leaf --> Sugar[Glucose]\n  Leaf --> Oxygen"
                            ),
                            "status": "READY",
                            "generator_version": "1.0",
                        },
                    },
                    {
                        "id": "step-p2",
                        "type": "QUIZ",
                        "title": "Key Input",
                        "content": {
                            "id": "vis-p2",
                            "visual_type": "SLIDE",
                            "title": "What drives it?",
                            "content": "Photosynthesis requires energy to proceed.",
                            "status": "READY",
                            "generator_version": "1.0",
                        },
                        "quizConfig": {
                            "template_id": "T3_FillBlank",
                            "data": {
                                "text_parts": ["The primary energy source for photosynthesis is ", "."],
                                "correct_answers": ["Sunlight"],
                            },
                        },
                    },
                ],
            },
            "progress": None,
        },
    ]


def seed_lessons(store: LessonStore, user_id: int) -> int:
    """
    Save the sample lessons and their progress for a user.

    Returns:
        Number of lessons seeded
    """
    seeded = 0
    for sample in sample_lessons():
        lesson = sample["lesson"]
        logger.info(f"Saving lesson: {lesson['topic']}...")
        store.save_lesson(
            lesson_id=lesson["id"],
            user_id=user_id,
            topic=lesson["topic"],
            mode=lesson["mode"],
            content=lesson,
            created_at=lesson["createdAt"],
        )
        if sample["progress"]:
            logger.info(f"Updating progress for: {lesson['topic']}...")
            store.update_progress(user_id=user_id, lesson_id=lesson["id"], **sample["progress"])
        seeded += 1
    return seeded
