"""
Lesson store tests against an in-memory database.
"""
import json

import pytest
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.core.exceptions import LessonNotFound, StorageFault
from app.db.base import Base, create_db_engine, create_session_factory
from app.models.lesson import LearningHistory, Lesson
from app.models.user import User
from app.services.lesson_store import LessonStore
from tests.conftest import make_settings


def lesson_doc(lesson_id: str, topic: str, mode: str = "FEYNMAN", title: str = "Intro") -> dict:
    return {"id": lesson_id, "topic": topic, "mode": mode, "chapters": [{"id": "chapter-1", "title": title, "steps": []}]}


def save(store: LessonStore, lesson_id: str, topic: str, mode: str = "FEYNMAN", user_id: int = 1,
         created_at: int = 1000, content=None) -> None:
    store.save_lesson(
        lesson_id=lesson_id,
        user_id=user_id,
        topic=topic,
        mode=mode,
        content=json.dumps(lesson_doc(lesson_id, topic, mode)) if content is None else content,
        created_at=created_at,
    )


# ============= save_lesson =============

def test_save_twice_keeps_one_row_with_latest_content(store: LessonStore, db: Session):
    save(store, "L1", "Quantum Entanglement", content=json.dumps({"version": 1}), created_at=1000)
    save(store, "L1", "Quantum Entanglement", content=json.dumps({"version": 2}), created_at=2000)

    rows = db.query(Lesson).filter(Lesson.id == "L1").all()
    assert len(rows) == 1
    assert json.loads(rows[0].content) == {"version": 2}
    assert rows[0].created_at == 2000


def test_resave_only_overwrites_content_and_timestamp(store: LessonStore):
    save(store, "L1", "Quantum Entanglement", mode="FEYNMAN")
    save(store, "L1", "Something Else", mode="INTERVIEW", content='{"v": 2}')

    raw = store.db.get(Lesson, "L1")
    assert raw.topic == "Quantum Entanglement"
    assert raw.mode == "FEYNMAN"
    assert store.get_lesson("L1") == {"v": 2}


def test_save_serializes_json_values(store: LessonStore):
    document = lesson_doc("L2", "Photosynthesis")
    save(store, "L2", "Photosynthesis", content=document)

    assert store.get_lesson("L2") == document


def test_save_without_user_uses_default_user(store: LessonStore):
    store.save_lesson("L3", None, "Bubble Sort", "FEYNMAN", "{}", 1000)

    history = store.get_history(1)
    assert [row["lesson_id"] for row in history] == ["L3"]


def test_save_without_timestamp_uses_now(store: LessonStore):
    store.save_lesson("L4", 1, "Bubble Sort", "FEYNMAN", "{}")

    assert store.db.get(Lesson, "L4").created_at > 1_600_000_000_000


def test_save_records_history_in_progress(store: LessonStore):
    save(store, "L1", "Quantum Entanglement")

    history = store.get_history(1)
    assert len(history) == 1
    row = history[0]
    assert row["lesson_id"] == "L1"
    assert row["status"] == "IN_PROGRESS"
    assert row["progress"] == 0
    assert row["score"] == 0
    assert row["topic"] == "Quantum Entanglement"
    assert row["mode"] == "FEYNMAN"


def test_resave_refreshes_history_without_resetting_status(store: LessonStore, db: Session):
    save(store, "L1", "Quantum Entanglement")
    store.update_progress(1, "L1", 100, 80, "COMPLETED")
    save(store, "L1", "Quantum Entanglement", content='{"v": 2}')

    rows = db.query(LearningHistory).filter(LearningHistory.lesson_id == "L1").all()
    assert len(rows) == 1
    assert rows[0].status == "COMPLETED"
    assert rows[0].score == 80


def test_save_raises_storage_fault_when_tables_are_missing(store: LessonStore, engine):
    Base.metadata.drop_all(bind=engine)

    with pytest.raises(StorageFault) as exc_info:
        save(store, "L1", "Quantum Entanglement")
    assert exc_info.value.message == "Failed to save lesson"


# ============= get_lesson =============

def test_get_lesson_returns_parsed_document(store: LessonStore):
    save(store, "L1", "Quantum Entanglement")

    lesson = store.get_lesson("L1")
    assert lesson["id"] == "L1"
    assert lesson["chapters"][0]["title"] == "Intro"


def test_get_lesson_with_malformed_content_returns_raw_row(store: LessonStore):
    save(store, "broken", "Broken Lesson", content="{not json", created_at=42)

    lesson = store.get_lesson("broken")
    assert lesson == {
        "id": "broken",
        "user_id": 1,
        "topic": "Broken Lesson",
        "mode": "FEYNMAN",
        "content": "{not json",
        "created_at": 42,
    }


def test_get_missing_lesson_raises_not_found(store: LessonStore):
    with pytest.raises(LessonNotFound):
        store.get_lesson("does-not-exist")


# ============= find_lesson =============

def test_find_matches_topic_substring_and_mode(store: LessonStore):
    save(store, "L1", "Quantum Entanglement", mode="FEYNMAN", user_id=1)

    assert store.find_lesson("Quantum", "FEYNMAN", 1)["id"] == "L1"
    with pytest.raises(LessonNotFound):
        store.find_lesson("Quantum", "INTERVIEW", 1)


def test_find_ignores_other_users(store: LessonStore):
    save(store, "L1", "Quantum Entanglement", user_id=1)

    with pytest.raises(LessonNotFound):
        store.find_lesson("Quantum", "FEYNMAN", 2)


def test_find_without_user_searches_default_user(store: LessonStore):
    save(store, "L1", "Quantum Entanglement", user_id=1)

    assert store.find_lesson("Entangle", "FEYNMAN", None)["id"] == "L1"


def test_find_returns_newest_match(store: LessonStore):
    save(store, "old", "Photosynthesis basics", created_at=1000)
    save(store, "new", "Photosynthesis advanced", created_at=5000)
    save(store, "middle", "Photosynthesis in algae", created_at=3000)

    assert store.find_lesson("Photosynthesis", "FEYNMAN", 1)["id"] == "new"


def test_find_treats_wildcards_literally(store: LessonStore):
    save(store, "L1", "Quantum Entanglement")

    with pytest.raises(LessonNotFound):
        store.find_lesson("%", "FEYNMAN", 1)
    with pytest.raises(LessonNotFound):
        store.find_lesson("Quantum_Entanglement", "FEYNMAN", 1)


def test_find_with_malformed_content_is_a_miss(store: LessonStore):
    save(store, "broken", "Broken Lesson", content="{not json")

    with pytest.raises(LessonNotFound):
        store.find_lesson("Broken", "FEYNMAN", 1)


def test_find_raises_storage_fault_on_database_error(store: LessonStore, engine):
    Base.metadata.drop_all(bind=engine)

    with pytest.raises(StorageFault):
        store.find_lesson("Quantum", "FEYNMAN", 1)


# ============= update_progress / get_history =============

def test_update_progress_is_reflected_in_history(store: LessonStore):
    save(store, "L1", "Quantum Entanglement")

    updated = store.update_progress(1, "L1", progress=100, score=80, status="COMPLETED")

    assert updated == 1
    rows = [row for row in store.get_history(1) if row["lesson_id"] == "L1"]
    assert len(rows) == 1
    assert rows[0]["status"] == "COMPLETED"
    assert rows[0]["score"] == 80
    assert rows[0]["progress"] == 100


def test_update_progress_without_history_is_a_noop(store: LessonStore, db: Session):
    save(store, "L1", "Quantum Entanglement", user_id=1)

    assert store.update_progress(1, "unknown", 50, 10, "IN_PROGRESS") == 0
    assert store.update_progress(2, "L1", 50, 10, "IN_PROGRESS") == 0
    assert db.query(LearningHistory).count() == 1


def test_history_is_ordered_by_last_access(store: LessonStore):
    save(store, "first", "Quantum Entanglement")
    save(store, "second", "React useEffect", mode="INTERVIEW")
    save(store, "third", "Photosynthesis")

    store.db.query(LearningHistory).filter(LearningHistory.lesson_id == "first").update({"last_accessed": 3000})
    store.db.query(LearningHistory).filter(LearningHistory.lesson_id == "second").update({"last_accessed": 1000})
    store.db.query(LearningHistory).filter(LearningHistory.lesson_id == "third").update({"last_accessed": 2000})
    store.db.commit()

    assert [row["lesson_id"] for row in store.get_history(1)] == ["first", "third", "second"]


def test_history_of_unknown_user_is_empty(store: LessonStore):
    save(store, "L1", "Quantum Entanglement", user_id=1)

    assert store.get_history(99) == []


# ============= foreign keys and concurrent saves =============

def test_sqlite_connections_enforce_foreign_keys(db: Session):
    assert db.execute(text("PRAGMA foreign_keys")).scalar() == 1


def test_save_for_user_without_user_row(store: LessonStore, db: Session):
    save(store, "L9", "Quantum Entanglement", user_id=2)

    assert db.get(User, 2) is None
    assert store.find_lesson("Quantum", "FEYNMAN", 2)["id"] == "L9"
    assert [row["lesson_id"] for row in store.get_history(2)] == ["L9"]


def test_interleaved_saves_of_one_id_last_write_wins(tmp_path):
    settings = make_settings(DATABASE_URL=f"sqlite:///{tmp_path / 'lessons.db'}")
    engine = create_db_engine(settings)
    Base.metadata.create_all(bind=engine)
    session_factory = create_session_factory(engine)
    first, second, check = session_factory(), session_factory(), session_factory()
    try:
        first_store = LessonStore(first)
        # first request looks the id up and finds nothing
        assert first.get(Lesson, "R1") is None

        save(LessonStore(second), "R1", "Quantum Entanglement", content='{"writer": "second"}', created_at=1000)
        save(first_store, "R1", "Quantum Entanglement", content='{"writer": "first"}', created_at=2000)

        assert check.query(Lesson).count() == 1
        assert json.loads(check.get(Lesson, "R1").content) == {"writer": "first"}
        assert check.query(LearningHistory).filter(LearningHistory.lesson_id == "R1").count() == 1
    finally:
        first.close()
        second.close()
        check.close()
        engine.dispose()
