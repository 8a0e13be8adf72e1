"""
HTTP tests for the lesson, history and progress endpoints.
"""
import json

from fastapi.testclient import TestClient
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from app.core.agents.lesson import LessonGenerator
from app.db.base import Base
from app.main import create_app
from tests.conftest import LESSON_REPLY, make_settings

API = "/api"


def save_payload(lesson_id: str = "L1", topic: str = "Quantum Entanglement", mode: str = "FEYNMAN",
                 user_id: int = 1, created_at: int = 1000, content=None) -> dict:
    document = {"id": lesson_id, "topic": topic, "mode": mode, "chapters": [], "createdAt": created_at}
    return {
        "id": lesson_id,
        "topic": topic,
        "mode": mode,
        "content": json.dumps(document) if content is None else content,
        "createdAt": created_at,
        "userId": user_id,
    }


def test_health(client: TestClient):
    assert client.get("/health").json() == {"status": "healthy"}
    root = client.get("/").json()
    assert root["status"] == "healthy"
    assert root["llm_configured"] is False


def test_save_lesson(client: TestClient):
    response = client.post(f"{API}/lessons", json=save_payload())

    assert response.status_code == 200
    assert response.json() == {"message": "Lesson saved successfully"}


def test_save_lesson_accepts_document_object(client: TestClient):
    document = {"id": "L1", "topic": "Photosynthesis", "chapters": [{"id": "c1", "title": "Basics", "steps": []}]}
    client.post(f"{API}/lessons", json=save_payload(topic="Photosynthesis", content=document))

    assert client.get(f"{API}/lessons/L1").json() == document


def test_save_lesson_with_invalid_mode_is_rejected(client: TestClient):
    response = client.post(f"{API}/lessons", json=save_payload(mode="LECTURE"))

    assert response.status_code == 422


def test_get_lesson(client: TestClient):
    client.post(f"{API}/lessons", json=save_payload())

    response = client.get(f"{API}/lessons/L1")
    assert response.status_code == 200
    assert response.json()["topic"] == "Quantum Entanglement"


def test_get_missing_lesson_is_404(client: TestClient):
    response = client.get(f"{API}/lessons/nope")

    assert response.status_code == 404
    assert response.json() == {"error": "Lesson not found"}


def test_get_lesson_with_malformed_content_returns_row(client: TestClient):
    client.post(f"{API}/lessons", json=save_payload(content="not json"))

    body = client.get(f"{API}/lessons/L1").json()
    assert body["id"] == "L1"
    assert body["content"] == "not json"


def test_find_lesson_scenario(client: TestClient):
    client.post(f"{API}/lessons", json=save_payload())

    hit = client.get(f"{API}/lessons/find", params={"topic": "Quantum", "mode": "FEYNMAN", "userId": 1})
    assert hit.status_code == 200
    assert hit.json()["id"] == "L1"

    miss = client.get(f"{API}/lessons/find", params={"topic": "Quantum", "mode": "INTERVIEW", "userId": 1})
    assert miss.status_code == 404
    assert miss.json() == {"message": "Lesson not found"}


def test_find_lesson_defaults_to_default_user(client: TestClient):
    client.post(f"{API}/lessons", json=save_payload(user_id=1))

    response = client.get(f"{API}/lessons/find", params={"topic": "Entanglement", "mode": "FEYNMAN"})
    assert response.status_code == 200


def test_update_progress_and_history_scenario(client: TestClient):
    client.post(f"{API}/lessons", json=save_payload())

    history = client.get(f"{API}/history/1").json()
    assert [(row["lesson_id"], row["status"]) for row in history] == [("L1", "IN_PROGRESS")]

    response = client.post(f"{API}/progress", json={
        "userId": 1, "lessonId": "L1", "progress": 100, "score": 80, "status": "COMPLETED",
    })
    assert response.status_code == 200
    assert response.json() == {"message": "Progress updated"}

    rows = [row for row in client.get(f"{API}/history/1").json() if row["lesson_id"] == "L1"]
    assert len(rows) == 1
    assert rows[0]["status"] == "COMPLETED"
    assert rows[0]["score"] == 80
    assert rows[0]["progress"] == 100
    assert rows[0]["topic"] == "Quantum Entanglement"
    assert rows[0]["mode"] == "FEYNMAN"


def test_update_progress_for_unknown_lesson_still_succeeds(client: TestClient):
    response = client.post(f"{API}/progress", json={
        "userId": 1, "lessonId": "ghost", "progress": 10, "score": 0, "status": "IN_PROGRESS",
    })

    assert response.status_code == 200
    assert client.get(f"{API}/history/1").json() == []


def test_update_progress_rejects_unknown_status(client: TestClient):
    response = client.post(f"{API}/progress", json={
        "userId": 1, "lessonId": "L1", "progress": 10, "score": 0, "status": "ABANDONED",
    })

    assert response.status_code == 422


def test_history_is_per_user(client: TestClient):
    client.post(f"{API}/lessons", json=save_payload(lesson_id="A", topic="Photosynthesis"))
    client.post(f"{API}/lessons", json=save_payload(lesson_id="B", topic="React useEffect", mode="INTERVIEW"))
    client.post(f"{API}/lessons", json=save_payload(lesson_id="C", topic="Bubble Sort", user_id=2))

    history = client.get(f"{API}/history/1").json()
    assert {row["lesson_id"] for row in history} == {"A", "B"}
    assert [row["lesson_id"] for row in client.get(f"{API}/history/2").json()] == ["C"]


def test_storage_fault_is_500_with_message(app, client: TestClient):
    Base.metadata.drop_all(bind=app.state.engine)

    response = client.post(f"{API}/lessons", json=save_payload())
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to save lesson"

    response = client.get(f"{API}/history/1")
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to fetch history"


def test_oversized_body_is_rejected():
    app = create_app(make_settings(MAX_BODY_SIZE=200))
    with TestClient(app) as client:
        response = client.post(f"{API}/lessons", json=save_payload(content="x" * 500))

    assert response.status_code == 413


def test_oversized_chunked_body_is_rejected():
    app = create_app(make_settings(MAX_BODY_SIZE=200))
    body = json.dumps(save_payload(content="x" * 500)).encode()
    with TestClient(app) as client:
        response = client.post(
            f"{API}/lessons",
            content=iter([body[:100], body[100:]]),
            headers={"Content-Type": "application/json"},
        )

    assert response.status_code == 413


def test_small_chunked_body_reaches_the_endpoint(client: TestClient):
    body = json.dumps(save_payload()).encode()

    response = client.post(
        f"{API}/lessons",
        content=iter([body]),
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 200
    assert client.get(f"{API}/lessons/L1").json()["id"] == "L1"


# ============= generation =============

def test_generate_without_api_key_returns_mock_lesson(client: TestClient):
    response = client.post(f"{API}/lessons/generate", json={"query": "Recursion", "mode": "FEYNMAN", "userId": 1})

    assert response.status_code == 200
    body = response.json()
    assert body["source"] == "mock"
    assert body["lesson"]["topic"] == "Recursion"
    assert client.get(f"{API}/history/1").json() == []


def test_generate_saves_then_serves_from_cache(app, client: TestClient):
    app.state.lesson_generator = LessonGenerator(
        app.state.settings, llm=FakeListChatModel(responses=[json.dumps(LESSON_REPLY)])
    )

    first = client.post(f"{API}/lessons/generate", json={"query": "Quantum Entanglement", "mode": "FEYNMAN"}).json()
    assert first["source"] == "generated"

    second = client.post(f"{API}/lessons/generate", json={"query": "Quantum", "mode": "FEYNMAN"}).json()
    assert second["source"] == "cache"
    assert second["lesson"]["id"] == first["lesson"]["id"]

    assert client.get(f"{API}/lessons/{first['lesson']['id']}").json() == first["lesson"]


def test_generate_visual_falls_back_to_mock_asset(client: TestClient):
    response = client.post(f"{API}/content/generate", json={"query": "The French Revolution"})

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "asset-001"


def test_generate_with_markdown_step_content_is_saved(app, client: TestClient):
    reply = {"chapters": [{"title": "Basics", "steps": [{"type": "CONCEPT", "title": "t", "content": "# plain markdown"}]}]}
    app.state.lesson_generator = LessonGenerator(
        app.state.settings, llm=FakeListChatModel(responses=[json.dumps(reply)])
    )

    body = client.post(f"{API}/lessons/generate", json={"query": "Recursion", "mode": "FEYNMAN", "userId": 5}).json()

    assert body["source"] == "generated"
    assert body["lesson"]["chapters"][0]["steps"][0]["content"]["content"] == "# plain markdown"
    assert [row["lesson_id"] for row in client.get(f"{API}/history/5").json()] == [body["lesson"]["id"]]
    assert body["status"] == "READY"
