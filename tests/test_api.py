# tests/test_api.py
import pytest
from fastapi.testclient import TestClient

from archimedes_prep.core.config import config
from archimedes_prep.main import app

DIAGNOSTIC_ANSWERS = ["0", "180", "4", "1,234,567,890"]


@pytest.fixture
def client(db_path):
    with TestClient(app) as client:
        yield client


def _question(qid, correct="B"):
    return {
        "id": qid,
        "text": f"Question {qid}",
        "options": ["A", "B", "C", "D", "E"],
        "correctAnswer": correct,
        "explanation": "Worked solution",
        "topic": "Logic & Combinatorics",
    }


def test_startup_creates_user_and_seed(client):
    user = client.get("/api/user").json()
    assert user["name"] == config.DEFAULT_USER_NAME

    tests = client.get("/api/tests").json()
    assert tests == [{"id": 1, "day_number": 1, "title": "Diagnostic Assessment"}]


def test_rename_user(client):
    response = client.put("/api/user", json={"name": "Ada"})
    assert response.status_code == 200
    assert response.json()["name"] == "Ada"
    assert client.get("/api/user").json()["name"] == "Ada"

    assert client.put("/api/user", json={"name": ""}).status_code == 422
    assert client.put("/api/user", json={"name": "   "}).status_code == 400


def test_get_test_uses_wire_field_names(client):
    test = client.get("/api/tests/1").json()
    assert len(test["questions"]) == 5
    assert test["questions"][0]["correctAnswer"] == "0"
    assert "correct_answer" not in test["questions"][0]


def test_unknown_test_is_404_and_listing_survives(client):
    response = client.get("/api/tests/999")
    assert response.status_code == 404
    assert response.json()["error"] == "Test not found"
    assert client.get("/api/tests").status_code == 200


def test_create_test(client):
    response = client.post("/api/tests", json={
        "day_number": 2, "title": "Logic Day", "questions": [_question(1), _question(2)]
    })
    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert [t["day_number"] for t in client.get("/api/tests").json()] == [1, 2]


def test_duplicate_day_is_conflict(client):
    response = client.post("/api/tests", json={
        "day_number": 1, "title": "Impostor", "questions": [_question(1)]
    })
    assert response.status_code == 400
    assert response.json()["message"] == "Test already exists for this day"
    assert client.get("/api/tests/1").json()["title"] == "Diagnostic Assessment"


def test_invalid_question_rejected(client):
    response = client.post("/api/tests", json={
        "day_number": 3, "title": "Broken", "questions": [_question(1, correct="Z")]
    })
    assert response.status_code == 422


def test_generate_next_test(client):
    response = client.post("/api/tests/generate", json={})
    assert response.status_code == 200
    body = response.json()
    assert body["day_number"] == 2
    assert body["title"] == "Mock Test #2"

    test = client.get(f"/api/tests/{body['id']}").json()
    assert len(test["questions"]) == config.QUESTIONS_PER_TEST


def test_save_result_and_progress(client):
    user_id = client.get("/api/user").json()["id"]
    answers = {str(i + 1): option for i, option in enumerate(DIAGNOSTIC_ANSWERS)}

    response = client.post("/api/results", json={
        "user_id": user_id, "test_id": 1, "score": 99, "total_questions": 5, "answers": answers
    })
    assert response.status_code == 200
    result_id = response.json()["id"]

    progress = client.get("/api/progress").json()
    assert len(progress) == 1
    assert progress[0]["id"] == result_id
    assert progress[0]["score"] == 60
    assert progress[0]["title"] == "Diagnostic Assessment"
    assert progress[0]["answers"] == answers

    summary = client.get("/api/progress/summary").json()
    assert summary["tests_completed"] == 1
    assert summary["average_score"] == 60

    topics = client.get("/api/progress/topics").json()
    assert sum(row["questions_seen"] for row in topics) == 5


def test_save_result_unknown_test(client):
    user_id = client.get("/api/user").json()["id"]
    response = client.post("/api/results", json={
        "user_id": user_id, "test_id": 42, "score": 0, "total_questions": 0, "answers": {}
    })
    assert response.status_code == 404


def test_learning_center(client):
    topics = client.get("/api/topics").json()
    assert len(topics) == 6

    response = client.get("/api/topics/arithmetic/explanation")
    assert response.status_code == 200
    body = response.json()
    assert body["topic"] == "Arithmetic Operations"
    assert body["html"].startswith("<h2>")


def test_session_requires_start(client):
    response = client.get("/api/session")
    assert response.status_code == 409
    assert response.json()["type"] == "session_error"


def test_session_flow(client):
    state = client.post("/api/session/start", json={"test_id": 1}).json()
    assert state["current_question_index"] == 0
    assert state["total_questions"] == 5
    assert state["time_left"] <= config.TEST_DURATION_SECONDS

    for index, option in enumerate(DIAGNOSTIC_ANSWERS):
        client.post("/api/session/jump", json={"index": index})
        state = client.post("/api/session/answer", json={"option": option}).json()
    assert state["answered_count"] == 4

    assert client.post("/api/session/previous").json()["current_question_index"] == 2
    assert client.post("/api/session/next").json()["current_question_index"] == 3

    outcome = client.post("/api/session/submit").json()
    assert outcome["score"] == 60
    assert outcome["result_saved"] is True

    again = client.post("/api/session/submit").json()
    assert again == outcome
    assert len(client.get("/api/progress").json()) == 1

    review = client.get("/api/session/review").json()
    assert [item["your_answer"] for item in review["items"]] == DIAGNOSTIC_ANSWERS + [None]

    late = client.post("/api/session/answer", json={"option": "0"})
    assert late.status_code == 409


def test_session_rejects_unknown_option(client):
    client.post("/api/session/start", json={"test_id": 1})
    response = client.post("/api/session/answer", json={"option": "seven"})
    assert response.status_code == 400
    assert response.json()["type"] == "validation_error"


def test_session_for_unknown_test(client):
    assert client.post("/api/session/start", json={"test_id": 77}).status_code == 404


def test_health_and_info(client):
    health = client.get("/health").json()
    assert health["status"] == "healthy"
    assert health["database"] == "healthy"

    info = client.get("/info").json()
    assert info["configuration"]["questions_per_test"] == config.QUESTIONS_PER_TEST
