"""
HTTP API tests using FastAPI's TestClient against a temporary database.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from sormbot.api.main import create_app
from sormbot.core.errors import PersistenceError


@pytest.fixture
def client(context):
    """Create test client for API testing."""
    with TestClient(create_app(context)) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["db_health"] is True
    assert data["entry_count"] == 0


def test_chat_teach_and_answer(client):
    response = client.post("/chat", json={"message": "!teach Foo | Bar", "user_id": 1, "username": "alice"})
    assert response.status_code == 200
    assert response.json()["reply"] == "✅ Learned: 'foo' → 'Bar'"

    response = client.post("/chat", json={"message": "FOO", "user_id": 2})
    assert response.status_code == 200
    assert response.json() == {"reply": "Bar", "parse_mode": None}


def test_chat_unknown_question(client):
    response = client.post("/chat", json={"message": "what now?"})

    data = response.json()
    assert data["parse_mode"] == "HTML"
    assert data["reply"].startswith("I don't know the answer to that.")


def test_chat_blank_message(client):
    response = client.post("/chat", json={"message": "   "})
    assert response.status_code == 200
    assert response.json()["reply"] is None


def test_chat_rejects_oversized_message(client):
    response = client.post("/chat", json={"message": "x" * 5000})
    assert response.status_code == 422


def test_stats(client):
    client.post("/chat", json={"message": "!teach foo | bar", "user_id": 1})
    client.post("/chat", json={"message": "foo", "user_id": 1})
    client.post("/chat", json={"message": "foo", "user_id": 1})

    response = client.get("/stats")

    assert response.status_code == 200
    assert response.json() == {
        "entry_count": 1,
        "interaction_count": 3,
        "top_questions": [{"question": "foo", "usage_count": 2}],
    }


def test_stats_unavailable(client, context):
    with patch.object(context.store, "count_entries", side_effect=PersistenceError("locked")):
        response = client.get("/stats")
    assert response.status_code == 503


def test_app_builds_its_own_context(settings, monkeypatch):
    monkeypatch.setenv("DB_PATH", settings.db_path)
    monkeypatch.setenv("LOG_FILE", "")

    with TestClient(create_app()) as client:
        response = client.post("/chat", json={"message": "!teach ping | pong"})
        assert response.json()["reply"] == "✅ Learned: 'ping' → 'pong'"
        assert client.get("/health").json()["entry_count"] == 1
