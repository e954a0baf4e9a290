"""
HTTP tests for POST /api/chat using FastAPI's TestClient with the chat
service swapped out through dependency_overrides.
"""

import pytest
from fastapi.testclient import TestClient

from chat_service import ChatResult, ChatService
from main import app, get_chat_service

from conftest import RecordingGateway, REPORT_ID


class StubService:
    def __init__(self, result=None, error=None):
        self.result = result or ChatResult("Hello!", "GENERAL_INTENT", [])
        self.error = error
        self.calls = []
        self.gateway = RecordingGateway()

    def chat(self, report_id, message, history=None):
        self.calls.append((report_id, message, history))
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def _use(service):
    app.dependency_overrides[get_chat_service] = lambda: service
    return service


class TestChatEndpoint:

    def test_success(self, client):
        service = _use(StubService(ChatResult("Fix your images.", "REPORT_INTENT", ["performance"])))
        resp = client.post("/api/chat", json={
            "reportId": REPORT_ID,
            "message": "  Why is my score low?  ",
            "history": [{"role": "user", "text": "hi"}, {"role": "assistant", "text": "hello"}],
        })

        assert resp.status_code == 200
        assert resp.json() == {
            "success": True,
            "reply": "Fix your images.",
            "intent": "REPORT_INTENT",
            "sources": ["performance"],
        }
        report_id, message, history = service.calls[0]
        assert report_id == REPORT_ID
        assert message == "Why is my score low?"
        assert [h["role"] for h in history] == ["user", "assistant"]
        assert history[1]["text"] == "hello"

    @pytest.mark.parametrize("body", [{}, {"message": ""}, {"message": "   "}, {"message": None}])
    def test_message_required(self, client, body):
        service = _use(StubService())
        resp = client.post("/api/chat", json=body)

        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Message is required"}
        assert service.calls == []

    def test_no_body(self, client):
        service = _use(StubService())
        resp = client.post("/api/chat")

        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Message is required"}
        assert service.calls == []

    @pytest.mark.parametrize("message", [123, ["hi"], {"text": "hi"}])
    def test_non_string_message(self, client, message):
        _use(StubService())
        resp = client.post("/api/chat", json={"message": message})

        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Message is required"}

    def test_malformed_history(self, client):
        _use(StubService())
        resp = client.post("/api/chat", json={"message": "hii", "history": "not a list"})

        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Invalid request body"}

    def test_service_construction_failure(self):
        def broken_factory():
            raise ValueError("Unsupported PROVIDER='openai'")

        app.dependency_overrides[get_chat_service] = broken_factory
        try:
            # the handler still answers; the client only re-raises it for debugging
            client = TestClient(app, raise_server_exceptions=False)
            resp = client.post("/api/chat", json={"message": "hii"})
        finally:
            app.dependency_overrides.clear()

        assert resp.status_code == 500
        assert resp.headers["content-type"].startswith("application/json")
        assert resp.json() == {"success": False, "error": "Unsupported PROVIDER='openai'"}

    def test_unhandled_error(self, client):
        _use(StubService(error=RuntimeError("boom")))
        resp = client.post("/api/chat", json={"message": "hii"})

        assert resp.status_code == 500
        assert resp.json() == {"success": False, "error": "boom"}

    def test_defaults_without_report_or_history(self, client):
        service = _use(StubService())
        client.post("/api/chat", json={"message": "hii"})
        assert service.calls[0] == (None, "hii", [])

    def test_end_to_end_with_real_service(self, client, store):
        gateway = RecordingGateway(reply="Your LCP is 4.6s.")
        _use(ChatService(gateway, store))
        resp = client.post("/api/chat", json={"reportId": REPORT_ID, "message": "Is my LCP slow?"})

        data = resp.json()
        assert data["success"] is True
        assert data["intent"] == "REPORT_INTENT"
        assert data["sources"] == ["performance"]
        assert "LCP (Largest Contentful Paint): 4.6s" in gateway.calls[0]["prompt"]


class TestHealth:

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_llm_health(self, client):
        _use(StubService())
        assert client.get("/health/llm").json() == {
            "provider": "gemini",
            "model": "test-model",
            "configured": True,
        }
