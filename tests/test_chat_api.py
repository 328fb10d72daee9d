"""
HTTP tests for the AI chat proxy, with the upstream API mocked by httpx.
"""

import json

import httpx
import pytest

from app.api.v1.endpoints.chat import get_chat_client
from app.core.chat import ChatClient
from app.main import app

CHAT = "/api/v1/chat"
MESSAGES = [{"role": "user", "content": "What does Endevera invest in?"}]


@pytest.fixture
def upstream():
    """Install a mocked upstream; returns the list of captured requests."""
    captured = []

    def _install(status_code=200, payload=None, api_key="test-key"):
        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            body = payload if payload is not None else {
                "id": "msg_01",
                "model": "claude-test",
                "content": [{"type": "text", "text": "Broadband infrastructure."}],
            }
            return httpx.Response(status_code, json=body)

        client = ChatClient(
            api_key=api_key,
            model="claude-test",
            transport=httpx.MockTransport(handler),
        )
        app.dependency_overrides[get_chat_client] = lambda: client
        return captured

    return _install


def test_chat_reply(client, upstream):
    captured = upstream()

    response = client.post(CHAT, json={"messages": MESSAGES, "context": {"page": "/invest"}})

    assert response.status_code == 200
    assert response.json() == {
        "message": "Broadband infrastructure.",
        "id": "msg_01",
        "model": "claude-test",
    }

    sent = captured[0]
    assert sent.url.path == "/v1/messages"
    assert sent.headers["x-api-key"] == "test-key"
    assert sent.headers["anthropic-version"] == "2023-06-01"
    body = json.loads(sent.content)
    assert body["messages"] == MESSAGES
    assert "User is on page: /invest" in body["system"]
    assert "User authenticated: No" in body["system"]


def test_chat_knows_about_signed_in_users(client, upstream, bearer):
    captured = upstream()

    client.post(CHAT, json={"messages": MESSAGES}, headers=bearer(3))

    assert "User authenticated: Yes" in json.loads(captured[0].content)["system"]


def test_chat_ignores_bad_token(client, upstream):
    captured = upstream()

    response = client.post(CHAT, json={"messages": MESSAGES}, headers={"Authorization": "Bearer junk"})

    assert response.status_code == 200
    assert "User authenticated: No" in json.loads(captured[0].content)["system"]


def test_chat_requires_messages(client, upstream):
    captured = upstream()

    response = client.post(CHAT, json={"messages": []})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"
    assert captured == []


def test_chat_unconfigured(client, upstream):
    upstream(api_key=None)

    response = client.post(CHAT, json={"messages": MESSAGES})

    assert response.status_code == 503


@pytest.mark.parametrize(
    "upstream_status, status, error",
    [
        (429, 429, "Rate limit exceeded"),
        (401, 500, "Configuration error"),
        (500, 502, "Chat service error"),
    ],
)
def test_chat_upstream_failures(client, upstream, upstream_status, status, error):
    upstream(status_code=upstream_status, payload={"error": {"type": "oops"}})

    response = client.post(CHAT, json={"messages": MESSAGES})

    assert response.status_code == status
    assert response.json()["error"] == error


def test_chat_health(client, upstream):
    upstream()
    assert client.get(f"{CHAT}/health").json()["status"] == "healthy"

    upstream(status_code=500, payload={})
    assert client.get(f"{CHAT}/health").json()["status"] == "unhealthy"

    upstream(api_key=None)
    assert client.get(f"{CHAT}/health").json()["status"] == "unconfigured"
