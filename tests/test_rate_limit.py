"""
HTTP tests for the per-IP request limits.
"""

import pytest

from app.core.rate_limit import limiter

LOGOUT = "/api/v1/auth/logout"
CHAT = "/api/v1/chat"
MESSAGES = [{"role": "user", "content": "Hello"}]


@pytest.fixture
def chat_upstream():
    import httpx

    from app.api.v1.endpoints.chat import get_chat_client
    from app.core.chat import ChatClient
    from app.main import app

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"id": "msg_01", "model": "claude-test", "content": [{"type": "text", "text": "Hi."}]},
        )

    client = ChatClient(api_key="test-key", model="claude-test", transport=httpx.MockTransport(handler))
    app.dependency_overrides[get_chat_client] = lambda: client


def test_api_limit_is_100_per_window(client):
    for _ in range(100):
        assert client.post(LOGOUT).status_code == 200

    response = client.post(LOGOUT)
    assert response.status_code == 429
    assert response.json() == {
        "error": "Rate limit exceeded",
        "message": "Too many requests from this IP, please try again later.",
    }
    assert "X-Request-ID" in response.headers


def test_api_limit_is_shared_across_routes(client):
    for _ in range(50):
        client.post(LOGOUT)
    for _ in range(50):
        client.get("/api/health")

    assert client.get("/api/v1/portal/deals").status_code == 429


def test_chat_limit_is_10_per_minute(client, chat_upstream):
    for _ in range(10):
        assert client.post(CHAT, json={"messages": MESSAGES}).status_code == 200

    response = client.post(CHAT, json={"messages": MESSAGES})
    assert response.status_code == 429
    assert response.json() == {
        "error": "Rate limit exceeded",
        "message": "Too many chat messages, please slow down.",
    }

    # The chat limit does not spend the general API allowance
    assert client.post(LOGOUT).status_code == 200


def test_root_is_not_limited(client):
    for _ in range(105):
        assert client.get("/").status_code == 200


def test_reset_clears_counters(client):
    for _ in range(100):
        client.post(LOGOUT)
    assert client.post(LOGOUT).status_code == 429

    limiter.reset()

    assert client.post(LOGOUT).status_code == 200
