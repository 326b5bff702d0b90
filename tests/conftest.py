"""Shared fixtures for the test suite."""

from __future__ import annotations

from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from app.config import settings
from app.main import app
from app.webhooks import get_client

HOOK_BASE = "http://hooks.test/webhook"
SOURCES = {
    "sales": "sales_webhook_url",
    "appointments": "appointments_webhook_url",
    "evaluations": "evaluations_webhook_url",
    "goals": "goals_read_webhook_url",
    "goals-write": "goals_write_webhook_url",
}


# ---------------------------------------------------------------------------
# Fake webhooks (no real n8n needed)
# ---------------------------------------------------------------------------

class FakeWebhooks:
    """httpx.MockTransport handler keyed by the last URL path segment."""

    def __init__(self):
        self.replies: dict[str, httpx.Response | Exception] = {}
        self.requests: list[httpx.Request] = []

    def json(self, source: str, payload: Any, status_code: int = 200) -> None:
        self.replies[source] = httpx.Response(status_code, json=payload)

    def text(self, source: str, body: str, status_code: int = 200) -> None:
        self.replies[source] = httpx.Response(status_code, text=body)

    def fail(self, source: str, exc: Exception | None = None) -> None:
        self.replies[source] = exc or httpx.ConnectError("connection refused")

    def requests_to(self, source: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.rsplit("/", 1)[-1] == source]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.replies.get(request.url.path.rsplit("/", 1)[-1])
        if reply is None:
            return httpx.Response(404, json={"message": "webhook not registered"})
        if isinstance(reply, Exception):
            raise reply
        return reply


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def webhooks(monkeypatch):
    """Point every webhook setting at the fake transport."""
    for source, attr in SOURCES.items():
        monkeypatch.setattr(settings, attr, f"{HOOK_BASE}/{source}")
    return FakeWebhooks()


@pytest.fixture()
async def webhook_client(webhooks):
    async with httpx.AsyncClient(transport=httpx.MockTransport(webhooks.handler)) as hc:
        yield hc


@pytest.fixture()
def override_client(webhook_client):
    """Override the FastAPI dependency so no real webhook is called."""
    async def _override():
        yield webhook_client

    app.dependency_overrides[get_client] = _override
    yield webhook_client
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(override_client):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def make_goal_row(month: int, year: int = 2024, **overrides: Any) -> dict[str, Any]:
    """Helper to build a remote goals-webhook row (Portuguese field names)."""
    row = {
        "mes": month,
        "ano": year,
        "meta_mensal": 10000,
        "meta_ticket": 500,
        "meta_agendamentos": 40,
        "meta_avaliacoes": 10,
        "meta_quantidade_vendas": 20,
    }
    row.update(overrides)
    return row
