"""
Tests for request id and request logging middleware.
"""

import pytest
from httpx import AsyncClient

import blog_cms.api.middleware.logging as logging_middleware
from blog_cms.api.middleware.request_id import REQUEST_ID_HEADER, get_request_id


class RecordingLogger:
    """Stands in for the structlog logger and notes the active request id."""

    def __init__(self):
        self.events: list[tuple[str, str]] = []

    def info(self, event: str, **kwargs) -> None:
        self.events.append((event, get_request_id()))


@pytest.mark.asyncio
async def test_request_logs_carry_request_id(client: AsyncClient, monkeypatch):
    recorder = RecordingLogger()
    monkeypatch.setattr(logging_middleware, "logger", recorder)

    response = await client.get("/api/blog/tags", headers={REQUEST_ID_HEADER: "req-123"})

    assert response.status_code == 200
    assert response.headers[REQUEST_ID_HEADER] == "req-123"
    assert recorder.events == [
        ("Request started", "req-123"),
        ("Request completed", "req-123"),
    ]


@pytest.mark.asyncio
async def test_request_id_is_minted_when_missing(client: AsyncClient):
    response = await client.get("/api/blog/tags")

    assert len(response.headers[REQUEST_ID_HEADER]) == 32
