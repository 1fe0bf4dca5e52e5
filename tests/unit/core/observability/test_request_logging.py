"""Tests for the HTTP request logging middleware."""

import logging

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from core.observability import format_query, register_http_request_logging


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


def test_format_query_redacts_sensitive_values():
    redacted = format_query("password=hunter2&ttl_value=5&token=abcdefghijklmnopqrstuvwxyz")

    assert "hunter2" not in redacted
    assert "password=%2A%2A%2A" in redacted
    assert "ttl_value=5" in redacted
    assert "token=abcdefghijkl%2A%2A%2A" in redacted


def test_format_query_passthrough():
    assert format_query("") == "<none>"
    assert format_query("ttl_unit=minutes") == "ttl_unit=minutes"


@pytest.mark.anyio
async def test_middleware_logs_request_and_leaves_body_for_handler(caplog):
    app = FastAPI()
    register_http_request_logging(app)

    @app.post("/echo")
    async def echo(request: Request) -> dict[str, int]:
        received = 0
        async for chunk in request.stream():
            received += len(chunk)
        return {"received": received}

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy"}

    caplog.set_level(logging.INFO, logger="core.http")
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/echo", content=b"x" * 4096)
        health = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"received": 4096}
    assert health.status_code == 200

    messages = [record.getMessage() for record in caplog.records if record.name == "core.http"]
    assert any("HTTP POST /echo" in message for message in messages)
    assert not any("/health" in message for message in messages)
