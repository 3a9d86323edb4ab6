"""Pytest fixtures for Render tools tests."""

import json
import os
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from cryptography.fernet import Fernet
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

# Settings are read at import time by the server module
os.environ.setdefault("RENDER_API_KEY", "rnd_test_key")
os.environ.setdefault("SECRET_ENCRYPTION_KEY", Fernet.generate_key().decode())
os.environ.setdefault("LOG_LEVEL", "DEBUG")


@pytest.fixture(autouse=True)
def reset_settings():
    """Reset settings before each test."""
    from config import reload_settings
    reload_settings()
    yield


class RecordingTransport:
    """httpx mock transport that records requests and replays responses.

    ``responses`` is a list of httpx.Response objects (or callables taking
    the request) returned in order; the last one repeats.
    """

    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self.responses)) - 1
        response = self.responses[index]
        if callable(response):
            return response(request)
        return response

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def json_body(self, index: int = -1):
        content = self.requests[index].content
        return json.loads(content) if content else None


@pytest.fixture
def recording_transport():
    """Factory for a RecordingTransport."""
    return RecordingTransport


@pytest.fixture
def make_client():
    """Build a RenderClient on top of a mock transport."""
    from render_tools.client import RenderClient

    def factory(transport, **kwargs):
        return RenderClient(api_key="rnd_test_key", transport=transport, **kwargs)

    return factory


@pytest.fixture
def mock_client():
    """Render client double with awaitable request/paginate."""
    client = MagicMock()
    client.request = AsyncMock(return_value={})
    client.paginate = AsyncMock(return_value=[])
    return client


@pytest.fixture
def run_tool(mock_client):
    """Execute a registered Render tool against the mock client."""
    import render_tools  # noqa: F401
    from tool_registry import get_registry

    async def runner(tool_name, /, **parameters):
        return await get_registry().execute(tool_name, parameters, mock_client)

    return runner


@pytest.fixture
def state_store():
    """Webhook state store backed by an in-memory SQLite database."""
    from database import WebhookStateStore, get_session_local, init_db

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    return WebhookStateStore(get_session_local(engine))


@pytest.fixture
def app_factory(state_store):
    """Create a FastAPI app wired to a mock Render transport."""
    from render_tools.client import RenderClient
    from server import create_app

    def factory(transport, **kwargs):
        return create_app(
            store=state_store,
            client_factory=lambda: RenderClient(api_key="rnd_test_key", transport=transport),
            **kwargs,
        )

    return factory


@pytest.fixture
def test_client():
    """Create a test client for the default FastAPI app."""
    from server import app
    return TestClient(app)
