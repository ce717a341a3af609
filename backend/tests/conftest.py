"""
Shared test fixtures and configuration for pytest.

This module provides common fixtures used across all test modules,
including settings, a recording upstream stub and the API client.

- Settings fixtures (every credential set, built without reading .env)
- Upstream fixtures (httpx.MockTransport, no real network access)
- API client fixtures (dependency overrides route upstream calls to the stub)
"""
import os

import pytest
from fastapi.testclient import TestClient

# Set required environment variables for tests
# The process-wide settings are read on import; tests build their own Settings objects
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEEPSEEK_API_KEY", "test-deepseek-key")

from researchproxy.dependencies import get_aggregator, get_completion_proxy
from researchproxy.llm.streaming import CompletionProxy
from researchproxy.main import create_app
from researchproxy.search.aggregator import SearchAggregator

from .factories import UpstreamStub, build_settings


@pytest.fixture
def app_settings():
    """Settings with every provider and backend configured."""
    return build_settings()


@pytest.fixture
def upstream():
    """
    Recording upstream stub.

    Register responses with ``upstream.add(method, url, json_body)`` and pass
    ``upstream.client()`` to anything that makes HTTP calls.
    """
    return UpstreamStub()


@pytest.fixture
def make_client(upstream):
    """
    Factory for test clients built from specific settings.

    The returned client has its search and completion dependencies wired to
    the upstream stub, and runs the application lifespan.
    """
    clients = []

    def _make(app_settings=None, raise_server_exceptions=True):
        app_settings = app_settings or build_settings()
        app = create_app(app_settings)
        http_client = upstream.client()
        app.dependency_overrides[get_aggregator] = lambda: SearchAggregator(app_settings, client=http_client)
        app.dependency_overrides[get_completion_proxy] = lambda: CompletionProxy(app_settings, client=http_client)

        test_client = TestClient(app, raise_server_exceptions=raise_server_exceptions)
        test_client.__enter__()
        clients.append(test_client)
        return test_client

    yield _make

    for test_client in clients:
        test_client.app.dependency_overrides.clear()
        test_client.__exit__(None, None, None)


@pytest.fixture
def client(make_client, app_settings):
    """Create a test client with every provider configured."""
    return make_client(app_settings)
