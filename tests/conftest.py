"""Pytest configuration and fixtures.

This module sets up pytest configuration including:
- Clearing provider API key variables so tests never pick up real secrets
- An httpx client factory backed by MockTransport
"""

from typing import Callable, List

import httpx
import pytest

API_KEY_VARS = ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GEMINI_API_KEY")
LLMX_VARS = ("LLMX_PROFILE", "LLMX_CONFIG", "LLMX_TIMEOUT")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove API keys and llmx settings inherited from the developer's shell."""
    for name in API_KEY_VARS + LLMX_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_client_factory() -> Callable[..., httpx.Client]:
    """Build an httpx.Client whose transport returns a canned response.

    The returned client has a `sent` list attribute collecting every request.
    """

    def factory(status_code: int = 200, content: bytes = b"{}", error: Exception = None):
        sent: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            sent.append(request)
            if error is not None:
                raise error
            return httpx.Response(status_code, content=content)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        client.sent = sent
        return client

    return factory
