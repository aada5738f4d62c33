"""Pytest fixtures for pwnedcheck tests."""

import os

import httpx
import pytest

from pwnedcheck.clients.pwned_passwords import ClientConfig
from pwnedcheck.config import reset_settings


@pytest.fixture(autouse=True)
def reset_global_settings(monkeypatch):
    """Reset cached settings and isolate from PWNEDCHECK_* variables."""
    for name in list(os.environ):
        if name.startswith("PWNEDCHECK_"):
            monkeypatch.delenv(name)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def config() -> ClientConfig:
    """Client config with a test user agent."""
    return ClientConfig(user_agent="pwnedcheck tests")


class RangeServer:
    """Scripted stand-in for the range endpoint.

    Serves queued responses in order, repeating the last one, and
    records every request it receives.
    """

    def __init__(self, *responses: httpx.Response) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        template = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        # Fresh copy per request; a served response cannot be streamed twice
        return httpx.Response(
            template.status_code,
            headers=template.headers,
            content=template.content,
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def range_server():
    """Factory for scripted range servers."""
    return RangeServer
