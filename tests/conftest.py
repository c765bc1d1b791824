from __future__ import annotations

import json
import os
from types import SimpleNamespace
from typing import Any

os.environ.setdefault("ENV", "test")

import httpx  # noqa: E402
import pytest  # noqa: E402

from authbridge.core.config import settings  # noqa: E402

settings.ENV = "test"  # type: ignore[attr-defined]


class StubProvider:
    """In-process identity provider served through httpx.MockTransport.

    Routes are keyed by method and URL without query string. Every request
    is recorded so tests can assert on call counts and headers.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], tuple[int, str]] = {}
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self.handle)

    def add(self, method: str, url: str, status: int = 200, json_body: Any = None, text: str = "") -> None:
        body = json.dumps(json_body) if json_body is not None else text
        self.routes[(method.upper(), url)] = (status, body)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, f"{request.url.scheme}://{request.url.host}{request.url.path}")
        if key not in self.routes:
            raise AssertionError(f"Unexpected provider call: {key}")
        status, body = self.routes[key]
        return httpx.Response(status, text=body)

    def calls_to(self, url: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if f"{r.url.scheme}://{r.url.host}{r.url.path}" == url
        ]


@pytest.fixture
def stub_provider() -> StubProvider:
    return StubProvider()


@pytest.fixture
def oauth_credentials(monkeypatch):
    """Configure credentials for every supported provider."""
    values = {
        "GOOGLE_CLIENT_ID": "google-id",
        "GOOGLE_CLIENT_SECRET": "google-secret",
        "GITHUB_CLIENT_ID": "github-id",
        "GITHUB_CLIENT_SECRET": "github-secret",
    }
    for key, value in values.items():
        monkeypatch.setattr(settings, key, value)
    return SimpleNamespace(**values)


@pytest.fixture
def no_oauth_credentials(monkeypatch):
    for key in ("GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET", "GITHUB_CLIENT_ID", "GITHUB_CLIENT_SECRET"):
        monkeypatch.setattr(settings, key, None)
