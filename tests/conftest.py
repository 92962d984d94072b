"""Pytest fixtures for sharecard tests."""

import io
import json
from typing import Any, Dict, List, Optional, Tuple

import aiohttp
import pytest
from PIL import Image


class FakeResponse:
    """Stand-in for an aiohttp response used as `async with session.get(...)`."""

    def __init__(self, body: bytes = b"", error: Optional[Exception] = None):
        self.body = body
        self.error = error

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    def raise_for_status(self) -> None:
        if self.error is not None:
            raise self.error

    async def json(self, content_type: Optional[str] = "application/json") -> Any:
        return json.loads(self.body.decode("utf-8"))

    async def read(self) -> bytes:
        return self.body


class FakeSession:
    """Serves canned responses by URL and records every request."""

    def __init__(self, routes: Dict[str, FakeResponse]):
        self.routes = routes
        self.calls: List[Tuple[str, Optional[Dict[str, str]]]] = []

    def get(self, url: str, params: Optional[Dict[str, str]] = None) -> FakeResponse:
        self.calls.append((url, params))
        if url not in self.routes:
            return FakeResponse(error=aiohttp.ClientConnectionError(f"no route for {url}"))
        return self.routes[url]


@pytest.fixture
def image_bytes():
    """Encode a solid-colour image as PNG bytes."""

    def _make(size=(40, 30), color=(0, 0, 255, 255)) -> bytes:
        buffer = io.BytesIO()
        Image.new("RGBA", size, color).save(buffer, format="PNG")
        return buffer.getvalue()

    return _make


@pytest.fixture
def blog_session(image_bytes):
    """Build a FakeSession serving one blog post and its images."""

    def _make(post: Dict[str, Any], images: Optional[Dict[str, bytes]] = None) -> FakeSession:
        routes = {
            "http://blog.test/api/blog": FakeResponse(json.dumps(post).encode("utf-8")),
        }
        for url, body in (images or {}).items():
            routes[url] = FakeResponse(body)
        return FakeSession(routes)

    return _make


@pytest.fixture
def sink():
    """In-memory sink for encoded output."""
    return io.BytesIO()
