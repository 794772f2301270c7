"""Test fixtures — an isolated app + registry per test.

Learn: create_app() builds a fresh ConnectionRegistry every time, so each
test gets its own subscriber set and nothing leaks between tests.
Subscribers are simulated with RecordingHandle, which records every frame
written to it and can be told to fail.
"""

import json
from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from relayhook.config import Settings
from relayhook.main import create_app
from relayhook.realtime.registry import ConnectionRegistry


class RecordingHandle:
    """Fake subscriber handle that keeps what was written to it."""

    def __init__(self, fail_with: Optional[Exception] = None):
        self.frames: list[str] = []
        self.write_calls = 0
        self.fail_with = fail_with
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, frame: str) -> None:
        self.write_calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        self.frames.append(frame)

    def close(self) -> None:
        self._closed = True

    def events(self) -> list[dict]:
        return [json.loads(f[len("data: "):]) for f in self.frames]


@pytest.fixture()
def handle_factory():
    """Build RecordingHandles: handle_factory() or handle_factory(fail_with=err)."""
    return RecordingHandle


@pytest.fixture()
def registry():
    return ConnectionRegistry()


@pytest.fixture()
def settings():
    return Settings(
        port=3001,
        environment="test",
        log_level="WARNING",
        outbound_webhook_url="",
        heartbeat_seconds=15.0,
    )


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest_asyncio.fixture()
async def client(app):
    """HTTP client talking to the app in-process."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
