# ==============================================================================
# Shared Test Fixtures
# ==============================================================================
"""
Pytest fixtures shared across all test modules.

Provides:
- FakeTransport: scripted collector responses, records every request
- FakeBeacon: records unload-safe sends, can be told to reject them
- In-memory storage and a static page environment
- fakeredis-backed ValkeyStorage
- A factory for fully wired SessionClient instances

Async scenarios run with asyncio.run() inside plain test functions.
"""

from typing import Any

import fakeredis
import pytest

from pagepulse.base import BeaconSender, Transport
from pagepulse.client import SessionClient
from pagepulse.core.models import PageElement, PageInfo
from pagepulse.exceptions import TransportError
from pagepulse.infrastructure.environment import StaticPageEnvironment
from pagepulse.infrastructure.storage import MemoryStorage, ValkeyStorage
from pagepulse.utils.config import RuntimeConfig

API_BASE_URL = "http://collector.test/api/v1"
PROJECT_ID = "project-1"


class FakeTransport(Transport):
    """Transport returning scripted responses per (method, path prefix).

    A response may be a value, an Exception instance (raised), or a callable
    taking (method, url, payload).
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, Any]] = []
        self.responses: dict[str, Any] = {
            "session/create": {"sessionId": "s1"},
            "session/update": {"ok": True},
            "session/end": {"ok": True},
            "events/log": {"success": True},
        }
        self.closed = False

    async def send(self, method: str, url: str, payload: Any) -> Any:
        self.calls.append((method, url, payload))
        path = url[len(API_BASE_URL) + 1 :]
        for prefix, response in self.responses.items():
            if path.startswith(prefix):
                if isinstance(response, Exception):
                    raise response
                if callable(response):
                    return response(method, url, payload)
                return response
        raise TransportError(f"no scripted response for {url}")

    def close(self) -> None:
        self.closed = True

    def calls_to(self, prefix: str) -> list[tuple[str, str, Any]]:
        return [c for c in self.calls if c[1][len(API_BASE_URL) + 1 :].startswith(prefix)]


class FakeBeacon(BeaconSender):
    """Records beacon sends."""

    def __init__(self, accept: bool = True) -> None:
        self.accept = accept
        self.sent: list[tuple[str, Any]] = []

    def send(self, url: str, payload: Any) -> bool:
        self.sent.append((url, payload))
        return self.accept


def make_config(**overrides) -> RuntimeConfig:
    values = {
        "api_base_url": API_BASE_URL,
        "project_id": PROJECT_ID,
        "activity_timeout_seconds": 60.0,
        "batch_size": 10,
        "batch_interval_seconds": 60.0,
        "development": True,
    }
    values.update(overrides)
    return RuntimeConfig(**values)


def button(**kwargs) -> PageElement:
    return PageElement(tag_name="button", **kwargs)


@pytest.fixture()
def transport():
    return FakeTransport()


@pytest.fixture()
def beacon():
    return FakeBeacon()


@pytest.fixture()
def storage():
    return MemoryStorage()


@pytest.fixture()
def page():
    return PageInfo(
        hostname="localhost",
        path="/pricing",
        title="Pricing",
        referrer="",
        user_agent="pytest-agent",
    )


@pytest.fixture()
def environment(page, beacon):
    return StaticPageEnvironment(page, beacon=beacon)


@pytest.fixture()
def make_client(environment, storage, transport):
    """Factory for SessionClient instances wired to the fakes."""

    def _make(**config_overrides) -> SessionClient:
        return SessionClient(make_config(**config_overrides), environment, storage, transport)

    return _make


@pytest.fixture()
def fake_redis():
    """A clean fakeredis instance for each test."""
    server = fakeredis.FakeServer()
    client = fakeredis.FakeRedis(server=server, decode_responses=True)
    yield client
    client.flushall()
    client.close()


@pytest.fixture()
def valkey_storage(fake_redis):
    """A ValkeyStorage with its internal client replaced by fakeredis."""
    store = ValkeyStorage.__new__(ValkeyStorage)
    store._client = fake_redis
    store._url = "redis://fake:6379"
    store._prefix = "pagepulse:"
    return store
