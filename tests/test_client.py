# ==============================================================================
# Tests for SessionClient
# ==============================================================================
"""
End-to-end scenarios through a fully wired SessionClient, plus construction
and teardown behavior.
"""

import asyncio
import re

import pytest

from conftest import API_BASE_URL, FakeTransport, button, make_config
from pagepulse.client import SessionClient
from pagepulse.exceptions import ConfigurationError
from pagepulse.infrastructure.environment import StaticPageEnvironment
from pagepulse.infrastructure.storage import MemoryStorage
from pagepulse.utils.config import Settings, StorageSettings, TrackerSettings

# ==============================================================================
# Scenarios
# ==============================================================================


class TestFreshVisitorScenario:
    """Load -> create session -> 10 clicks -> automatic batch."""

    def test_full_batch_flushes_automatically(self, make_client, transport, storage):
        client = make_client()

        async def scenario():
            async with client:
                await client.dispatch("load")
                events = [client.bridge.on_click(button(id=f"b{n}")) for n in range(10)]
                await client.wait_idle()
                remaining = len(client.batcher)
                client.activity.cancel()
                return events, remaining

        events, remaining = asyncio.run(scenario())

        (_, _, create_payload), = transport.calls_to("session/create")
        assert re.match(r"^visitor-[a-z0-9]{9}$", create_payload["visitorId"])
        assert storage.get("visitorId") == create_payload["visitorId"]

        assert all(e.session_id == "s1" for e in events)
        assert events[0].to_payload()["session"] == "s1"

        (method, url, payload), = transport.calls_to("events/log")
        assert (method, url) == ("POST", f"{API_BASE_URL}/events/log")
        assert len(payload["events"]) == 10
        assert [e["eventTarget"] for e in payload["events"]] == [f"b{n}" for n in range(10)]
        assert remaining == 0


class TestUnloadScenario:
    """Unload with queued events sends exactly one end-of-session request."""

    def test_residual_events_travel_with_end(self, make_client, transport, beacon):
        transport.responses["session/create"] = {"sessionId": "s2"}
        client = make_client()

        async def scenario():
            async with client:
                await client.dispatch("load")
                for n in range(3):
                    client.dispatch("click", button(id=f"b{n}"))
                client.dispatch("beforeunload")
                return client.session_id, len(client.batcher)

        assert asyncio.run(scenario()) == (None, 0)
        (url, payload), = beacon.sent
        assert url == f"{API_BASE_URL}/session/end/s2"
        assert len(payload["events"]) == 3
        assert transport.calls_to("events/log") == []

    def test_unload_without_beacon_uses_request(self, storage, transport, page):
        transport.responses["session/create"] = {"sessionId": "s2"}
        environment = StaticPageEnvironment(page)
        client = SessionClient(make_config(), environment, storage, transport)

        async def scenario():
            async with client:
                await client.dispatch("load")
                client.dispatch("click", button())
                client.dispatch("beforeunload")
                return client.session_id

        assert asyncio.run(scenario()) is None
        (method, _, payload), = transport.calls_to("session/end/s2")
        assert method == "POST"
        assert len(payload["events"]) == 1

    def test_unload_during_flush_sends_each_event_once(self, make_client, transport, beacon):
        client = make_client(batch_size=2)
        send = transport.send

        async def scenario():
            gate = asyncio.Event()

            async def held_log(method, url, payload):
                if not url.endswith("/events/log"):
                    return await send(method, url, payload)
                transport.calls.append((method, url, payload))
                await gate.wait()
                return {"success": True}

            transport.send = held_log
            async with client:
                await client.dispatch("load")
                client.dispatch("click", button(id="a"))
                client.dispatch("click", button(id="b"))
                await asyncio.sleep(0)  # size-triggered flush waits on the collector
                client.dispatch("click", button(id="c"))
                client.dispatch("beforeunload")
                gate.set()
            return len(client.batcher)

        assert asyncio.run(scenario()) == 0
        (_, _, logged), = transport.calls_to("events/log")
        (_, ended), = beacon.sent
        assert [e["eventTarget"] for e in logged["events"]] == ["a", "b"]
        assert [e["eventTarget"] for e in ended["events"]] == ["c"]


class TestPeriodicFlush:
    def test_interval_flushes_partial_batch(self, make_client, transport):
        client = make_client(batch_interval_seconds=0.02)

        async def scenario():
            async with client:
                await client.dispatch("load")
                client.dispatch("click", button())
                await asyncio.sleep(0.08)
                client.activity.cancel()
                return len(client.batcher)

        assert asyncio.run(scenario()) == 0
        (_, _, payload), = transport.calls_to("events/log")
        assert len(payload["events"]) == 1

    def test_failed_flush_keeps_events_for_next_tick(self, make_client, transport):
        transport.responses["events/log"] = {"success": False}
        client = make_client(batch_interval_seconds=0.02)

        async def scenario():
            async with client:
                await client.dispatch("load")
                client.dispatch("click", button())
                await asyncio.sleep(0.07)
                client.activity.cancel()
                return len(client.batcher)

        assert asyncio.run(scenario()) == 1
        assert len(transport.calls_to("events/log")) >= 2


# ==============================================================================
# Construction and teardown
# ==============================================================================


class TestFromSettings:
    def _settings(self, **tracker) -> Settings:
        return Settings(
            tracker=TrackerSettings(**tracker),
            storage=StorageSettings(backend="memory"),
        )

    def test_missing_project_is_fatal(self, page):
        with pytest.raises(ConfigurationError, match="No project-id specified"):
            SessionClient.from_settings(
                StaticPageEnvironment(page),
                settings=self._settings(),
                transport=FakeTransport(),
            )

    def test_development_defaults(self, page):
        client = SessionClient.from_settings(
            StaticPageEnvironment(page),
            settings=self._settings(project_id="p1"),
            transport=FakeTransport(),
        )
        assert client.config.development is True
        assert client.config.api_base_url == "http://localhost:3000/api/v1"
        assert client.config.activity_timeout_seconds == 300
        assert isinstance(client.visitor._storage, MemoryStorage)

    def test_production_defaults(self, page):
        environment = StaticPageEnvironment(page.model_copy(update={"hostname": "shop.example.com"}))
        client = SessionClient.from_settings(
            environment,
            settings=self._settings(project_id="p1"),
            transport=FakeTransport(),
        )
        assert client.config.development is False
        assert client.config.api_base_url == "https://analytics.jscloud.in/api/v1"
        assert client.config.activity_timeout_seconds == 900

    def test_default_transport(self, page):
        from pagepulse.infrastructure.transport import RequestsTransport

        client = SessionClient.from_settings(
            StaticPageEnvironment(page), settings=self._settings(project_id="p1")
        )
        assert isinstance(client._transport, RequestsTransport)


class TestClose:
    def test_close_stops_timers_and_transport(self, make_client, transport):
        client = make_client()

        async def scenario():
            client.start()
            await client.dispatch("load")
            await client.close()
            return client.activity.pending, client.batcher._tick_task

        assert asyncio.run(scenario()) == (False, None)
        assert transport.closed is True

    def test_close_waits_for_in_flight_requests(self, make_client, transport, beacon):
        beacon.accept = False
        client = make_client()

        async def scenario():
            async with client:
                await client.dispatch("load")
                client.dispatch("beforeunload")

        asyncio.run(scenario())
        assert len(transport.calls_to("session/end/s1")) == 1

    def test_close_does_not_end_session(self, make_client, beacon):
        client = make_client()

        async def scenario():
            async with client:
                await client.dispatch("load")
            return client.session_id

        assert asyncio.run(scenario()) == "s1"
        assert beacon.sent == []

    def test_start_is_idempotent(self, make_client):
        client = make_client()

        async def scenario():
            client.start()
            task = client.batcher._tick_task
            client.start()
            same = client.batcher._tick_task is task
            await client.close()
            return same

        assert asyncio.run(scenario()) is True
