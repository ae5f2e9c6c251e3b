# ==============================================================================
# Session Client
# ==============================================================================
"""
One telemetry client per page context.

SessionClient owns every piece of mutable state (event queue, session,
activity timer, background tasks) and wires the core components together:

    PageLifecycleBridge -> SessionManager -> DeliveryClient
                        -> EventBatcher   -> DeliveryClient
    ActivityMonitor --timeout--> SessionManager.end_session

Lifecycle:
    client = SessionClient.from_settings(environment, settings)
    client.start()                      # inside a running event loop
    client.dispatch("load")
    client.dispatch("click", element)
    client.dispatch("beforeunload")
    await client.close()

or, equivalently, ``async with SessionClient(...) as client: ...``.
"""

import asyncio
import logging
from typing import Any, Optional

from pagepulse.base import KeyValueStorage, PageEnvironment, Transport
from pagepulse.core.activity import ActivityMonitor
from pagepulse.core.batcher import EventBatcher
from pagepulse.core.delivery import DeliveryClient
from pagepulse.core.lifecycle import PageLifecycleBridge
from pagepulse.core.session_manager import SessionManager
from pagepulse.core.visitor import VisitorIdentity
from pagepulse.utils.config import RuntimeConfig, Settings, get_settings
from pagepulse.utils.tasks import BackgroundTasks

logger = logging.getLogger(__name__)


class SessionClient:
    """
    Session telemetry client for a single page context.

    Args:
        config: Resolved runtime configuration
        environment: Page information and unload-safe sender provider
        storage: Durable storage for the visitor id
        transport: Transport for collector requests
    """

    def __init__(
        self,
        config: RuntimeConfig,
        environment: PageEnvironment,
        storage: KeyValueStorage,
        transport: Transport,
    ) -> None:
        self.config = config
        self.environment = environment
        self._transport = transport
        self._tasks = BackgroundTasks()
        self._started = False

        self.visitor = VisitorIdentity(storage)
        self.activity = ActivityMonitor(config.activity_timeout_seconds)
        self.delivery = DeliveryClient(
            api_base_url=config.api_base_url,
            transport=transport,
            tasks=self._tasks,
            beacon=environment.beacon,
            development=config.development,
        )
        self.batcher = EventBatcher(
            delivery=self.delivery,
            tasks=self._tasks,
            batch_size=config.batch_size,
            batch_interval_seconds=config.batch_interval_seconds,
        )
        self.sessions = SessionManager(
            project_id=config.project_id,
            environment=environment,
            visitor=self.visitor,
            delivery=self.delivery,
            activity=self.activity,
            batcher=self.batcher,
        )
        self.bridge = PageLifecycleBridge(
            sessions=self.sessions,
            batcher=self.batcher,
            activity=self.activity,
            visitor=self.visitor,
            project_id=config.project_id,
            tasks=self._tasks,
        )

        logger.debug("API base url %s", config.api_base_url)
        logger.debug("Project id %s", config.project_id)

    @classmethod
    def from_settings(
        cls,
        environment: PageEnvironment,
        settings: Optional[Settings] = None,
        storage: Optional[KeyValueStorage] = None,
        transport: Optional[Transport] = None,
    ) -> "SessionClient":
        """
        Build a client from application settings.

        Args:
            environment: Page environment; its hostname selects the defaults
            settings: Application settings (defaults to cached settings)
            storage: Visitor storage (defaults to the configured backend)
            transport: Collector transport (defaults to RequestsTransport)

        Raises:
            ConfigurationError: If no project id is configured
        """
        from pagepulse.infrastructure.storage import get_storage
        from pagepulse.infrastructure.transport import RequestsTransport

        settings = settings or get_settings()
        config = settings.tracker.resolve(environment.page_info().hostname)

        if storage is None:
            storage = get_storage(settings)
        if transport is None:
            transport = RequestsTransport(timeout=config.request_timeout_seconds)

        return cls(config, environment, storage, transport)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the periodic flush tick. Requires a running event loop."""
        if self._started:
            return
        self.batcher.start()
        self._started = True
        logger.debug("Initializing analytics")

    async def close(self) -> None:
        """
        Tear the client down.

        Stops the timers, then waits for requests already in flight. The
        session is not ended here; hosts dispatch "beforeunload" for that.
        """
        self.activity.cancel()
        await self.batcher.stop()
        await self._tasks.drain()
        self._transport.close()
        self._started = False

    async def __aenter__(self) -> "SessionClient":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Signals
    # ------------------------------------------------------------------

    def dispatch(self, signal: str, payload: Any = None) -> asyncio.Task | None:
        """Route a page signal; see PageLifecycleBridge.dispatch()."""
        return self.bridge.dispatch(signal, payload)

    async def wait_idle(self) -> None:
        """Wait until no background work is outstanding."""
        await self._tasks.drain()

    @property
    def session_id(self) -> str | None:
        return self.sessions.session_id
