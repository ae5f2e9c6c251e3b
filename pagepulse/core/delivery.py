# ==============================================================================
# Delivery Client
# ==============================================================================
"""
The four collector operations.

    POST  /session/create              -> {"sessionId": ...}
    PUT   /session/update/{sessionId}  -> acknowledgement
    POST  /session/end/{sessionId}     -> (fire-and-forget)
    POST  /events/log                  -> {"success": bool}

Every failure is caught here: transport errors, unexpected exceptions and
malformed responses all turn into a "failed" return value. Failures are
logged only when the client runs on a development-like host; in production
they are swallowed so the host page is never disrupted. Nothing is retried.

Ending a session prefers the environment's unload-safe sender and falls back
to an ordinary request that runs in the background.
"""

import logging
from typing import Any, Optional

from pagepulse.base import BeaconSender, Transport
from pagepulse.utils.tasks import BackgroundTasks

logger = logging.getLogger(__name__)

CREATE_SESSION_PATH = "session/create"
UPDATE_SESSION_PATH = "session/update/{session_id}"
END_SESSION_PATH = "session/end/{session_id}"
LOG_EVENTS_PATH = "events/log"


class DeliveryClient:
    """
    Collector operations over a Transport.

    Args:
        api_base_url: Collector base URL
        transport: Transport used for request/response operations
        tasks: Registry for background requests
        beacon: Unload-safe sender, if the environment provides one
        development: Log failures when True
    """

    def __init__(
        self,
        api_base_url: str,
        transport: Transport,
        tasks: BackgroundTasks,
        beacon: Optional[BeaconSender] = None,
        development: bool = False,
    ) -> None:
        self._base_url = api_base_url.rstrip("/")
        self._transport = transport
        self._tasks = tasks
        self._beacon = beacon
        self._development = development

    def url(self, path: str) -> str:
        return f"{self._base_url}/{path}"

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def create_session(self, data: dict) -> str | None:
        """
        Ask the collector to open a session.

        Args:
            data: Session start payload

        Returns:
            The assigned session id, or None on failure or malformed response
        """
        result = await self._request("POST", CREATE_SESSION_PATH, data)
        if not isinstance(result, dict):
            return None
        session_id = result.get("sessionId")
        if not session_id:
            return None
        return str(session_id)

    async def update_session(self, session_id: str, data: dict) -> bool:
        """
        Report the current page for an active session.

        Returns:
            True if the collector acknowledged the update
        """
        path = UPDATE_SESSION_PATH.format(session_id=session_id)
        result = await self._request("PUT", path, data)
        return result is not None

    def end_session(self, session_id: str, data: dict) -> None:
        """
        Close a session without waiting for the collector.

        Uses the unload-safe sender when available; otherwise (or if the
        sender rejects the payload) an ordinary request is started in the
        background and its outcome is ignored.

        Args:
            session_id: Session to end
            data: End payload ({"events": [...]})
        """
        url = self.url(END_SESSION_PATH.format(session_id=session_id))

        if self._beacon is not None:
            try:
                if self._beacon.send(url, data):
                    return
            except Exception as e:
                self._log_failure("Beacon send failed", e)

        self._tasks.spawn(self._request("POST", END_SESSION_PATH.format(session_id=session_id), data))

    async def log_events(self, events: list[dict]) -> bool:
        """
        Send one batch of events.

        Args:
            events: Serialized events, in occurrence order

        Returns:
            True only if the collector reported success
        """
        result = await self._request("POST", LOG_EVENTS_PATH, {"events": events})
        return isinstance(result, dict) and result.get("success") is True

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, payload: Any) -> Any:
        try:
            return await self._transport.send(method, self.url(path), payload)
        except Exception as e:
            self._log_failure("Session tracker API error", e)
            return None

    def _log_failure(self, message: str, error: Exception) -> None:
        if self._development:
            logger.error("%s: %s", message, error)
