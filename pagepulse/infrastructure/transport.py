# ==============================================================================
# Requests Transport
# ==============================================================================
"""
Transport implementation on top of requests.

requests is blocking, so each call runs in a worker thread via
asyncio.to_thread(); the event loop stays free while the request is in
flight. Connection errors, timeouts, non-2xx statuses and non-JSON bodies
are all reported as TransportError.
"""

import asyncio
import logging
from typing import Any

import requests

from pagepulse.base import Transport
from pagepulse.exceptions import TransportError

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


class RequestsTransport(Transport):
    """
    JSON-over-HTTP transport.

    Args:
        timeout: Per-request timeout in seconds
        session: Optional preconfigured requests.Session
    """

    def __init__(self, timeout: float = 10.0, session: requests.Session | None = None):
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(JSON_HEADERS)

    async def send(self, method: str, url: str, payload: Any) -> Any:
        return await asyncio.to_thread(self.send_sync, method, url, payload)

    def send_sync(self, method: str, url: str, payload: Any) -> Any:
        """Blocking variant of send()."""
        try:
            response = self._session.request(method, url, json=payload, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise TransportError(f"{method} {url} timed out") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        if not response.ok:
            raise TransportError(f"{method} {url} returned HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"{method} {url} returned a non-JSON body") from e

    def close(self) -> None:
        self._session.close()
