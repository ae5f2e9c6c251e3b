# ==============================================================================
# Page Environment Adapters
# ==============================================================================
"""
PageEnvironment and BeaconSender implementations for running the client
outside a browser.

StaticPageEnvironment describes a page from plain values and can "navigate"
to another path. ThreadedBeaconSender hands each payload to a daemon thread
and returns at once, so ending a session never blocks the caller.
"""

import logging
import threading
from typing import Any

import requests

from pagepulse.base import BeaconSender, PageEnvironment
from pagepulse.core.models import PageInfo
from pagepulse.infrastructure.transport import JSON_HEADERS

logger = logging.getLogger(__name__)


class StaticPageEnvironment(PageEnvironment):
    """
    Page environment backed by a PageInfo value.

    Args:
        page: Current page description
        beacon: Optional unload-safe sender
    """

    def __init__(self, page: PageInfo | None = None, beacon: BeaconSender | None = None):
        self._page = page or PageInfo()
        self._beacon = beacon

    def page_info(self) -> PageInfo:
        return self._page

    @property
    def beacon(self) -> BeaconSender | None:
        return self._beacon

    def navigate(self, path: str, title: str | None = None) -> None:
        """Move to another page of the same site; the old URL becomes the referrer."""
        previous = self._page
        referrer = f"https://{previous.hostname}{previous.path}" if previous.hostname else ""
        self._page = previous.model_copy(
            update={
                "path": path,
                "title": title if title is not None else previous.title,
                "referrer": referrer,
            }
        )


class ThreadedBeaconSender(BeaconSender):
    """
    Posts each payload from a daemon thread.

    Delivery is best effort: failures are logged at debug level and
    nothing is reported back to the caller.

    Args:
        timeout: Per-request timeout in seconds
    """

    def __init__(self, timeout: float = 5.0):
        self.timeout = timeout
        self._threads: set[threading.Thread] = set()
        self._lock = threading.Lock()

    def send(self, url: str, payload: Any) -> bool:
        thread = threading.Thread(target=self._post, args=(url, payload), daemon=True)
        with self._lock:
            self._threads.add(thread)
        try:
            thread.start()
        except RuntimeError as e:
            logger.debug("Could not start beacon thread: %s", e)
            with self._lock:
                self._threads.discard(thread)
            return False
        return True

    def join(self, timeout: float | None = None) -> None:
        """Wait for beacons still being delivered."""
        with self._lock:
            threads = list(self._threads)
        for thread in threads:
            thread.join(timeout)

    def _post(self, url: str, payload: Any) -> None:
        try:
            requests.post(url, json=payload, headers=JSON_HEADERS, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.debug("Beacon to %s failed: %s", url, e)
        finally:
            with self._lock:
                self._threads.discard(threading.current_thread())
