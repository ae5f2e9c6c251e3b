# ==============================================================================
# Page Environment Abstract Base Classes
# ==============================================================================
"""
Abstract interfaces for the page the client is embedded in.

PageEnvironment answers "where are we" (hostname, path, title, referrer,
user agent). BeaconSender is the unload-safe transmission primitive: it
accepts a payload for delivery without blocking and without exposing a
response.
"""

from abc import ABC, abstractmethod
from typing import Any

from pagepulse.core.models import PageInfo


class BeaconSender(ABC):
    """Fire-and-forget sender that survives page teardown."""

    @abstractmethod
    def send(self, url: str, payload: Any) -> bool:
        """
        Queue a JSON payload for delivery.

        Must return promptly; delivery happens out of band.

        Args:
            url: Absolute collector URL
            payload: JSON-serializable body

        Returns:
            True if the payload was accepted for delivery
        """
        ...


class PageEnvironment(ABC):
    """Provides information about the current page."""

    @abstractmethod
    def page_info(self) -> PageInfo:
        """Return a snapshot of the current page."""
        ...

    @property
    def beacon(self) -> BeaconSender | None:
        """Unload-safe sender, or None when the environment has none."""
        return None
