# ==============================================================================
# Transport Abstract Base Class
# ==============================================================================
"""
Abstract interface for issuing JSON requests to the collector.
"""

from abc import ABC, abstractmethod
from typing import Any


class Transport(ABC):
    """
    Sends one JSON request and returns the decoded JSON response.

    Implementations raise TransportError on connection failures, non-2xx
    responses and bodies that are not valid JSON.
    """

    @abstractmethod
    async def send(self, method: str, url: str, payload: Any) -> Any:
        """
        Send a request.

        Args:
            method: HTTP method (POST, PUT)
            url: Absolute collector URL
            payload: JSON-serializable request body

        Returns:
            Decoded JSON response body
        """
        ...

    def close(self) -> None:
        """Release transport resources. Optional override."""
        pass
