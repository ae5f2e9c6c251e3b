# ==============================================================================
# PagePulse - Client-Side Session Telemetry
# ==============================================================================
"""
Visitor identity, session lifecycle and batched interaction events for a
single page context, delivered to a remote collector.
"""

from pagepulse.client import SessionClient
from pagepulse.exceptions import (
    ConfigurationError,
    PagePulseError,
    StorageError,
    TransportError,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "PagePulseError",
    "SessionClient",
    "StorageError",
    "TransportError",
]
