# ==============================================================================
# Infrastructure Adapters
# ==============================================================================
"""
Concrete implementations of the pagepulse.base ports.

- storage: MemoryStorage, FileStorage, ValkeyStorage
- transport: RequestsTransport
- environment: StaticPageEnvironment, ThreadedBeaconSender
"""

from pagepulse.infrastructure.environment import StaticPageEnvironment, ThreadedBeaconSender
from pagepulse.infrastructure.storage import (
    FileStorage,
    MemoryStorage,
    ValkeyStorage,
    get_storage,
)
from pagepulse.infrastructure.transport import RequestsTransport

__all__ = [
    "FileStorage",
    "MemoryStorage",
    "RequestsTransport",
    "StaticPageEnvironment",
    "ThreadedBeaconSender",
    "ValkeyStorage",
    "get_storage",
]
