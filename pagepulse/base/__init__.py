# ==============================================================================
# Base Abstract Classes
# ==============================================================================
"""
Abstract base classes defining the environment capabilities the client needs.

The client core never touches a browser, a network library or a storage
engine directly. Each capability is a port here, with adapters living in
pagepulse.infrastructure and fakes in the test suite.
"""

from pagepulse.base.environment import BeaconSender, PageEnvironment
from pagepulse.base.storage import KeyValueStorage
from pagepulse.base.transport import Transport

__all__ = [
    "BeaconSender",
    "KeyValueStorage",
    "PageEnvironment",
    "Transport",
]
