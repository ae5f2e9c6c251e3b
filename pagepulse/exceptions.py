# ==============================================================================
# Exceptions
# ==============================================================================
"""
Exception hierarchy.

Only ConfigurationError is meant to reach the host: it is raised while the
client is being constructed. TransportError and StorageError are raised by
adapters and absorbed by DeliveryClient and VisitorIdentity respectively.
"""


class PagePulseError(Exception):
    """Base class for all pagepulse errors."""


class ConfigurationError(PagePulseError):
    """Required configuration is missing or invalid."""


class TransportError(PagePulseError):
    """A collector request failed or returned an unusable response."""


class StorageError(PagePulseError):
    """Durable key-value storage is unavailable."""
