# ==============================================================================
# Storage Infrastructure
# ==============================================================================
"""
Key-value storage implementations for the visitor identifier.

Available implementations:
- MemoryStorage: process-local dict, lost on exit
- FileStorage: JSON file on disk
- ValkeyStorage: Valkey/Redis-based storage
"""

from typing import Optional

from pagepulse.base import KeyValueStorage
from pagepulse.infrastructure.storage.file import FileStorage
from pagepulse.infrastructure.storage.memory import MemoryStorage
from pagepulse.infrastructure.storage.valkey import ValkeyStorage
from pagepulse.utils.config import Settings, get_settings


def get_storage(settings: Optional[Settings] = None) -> KeyValueStorage:
    """
    Build the storage backend selected in settings.

    Args:
        settings: Application settings (defaults to cached settings)

    Returns:
        KeyValueStorage instance
    """
    settings = settings or get_settings()
    backend = settings.storage.backend

    if backend == "memory":
        return MemoryStorage()
    if backend == "valkey":
        return ValkeyStorage(url=settings.valkey.url, key_prefix=settings.storage.key_prefix)
    return FileStorage(settings.storage.path)


__all__ = [
    "FileStorage",
    "MemoryStorage",
    "ValkeyStorage",
    "get_storage",
]
