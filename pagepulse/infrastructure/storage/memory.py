# ==============================================================================
# In-Memory Storage
# ==============================================================================
"""
Process-local storage. Values live only as long as the instance.
"""

from pagepulse.base import KeyValueStorage


class MemoryStorage(KeyValueStorage):
    """Dict-backed KeyValueStorage."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None
