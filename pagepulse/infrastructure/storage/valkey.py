# ==============================================================================
# Valkey Storage Implementation
# ==============================================================================
"""
Valkey/Redis implementation of the KeyValueStorage interface.

Keys are namespaced with a prefix so several page contexts (or projects) can
share one Valkey database. Connection problems surface as StorageError.
"""

import logging

import redis
from redis.backoff import ExponentialBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError
from redis.retry import Retry

from pagepulse.base import KeyValueStorage
from pagepulse.exceptions import StorageError
from pagepulse.utils.config import get_settings

logger = logging.getLogger(__name__)

# The visitor id lookup sits on the page-load path; fail fast.
VALKEY_RETRIES = 1


class ValkeyStorage(KeyValueStorage):
    """
    Valkey/Redis KeyValueStorage.

    Configured with:
    - Short socket timeouts so an unreachable server degrades quickly
    - A single retry with exponential backoff for transient failures
    """

    def __init__(
        self,
        url: str | None = None,
        key_prefix: str = "pagepulse:",
        socket_timeout: int = 2,
        retries: int | None = None,
    ):
        """
        Initialize Valkey storage.

        Args:
            url: Valkey/Redis connection URL. If None, uses settings.
            key_prefix: Prefix prepended to every key
            socket_timeout: Socket timeout in seconds (default: 2)
            retries: Number of retries for transient failures
        """
        if url is None:
            url = get_settings().valkey.url

        retry_count = retries if retries is not None else VALKEY_RETRIES
        retry_strategy = Retry(ExponentialBackoff(cap=2, base=0.1), retries=retry_count)

        self._client = redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
            retry=retry_strategy,
            retry_on_error=[RedisTimeoutError, RedisConnectionError],
        )
        self._url = url
        self._prefix = key_prefix

    @property
    def client(self) -> redis.Redis:
        """Get the underlying Redis client."""
        return self._client

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> str | None:
        try:
            return self._client.get(self._key(key))
        except RedisError as e:
            raise StorageError(f"Valkey get failed: {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            self._client.set(self._key(key), value)
        except RedisError as e:
            raise StorageError(f"Valkey set failed: {e}") from e

    def delete(self, key: str) -> bool:
        try:
            return self._client.delete(self._key(key)) > 0
        except RedisError as e:
            raise StorageError(f"Valkey delete failed: {e}") from e

    def ping(self) -> bool:
        """Check if Valkey is reachable."""
        try:
            return bool(self._client.ping())
        except RedisError:
            return False
