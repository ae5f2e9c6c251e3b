# ==============================================================================
# Visitor Identity
# ==============================================================================
"""
Durable pseudonymous visitor identifier.

The id is created once per storage scope and reused by every later session
and page load. Format: "visitor-" followed by 9 base-36 characters.
"""

import logging
import secrets
import string

from pagepulse.base import KeyValueStorage
from pagepulse.exceptions import StorageError

logger = logging.getLogger(__name__)

VISITOR_ID_KEY = "visitorId"
VISITOR_ID_PREFIX = "visitor-"
VISITOR_TOKEN_LENGTH = 9

_BASE36_ALPHABET = string.digits + string.ascii_lowercase


def generate_visitor_id() -> str:
    """Create a new random visitor id."""
    token = "".join(secrets.choice(_BASE36_ALPHABET) for _ in range(VISITOR_TOKEN_LENGTH))
    return f"{VISITOR_ID_PREFIX}{token}"


class VisitorIdentity:
    """
    Reads the visitor id from storage, creating and persisting it when absent.

    Storage failures are not fatal: the caller gets a fresh id that is not
    persisted, so an unavailable store yields a new id on every call.
    """

    def __init__(self, storage: KeyValueStorage, key: str = VISITOR_ID_KEY):
        self._storage = storage
        self._key = key

    def get_or_create(self) -> str:
        """
        Return the stored visitor id, creating one if needed.

        Returns:
            Visitor id string
        """
        try:
            visitor_id = self._storage.get(self._key)
        except StorageError as e:
            logger.debug("Visitor storage unavailable, using ephemeral id: %s", e)
            return generate_visitor_id()

        if visitor_id:
            return visitor_id

        visitor_id = generate_visitor_id()
        try:
            self._storage.set(self._key, visitor_id)
        except StorageError as e:
            logger.debug("Could not persist visitor id: %s", e)
        return visitor_id

    def reset(self) -> bool:
        """
        Forget the stored visitor id.

        Returns:
            True if an id was removed
        """
        try:
            return self._storage.delete(self._key)
        except StorageError as e:
            logger.debug("Could not reset visitor id: %s", e)
            return False
