"""Alias generation backed by a durable counter."""

import logging

from ..core.errors import StorageError
from .kv import KeyValueStore

logger = logging.getLogger(__name__)

COUNTER_KEY = "cert_counter"
ALIAS_PREFIX = "cert"


class AliasSequencer:
    """Issues ``cert1``, ``cert2``, ... and never repeats an alias."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def current(self) -> int:
        """Last issued counter value (0 if none issued yet)."""
        return self._read(self.store)

    def next_alias(self) -> str:
        """Increment and persist the counter, then return the new alias."""
        with self.store.transaction() as store:
            value = self._read(store) + 1
            store.put(COUNTER_KEY, value)

        alias = f"{ALIAS_PREFIX}{value}"
        logger.debug("Issued alias %s", alias)
        return alias

    @staticmethod
    def _read(store: KeyValueStore) -> int:
        raw = store.get(COUNTER_KEY, 0)
        if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
            # Never fall back to 0: issued aliases must not repeat
            raise StorageError(f"Stored alias counter is invalid: {raw!r}")
        return raw
