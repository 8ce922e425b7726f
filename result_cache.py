import logging
import time

logger = logging.getLogger("career_assistant.cache")

DEFAULT_TTL_SEC = 5 * 60


class ResultCache:
    """In-memory result cache with read-time expiry.

    Entries older than ``ttl`` read as absent but are left in place; nothing
    sweeps them. There is no locking, so two concurrent misses on the same key
    both recompute.
    """

    def __init__(self, ttl=DEFAULT_TTL_SEC, clock=time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries = {}  # key -> (value, created_at)

    def get(self, key):
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, created_at = entry
        if self._clock() - created_at >= self.ttl:
            return None
        logger.debug("cache_hit key_len=%s", len(key))
        return value

    def put(self, key, value):
        self._entries[key] = (value, self._clock())

    def __len__(self):
        return len(self._entries)
