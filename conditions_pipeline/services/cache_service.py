"""In-memory TTL cache for provider payloads and lookups."""
import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Hashable, Optional, Tuple

from conditions_pipeline.config import CACHE_MAX_ENTRIES

logger = logging.getLogger(__name__)


class CacheService:
    """
    Key-value cache with per-entry TTL.

    Two scopes are kept apart: long-lived entries (geocoding, coastline) and
    session entries (weather, marine, tides). Each scope is a bounded LRU.
    Concurrent writers to the same key are last-write-wins.
    """

    def __init__(
        self,
        max_entries: int = CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_entries = max_entries
        self.clock = clock
        self._scopes = {
            True: OrderedDict(),
            False: OrderedDict(),
        }
        self._lock = threading.Lock()

    def get(self, key: Hashable, long_lived: bool = False) -> Optional[Any]:
        """Return the cached value, or None if absent or expired."""
        scope = self._scopes[long_lived]
        with self._lock:
            entry: Optional[Tuple[float, Any]] = scope.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self.clock() >= expires_at:
                del scope[key]
                logger.debug("Cache entry expired: %s", key)
                return None
            scope.move_to_end(key)
            return value

    def set(self, key: Hashable, value: Any, ttl_seconds: float, long_lived: bool = False) -> None:
        scope = self._scopes[long_lived]
        with self._lock:
            scope[key] = (self.clock() + ttl_seconds, value)
            scope.move_to_end(key)
            while len(scope) > self.max_entries:
                scope.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            for scope in self._scopes.values():
                scope.clear()
