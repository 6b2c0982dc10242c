import logging
import threading
import time
from collections.abc import Callable

from mallaplan.engine.catalog import Catalog

logger = logging.getLogger(__name__)


class CatalogCache:
    """Process-local cache of loaded curricula keyed by career code.

    Entries expire after ``ttl_seconds`` (0 keeps them until invalidated).
    Replacing a curriculum must call ``invalidate`` for its career.
    """

    def __init__(self, ttl_seconds: int = 0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[Catalog, float]] = {}
        self._lock = threading.Lock()

    def get(self, career_code: str) -> Catalog | None:
        with self._lock:
            entry = self._entries.get(career_code)
            if entry is None:
                return None
            catalog, stored_at = entry
            if self.ttl_seconds and self._clock() - stored_at >= self.ttl_seconds:
                logger.debug("Cached curriculum for %s expired", career_code)
                del self._entries[career_code]
                return None
            return catalog

    def put(self, catalog: Catalog) -> None:
        with self._lock:
            self._entries[catalog.career_code] = (catalog, self._clock())

    def invalidate(self, career_code: str) -> None:
        with self._lock:
            self._entries.pop(career_code, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
