"""
Short-TTL read cache for job listings.

The cache is owned by the app (``app.extensions["response_cache"]``) and
handed to job operations explicitly; writers call ``invalidate(prefix)``.
"""
import logging
import threading
import time
from typing import Any, Optional

logger = logging.getLogger(__name__)

JOBS_PREFIX = "jobs:"


class ResponseCache:
    def __init__(self, default_ttl: float = 30, clock=time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expire_at = entry
            if expire_at <= self._clock():
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        with self._lock:
            self._entries[key] = (value, self._clock() + ttl)

    def invalidate(self, prefix: str) -> int:
        """Drop every key starting with ``prefix``; returns how many were dropped."""
        with self._lock:
            stale = [key for key in self._entries if key.startswith(prefix)]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug(f"cache invalidated {len(stale)} key(s) for prefix '{prefix}'")
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self):
        with self._lock:
            return len(self._entries)
