"""
Process-wide search result cache with per-entry TTL.

Advisory only: every method swallows its own failures so that a broken cache
degrades to always-miss instead of failing a search or an ingestion run.
"""

import copy
import hashlib
import json
import logging
import threading
import time
from typing import Any, Dict, Mapping, Optional, Tuple

from techjobs.config.settings import settings

logger = logging.getLogger(__name__)


def make_key(params: Mapping[str, Any]) -> str:
    """
    Stable key for a set of query parameters: empty values are dropped and
    the rest hashed in sorted order, so {"a": 1, "b": None} == {"a": 1}.
    """
    cleaned = {
        key: params[key]
        for key in sorted(params)
        if params[key] is not None and params[key] != ""
    }
    payload = json.dumps(cleaned, sort_keys=True, default=str)
    return hashlib.md5(payload.encode("utf-8")).hexdigest()


class SearchCache:
    def __init__(
        self,
        ttl: int = settings.CACHE_TTL,
        prefix: str = settings.CACHE_PREFIX,
        max_entries: int = settings.CACHE_MAX_ENTRIES,
    ):
        self.ttl = ttl
        self.prefix = prefix
        self.max_entries = max_entries
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def _full_key(self, key: str) -> str:
        return key if key.startswith(self.prefix) else f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[Any]:
        try:
            full_key = self._full_key(key)
            with self._lock:
                entry = self._entries.get(full_key)
                if entry is None:
                    return None
                expires_at, value = entry
                if expires_at <= time.monotonic():
                    del self._entries[full_key]
                    return None
            return copy.deepcopy(value)
        except Exception as e:
            logger.error(f"Cache get error: {e}")
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        try:
            expires_at = time.monotonic() + (self.ttl if ttl is None else ttl)
            with self._lock:
                self._entries[self._full_key(key)] = (expires_at, copy.deepcopy(value))
                self._prune()
        except Exception as e:
            logger.error(f"Cache set error: {e}")

    def _prune(self) -> None:
        """
        Drop expired entries, then the ones closest to expiry while over
        max_entries. Caller holds the lock.
        """
        now = time.monotonic()
        expired = [key for key, (expires_at, _) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]

        overflow = len(self._entries) - self.max_entries
        if overflow > 0:
            for key in sorted(self._entries, key=lambda k: self._entries[k][0])[:overflow]:
                del self._entries[key]

    def invalidate_all(self, prefix: Optional[str] = None) -> int:
        """Drop every entry whose key starts with `prefix`. Returns the count."""
        prefix = self.prefix if prefix is None else prefix
        try:
            with self._lock:
                doomed = [key for key in self._entries if key.startswith(prefix)]
                for key in doomed:
                    del self._entries[key]
            return len(doomed)
        except Exception as e:
            logger.error(f"Cache clear error: {e}")
            return 0

    def __len__(self) -> int:
        return len(self._entries)
