"""
TTL Cache.

Shields the slow or rate-limited lookups (spatial queries, social feeds,
image verification, scraped updates) behind a diskcache store.

Each entry is a JSON envelope {"value": ..., "expires_at": <epoch seconds>}.
An entry is live while expires_at > now; expired entries read as absent but
stay on disk until the next write to the same key replaces them. Every
write replaces value and expiry unconditionally.
"""

import asyncio
import json
import logging
import time
from collections import Counter
from typing import Any, Callable, Optional

import diskcache

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)


class CacheService:
    """
    Disk-backed TTL cache.

    Reads and writes run on the default executor. The store is never a
    hard dependency: if it cannot be opened or a call fails, the error is
    logged and callers see a miss (get) or False (set).
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._settings = settings or get_settings()
        self._clock = clock
        self._store: Optional[diskcache.Cache] = None

    def initialize(self) -> None:
        """Open the store. Safe to call more than once."""
        if self._store is not None:
            return

        directory = self._settings.cache_directory
        try:
            self._store = diskcache.Cache(directory, size_limit=self._settings.cache_size_limit)
        except Exception as e:
            logger.error(f"Cache store at {directory} unavailable, lookups will bypass it: {e}")
            return

        logger.info(f"Cache store opened at {directory} (default TTL {self.default_ttl}s)")

    def close(self) -> None:
        store, self._store = self._store, None
        if store is None:
            return
        try:
            store.close()
        except Exception as e:
            logger.warning(f"Cache store did not close cleanly: {e}")

    @property
    def is_ready(self) -> bool:
        return self._store is not None

    @property
    def default_ttl(self) -> int:
        return self._settings.cache_ttl_seconds

    def _read(self, key: str) -> Optional[Any]:
        raw = self._store.get(key)
        if raw is None:
            logger.info(f"[Cache] MISS for {key}")
            return None

        entry = json.loads(raw)
        if entry["expires_at"] <= self._clock():
            logger.info(f"[Cache] STALE for {key}")
            return None

        logger.info(f"[Cache] HIT for {key}")
        return entry["value"]

    def _write(self, key: str, value: Any, ttl_seconds: int) -> None:
        entry = {"value": value, "expires_at": self._clock() + ttl_seconds}
        self._store.set(key, json.dumps(entry))
        logger.info(f"[Cache] SET {key} (TTL: {ttl_seconds}s)")

    async def get(self, key: str) -> Optional[Any]:
        """
        Look up a live entry.

        Args:
            key: Cache key, e.g. "social:<disaster_id>"

        Returns:
            The stored value, or None if absent, expired or unreadable
        """
        if self._store is None:
            return None

        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._read, key)
        except Exception as e:
            logger.warning(f"[Cache] read of {key} failed, bypassing: {e}")
            return None

    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> bool:
        """
        Store a JSON-serialisable value for ttl_seconds (default cache_ttl_seconds).

        Returns:
            False when the store is unavailable or the write failed
        """
        if self._store is None:
            return False

        ttl = self.default_ttl if ttl_seconds is None else ttl_seconds
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._write, key, value, ttl)
        except Exception as e:
            logger.warning(f"[Cache] write of {key} failed, bypassing: {e}")
            return False
        return True

    def clear(self) -> bool:
        if self._store is None:
            return False
        try:
            removed = self._store.clear()
        except Exception as e:
            logger.warning(f"Cache clear failed: {e}")
            return False
        logger.info(f"Cache cleared ({removed} entries)")
        return True

    async def stats(self) -> dict:
        """
        Entry counts for the admin endpoint.

        "by_kind" groups keys by their prefix (resources, social, verify,
        updates); "stale" counts expired entries still on disk. The scan
        walks every key, so it runs off the event loop.
        """
        if self._store is None:
            return {"status": "not initialized"}

        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._collect_stats)
        except Exception as e:
            logger.warning(f"[Cache] stats scan failed: {e}")
            return {"status": "error", "error": str(e)}

    def _collect_stats(self) -> dict:
        now = self._clock()
        by_kind: Counter = Counter()
        stale = 0
        for key in self._store.iterkeys():
            by_kind[str(key).split(":", 1)[0]] += 1
            raw = self._store.get(key)
            if raw is not None and json.loads(raw)["expires_at"] <= now:
                stale += 1

        return {
            "status": "ready",
            "size": sum(by_kind.values()),
            "stale": stale,
            "by_kind": dict(by_kind),
            "directory": self._settings.cache_directory,
            "ttl_seconds": self.default_ttl,
        }


_cache_instance: Optional[CacheService] = None


def get_cache_service() -> CacheService:
    """Shared cache used by services and routes."""
    global _cache_instance
    if _cache_instance is None:
        _cache_instance = CacheService()
    return _cache_instance
