"""
TTL cache over a KeyValueStore.

Entries are stored as JSON {"data": ..., "expiresAt": <epoch ms>} under a
fixed key prefix so they never collide with other persisted state (auth
tokens, push tokens).  The cache is an optimisation, not a source of
truth: every operation degrades to None / no-op instead of raising.
"""

import json
import logging
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable

from homestay.domain.store import KeyValueStore

log = logging.getLogger(__name__)

PREFIX = "nh_cache_"
DEFAULT_TTL = timedelta(minutes=15)


@dataclass
class CacheEntry:
    data: Any
    expires_at: int  # epoch milliseconds

    def to_json(self) -> str:
        return json.dumps({"data": self.data, "expiresAt": self.expires_at})

    @classmethod
    def from_json(cls, raw: str) -> "CacheEntry":
        obj = json.loads(raw)
        return cls(data=obj["data"], expires_at=int(obj["expiresAt"]))


def _now_ms() -> int:
    return int(time.time() * 1000)


class TTLCache:
    """
    Namespaced, time-limited cache.

    Expired entries are removed lazily, on the first get() that sees them.
    There is no background sweep.
    """

    def __init__(
        self,
        store: KeyValueStore,
        default_ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], int] = _now_ms,
    ):
        self._store = store
        self._default_ttl = default_ttl
        self._clock = clock

    async def get(self, key: str) -> Any | None:
        """Return the cached value, or None on miss, expiry or any failure."""
        full_key = PREFIX + key
        try:
            raw = await self._store.get_item(full_key)
            if not raw:
                return None
            entry = CacheEntry.from_json(raw)
            if self._clock() > entry.expires_at:
                log.debug("cache expired: %s", key)
                await self._store.remove_item(full_key)
                return None
            return entry.data
        except Exception as exc:
            log.debug("cache read failed for %s: %s", key, exc)
            return None

    async def set(self, key: str, value: Any, ttl: timedelta | float | None = None) -> None:
        """Replace the entry under key. A numeric ttl is seconds. Failures are logged and dropped."""
        ttl = self._default_ttl if ttl is None else ttl
        try:
            seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
            entry = CacheEntry(data=value, expires_at=self._clock() + int(seconds * 1000))
            await self._store.set_item(PREFIX + key, entry.to_json())
        except Exception as exc:
            log.warning("cache write failed for %s: %s", key, exc)

    async def invalidate(self, key_prefix: str) -> None:
        """Remove every entry whose logical key starts with key_prefix."""
        try:
            keys = await self._store.get_all_keys()
            to_remove = [k for k in keys if k.startswith(PREFIX + key_prefix)]
            for k in to_remove:
                await self._store.remove_item(k)
            if to_remove:
                log.debug("cache invalidated %d entr(ies) under %r", len(to_remove), key_prefix)
        except Exception as exc:
            log.warning("cache invalidate failed for %r: %s", key_prefix, exc)


# -- logical keys --------------------------------------------------------

HERO = "listings_hero"
FEATURED = "listings_featured"


def listing_key(listing_id: int) -> str:
    return f"listing_{listing_id}"


def search_key(params: dict[str, Any]) -> str:
    """Deterministic key for a search: params sorted, empty values dropped."""
    parts = [
        f"{k}={params[k]}"
        for k in sorted(params)
        if params[k] is not None and params[k] != ""
    ]
    return "listings_search_" + "&".join(parts)
