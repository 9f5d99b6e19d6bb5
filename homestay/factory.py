import os
from datetime import timedelta

from homestay.adapters.homestay_client import DEFAULT_BASE_URL, HomestayClient
from homestay.domain.cache import DEFAULT_TTL, TTLCache
from homestay.domain.store import KeyValueStore


def api_base_url() -> str:
    """HOMESTAY_API_URL if set (trailing slash stripped), otherwise the UAT API."""
    url = os.environ.get("HOMESTAY_API_URL", "").strip()
    return url.rstrip("/") if url else DEFAULT_BASE_URL


def create_gateway(token: str | None = None) -> HomestayClient:
    return HomestayClient(
        base_url=api_base_url(),
        token=token or os.environ.get("HOMESTAY_API_TOKEN") or None,
    )


def create_store(backend: str | None = None) -> KeyValueStore:
    """
    Factory: create the right store based on config.

    The backend can be passed explicitly or read from the
    HOMESTAY_CACHE_BACKEND env var. Defaults to "sqlite".
    """
    backend = backend or os.environ.get("HOMESTAY_CACHE_BACKEND", "sqlite")

    if backend == "sqlite":
        from homestay.adapters.sqlite_store import SqliteKeyValueStore

        db_path = os.environ.get("HOMESTAY_CACHE_DB", "data/homestay_cache.db")
        if os.path.dirname(db_path):
            os.makedirs(os.path.dirname(db_path), exist_ok=True)
        return SqliteKeyValueStore(db_path=db_path)

    if backend == "memory":
        from homestay.adapters.simulator_store import InMemoryKeyValueStore

        return InMemoryKeyValueStore()

    raise ValueError(f"Unknown cache backend: {backend!r}")


def create_cache(store: KeyValueStore | None = None) -> TTLCache:
    minutes = os.environ.get("HOMESTAY_CACHE_TTL_MINUTES")
    ttl = timedelta(minutes=float(minutes)) if minutes else DEFAULT_TTL
    return TTLCache(store or create_store(), default_ttl=ttl)
