"""
KeyValueStore port — the persistent string store the cache is built on.

Four primitives only: get, set, remove, list keys.  Values are opaque
strings; serialization and expiry belong to the cache on top.
"""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """
    Port: durable string-keyed storage that survives process restarts.

    Implementations may raise on storage failure; callers that must not
    fail (the TTL cache) catch and degrade.
    """

    @abstractmethod
    async def get_item(self, key: str) -> str | None:
        """Return the stored string, or None if the key is absent."""
        ...

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing anything already there."""
        ...

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Delete key. Removing an absent key is not an error."""
        ...

    @abstractmethod
    async def get_all_keys(self) -> list[str]:
        """Return every key currently stored."""
        ...
