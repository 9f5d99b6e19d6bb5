"""
In-memory KeyValueStore for testing — no database required.
"""

from homestay.domain.store import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """
    Dict-backed store.

    Test helpers:
        fail_with     — exception instance raised by every operation while set
        reads         — keys passed to get_item(), in call order
    """

    def __init__(self):
        self._items: dict[str, str] = {}
        self.fail_with: Exception | None = None
        self.reads: list[str] = []

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def get_item(self, key: str) -> str | None:
        self._check()
        self.reads.append(key)
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._check()
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._check()
        self._items.pop(key, None)

    async def get_all_keys(self) -> list[str]:
        self._check()
        return list(self._items)

    def raw(self, key: str) -> str | None:
        """Test helper: peek at a stored value without recording a read."""
        return self._items.get(key)

    def put_raw(self, key: str, value: str) -> None:
        """Test helper: write a value directly, bypassing failure injection."""
        self._items[key] = value
