"""LRU cache of generated results keyed by (image_key, settings_hash)."""

from __future__ import annotations

from collections import OrderedDict


class ResultCache:
    """Small LRU cache so revisiting a parameter combination is instant.

    Keys are (image_key, settings_hash) tuples.
    """

    def __init__(self, max_size: int = 32) -> None:
        self._max_size = max_size
        self._cache: OrderedDict[tuple[str, str], object] = OrderedDict()

    def get(self, image_key: str, settings_hash: str) -> object | None:
        """Get a cached result, or None if not present."""
        key = (image_key, settings_hash)
        if key in self._cache:
            self._cache.move_to_end(key)
            return self._cache[key]
        return None

    def put(self, image_key: str, settings_hash: str, value: object) -> None:
        key = (image_key, settings_hash)
        if key in self._cache:
            self._cache.move_to_end(key)
        elif len(self._cache) >= self._max_size:
            self._cache.popitem(last=False)
        self._cache[key] = value

    def clear(self) -> None:
        self._cache.clear()

    @property
    def size(self) -> int:
        return len(self._cache)
