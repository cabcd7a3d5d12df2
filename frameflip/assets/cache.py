"""LRU cache for prefetched assets."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from pathlib import Path
from typing import Callable

from frameflip.assets.loader import LoadedAsset, load_asset
from frameflip.constants import DEFAULT_CACHE_MAX_MB

logger = logging.getLogger(__name__)


class AssetCache:
    """LRU cache of loaded assets, bounded by total memory usage.

    When the cache exceeds the memory limit, the least-recently-used asset
    is evicted. Safe to use from prefetch worker threads.
    """

    def __init__(self, max_mb: int = DEFAULT_CACHE_MAX_MB) -> None:
        self._max_bytes = max_mb * 1024 * 1024
        self._cache: OrderedDict[str, LoadedAsset] = OrderedDict()
        self._sizes: dict[str, int] = {}  # key -> size in bytes
        self._current_bytes = 0
        self._lock = threading.Lock()

    @property
    def current_mb(self) -> float:
        return self._current_bytes / (1024 * 1024)

    @property
    def max_mb(self) -> int:
        return self._max_bytes // (1024 * 1024)

    @property
    def entry_count(self) -> int:
        return len(self._cache)

    def __contains__(self, path: object) -> bool:
        return str(path) in self._cache

    def get(self, path: str | Path) -> LoadedAsset | None:
        """Get a cached asset, returning None if not cached.

        Marks the entry as recently used.
        """
        key = str(path)
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
                return self._cache[key]
        return None

    def put(self, path: str | Path, asset: LoadedAsset) -> None:
        """Insert an asset, evicting LRU entries until it fits."""
        key = str(path)
        size = asset.nbytes
        with self._lock:
            if key in self._cache:
                self._current_bytes -= self._sizes.pop(key, 0)
                del self._cache[key]

            while self._current_bytes + size > self._max_bytes and self._cache:
                self._evict_lru()

            self._cache[key] = asset
            self._sizes[key] = size
            self._current_bytes += size

        logger.debug(
            "Cached %s (%.1f MB). Cache: %.1f / %d MB (%d entries)",
            Path(key).name, size / (1024 * 1024), self.current_mb, self.max_mb, self.entry_count,
        )

    def get_or_load(
        self,
        path: str | Path,
        loader: Callable[[str | Path], LoadedAsset] = load_asset,
    ) -> LoadedAsset:
        """Get a cached asset or load it with ``loader``."""
        cached = self.get(path)
        if cached is not None:
            return cached
        asset = loader(path)
        self.put(path, asset)
        return asset

    def evict(self, path: str | Path) -> None:
        """Explicitly remove an asset from the cache."""
        key = str(path)
        with self._lock:
            if key in self._cache:
                self._current_bytes -= self._sizes.pop(key, 0)
                del self._cache[key]

    def clear(self) -> None:
        """Remove all entries from the cache."""
        with self._lock:
            self._cache.clear()
            self._sizes.clear()
            self._current_bytes = 0

    def _evict_lru(self) -> None:
        """Evict the least recently used entry. Caller holds the lock."""
        if not self._cache:
            return
        key, _ = self._cache.popitem(last=False)
        size = self._sizes.pop(key, 0)
        self._current_bytes -= size
        logger.info("Evicted %s (%.1f MB) from cache", Path(key).name, size / (1024 * 1024))
