"""Concurrent asset prefetching with a single batched completion report."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Sequence

from frameflip.assets.cache import AssetCache
from frameflip.assets.loader import LoadedAsset, load_asset
from frameflip.constants import DEFAULT_PREFETCH_WORKERS

logger = logging.getLogger(__name__)


class _Batch:
    """Outcome collector for one prefetch call."""

    def __init__(self, size: int, on_done: Callable[[list[bool]], None]) -> None:
        self.outcomes: list[bool] = [False] * size
        self._remaining = size
        self._on_done = on_done
        self._lock = threading.Lock()

    def record(self, index: int, ok: bool) -> None:
        with self._lock:
            self.outcomes[index] = ok
            self._remaining -= 1
            done = self._remaining == 0
        if done:
            self._on_done(list(self.outcomes))


class PrefetchCoordinator:
    """Loads assets on a bounded worker pool.

    Every load resolves to True (loaded) or False (failed) on its own; one
    failure never blocks the others. When all outcomes are in, the batch is
    reported once, as a list in asset-list order.

    Args:
        loader: Loads one asset, raising on failure. Defaults to decoding
                the file into memory.
        max_workers: Maximum number of concurrent loads.
        cache: If given, loaded assets are stored here (and cache hits skip
               loading).
        post: Hands the completion callback to another execution context,
              typically :meth:`FrameLoop.post`. Without it, the callback runs
              on the worker thread that finished last.
    """

    def __init__(
        self,
        loader: Callable[[str], LoadedAsset] = load_asset,
        max_workers: int = DEFAULT_PREFETCH_WORKERS,
        cache: AssetCache | None = None,
        post: Callable[[Callable[[], None]], None] | None = None,
    ) -> None:
        self._loader = loader
        self.cache = cache
        self._post = post
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_workers), thread_name_prefix="frameflip-prefetch",
        )

    def prefetch(
        self,
        assets: Sequence[str],
        on_complete: Callable[[list[bool]], None] | None = None,
    ) -> Future[list[bool]]:
        """Start loading ``assets``.

        Returns:
            A future resolving to the per-asset outcomes.
        """
        assets = list(assets)
        result: Future[list[bool]] = Future()

        def finish(outcomes: list[bool]) -> None:
            loaded = sum(outcomes)
            logger.info("Prefetched %d/%d assets", loaded, len(outcomes))
            if on_complete is not None:
                self._deliver(on_complete, outcomes)
            result.set_result(outcomes)

        if not assets:
            finish([])
            return result

        logger.debug("Prefetching %d assets", len(assets))
        batch = _Batch(len(assets), finish)
        for index, src in enumerate(assets):
            future = self._executor.submit(self._load_one, src)
            future.add_done_callback(
                lambda f, i=index: batch.record(i, not f.cancelled() and f.exception() is None and f.result())
            )
        return result

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _load_one(self, src: str) -> bool:
        try:
            if self.cache is not None:
                self.cache.get_or_load(src, self._loader)
            else:
                self._loader(src)
        except Exception as exc:
            logger.warning("Prefetch failed for %s: %s", src, exc)
            return False
        return True

    def _deliver(self, on_complete: Callable[[list[bool]], None], outcomes: list[bool]) -> None:
        def call() -> None:
            try:
                on_complete(outcomes)
            except Exception:
                logger.exception("Prefetch completion callback failed")

        if self._post is not None:
            self._post(call)
        else:
            call()
