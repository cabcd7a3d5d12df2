"""Host frame loop — the per-frame callback primitive that drives playback.

Callbacks requested with :meth:`FrameLoop.request` run once, on the next
tick, and receive the tick timestamp in milliseconds. Everything runs on the
thread calling :meth:`FrameLoop.tick` / :meth:`FrameLoop.run`; other threads
hand work over with :meth:`FrameLoop.post`.
"""

from __future__ import annotations

import logging
import queue
import time
from typing import Callable

from frameflip.constants import DEFAULT_FPS, MAX_LOOP_FPS

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class FrameLoop:
    """Runs requested callbacks once per frame, paced to ``fps``.

    Tests and embedding hosts can call :meth:`tick` directly with explicit
    timestamps; :meth:`run` is a blocking loop that ticks at the target rate.
    """

    def __init__(self, fps: float = DEFAULT_FPS, clock: Callable[[], float] = time.monotonic) -> None:
        self.fps = max(1, min(fps, MAX_LOOP_FPS))
        self._frame_time_target = 1.0 / self.fps
        self._clock = clock
        self._origin = clock()

        self._callbacks: dict[int, FrameCallback] = {}
        self._batch: dict[int, FrameCallback] = {}
        self._next_handle = 1
        self._posted: queue.Queue[Callable[[], None]] = queue.Queue()

        self._running = False
        self._stop_requested = False
        self.ticks_run = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def pending(self) -> int:
        """Number of callbacks and posted tasks waiting for the next tick."""
        return len(self._callbacks) + self._posted.qsize()

    def now_ms(self) -> float:
        """Milliseconds since the loop was created."""
        return (self._clock() - self._origin) * 1000.0

    def request(self, callback: FrameCallback) -> int:
        """Arm ``callback`` for the next tick. Returns a handle for :meth:`cancel`."""
        handle = self._next_handle
        self._next_handle += 1
        self._callbacks[handle] = callback
        return handle

    def cancel(self, handle: int | None) -> None:
        """Ensure the callback behind ``handle`` never runs. Unknown handles are ignored."""
        if handle is None:
            return
        self._callbacks.pop(handle, None)
        self._batch.pop(handle, None)

    def post(self, task: Callable[[], None]) -> None:
        """Queue ``task`` to run at the start of the next tick. Thread-safe."""
        self._posted.put_nowait(task)

    def tick(self, timestamp: float | None = None) -> int:
        """Run one frame.

        Posted tasks run first, then every callback requested before this
        tick began, all with the same timestamp. Callbacks requested during
        the tick wait for the next one.

        Returns:
            The number of frame callbacks that ran.
        """
        if timestamp is None:
            timestamp = self.now_ms()

        while True:
            try:
                task = self._posted.get_nowait()
            except queue.Empty:
                break
            try:
                task()
            except Exception:
                logger.exception("Posted task failed")

        self._batch, self._callbacks = self._callbacks, {}
        ran = 0
        while self._batch:
            handle = next(iter(self._batch))
            callback = self._batch.pop(handle)
            try:
                callback(timestamp)
            except Exception:
                logger.exception("Frame callback %d failed", handle)
            ran += 1

        self.ticks_run += 1
        return ran

    def run(self, until: Callable[[], bool] | None = None, max_ticks: int | None = None) -> int:
        """Tick at the target frame rate until stopped.

        Stops when :meth:`stop` is called, ``until()`` returns True,
        ``max_ticks`` ticks have run, or (without ``until``) nothing is
        pending any more.

        Returns:
            Number of ticks run.
        """
        self._running = True
        self._stop_requested = False
        ticks = 0
        logger.debug("Frame loop started @ %s FPS", self.fps)
        try:
            while not self._stop_requested:
                frame_start = self._clock()
                if until is None and self.pending == 0:
                    break

                self.tick()
                ticks += 1

                if until is not None and until():
                    break
                if max_ticks is not None and ticks >= max_ticks:
                    break

                # Frame rate limiting
                elapsed = self._clock() - frame_start
                sleep_time = self._frame_time_target - elapsed
                if sleep_time > 0:
                    time.sleep(sleep_time)
        finally:
            self._running = False
        logger.debug("Frame loop stopped after %d ticks", ticks)
        return ticks

    def stop(self) -> None:
        """Ask a running :meth:`run` loop to exit after the current tick."""
        self._stop_requested = True
