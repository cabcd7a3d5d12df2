"""Frame animation — playback state machine driven by the host frame loop.

Each scheduled tick asks the timing strategy whether it is due, renders the
current frame through the renderer adapter, fires ``on_update``, then decides
whether to advance, bounce, loop, settle, or stop.

Hooks run synchronously inside a tick. If a hook calls :meth:`start`,
:meth:`interrupt`, :meth:`resume` or :meth:`cancel`, the in-flight tick
notices the changed clock handle and stops without re-arming itself.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Any, Callable, Mapping, Sequence

from frameflip.assets.cache import AssetCache
from frameflip.assets.prefetch import PrefetchCoordinator
from frameflip.config import (
    AnimationConfig,
    ConfigError,
    Direction,
    MotionDirection,
    parse_enum,
)
from frameflip.playback.clock import PlaybackClock
from frameflip.playback.loop import FrameLoop
from frameflip.playback.state import PlaybackEvents, PlaybackState
from frameflip.render.adapters import CallbackRenderer, RendererAdapter, create_renderer
from frameflip.timing.frames import SpriteLayout, normalize_frame
from frameflip.timing.strategy import create_timing

logger = logging.getLogger(__name__)


class FrameAnimation:
    """Plays a sprite-sheet animation on a render target.

    Args:
        target: The surface to mutate (usually a :class:`SpriteElement`).
        config: An :class:`AnimationConfig` or a mapping accepted by
                :meth:`AnimationConfig.from_dict`.
        events: Lifecycle hooks.
        loop: Host frame loop to schedule ticks on. A private one is created
              if omitted; the caller is then responsible for ticking
              ``animation.loop``.
        renderer: Overrides the adapter chosen by ``config.draw_type``.
                  Either a :class:`RendererAdapter` or a plain
                  ``(frame_index, direction)`` callable.
        prefetcher: Coordinator used for ``asset_list`` prefetching. If
                    omitted, the animation creates one on first prefetch
                    and shuts it down on :meth:`cancel`.
        cache: Where an animation-owned coordinator keeps prefetched
               assets. A fresh :class:`AssetCache` is used if omitted.

    Raises:
        ConfigError: If the configuration is invalid or has a single frame.
    """

    def __init__(
        self,
        target: Any,
        config: AnimationConfig | Mapping[str, Any],
        events: PlaybackEvents | None = None,
        loop: FrameLoop | None = None,
        renderer: RendererAdapter | Callable[[int, Direction], None] | None = None,
        prefetcher: PrefetchCoordinator | None = None,
        cache: AssetCache | None = None,
    ) -> None:
        if not isinstance(config, AnimationConfig):
            config = AnimationConfig.from_dict(dict(config))
        if config.total_frame_number < 2:
            raise ConfigError(
                f"total_frame_number must be at least 2 to animate, got {config.total_frame_number}"
            )

        self.config = config
        self.events = events or PlaybackEvents()
        self.layout = SpriteLayout.from_config(config)
        self.loop = loop or FrameLoop()
        self.target = target

        if renderer is None:
            renderer = create_renderer(config, target, self.layout)
        elif not isinstance(renderer, RendererAdapter):
            renderer = CallbackRenderer(renderer, layout=self.layout)
        self.renderer = renderer

        self._clock = PlaybackClock(self.loop)
        self._timing = create_timing(config)
        self._prefetcher = prefetcher
        self._owns_prefetcher = prefetcher is None
        self.cache = cache
        self.prefetch_result: Future[list[bool]] | None = None

        self.state = PlaybackState.TERMINATION
        self.direction = Direction.LTR
        self.current_frame = 0
        self._cancelled = False

        if config.prefetch and config.asset_list:
            self.prefetch()

    def __repr__(self) -> str:
        return (
            f"<FrameAnimation {self.state.value} frame={self.current_frame}"
            f"/{self.config.total_frame_number} {self.direction.value}>"
        )

    # === Introspection ===

    @property
    def is_running(self) -> bool:
        return self.state in (PlaybackState.RUNNING, PlaybackState.INFINITE_CONTINUE)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def handle(self) -> int | None:
        """The pending tick handle, if any."""
        return self._clock.handle

    @property
    def timing(self):
        return self._timing

    @property
    def visible_frame(self) -> int:
        """Frame index the current counter maps to."""
        return self._frame_index(self.current_frame, self.direction)

    # === Public operations ===

    def start(self, direction: Direction | str = Direction.LTR) -> None:
        """Play from the first frame (after any delay).

        Calling start while already running in the same direction does nothing.
        """
        if self._inert("start"):
            return
        direction = parse_enum(Direction, direction, "direction")
        if self.is_running and direction is self.direction:
            logger.debug("start() ignored, already running %s", direction.value)
            return
        self._restart(direction, PlaybackState.RUNNING)

    def resume(self, direction: Direction | str | None = None, reverse: bool = False) -> None:
        """Continue ticking from the current frame.

        Args:
            direction: Direction to resume in; defaults to the last one.
            reverse: Mirror the position within the cycle and flip the
                     direction.
        """
        if self._inert("resume"):
            return
        if self.is_running and not reverse:
            return
        direction = self.direction if direction is None else parse_enum(Direction, direction, "direction")
        self._clock.cancel()
        if reverse:
            self.current_frame = self.config.total_frame_number - self.current_frame
            self._timing.mirror()
            direction = direction.flipped
        self.direction = direction
        self.state = PlaybackState.RUNNING
        self._arm(direction)

    def interrupt(self) -> None:
        """Stop ticking, keeping the current frame for a later :meth:`resume`."""
        if self._inert("interrupt"):
            return
        self._clock.cancel()
        self._timing.pause()
        self.state = PlaybackState.TERMINATION

    def cancel(self) -> None:
        """Stop, reset to frame 0, clear the render target and release it.

        Every later operation on this animation is a no-op.
        """
        if self._inert("cancel"):
            return
        self._clock.cancel()
        self.current_frame = 0
        self._timing.reset()
        self.state = PlaybackState.TERMINATION
        try:
            self.renderer.clear()
        except Exception:
            logger.exception("Renderer clear failed")
        self._emit("on_cancel", self)

        self.renderer.detach()
        self.target = None
        if self._owns_prefetcher and self._prefetcher is not None:
            self._prefetcher.shutdown(wait=False)
        self._cancelled = True
        logger.debug("Animation cancelled")

    def render_frame(self, frame: int, direction: Direction | str = Direction.LTR) -> None:
        """Jump to ``frame`` and draw it immediately, running or not."""
        if self._inert("render_frame"):
            return
        self.current_frame = frame
        self._draw(frame, parse_enum(Direction, direction, "direction"))

    def prefetch(self) -> Future[list[bool]]:
        """Load every entry of ``asset_list`` concurrently.

        ``on_prefetch`` fires with the outcomes on a frame-loop tick. Loaded
        assets stay in :attr:`cache`.
        """
        if self._inert("prefetch"):
            return self._empty_prefetch()
        if self._prefetcher is None:
            if self.cache is None:
                self.cache = AssetCache()
            self._prefetcher = PrefetchCoordinator(cache=self.cache, post=self.loop.post)
        self.prefetch_result = self._prefetcher.prefetch(
            self.config.asset_list, on_complete=self._on_prefetched,
        )
        return self.prefetch_result

    # === Tick ===

    def _restart(self, direction: Direction, state: PlaybackState, arm: bool = True) -> None:
        self.current_frame = -self.config.delay_frames
        self._timing.prepare()
        self._timing.reset()
        if arm:
            self._clock.cancel()
        self.direction = direction
        self.state = state
        if arm:
            self._arm(direction)
        self._emit("on_start", self)

    def _next_cycle(self, direction: Direction, timestamp: float, cached: int | None, rollover: bool) -> None:
        if self._timing.continuous and not rollover:
            # The completing tick already starts the next cycle
            self._tick(direction, timestamp, once=False, rollover=True)
        else:
            self._arm(direction, cached)

    def _arm(self, direction: Direction, cached: int | None = None, once: bool = False) -> None:
        self._clock.schedule(lambda timestamp: self._tick(direction, timestamp, once), cached)

    def _tick(self, direction: Direction, timestamp: float, once: bool, rollover: bool = False) -> None:
        cached = self._clock.handle
        if not self._timing.due(timestamp):
            self._arm(direction, cached, once)
            return

        if once:
            # Settle pass after a non-filling completion
            self._draw(self.current_frame, direction)
            self._emit("on_update", timestamp, self)
            self._clock.release(cached)
            return

        step = self._timing.evaluate(self.current_frame)
        self.current_frame = step.frame
        if step.changed:
            self._draw(step.frame, direction)
            self._emit("on_update", timestamp, self)
        if self._clock.superseded(cached):
            return

        if not step.complete:
            self.current_frame = self._timing.advance(self.current_frame)
            self._arm(direction, cached)
            return

        self._complete(direction, timestamp, cached, rollover)

    def _complete(self, direction: Direction, timestamp: float, cached: int | None, rollover: bool) -> None:
        self._emit("on_complete", timestamp, self)
        if self._clock.superseded(cached):
            return

        if self.config.motion_direction is MotionDirection.ALTERNATE:
            self.current_frame = 0
            self._timing.restart_cycle()
            self.direction = direction.flipped
            logger.debug("Cycle complete, bouncing to %s", self.direction.value)
            self._next_cycle(self.direction, timestamp, cached, rollover)
            return

        if self.config.infinite:
            logger.debug("Cycle complete, looping")
            in_place = self._timing.continuous and not rollover
            self._restart(direction, PlaybackState.INFINITE_CONTINUE, arm=not in_place)
            if in_place and not self._clock.superseded(cached):
                self._tick(direction, timestamp, once=False, rollover=True)
            return

        self.state = PlaybackState.TERMINATION
        if not self.config.fill_mode.holds_end:
            # One extra pass settles back on the first frame
            self.current_frame += 1
            self._arm(direction, cached, once=True)
        else:
            self._clock.release(cached)
        logger.debug("Playback finished on raw frame %d", self.current_frame)

    # === Helpers ===

    def _frame_index(self, raw: int, direction: Direction) -> int:
        return normalize_frame(raw, self.config.total_frame_number, self.config.fill_mode, direction)

    def _draw(self, raw: int, direction: Direction) -> None:
        try:
            self.renderer.render(self._frame_index(raw, direction), direction)
        except Exception:
            logger.exception("Render of frame %d failed, skipping", raw)

    def _emit(self, hook_name: str, *args: Any) -> None:
        hook = getattr(self.events, hook_name)
        if hook is None:
            return
        try:
            hook(*args)
        except Exception:
            logger.exception("%s hook failed", hook_name)

    def _on_prefetched(self, outcomes: Sequence[bool]) -> None:
        if self._cancelled:
            logger.debug("Prefetch finished after cancel, dropping result")
            return
        self._emit("on_prefetch", list(outcomes), self)

    @staticmethod
    def _empty_prefetch() -> Future[list[bool]]:
        result: Future[list[bool]] = Future()
        result.set_result([])
        return result

    def _inert(self, operation: str) -> bool:
        if self._cancelled:
            logger.debug("%s() on a cancelled animation ignored", operation)
        return self._cancelled
