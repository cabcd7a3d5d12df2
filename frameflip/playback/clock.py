"""Per-animation scheduling slot on a :class:`FrameLoop`."""

from __future__ import annotations

import logging

from frameflip.playback.loop import FrameCallback, FrameLoop

logger = logging.getLogger(__name__)


class PlaybackClock:
    """Owns the single pending tick of one animation.

    Every call to :meth:`schedule` replaces the stored handle. A tick that
    captured an older handle (``cached``) has been superseded and must not
    arm another tick, so two ticking chains never coexist.
    """

    def __init__(self, loop: FrameLoop) -> None:
        self.loop = loop
        self.handle: int | None = None

    @property
    def active(self) -> bool:
        return self.handle is not None

    def superseded(self, cached: int | None) -> bool:
        """True if a tick that captured ``cached`` no longer owns the clock."""
        return cached is not None and self.handle != cached

    def schedule(self, callback: FrameCallback, cached: int | None = None) -> int | None:
        """Arm ``callback`` for the next tick.

        Args:
            callback: Receives the tick timestamp in milliseconds.
            cached: Handle captured by the calling tick, or None for a fresh
                    chain (start/resume).

        Returns:
            The new handle, or None if the caller was superseded.
        """
        if self.superseded(cached):
            logger.debug("Tick %s superseded by %s, not re-arming", cached, self.handle)
            return None
        self.handle = self.loop.request(callback)
        return self.handle

    def release(self, cached: int | None) -> None:
        """Forget a handle whose tick ran and did not re-arm."""
        if self.handle == cached:
            self.handle = None

    def cancel(self) -> None:
        """Cancel the pending tick, if any."""
        if self.handle is not None:
            self.loop.cancel(self.handle)
        self.handle = None
