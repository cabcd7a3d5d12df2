"""Timing strategies — decide, per host tick, which frame a playback shows.

Two strategies share one interface so the playback state machine never
needs to know which timing model drives it:

- :class:`DiscreteTiming` advances an integer counter once per frame
  interval (``1000 / fps`` milliseconds).
- :class:`EasedTiming` accumulates real elapsed time over ``duration_ms``
  and maps it through a cubic-bezier timing curve.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

from frameflip.config import AnimationConfig
from frameflip.constants import DEFAULT_TIMING_FUNCTION, EASING_RESOLUTION
from frameflip.timing.easing import CubicBezier, create_easing

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameStep:
    """Outcome of evaluating one due tick."""

    frame: int          # raw frame counter to show
    complete: bool      # this tick shows the last frame of the cycle
    changed: bool = True


class TimingStrategy(ABC):
    """Maps host ticks to raw frame counters for one animation."""

    # A new cycle can start on the tick that completed the previous one
    continuous = False

    def __init__(self, config: AnimationConfig) -> None:
        self.config = config

    def prepare(self) -> None:
        """Per-start setup."""

    @abstractmethod
    def reset(self) -> None:
        """Reset the timing baseline."""

    def pause(self) -> None:
        """Playback was interrupted; time until the next tick must not count."""

    def restart_cycle(self) -> None:
        """A new cycle begins without a full restart (alternate bounce)."""

    def mirror(self) -> None:
        """Playback resumes reversed; mirror the position within the cycle."""

    @abstractmethod
    def due(self, timestamp: float) -> bool:
        """Return True if the tick at ``timestamp`` (ms) should render."""

    @abstractmethod
    def evaluate(self, current_frame: int) -> FrameStep:
        """Decide which raw frame a due tick shows and whether it ends the cycle."""

    def advance(self, current_frame: int) -> int:
        """Raw frame counter after a non-terminal tick."""
        return current_frame + 1


class DiscreteTiming(TimingStrategy):
    """Fixed frame rate: one frame per ``1000 / fps`` milliseconds."""

    def __init__(self, config: AnimationConfig) -> None:
        super().__init__(config)
        self.frame_interval_ms = config.frame_interval_ms
        self.last_timestamp: float | None = None

    def reset(self) -> None:
        self.last_timestamp = None

    def due(self, timestamp: float) -> bool:
        if self.last_timestamp is None or timestamp - self.last_timestamp >= self.frame_interval_ms:
            self.last_timestamp = timestamp
            return True
        return False

    def evaluate(self, current_frame: int) -> FrameStep:
        return FrameStep(
            frame=current_frame,
            complete=current_frame + 1 >= self.config.total_frame_number,
        )


class EasedTiming(TimingStrategy):
    """Continuous time mapped through a timing curve.

    The displayed frame is ``ceil(total * eased)``, capped at the last frame.
    ``changed`` is only set when that frame differs from the previous tick.

    The first frame only shows at progress 0, so a following cycle starts on
    the same tick that completed the previous one and the period stays
    ``duration_ms``.
    """

    continuous = True

    def __init__(self, config: AnimationConfig) -> None:
        super().__init__(config)
        self.duration_ms = float(config.duration_ms)
        self.cumulative_time: float = 0.0
        self.last_timestamp: float | None = None
        self.last_frame: int | None = None
        self.easing: CubicBezier | None = None

    def prepare(self) -> None:
        # Built once per start, not per tick
        self.easing = create_easing(self.config.timing_function or DEFAULT_TIMING_FUNCTION)

    def reset(self) -> None:
        self.cumulative_time = -float(self.config.delay_ms)
        self.last_timestamp = None
        self.last_frame = None

    def pause(self) -> None:
        self.last_timestamp = None

    def restart_cycle(self) -> None:
        self.cumulative_time = 0.0
        self.last_frame = None

    def mirror(self) -> None:
        self.cumulative_time = self.duration_ms - min(self.duration_ms, max(0.0, self.cumulative_time))
        self.last_frame = None

    def due(self, timestamp: float) -> bool:
        if self.last_timestamp is not None:
            self.cumulative_time += timestamp - self.last_timestamp
        self.last_timestamp = timestamp
        return True

    @property
    def progress(self) -> float:
        """Un-eased progress of the current cycle, clamped to [0, 1]."""
        return min(1.0, max(0.0, self.cumulative_time) / self.duration_ms)

    def eased_progress(self) -> float:
        if self.easing is None:
            self.prepare()
        eased = self.easing(self.progress)
        if not math.isfinite(eased):
            return eased
        return math.ceil(eased * EASING_RESOLUTION) / EASING_RESOLUTION

    def evaluate(self, current_frame: int) -> FrameStep:
        total = self.config.total_frame_number
        eased = self.eased_progress()
        if not math.isfinite(eased):
            logger.warning("Timing curve produced %r at progress %.3f, skipping frame", eased, self.progress)
            return FrameStep(frame=current_frame, complete=False, changed=False)
        frame = min(math.ceil(total * eased), total - 1)
        changed = frame != self.last_frame
        self.last_frame = frame
        return FrameStep(frame=frame, complete=eased >= 1.0, changed=changed)

    def advance(self, current_frame: int) -> int:
        return current_frame


def create_timing(config: AnimationConfig) -> TimingStrategy:
    """Select the timing strategy for a configuration."""
    if config.uses_easing:
        logger.debug("Eased timing: %.0fms, curve=%r", config.duration_ms, config.timing_function)
        return EasedTiming(config)
    logger.debug("Discrete timing: %.1f fps", config.fps)
    return DiscreteTiming(config)
