"""Playback lifecycle states and hooks."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional, Sequence

if TYPE_CHECKING:
    from frameflip.playback.engine import FrameAnimation


class PlaybackState(Enum):
    """Lifecycle state of an animation."""

    TERMINATION = "termination"              # idle: initial and terminal, nothing scheduled
    RUNNING = "running"
    INFINITE_CONTINUE = "infinite_continue"  # running again after an infinite cycle completed


@dataclass
class PlaybackEvents:
    """Optional lifecycle hooks. Every hook receives the animation last.

    ``on_update`` and ``on_complete`` also receive the tick timestamp (ms),
    ``on_prefetch`` the per-asset load outcomes.
    """

    on_start: Optional[Callable[[FrameAnimation], None]] = None
    on_update: Optional[Callable[[float, FrameAnimation], None]] = None
    on_complete: Optional[Callable[[float, FrameAnimation], None]] = None
    on_cancel: Optional[Callable[[FrameAnimation], None]] = None
    on_prefetch: Optional[Callable[[Sequence[bool], FrameAnimation], None]] = None
