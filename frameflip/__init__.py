"""Sprite-sheet frame animation playback."""

__version__ = "0.3.0"

from frameflip.config import (
    AnimationConfig,
    ConfigError,
    Direction,
    DrawType,
    FillMode,
    LayoutAxis,
    MotionDirection,
)
from frameflip.playback.engine import FrameAnimation
from frameflip.playback.loop import FrameLoop
from frameflip.playback.state import PlaybackEvents, PlaybackState
from frameflip.render.target import SpriteElement

__all__ = [
    "AnimationConfig",
    "ConfigError",
    "Direction",
    "DrawType",
    "FillMode",
    "FrameAnimation",
    "FrameLoop",
    "LayoutAxis",
    "MotionDirection",
    "PlaybackEvents",
    "PlaybackState",
    "SpriteElement",
    "__version__",
]
