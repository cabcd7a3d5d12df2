"""Animation configuration, validation, and TOML profile loading/saving."""

from __future__ import annotations

import logging
import math
import numbers
import os
import sys
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Sequence, Union

logger = logging.getLogger(__name__)

import tomli_w

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from frameflip.constants import DEFAULT_FPS, DEFAULT_TIMING_FUNCTION


class ConfigError(ValueError):
    """Raised for configuration that cannot produce a valid animation."""


class FillMode(Enum):
    """What is visible before the first and after the last frame."""

    NONE = "none"
    FORWARDS = "forwards"
    BACKWARDS = "backwards"
    BOTH = "both"

    @property
    def holds_end(self) -> bool:
        return self in (FillMode.FORWARDS, FillMode.BOTH)

    @property
    def holds_start(self) -> bool:
        return self in (FillMode.BACKWARDS, FillMode.BOTH)


class MotionDirection(Enum):
    NORMAL = "normal"
    ALTERNATE = "alternate"


class LayoutAxis(Enum):
    """Axis along which a single-row sprite sheet is laid out."""

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class DrawType(Enum):
    """Which visual mutation renders a frame."""

    BACKGROUND = "background"
    TRANSFORM = "transform"
    OFFSET = "offset"
    IMAGE_SOURCE = "image_source"


class Direction(Enum):
    """Traversal direction of a cycle."""

    LTR = "ltr"
    RTL = "rtl"

    @property
    def flipped(self) -> Direction:
        return Direction.RTL if self is Direction.LTR else Direction.LTR


TimingFunction = Union[str, Sequence[float]]


def parse_enum(enum_cls: type[Enum], value: Any, name: str) -> Any:
    """Parse an enum member from a member or its (case-insensitive) string value."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.lower().strip().replace("-", "_")
        if enum_cls is DrawType and key in ("imgsrc", "img_src"):
            key = "image_source"
        for member in enum_cls:
            if member.value == key:
                return member
    choices = ", ".join(m.value for m in enum_cls)
    raise ConfigError(f"Invalid {name}: {value!r} (expected one of: {choices})")


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


@dataclass(frozen=True)
class AnimationConfig:
    """Configuration of one frame animation.

    Instances are immutable and validated on construction. Either ``fps``
    (discrete timing) or ``duration_ms`` + ``timing_function`` (eased timing)
    drives playback; setting ``duration_ms`` selects the eased variant.
    """

    total_frame_number: int
    column_number: int | None = None
    fps: float = DEFAULT_FPS
    duration_ms: float | None = None
    timing_function: TimingFunction = DEFAULT_TIMING_FUNCTION
    infinite: bool = False
    delay_frames: int = 0
    delay_ms: float = 0.0
    fill_mode: FillMode = FillMode.NONE
    motion_direction: MotionDirection = MotionDirection.NORMAL
    layout_axis: LayoutAxis = LayoutAxis.VERTICAL
    draw_type: DrawType = DrawType.BACKGROUND
    asset_list: tuple[str, ...] = field(default_factory=tuple)
    prefetch: bool = False

    def __post_init__(self) -> None:
        # Enum fields may be given as strings; normalise before validating
        object.__setattr__(self, "fill_mode", parse_enum(FillMode, self.fill_mode, "fill_mode"))
        object.__setattr__(
            self, "motion_direction",
            parse_enum(MotionDirection, self.motion_direction, "motion_direction"),
        )
        object.__setattr__(self, "layout_axis", parse_enum(LayoutAxis, self.layout_axis, "layout_axis"))
        object.__setattr__(self, "draw_type", parse_enum(DrawType, self.draw_type, "draw_type"))
        object.__setattr__(self, "asset_list", tuple(self.asset_list))
        if not _is_number(self.fps):
            object.__setattr__(self, "fps", DEFAULT_FPS)
        self.validate()

    def validate(self) -> None:
        """Raise :class:`ConfigError` if the configuration is unusable."""
        total = self.total_frame_number
        if not isinstance(total, int) or isinstance(total, bool):
            raise ConfigError(f"total_frame_number must be an integer, got {total!r}")
        if total < 1:
            raise ConfigError(f"total_frame_number must be >= 1, got {total}")

        if self.column_number is not None:
            columns = self.column_number
            if not isinstance(columns, int) or isinstance(columns, bool):
                raise ConfigError(f"column_number must be an integer, got {columns!r}")
            if columns < 1 or columns > total:
                raise ConfigError(
                    f"column_number must be between 1 and total_frame_number ({total}), got {columns}"
                )

        if not math.isfinite(self.fps) or self.fps <= 0:
            raise ConfigError(f"fps must be a finite number > 0, got {self.fps}")

        if self.duration_ms is not None:
            if not _is_number(self.duration_ms) or not math.isfinite(self.duration_ms) \
                    or self.duration_ms <= 0:
                raise ConfigError(f"duration_ms must be a finite number > 0, got {self.duration_ms!r}")

        if not isinstance(self.delay_frames, int) or isinstance(self.delay_frames, bool) \
                or self.delay_frames < 0:
            raise ConfigError(f"delay_frames must be an integer >= 0, got {self.delay_frames!r}")
        if not _is_number(self.delay_ms) or not math.isfinite(self.delay_ms) or self.delay_ms < 0:
            raise ConfigError(f"delay_ms must be a finite number >= 0, got {self.delay_ms!r}")

    @property
    def uses_grid(self) -> bool:
        """True for multi-column sprite sheets."""
        return self.column_number is not None and self.column_number > 1

    @property
    def uses_easing(self) -> bool:
        return self.duration_ms is not None

    @property
    def frame_interval_ms(self) -> float:
        return 1000.0 / self.fps

    def replace(self, **changes: Any) -> AnimationConfig:
        """Return a copy with the given fields changed (re-validated)."""
        return replace(self, **changes)

    # === TOML profiles ===

    @classmethod
    def from_toml(cls, path: Path) -> AnimationConfig:
        """Load configuration from the ``[animation]`` table of a TOML file."""
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return cls.from_dict(data.get("animation", data))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnimationConfig:
        """Build config from a parsed TOML dict."""
        if "total_frame_number" not in data:
            raise ConfigError("total_frame_number is required")

        timing_function = data.get("timing_function", DEFAULT_TIMING_FUNCTION)
        if isinstance(timing_function, list):
            timing_function = tuple(timing_function)

        return cls(
            total_frame_number=data["total_frame_number"],
            column_number=data.get("column_number"),
            fps=data.get("fps", DEFAULT_FPS),
            duration_ms=data.get("duration_ms"),
            timing_function=timing_function,
            infinite=bool(data.get("infinite", False)),
            delay_frames=data.get("delay_frames", 0),
            delay_ms=data.get("delay_ms", 0.0),
            fill_mode=data.get("fill_mode", FillMode.NONE),
            motion_direction=data.get("motion_direction", MotionDirection.NORMAL),
            layout_axis=data.get("layout_axis", LayoutAxis.VERTICAL),
            draw_type=data.get("draw_type", DrawType.BACKGROUND),
            asset_list=tuple(data.get("asset_list", ())),
            prefetch=bool(data.get("prefetch", False)),
        )

    def to_toml(self, path: Path) -> None:
        """Save configuration to a TOML file."""
        with open(path, "wb") as f:
            tomli_w.dump({"animation": self.to_dict()}, f)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to a TOML-compatible dict (None fields omitted)."""
        timing_function = self.timing_function
        if not isinstance(timing_function, str):
            timing_function = list(timing_function)

        data: dict[str, Any] = {
            "total_frame_number": self.total_frame_number,
            "fps": self.fps,
            "timing_function": timing_function,
            "infinite": self.infinite,
            "delay_frames": self.delay_frames,
            "delay_ms": self.delay_ms,
            "fill_mode": self.fill_mode.value,
            "motion_direction": self.motion_direction.value,
            "layout_axis": self.layout_axis.value,
            "draw_type": self.draw_type.value,
            "asset_list": list(self.asset_list),
            "prefetch": self.prefetch,
        }
        if self.column_number is not None:
            data["column_number"] = self.column_number
        if self.duration_ms is not None:
            data["duration_ms"] = self.duration_ms
        return data


def get_config_dir() -> Path:
    """Return the XDG config directory for frameflip.

    Uses $XDG_CONFIG_HOME/frameflip if set, otherwise ~/.config/frameflip.
    Creates the directory (and profiles/ subdirectory) if they don't exist.
    """
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        base = Path(xdg) / "frameflip"
    else:
        base = Path.home() / ".config" / "frameflip"
    profiles_dir = base / "profiles"
    profiles_dir.mkdir(parents=True, exist_ok=True)
    return base


def get_profiles_dir() -> Path:
    """Return the default profiles directory."""
    return get_config_dir() / "profiles"


def list_profiles() -> list[Path]:
    """List all .toml profile files in the default profiles directory."""
    profiles_dir = get_profiles_dir()
    if not profiles_dir.exists():
        return []
    return sorted(profiles_dir.glob("*.toml"))


def load_profile(path: Path) -> AnimationConfig:
    """Load a profile from a TOML file."""
    config = AnimationConfig.from_toml(path)
    logger.info("Loaded animation profile %s (%d frames)", Path(path).name, config.total_frame_number)
    return config
