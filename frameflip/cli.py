"""Command-line entry point for keyframes generation and headless playback."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from frameflip.config import (
    AnimationConfig,
    ConfigError,
    Direction,
    DrawType,
    FillMode,
    MotionDirection,
    load_profile,
)
from frameflip.constants import DEFAULT_FPS, DEFAULT_KEYFRAMES_NAME
from frameflip.playback.engine import FrameAnimation
from frameflip.playback.loop import FrameLoop
from frameflip.playback.state import PlaybackEvents
from frameflip.tools.keyframes import KEYFRAME_TYPES, generate_keyframes

logger = logging.getLogger(__name__)

DEFAULT_MAX_TICKS = 10_000


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    from frameflip import __version__

    parser = argparse.ArgumentParser(
        prog="frameflip",
        description="Sprite-sheet frame animation playback",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    kf = sub.add_parser("keyframes", help="Print @keyframes text for a grid sprite sheet")
    kf.add_argument("--total", type=int, required=True, help="Total frame count")
    kf.add_argument("--columns", type=int, required=True, help="Frames per row")
    kf.add_argument(
        "--type", dest="draw_type", default=DrawType.BACKGROUND.value,
        choices=[t.value for t in KEYFRAME_TYPES], help="Style property to animate",
    )
    kf.add_argument("--name", default=DEFAULT_KEYFRAMES_NAME, help="Keyframes rule name")

    play = sub.add_parser("play", help="Run an animation headlessly, logging each frame")
    play.add_argument("--profile", type=str, default=None, help="Path to a TOML profile file")
    play.add_argument("--total", type=int, default=None, help="Total frame count")
    play.add_argument("--columns", type=int, default=None, help="Frames per row (grid sheets)")
    play.add_argument("--fps", type=float, default=None, help="Playback frame rate")
    play.add_argument("--duration-ms", type=float, default=None, help="Eased playback duration")
    play.add_argument("--timing-function", default=None, help="Timing curve preset")
    play.add_argument("--infinite", action="store_true", help="Loop forever (bounded by --max-ticks)")
    play.add_argument("--alternate", action="store_true", help="Reverse direction every cycle")
    play.add_argument(
        "--fill-mode", choices=[m.value for m in FillMode], default=None, help="Post-completion fill",
    )
    play.add_argument("--rtl", action="store_true", help="Play right-to-left")
    play.add_argument(
        "--max-ticks", type=int, default=DEFAULT_MAX_TICKS, help="Stop after this many host ticks",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AnimationConfig:
    """Build the playback config from a profile and/or command-line overrides."""
    if args.profile:
        config = load_profile(Path(args.profile))
    elif args.total is not None:
        config = AnimationConfig(total_frame_number=args.total)
    else:
        raise ConfigError("play needs --profile or --total")

    overrides = {}
    if args.total is not None:
        overrides["total_frame_number"] = args.total
    if args.columns is not None:
        overrides["column_number"] = args.columns
    if args.fps is not None:
        overrides["fps"] = args.fps
    if args.duration_ms is not None:
        overrides["duration_ms"] = args.duration_ms
    if args.timing_function is not None:
        overrides["timing_function"] = args.timing_function
    if args.infinite:
        overrides["infinite"] = True
    if args.alternate:
        overrides["motion_direction"] = MotionDirection.ALTERNATE
    if args.fill_mode is not None:
        overrides["fill_mode"] = args.fill_mode
    return config.replace(**overrides) if overrides else config


def play(config: AnimationConfig, direction: Direction, max_ticks: int) -> int:
    """Play ``config`` on a host loop until it finishes. Returns frames rendered."""
    rendered: list[int] = []

    def render(index: int, frame_direction: Direction) -> None:
        rendered.append(index)
        logger.info("Frame %d (%s)", index, frame_direction.value)

    events = PlaybackEvents(
        on_complete=lambda timestamp, anim: logger.info("Cycle complete at %.0fms", timestamp),
    )
    loop = FrameLoop(fps=max(DEFAULT_FPS, config.fps))
    animation = FrameAnimation(None, config, events=events, loop=loop, renderer=render)
    animation.start(direction)

    ticks = loop.run(max_ticks=max_ticks)
    if animation.is_running:
        animation.interrupt()
    logger.info("Rendered %d frames in %d ticks", len(rendered), ticks)
    return len(rendered)


def main(argv: list[str] | None = None) -> int:
    """Application entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        if args.command == "keyframes":
            sys.stdout.write(generate_keyframes(args.total, args.columns, args.draw_type, args.name))
            return 0

        config = build_config(args)
        play(config, Direction.RTL if args.rtl else Direction.LTR, args.max_ticks)
        return 0
    except ConfigError as exc:
        logger.error("%s", exc)
        return 2
