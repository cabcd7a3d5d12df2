"""Stylesheet ``@keyframes`` generator for grid sprite sheets.

Emits one keyframe stop per frame, using the same frame geometry as the
renderer adapters, so a sheet can be animated by a stylesheet alone.
"""

from __future__ import annotations

import logging

from frameflip.config import AnimationConfig, ConfigError, DrawType, parse_enum
from frameflip.constants import DEFAULT_KEYFRAMES_NAME
from frameflip.render.adapters import create_renderer, format_percent
from frameflip.render.target import SpriteElement
from frameflip.timing.frames import SpriteLayout

logger = logging.getLogger(__name__)

KEYFRAME_TYPES = (DrawType.BACKGROUND, DrawType.TRANSFORM, DrawType.OFFSET)


def generate_keyframes(
    total: int,
    columns: int,
    draw_type: DrawType | str = DrawType.BACKGROUND,
    name: str = DEFAULT_KEYFRAMES_NAME,
) -> str:
    """Return ``@keyframes`` text stepping through ``total`` frames.

    Raises:
        ConfigError: For counts below 2 frames / 1 column, more columns than
                     frames, or a draw type a stylesheet cannot express.
    """
    draw_type = parse_enum(DrawType, draw_type, "draw_type")
    if draw_type not in KEYFRAME_TYPES:
        raise ConfigError(f"Keyframes cannot be generated for draw type {draw_type.value!r}")
    if total < 2:
        raise ConfigError(f"At least 2 frames are needed for keyframes, got {total}")
    if columns > total:
        raise ConfigError(f"Column count ({columns}) can't be bigger than total frame count ({total})")

    config = AnimationConfig(total_frame_number=total, column_number=columns, draw_type=draw_type)
    layout = SpriteLayout.from_config(config)
    time_step = 100.0 / (total - 1)

    lines = [f"@keyframes {name} {{"]
    for index in range(total):
        element = SpriteElement()
        create_renderer(config, element, layout).render(index)
        declarations = " ".join(f"{prop}: {value};" for prop, value in element.style.items())
        lines.append(f"  {format_percent(index * time_step)}% {{ {declarations} }}")
    lines.append("}")

    logger.debug("Generated %d keyframes (%s, %d columns)", total, draw_type.value, columns)
    return "\n".join(lines) + "\n"
