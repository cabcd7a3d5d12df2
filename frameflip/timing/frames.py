"""Frame index arithmetic and sprite-sheet geometry."""

from __future__ import annotations

import math
from dataclasses import dataclass

from frameflip.config import AnimationConfig, Direction, FillMode, LayoutAxis


def normalize_frame(
    raw: int,
    total: int,
    fill_mode: FillMode = FillMode.NONE,
    direction: Direction = Direction.LTR,
) -> int:
    """Map a raw (possibly negative or overflowing) frame counter to a frame index.

    Negative counters belong to the pre-roll delay. With a backwards-filling
    mode they show frame 0, otherwise they wrap like any other counter.

    Returns:
        An index in ``[0, total)``.
    """
    tolerant = abs(raw) % total
    if raw < 0 and fill_mode.holds_start:
        tolerant = 0
    if direction is Direction.RTL:
        tolerant = total - tolerant - 1
    return tolerant


def row_count(total: int, columns: int) -> int:
    return math.ceil(total / columns)


def grid_cell(index: int, columns: int) -> tuple[int, int]:
    """Return the (row, column) of a frame index in a grid sheet."""
    return index // columns, index % columns


def step_percent(count: int, boundary: bool) -> float:
    """Percentage covered by one frame step along an axis of ``count`` frames.

    Position-style mutations interpolate between ``count - 1`` boundaries,
    translate-style mutations move by whole frames. A zero divisor (a single
    frame along the axis) yields a zero step.
    """
    divisor = count - 1 if boundary else count
    if divisor <= 0:
        return 0.0
    return 100.0 / divisor


@dataclass(frozen=True)
class SpriteLayout:
    """Geometry of a sprite sheet.

    A single-row layout lays ``total`` frames along ``axis``; a grid layout
    has ``columns`` frames per row and ``rows = ceil(total / columns)``.
    """

    total: int
    columns: int
    rows: int
    axis: LayoutAxis = LayoutAxis.VERTICAL
    grid: bool = False

    @classmethod
    def from_config(cls, config: AnimationConfig) -> SpriteLayout:
        total = config.total_frame_number
        if config.uses_grid:
            columns = config.column_number
            return cls(total=total, columns=columns, rows=row_count(total, columns), grid=True)

        # A single column is a vertical strip regardless of layout_axis
        axis = LayoutAxis.VERTICAL if config.column_number == 1 else config.layout_axis
        if axis is LayoutAxis.HORIZONTAL:
            return cls(total=total, columns=total, rows=1, axis=axis)
        return cls(total=total, columns=1, rows=total, axis=axis)

    def locate(self, index: int) -> tuple[int, int]:
        """Return the (row, column) holding a frame index."""
        if not self.grid:
            if self.axis is LayoutAxis.HORIZONTAL:
                return 0, index
            return index, 0
        return grid_cell(index, self.columns)

    def linear_step(self, boundary: bool) -> float:
        """Per-frame step of a single-row sheet."""
        return step_percent(self.total, boundary)

    def percent_steps(self, boundary: bool) -> tuple[float, float]:
        """Return (row_percent, column_percent) steps of a grid sheet."""
        return step_percent(self.rows, boundary), step_percent(self.columns, boundary)
