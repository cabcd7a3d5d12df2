import pytest

from frameflip.config import AnimationConfig, Direction, FillMode, LayoutAxis
from frameflip.timing.frames import SpriteLayout, grid_cell, normalize_frame, row_count, step_percent


@pytest.mark.parametrize("raw, expected", [(0, 0), (3, 3), (8, 0), (11, 3), (-1, 1), (-6, 6)])
def test_normalize_wraps(raw, expected):
    assert normalize_frame(raw, 8) == expected


def test_normalize_rtl_mirrors():
    assert [normalize_frame(i, 4, direction=Direction.RTL) for i in range(4)] == [3, 2, 1, 0]


@pytest.mark.parametrize("fill_mode", [FillMode.BACKWARDS, FillMode.BOTH])
def test_negative_counter_holds_first_frame(fill_mode):
    assert normalize_frame(-3, 8, fill_mode) == 0
    assert normalize_frame(-3, 8, fill_mode, Direction.RTL) == 7


def test_negative_counter_wraps_without_backwards_fill():
    assert normalize_frame(-3, 8, FillMode.FORWARDS) == 3


def test_grid_helpers():
    assert row_count(10, 4) == 3
    assert row_count(12, 4) == 3
    assert grid_cell(5, 4) == (1, 1)
    assert grid_cell(11, 4) == (2, 3)


def test_step_percent():
    assert step_percent(5, boundary=True) == 25.0
    assert step_percent(5, boundary=False) == 20.0
    assert step_percent(1, boundary=True) == 0.0


def test_layout_from_grid_config():
    layout = SpriteLayout.from_config(AnimationConfig(total_frame_number=10, column_number=4))
    assert layout.grid
    assert (layout.columns, layout.rows) == (4, 3)
    assert layout.locate(9) == (2, 1)


def test_single_column_is_vertical_strip():
    config = AnimationConfig(total_frame_number=6, column_number=1, layout_axis="horizontal")
    layout = SpriteLayout.from_config(config)
    assert not layout.grid
    assert layout.axis is LayoutAxis.VERTICAL
    assert layout.locate(4) == (4, 0)


def test_horizontal_strip():
    layout = SpriteLayout.from_config(AnimationConfig(total_frame_number=6, layout_axis="horizontal"))
    assert (layout.columns, layout.rows) == (6, 1)
    assert layout.locate(4) == (0, 4)
    assert layout.linear_step(boundary=True) == 20.0


def test_single_row_grid_has_zero_row_step():
    layout = SpriteLayout.from_config(AnimationConfig(total_frame_number=4, column_number=4))
    row_percent, column_percent = layout.percent_steps(boundary=True)
    assert row_percent == 0.0
    assert column_percent == pytest.approx(100.0 / 3)
