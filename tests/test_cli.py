import logging

import pytest

from frameflip.cli import build_config, main, parse_args, play
from frameflip.config import AnimationConfig, ConfigError, Direction, FillMode, MotionDirection


def test_keyframes_command(capsys):
    assert main(["keyframes", "--total", "4", "--columns", "2", "--name", "run"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("@keyframes run {")
    assert "100% { background-position: 100% 100%; }" in out


def test_keyframes_command_rejects_bad_columns(caplog):
    with caplog.at_level(logging.ERROR):
        assert main(["keyframes", "--total", "4", "--columns", "6"]) == 2
    assert "can't be bigger" in caplog.text


def test_play_command():
    assert main(["play", "--total", "3", "--fps", "240"]) == 0


def test_play_without_source_fails():
    assert main(["play"]) == 2


def test_build_config_overrides_profile(tmp_path):
    path = tmp_path / "idle.toml"
    AnimationConfig(total_frame_number=10, fill_mode="forwards").to_toml(path)

    args = parse_args(["play", "--profile", str(path), "--columns", "5", "--alternate", "--infinite"])
    config = build_config(args)
    assert config.total_frame_number == 10
    assert config.column_number == 5
    assert config.fill_mode is FillMode.FORWARDS
    assert config.motion_direction is MotionDirection.ALTERNATE
    assert config.infinite


def test_build_config_requires_total():
    with pytest.raises(ConfigError):
        build_config(parse_args(["play", "--fps", "30"]))


def test_play_renders_every_frame():
    config = AnimationConfig(total_frame_number=5, fps=240, fill_mode="forwards")
    assert play(config, Direction.LTR, max_ticks=100) == 5


def test_play_infinite_is_bounded_by_max_ticks():
    config = AnimationConfig(total_frame_number=3, fps=240, infinite=True)
    assert play(config, Direction.RTL, max_ticks=9) <= 9
