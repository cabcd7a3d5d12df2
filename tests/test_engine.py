import logging
from unittest.mock import MagicMock

import pytest

from frameflip.config import AnimationConfig, ConfigError, Direction, DrawType, FillMode
from frameflip.playback.engine import FrameAnimation
from frameflip.playback.state import PlaybackEvents, PlaybackState
from frameflip.render.target import SpriteElement


def make(loop, recorder, events=None, **config):
    return FrameAnimation(None, AnimationConfig(**config), events=events, loop=loop, renderer=recorder)


def test_single_strip_background_positions(loop, ticker, element):
    anim = FrameAnimation(element, AnimationConfig(total_frame_number=24, column_number=1, fps=60), loop=loop)
    anim.start()

    ticker.tick()
    assert element.style["background-position"] == "0 0%"

    ticker.tick(23)
    assert element.style["background-position"] == "0 100%"


def test_finite_playback_settles_back_to_first_frame(loop, ticker, recorder):
    anim = make(loop, recorder, total_frame_number=5)
    anim.start()

    ticker.tick(6)
    assert recorder.frames == [0, 1, 2, 3, 4, 0]
    assert anim.state is PlaybackState.TERMINATION

    ticker.tick(5)
    assert recorder.frames == [0, 1, 2, 3, 4, 0]
    assert anim.handle is None
    assert loop.pending == 0


@pytest.mark.parametrize("fill_mode", [FillMode.FORWARDS, FillMode.BOTH])
def test_filling_playback_holds_last_frame(loop, ticker, recorder, fill_mode):
    anim = make(loop, recorder, total_frame_number=5, fill_mode=fill_mode)
    anim.start()

    ticker.tick(10)
    assert recorder.frames == [0, 1, 2, 3, 4]
    assert anim.state is PlaybackState.TERMINATION
    assert anim.handle is None
    assert anim.visible_frame == 4


def test_infinite_playback_is_periodic(loop, ticker, recorder):
    anim = make(loop, recorder, total_frame_number=4, infinite=True)
    anim.start()

    ticker.tick(12)
    assert recorder.frames == [0, 1, 2, 3] * 3
    assert anim.state is PlaybackState.INFINITE_CONTINUE
    assert anim.is_running


def test_alternate_bounces_each_cycle(loop, ticker, recorder):
    anim = make(loop, recorder, total_frame_number=8, infinite=True, motion_direction="alternate")
    anim.start()

    ticker.tick(24)
    forward = list(range(8))
    assert recorder.frames == forward + forward[::-1] + forward
    assert recorder.directions == [Direction.LTR] * 8 + [Direction.RTL] * 8 + [Direction.LTR] * 8


def test_alternate_resets_counter_at_each_flip(loop, ticker, recorder):
    seen = []
    events = PlaybackEvents(on_complete=lambda ts, a: seen.append(a.direction))
    anim = make(loop, recorder, events=events, total_frame_number=3, infinite=True, motion_direction="alternate")
    anim.start()

    ticker.tick(3)
    assert anim.current_frame == 0
    assert anim.direction is Direction.RTL
    ticker.tick(3)
    assert anim.current_frame == 0
    assert anim.direction is Direction.LTR
    assert seen == [Direction.LTR, Direction.RTL]


def test_delay_with_backwards_fill_shows_first_frame(loop, ticker, recorder):
    anim = make(loop, recorder, total_frame_number=4, delay_frames=2, fill_mode="both")
    anim.start()
    assert anim.current_frame == -2

    ticker.tick(8)
    assert recorder.frames == [0, 0, 0, 1, 2, 3]


def test_delay_without_fill_wraps_counter(loop, ticker, recorder):
    anim = make(loop, recorder, total_frame_number=4, delay_frames=2)
    anim.start()

    ticker.tick(8)
    assert recorder.frames == [2, 1, 0, 1, 2, 3, 0]


def test_rtl_playback_mirrors_ltr(loop, ticker, recorder):
    anim = make(loop, recorder, total_frame_number=4, fill_mode="forwards")
    anim.start(Direction.RTL)

    ticker.tick(4)
    assert recorder.frames == [3, 2, 1, 0]


def test_ticks_inside_frame_interval_do_not_advance(loop, recorder):
    anim = make(loop, recorder, total_frame_number=4, fps=60)
    anim.start()

    loop.tick(1000.0)
    loop.tick(1005.0)
    loop.tick(1010.0)
    assert recorder.frames == [0]

    loop.tick(1017.0)
    assert recorder.frames == [0, 1]


def test_start_while_running_is_idempotent(loop, ticker, recorder):
    anim = make(loop, recorder, total_frame_number=10)
    anim.start()
    ticker.tick(3)
    handle = anim.handle

    anim.start()
    assert anim.current_frame == 3
    assert anim.handle == handle

    ticker.tick()
    assert recorder.frames == [0, 1, 2, 3]


def test_start_in_other_direction_restarts(loop, ticker, recorder):
    anim = make(loop, recorder, total_frame_number=10)
    anim.start()
    ticker.tick(3)

    anim.start(Direction.RTL)
    assert anim.current_frame == 0
    ticker.tick()
    assert recorder.frames[-1] == 9
    assert loop.pending == 1


def test_interrupt_and_resume(loop, ticker, recorder):
    anim = make(loop, recorder, total_frame_number=10)
    anim.start()
    ticker.tick(3)

    anim.interrupt()
    assert anim.state is PlaybackState.TERMINATION
    assert anim.handle is None
    ticker.tick(5)
    assert recorder.frames == [0, 1, 2]

    anim.resume()
    assert anim.is_running
    ticker.tick(2)
    assert recorder.frames == [0, 1, 2, 3, 4]


def test_resume_while_running_is_ignored(loop, ticker, recorder):
    anim = make(loop, recorder, total_frame_number=10)
    anim.start()
    ticker.tick(2)
    handle = anim.handle

    anim.resume()
    assert anim.handle == handle


def test_resume_reverse_mirrors_counter(loop, ticker, recorder):
    anim = make(loop, recorder, total_frame_number=10)
    anim.start()
    ticker.tick(3)
    anim.interrupt()

    anim.resume(reverse=True)
    assert anim.current_frame == 7
    assert anim.direction is Direction.RTL


def test_cancel_resets_and_releases(loop, ticker, recorder):
    on_cancel = MagicMock()
    anim = make(loop, recorder, events=PlaybackEvents(on_cancel=on_cancel), total_frame_number=10)
    anim.start()
    ticker.tick(4)

    anim.cancel()
    assert anim.current_frame == 0
    assert anim.handle is None
    assert anim.state is PlaybackState.TERMINATION
    assert anim.cancelled
    assert recorder.clears == 1
    on_cancel.assert_called_once_with(anim)

    anim.cancel()
    anim.start()
    anim.render_frame(3)
    ticker.tick(3)
    assert recorder.clears == 1
    assert recorder.frames == [0, 1, 2, 3]
    assert loop.pending == 0


def test_cancel_clears_element_style(loop, ticker, element):
    anim = FrameAnimation(element, AnimationConfig(total_frame_number=6, draw_type="transform"), loop=loop)
    anim.start()
    ticker.tick(2)
    assert "transform" in element.style

    anim.cancel()
    assert element.style == {}
    assert anim.target is None


def test_cancel_from_update_hook_stops_tick(loop, ticker, recorder):
    def on_update(timestamp, anim):
        if len(recorder.frames) == 3:
            anim.cancel()

    anim = make(loop, recorder, events=PlaybackEvents(on_update=on_update), total_frame_number=10)
    anim.start()

    ticker.tick(6)
    assert recorder.frames == [0, 1, 2]
    assert anim.current_frame == 0
    assert loop.pending == 0


def test_restart_from_complete_hook_keeps_single_chain(loop, ticker, recorder):
    restarted = []

    def on_complete(timestamp, anim):
        if not restarted:
            restarted.append(timestamp)
            anim.start(Direction.RTL)

    anim = make(
        loop, recorder, events=PlaybackEvents(on_complete=on_complete),
        total_frame_number=3, fill_mode="forwards",
    )
    anim.start()

    for _ in range(8):
        ticker.tick()
        assert loop.pending <= 1
    assert recorder.frames == [0, 1, 2, 2, 1, 0]
    assert anim.state is PlaybackState.TERMINATION


def test_hooks_receive_animation(loop, ticker, recorder):
    events = PlaybackEvents(on_start=MagicMock(), on_update=MagicMock(), on_complete=MagicMock())
    anim = make(loop, recorder, events=events, total_frame_number=3, fill_mode="forwards")
    anim.start()
    events.on_start.assert_called_once_with(anim)

    ticker.tick(5)
    assert events.on_update.call_count == 3
    first_timestamp, first_anim = events.on_update.call_args_list[0].args
    assert first_timestamp == 1000.0
    assert first_anim is anim
    events.on_complete.assert_called_once()
    assert events.on_complete.call_args.args[1] is anim


def test_infinite_loop_fires_start_each_cycle(loop, ticker, recorder):
    events = PlaybackEvents(on_start=MagicMock(), on_complete=MagicMock())
    anim = make(loop, recorder, events=events, total_frame_number=2, infinite=True)
    anim.start()

    ticker.tick(6)
    assert events.on_complete.call_count == 3
    assert events.on_start.call_count == 4


def test_failing_hook_does_not_stop_playback(loop, ticker, recorder, caplog):
    events = PlaybackEvents(on_update=MagicMock(side_effect=RuntimeError("boom")))
    anim = make(loop, recorder, events=events, total_frame_number=4, fill_mode="forwards")
    anim.start()

    with caplog.at_level(logging.ERROR):
        ticker.tick(4)
    assert recorder.frames == [0, 1, 2, 3]
    assert "on_update hook failed" in caplog.text


def test_failing_render_is_skipped(loop, ticker):
    calls = []

    def render(index, direction):
        calls.append(index)
        if index == 1:
            raise ValueError("bad frame")

    anim = FrameAnimation(None, AnimationConfig(total_frame_number=4, fill_mode="forwards"), loop=loop, renderer=render)
    anim.start()
    ticker.tick(4)
    assert calls == [0, 1, 2, 3]


def test_render_frame_jumps(loop, recorder):
    anim = make(loop, recorder, total_frame_number=8)

    anim.render_frame(5, Direction.RTL)
    assert anim.current_frame == 5
    assert recorder.frames == [2]
    assert recorder.directions == [Direction.RTL]

    anim.render_frame(11)
    assert recorder.frames == [2, 3]


def test_render_frame_while_running_moves_counter(loop, ticker, recorder):
    anim = make(loop, recorder, total_frame_number=8)
    anim.start()
    ticker.tick(2)

    anim.render_frame(5)
    ticker.tick()
    assert recorder.frames == [0, 1, 5, 5]


def test_config_mapping_is_accepted(loop, recorder):
    anim = FrameAnimation(None, {"total_frame_number": 6, "fill_mode": "both"}, loop=loop, renderer=recorder)
    assert anim.config.fill_mode is FillMode.BOTH


@pytest.mark.parametrize("total", [0, 1])
def test_degenerate_frame_count_is_rejected(loop, total):
    with pytest.raises(ConfigError):
        FrameAnimation(SpriteElement(), {"total_frame_number": total}, loop=loop)


def test_image_source_on_non_image_target_degrades(loop, ticker, caplog):
    element = SpriteElement(tag="div")
    config = AnimationConfig(total_frame_number=2, draw_type=DrawType.IMAGE_SOURCE, asset_list=("a.png", "b.png"))
    with caplog.at_level(logging.WARNING):
        anim = FrameAnimation(element, config, loop=loop)
    assert "cannot accept" in caplog.text

    anim.start()
    ticker.tick(3)
    assert element.src == ""
    assert anim.state is PlaybackState.TERMINATION


def test_image_source_swaps_src(loop, ticker):
    element = SpriteElement(tag="img")
    config = AnimationConfig(
        total_frame_number=3, draw_type="image_source", asset_list=("a.png", "b.png", "c.png"),
        fill_mode="forwards",
    )
    anim = FrameAnimation(element, config, loop=loop)
    anim.start()

    ticker.tick(2)
    assert element.src == "b.png"
    ticker.tick()
    assert element.src == "c.png"

    anim.cancel()
    assert element.src == "a.png"
