import os
import sys

import pytest

# Ensure frameflip can be imported from a source checkout
sys.path.append(os.getcwd())

from frameflip.playback.loop import FrameLoop
from frameflip.render.adapters import RendererAdapter
from frameflip.render.target import SpriteElement


class RecordingRenderer(RendererAdapter):
    """Renderer that records every frame it is asked to draw."""

    name = "recording"

    def __init__(self):
        self.target = None
        self.layout = None
        self.enabled = True
        self.frames = []
        self.directions = []
        self.clears = 0

    def _draw(self, frame_index, direction):
        self.frames.append(frame_index)
        self.directions.append(direction)

    def _clear(self):
        self.clears += 1


class Ticker:
    """Drives a FrameLoop with evenly spaced timestamps (ms)."""

    def __init__(self, loop, start=1000.0, step=17.0):
        self.loop = loop
        self.now = start
        self.step = step

    def tick(self, count=1):
        for _ in range(count):
            self.loop.tick(self.now)
            self.now += self.step


@pytest.fixture
def loop():
    """Fresh host frame loop for each test."""
    return FrameLoop()


@pytest.fixture
def ticker(loop):
    return Ticker(loop)


@pytest.fixture
def recorder():
    return RecordingRenderer()


@pytest.fixture
def element():
    return SpriteElement()
