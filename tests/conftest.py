"""
Shared fixtures for the terrain engine tests
"""
import logging

import numpy as np
import pytest


class RecordingSurface:
    """A DrawingSurface that records every call instead of drawing"""

    def __init__(self, width=800, height=600):
        self.width = width
        self.height = height
        self.blits = []
        self.lines = []
        self.clears = 0

    def clear(self):
        self.clears += 1
        self.blits.clear()
        self.lines.clear()

    def blit(self, pixels, x, y):
        self.blits.append((np.array(pixels, copy=True), x, y))

    def draw_line(self, start, end, color, width):
        self.lines.append((start, end, color, width))


class FakeClock:
    """A manually advanced clock returning seconds"""

    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance_ms(self, ms):
        self.now += ms / 1000.0


@pytest.fixture
def logger():
    return logging.getLogger("terrain_engine.tests")


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def clock():
    return FakeClock()
