import os

# pygame surfaces only; no window is ever opened
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest

from npendulum.data_models import RenderConfig, TrajectoryDataset


def make_dataset(n=1, limit=2.0, frames=None):
    if frames is None:
        frames = [[1.0, 0.0], [0.0, 1.0], [-1.0, 0.0]]
    return TrajectoryDataset.from_payload({"n": n, "limit": limit, "positions": frames})


def circle_frames(n_bodies, n_frames):
    """Bodies on concentric circles; body k at radius k + 1."""
    import math
    frames = []
    for j in range(n_frames):
        a = 2 * math.pi * j / n_frames
        row = []
        for k in range(n_bodies):
            row += [(k + 1) * math.cos(a), (k + 1) * math.sin(a)]
        frames.append(row)
    return frames


@pytest.fixture
def small_dataset():
    return make_dataset()


@pytest.fixture
def chain_dataset():
    return make_dataset(n=3, limit=3.5, frames=circle_frames(3, 300))


@pytest.fixture
def render_config():
    return RenderConfig(sim_duration=60.0, trace_length=100)


class FakeTime:
    """Manually advanced stand-in for time.perf_counter."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def fake_time():
    return FakeTime()
