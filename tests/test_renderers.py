import pygame
import pytest

from conftest import make_dataset
from npendulum.constants import (
    AXIS_COLOR,
    AXIS_DETAILED_COLOR,
    BACKGROUND_COLOR,
    BODY_COLOR,
    BORDER_COLOR,
    GRID_FINE_COLOR,
    MIN_GRID_STEP,
    PIVOT_COLOR,
)
from npendulum.grid import draw_grid, grid_offsets
from npendulum.scene import chain_points, draw_scene, trace_points
from npendulum.trajectories import draw_trajectories, trajectory_points

SENTINEL = (1, 2, 3)


def rgb(surf, pos):
    return tuple(surf.get_at((int(pos[0]), int(pos[1]))))[:3]


def has_color_near(surf, pos, color, radius=2):
    x0, y0 = int(round(pos[0])), int(round(pos[1]))
    for dx in range(-radius, radius + 1):
        for dy in range(-radius, radius + 1):
            if rgb(surf, (x0 + dx, y0 + dy)) == tuple(color):
                return True
    return False


@pytest.fixture
def surf():
    s = pygame.Surface((400, 400))
    s.fill(SENTINEL)
    return s


# -----------------------
# Grid
# -----------------------

def test_plain_grid(surf):
    draw_grid(surf, 400, 400, 100.0, detailed=False)
    assert rgb(surf, (5, 5)) == BACKGROUND_COLOR
    assert rgb(surf, (50, 200)) == AXIS_COLOR
    assert rgb(surf, (200, 50)) == AXIS_COLOR
    assert rgb(surf, (0, 0)) == BACKGROUND_COLOR  # no border
    # no fine grid either
    assert rgb(surf, (220, 50)) == BACKGROUND_COLOR


def test_detailed_grid(surf):
    draw_grid(surf, 400, 400, 100.0, detailed=True)
    assert rgb(surf, (0, 50)) == BORDER_COLOR
    assert rgb(surf, (399, 50)) == BORDER_COLOR
    assert rgb(surf, (50, 200)) == AXIS_DETAILED_COLOR
    # fine lines every 20 px, aligned with the centre
    assert rgb(surf, (220, 50)) == GRID_FINE_COLOR
    assert rgb(surf, (50, 180)) == GRID_FINE_COLOR
    assert rgb(surf, (230, 55)) == BACKGROUND_COLOR


def test_detailed_grid_without_scale_skips_fine_lines(surf):
    draw_grid(surf, 400, 400, None, detailed=True)
    assert rgb(surf, (220, 50)) == BACKGROUND_COLOR
    assert rgb(surf, (0, 50)) == BORDER_COLOR


def test_fine_grid_spacing_has_a_floor(surf):
    # scale/5 would be 0.2 px; lines fall back to every MIN_GRID_STEP px
    draw_grid(surf, 400, 400, 1.0, detailed=True)
    assert rgb(surf, (200 + MIN_GRID_STEP, 51)) == GRID_FINE_COLOR
    assert rgb(surf, (201, 51)) == BACKGROUND_COLOR


def test_grid_offsets_are_centre_aligned():
    xs = list(grid_offsets(200, 400, 30))
    assert xs[0] == 20
    assert 200 in xs
    assert all(0 <= x < 400 for x in xs)


# -----------------------
# Scene
# -----------------------

@pytest.mark.parametrize("frame", [0, 1, 5, 99, 100, 101, 250, 299])
def test_trace_window(chain_dataset, frame):
    pts = trace_points(chain_dataset, frame, 100)
    assert len(pts) == min(frame, 100) + 1
    start = max(0, frame - 100)
    last = chain_dataset.body_count - 1
    assert pts[0].tolist() == list(chain_dataset.body_position(start, last))
    assert pts[-1].tolist() == list(chain_dataset.body_position(frame, last))


def test_chain_starts_at_pivot(chain_dataset):
    pts = chain_points(chain_dataset, 10)
    assert pts.shape == (chain_dataset.body_count + 1, 2)
    assert pts[0].tolist() == [0.0, 0.0]
    assert pts[2].tolist() == list(chain_dataset.body_position(10, 1))


def test_scene_draws_pivot_bodies_and_trace(surf, small_dataset, render_config):
    assert draw_scene(surf, small_dataset, 2, render_config)
    assert rgb(surf, (200, 200)) == PIVOT_COLOR
    # body 0 at (-1, 0) with scale 100
    assert rgb(surf, (100, 200)) == BODY_COLOR
    # trace passes (1, 0) -> (0, 1): translucent red over white
    r, g, b = rgb(surf, (250, 150))
    assert r == 255 and g < 200 and b < 200
    assert rgb(surf, (350, 350)) == BACKGROUND_COLOR


def test_scene_at_first_frame(surf, small_dataset, render_config):
    assert draw_scene(surf, small_dataset, 0, render_config)
    assert rgb(surf, (300, 200)) == BODY_COLOR


def test_scene_without_dataset_is_noop(surf, render_config):
    assert draw_scene(surf, None, 0, render_config) is False
    assert rgb(surf, (5, 5)) == SENTINEL


@pytest.mark.parametrize("limit", [0.0, -2.0])
def test_scene_skips_degenerate_limit(surf, render_config, limit):
    ds = make_dataset(limit=limit)
    assert draw_scene(surf, ds, 1, render_config) is False
    assert rgb(surf, (5, 5)) == SENTINEL


# -----------------------
# Trajectories
# -----------------------

@pytest.mark.parametrize("frame", [0, 1, 2, 150, 299])
def test_trajectory_length(chain_dataset, frame):
    for k in range(chain_dataset.body_count):
        pts = trajectory_points(chain_dataset, k, frame)
        assert len(pts) == frame + 1
        assert pts[-1].tolist() == list(chain_dataset.body_position(frame, k))


def test_trajectories_use_palette(surf, chain_dataset, render_config):
    assert draw_trajectories(surf, chain_dataset, 150, render_config)
    scale = 200 / 3.5
    # every body passes (radius, 0) at frame 0, drawn in its own colour
    for k in range(chain_dataset.body_count):
        pos = (200 + (k + 1) * scale, 200)
        assert has_color_near(surf, pos, render_config.color_for(k))
    assert rgb(surf, (0, 10)) == BORDER_COLOR


def test_trajectories_only_drawn_up_to_frame(surf, chain_dataset, render_config):
    draw_trajectories(surf, chain_dataset, 60, render_config)
    scale = 200 / 3.5
    # frame 150 is half way round: (-r, 0), not reached yet at frame 60
    pos = (200 - 3 * scale, 200)
    assert not has_color_near(surf, pos, render_config.color_for(2))


def test_trajectories_first_frame(surf, chain_dataset, render_config):
    assert draw_trajectories(surf, chain_dataset, 0, render_config)


def test_trajectories_scale_uses_smaller_side(render_config, small_dataset):
    wide = pygame.Surface((600, 400))
    assert draw_trajectories(wide, small_dataset, 2, render_config)
    # body 0 ends at (-1, 0): scale = 200 / 2 = 100 from the 400 px side
    assert has_color_near(wide, (200, 200), render_config.color_for(0))


def test_trajectories_without_dataset_is_noop(surf, render_config):
    assert draw_trajectories(surf, None, 0, render_config) is False
    assert rgb(surf, (5, 5)) == SENTINEL
