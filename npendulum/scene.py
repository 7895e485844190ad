#!/usr/bin/env python3
"""
Live scene renderer: the pendulum chain at the current frame.

Draw order (back to front)
1. plain grid
2. trace: translucent red tail of the last body over the previous
   trace_length frames
3. rods: one polyline from the pivot through every body in index order
4. markers: pivot dot, then one dot per body
"""
from typing import Optional

import numpy as np
import pygame

from .camera import Camera2D
from .constants import (
    BODY_COLOR,
    BODY_RADIUS,
    PIVOT_COLOR,
    PIVOT_RADIUS,
    ROD_COLOR,
    ROD_WIDTH,
    TRACE_COLOR,
    TRACE_WIDTH,
)
from .data_models import RenderConfig, TrajectoryDataset
from .grid import draw_grid


def trace_points(dataset: TrajectoryDataset, frame_index: int, trace_length: int) -> np.ndarray:
    """World positions of the last body for frames max(0, f - trace_length)..f."""
    start = max(0, frame_index - trace_length)
    return dataset.body_path(dataset.body_count - 1, start, frame_index)


def chain_points(dataset: TrajectoryDataset, frame_index: int) -> np.ndarray:
    """World positions of the pivot followed by every body at one frame."""
    bodies = dataset.frames[frame_index].reshape(dataset.body_count, 2)
    return np.vstack([np.zeros((1, 2)), bodies])


def draw_trace(surf: pygame.Surface, camera: Camera2D, points: np.ndarray) -> None:
    if len(points) < 2:
        return
    # pygame ignores alpha when drawing straight onto an opaque surface
    overlay = pygame.Surface(surf.get_size(), pygame.SRCALPHA)
    pygame.draw.lines(overlay, TRACE_COLOR, False, camera.path_to_screen(points).tolist(), TRACE_WIDTH)
    surf.blit(overlay, (0, 0))


def draw_scene(surf: pygame.Surface, dataset: Optional[TrajectoryDataset], frame_index: int,
               config: RenderConfig) -> bool:
    """Draw one frame onto `surf`. Returns False when there was nothing to draw."""
    if dataset is None:
        return False
    w, h = surf.get_size()
    camera = Camera2D.fit(w, dataset.spatial_limit, (w, h))
    if camera is None:
        return False

    draw_grid(surf, w, h, camera.scale, detailed=False)

    draw_trace(surf, camera, trace_points(dataset, frame_index, config.trace_length))

    chain = camera.path_to_screen(chain_points(dataset, frame_index))
    pygame.draw.lines(surf, ROD_COLOR, False, chain.tolist(), ROD_WIDTH)

    pivot = chain[0]
    pygame.draw.circle(surf, PIVOT_COLOR, (pivot[0], pivot[1]), PIVOT_RADIUS)
    for x, y in chain[1:]:
        pygame.draw.circle(surf, BODY_COLOR, (x, y), BODY_RADIUS)
    return True
