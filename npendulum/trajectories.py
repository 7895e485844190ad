#!/usr/bin/env python3
"""
Trajectory plot renderer: the full path of every body from frame 0 to the
current frame, on graph paper.

Every redraw rebuilds all paths from scratch, O(bodies * frame_index). Redraws
are capped by the display cadence, and the paths only ever grow, so nothing is
cached.
"""
from typing import Optional

import numpy as np
import pygame

from .camera import Camera2D
from .constants import TRAJECTORY_WIDTH
from .data_models import RenderConfig, TrajectoryDataset
from .grid import draw_grid


def trajectory_points(dataset: TrajectoryDataset, body: int, frame_index: int) -> np.ndarray:
    """World positions of `body` for frames 0..frame_index."""
    return dataset.body_path(body, 0, frame_index)


def draw_trajectories(surf: pygame.Surface, dataset: Optional[TrajectoryDataset], frame_index: int,
                      config: RenderConfig) -> bool:
    """Draw every body's path onto `surf`. Returns False when there was nothing to draw."""
    if dataset is None:
        return False
    w, h = surf.get_size()
    camera = Camera2D.fit(min(w, h), dataset.spatial_limit, (w, h))
    if camera is None:
        return False

    draw_grid(surf, w, h, camera.scale, detailed=True)

    for k in range(dataset.body_count):
        pts = camera.path_to_screen(trajectory_points(dataset, k, frame_index))
        color = config.color_for(k)
        if len(pts) > 1:
            pygame.draw.lines(surf, color, False, pts.tolist(), TRAJECTORY_WIDTH)
        else:
            pygame.draw.circle(surf, color, (pts[0][0], pts[0][1]), TRAJECTORY_WIDTH / 2)
    return True
