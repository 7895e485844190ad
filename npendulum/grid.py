#!/usr/bin/env python3
"""
Background grid drawing.

Two looks share one routine:
- plain (detailed=False): white fill and faint centre axes, used behind the live
  scene so it stays out of the way;
- graph paper (detailed=True): white fill, a fine grid every scale/5 pixels
  aligned to the centre, darker axes and a black border, used behind the
  trajectory plot for reading off coordinates.

Fine lines are never closer than MIN_GRID_STEP pixels. Below a scale of
5 * MIN_GRID_STEP px/m (long chains) the spacing is MIN_GRID_STEP rather than scale/5.
"""
from typing import Optional

import pygame

from .constants import (
    AXIS_COLOR,
    AXIS_DETAILED_COLOR,
    BACKGROUND_COLOR,
    BORDER_COLOR,
    GRID_FINE_COLOR,
    MIN_GRID_STEP,
)


def grid_offsets(center: float, extent: float, step: float):
    """Pixel positions of grid lines along one axis, starting at center % step."""
    pos = center % step
    while pos < extent:
        yield pos
        pos += step


def draw_grid(surf: pygame.Surface, w: int, h: int, scale: Optional[float], detailed: bool = False) -> None:
    ox, oy = w / 2, h / 2

    surf.fill(BACKGROUND_COLOR)

    # Fine grid
    if detailed and scale and scale > 0:
        step = max(scale / 5, MIN_GRID_STEP)
        for x in grid_offsets(ox, w, step):
            pygame.draw.line(surf, GRID_FINE_COLOR, (x, 0), (x, h), 1)
        for y in grid_offsets(oy, h, step):
            pygame.draw.line(surf, GRID_FINE_COLOR, (0, y), (w, y), 1)

    # Centre axes
    axis_color = AXIS_DETAILED_COLOR if detailed else AXIS_COLOR
    pygame.draw.line(surf, axis_color, (0, oy), (w, oy), 1)
    pygame.draw.line(surf, axis_color, (ox, 0), (ox, h), 1)

    if detailed:
        pygame.draw.rect(surf, BORDER_COLOR, pygame.Rect(0, 0, w, h), 1)
