#!/usr/bin/env python3
"""
Camera utilities for 2D world-to-screen transforms.

The physical origin (the pendulum pivot) always sits at the centre of the
panel and physical "up" is screen "up", so the y axis is inverted.
"""
import math
from typing import Optional, Tuple

import numpy as np


def compute_scale(dimension: float, limit: float) -> Optional[float]:
    """
    Pixels per meter so that `limit` meters span half of `dimension` pixels.
    Returns None for a zero, negative or non-finite limit.
    """
    if not math.isfinite(limit) or limit <= 0:
        return None
    scale = (dimension / 2) / limit
    if not math.isfinite(scale):
        return None
    return scale


def world_to_screen(x: float, y: float, scale: float, w: float, h: float) -> Tuple[float, float]:
    return (x * scale + w / 2, -y * scale + h / 2)


def world_to_screen_array(xy: np.ndarray, scale: float, w: float, h: float) -> np.ndarray:
    """Vectorised world_to_screen for an (N, 2) array of points."""
    out = np.empty(xy.shape, dtype=float)
    out[:, 0] = xy[:, 0] * scale + w / 2
    out[:, 1] = -xy[:, 1] * scale + h / 2
    return out


class Camera2D:
    """
    Fixed camera for one square panel: maps meters to pixels around the panel centre.

    Attributes:
        scale: pixels per meter.
        viewport_size: (width, height) in pixels.
    """

    def __init__(self, scale: float, viewport_size: Tuple[int, int]):
        self.scale = scale
        self.viewport_size = viewport_size

    @classmethod
    def fit(cls, dimension: float, limit: float, viewport_size: Tuple[int, int]) -> Optional["Camera2D"]:
        """Camera whose scale fits `limit` into half of `dimension`, or None if degenerate."""
        scale = compute_scale(dimension, limit)
        if scale is None:
            return None
        return cls(scale, viewport_size)

    @property
    def center(self) -> Tuple[float, float]:
        return (self.viewport_size[0] / 2, self.viewport_size[1] / 2)

    def world_to_screen(self, pos: Tuple[float, float]) -> Tuple[float, float]:
        w, h = self.viewport_size
        return world_to_screen(pos[0], pos[1], self.scale, w, h)

    def path_to_screen(self, xy: np.ndarray) -> np.ndarray:
        w, h = self.viewport_size
        return world_to_screen_array(xy, self.scale, w, h)

    def screen_to_world(self, screen: Tuple[float, float]) -> Tuple[float, float]:
        w, h = self.viewport_size
        return ((screen[0] - w / 2) / self.scale, -(screen[1] - h / 2) / self.scale)
