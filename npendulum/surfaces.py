#!/usr/bin/env python3
"""
Drawing surfaces for the two panels (live scene and trajectory plot).

Both surfaces are square and as wide as their container. A resize replaces
them; when playback is paused the frozen frame is drawn again straight away so
the panels never go blank. While playing the next scheduled pass repaints.
"""
import logging
from typing import Tuple

import pygame

from .constants import BACKGROUND_COLOR
from .data_models import PlaybackState, RenderConfig
from .scene import draw_scene
from .trajectories import draw_trajectories

logger = logging.getLogger("npendulum.surfaces")


class SurfaceManager:
    def __init__(self, config: RenderConfig, size: int):
        self.config = config
        self.size = 0
        self.scene = None
        self.graph = None
        self._allocate(size)

    def _allocate(self, size: int) -> None:
        self.size = max(1, int(size))
        self.scene = pygame.Surface((self.size, self.size))
        self.graph = pygame.Surface((self.size, self.size))
        self.scene.fill(BACKGROUND_COLOR)
        self.graph.fill(BACKGROUND_COLOR)

    @property
    def dimensions(self) -> Tuple[int, int]:
        return (self.size, self.size)

    def render(self, state: PlaybackState) -> bool:
        """Draw both panels at state.frame_index."""
        if state.dataset is None:
            return False
        drew_scene = draw_scene(self.scene, state.dataset, state.frame_index, self.config)
        drew_graph = draw_trajectories(self.graph, state.dataset, state.frame_index, self.config)
        return drew_scene and drew_graph

    def on_resize(self, container_width: int, state: PlaybackState) -> bool:
        """
        Match both surfaces to `container_width`. Returns True if the frozen
        frame was redrawn.
        """
        if int(container_width) == self.size:
            return False
        self._allocate(container_width)
        logger.debug("Surfaces resized to %dx%d", self.size, self.size)
        if not state.is_playing and state.dataset is not None:
            return self.render(state)
        return False
