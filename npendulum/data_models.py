#!/usr/bin/env python3
"""
Data models for the N-Pendulum Viewer.

This module defines the records shared between the playback clock, the
renderers, the simulation backends and the UI.

Units and usage
- Positions are in meters [m]; frames interleave (x, y) per body, body 0 first.
- Wall-clock instants are in seconds (time.perf_counter()).
- TrajectoryDataset is immutable once built; PlaybackState is owned and mutated
  only by PlaybackClock.
- Colors are RGB tuples in 0..255.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .constants import (
    DEFAULT_LENGTH,
    DEFAULT_MASS,
    N_POINTS,
    PALETTE,
    SIM_DURATION,
    TRACE_LENGTH,
)
from .errors import DatasetError
from .utils import try_float, try_int


@dataclass(frozen=True, eq=False)
class TrajectoryDataset:
    """
    A finished simulation run.

    Fields:
    - body_count: number of simulated bodies (>= 1)
    - spatial_limit: half-width of the physical region to display [m]
    - frames: read-only array of shape (frame_count, 2 * body_count)
    """
    body_count: int
    spatial_limit: float
    frames: np.ndarray

    @classmethod
    def from_payload(cls, data: Any) -> "TrajectoryDataset":
        """
        Build a dataset from the wire form {"n", "limit", "positions"}.
        Raises DatasetError if the payload does not describe at least one
        frame of exactly 2 * n finite coordinates.
        """
        if not isinstance(data, dict):
            raise DatasetError("Animation data is missing.")

        n = data.get("n")
        if isinstance(n, bool) or try_int(n) is None or int(n) != n or n < 1:
            raise DatasetError(f"Invalid body count: {n!r}")
        n = int(n)

        limit = try_float(data.get("limit"))
        if limit is None or not math.isfinite(limit):
            raise DatasetError(f"Invalid spatial limit: {data.get('limit')!r}")

        positions = data.get("positions")
        if not isinstance(positions, (list, tuple, np.ndarray)) or len(positions) == 0:
            raise DatasetError("Animation data contains no frames.")
        try:
            frames = np.array(positions, dtype=float)
        except (TypeError, ValueError) as exc:
            raise DatasetError(f"Malformed frame data: {exc}") from exc
        if frames.ndim != 2 or frames.shape[1] != 2 * n:
            raise DatasetError(
                f"Expected frames of {2 * n} coordinates, got array of shape {frames.shape}"
            )
        if not np.isfinite(frames).all():
            raise DatasetError("Frame data contains non-finite coordinates.")

        frames.setflags(write=False)
        return cls(body_count=n, spatial_limit=limit, frames=frames)

    @property
    def frame_count(self) -> int:
        return self.frames.shape[0]

    def body_position(self, frame_index: int, body: int) -> Tuple[float, float]:
        row = self.frames[frame_index]
        return (float(row[2 * body]), float(row[2 * body + 1]))

    def body_path(self, body: int, start: int, stop: int) -> np.ndarray:
        """(x, y) rows of one body for frames start..stop inclusive."""
        return self.frames[start:stop + 1, 2 * body:2 * body + 2]


@dataclass
class PlaybackState:
    """
    Mutable playback position. Only PlaybackClock writes to it.

    While is_playing, frame_index is derived from origin on every tick and is
    never incremented directly.
    """
    dataset: Optional[TrajectoryDataset] = None
    frame_index: int = 0
    is_playing: bool = False
    origin: float = 0.0  # wall-clock seconds at loop progress 0

    @property
    def has_dataset(self) -> bool:
        return self.dataset is not None


@dataclass(frozen=True)
class RenderConfig:
    sim_duration: float = SIM_DURATION  # seconds per loop
    trace_length: int = TRACE_LENGTH  # frames
    palette: Tuple[Tuple[int, int, int], ...] = PALETTE

    def color_for(self, body: int) -> Tuple[int, int, int]:
        return self.palette[body % len(self.palette)]


def default_angle(index: int) -> float:
    """Initial angle in degrees for pendulum `index` (0-based): 90, 45, then 0."""
    if index == 0:
        return 90.0
    if index == 1:
        return 45.0
    return 0.0


@dataclass
class SimulationParams:
    """
    Inputs for one simulation run, as collected by the parameter form.
    Angles are in degrees.
    """
    body_count: int
    masses: List[float] = field(default_factory=list)
    lengths: List[float] = field(default_factory=list)
    initial_angles: List[float] = field(default_factory=list)
    t_max: float = SIM_DURATION
    n_points: int = N_POINTS

    @classmethod
    def with_defaults(cls, body_count: int, t_max: float = SIM_DURATION,
                      n_points: int = N_POINTS) -> "SimulationParams":
        return cls(
            body_count=body_count,
            masses=[DEFAULT_MASS] * body_count,
            lengths=[DEFAULT_LENGTH] * body_count,
            initial_angles=[default_angle(i) for i in range(body_count)],
            t_max=t_max,
            n_points=n_points,
        )

    def to_payload(self) -> Dict[str, Any]:
        """Request body in the simulation server's wire format."""
        return {
            "n": self.body_count,
            "masses": ",".join(str(m) for m in self.masses),
            "lengths": ",".join(str(l) for l in self.lengths),
            "initial_angles": ",".join(str(a) for a in self.initial_angles),
            "t_max": self.t_max,
            "n_points": self.n_points,
        }
