#!/usr/bin/env python3
"""
Playback clock: maps wall-clock time to a trajectory frame.

States
- Idle: no dataset loaded.
- Playing: frame_index is recomputed from the playback origin on every tick.
- Paused: frame_index is frozen; tick is a no-op.
Reset returns to frame 0 without changing play/pause. Playback loops forever.

Timing model
- progress = ((now - origin) / sim_duration) mod 1
- frame_index = floor(progress * frame_count)
Only wall-clock deltas matter, never the number of ticks, so a jittery or
throttled scheduler changes smoothness but not position.
"""
import logging
import math
from typing import Optional

from .data_models import PlaybackState, TrajectoryDataset

logger = logging.getLogger("npendulum.clock")


class PlaybackClock:
    """
    Owns the PlaybackState. All `now` arguments are wall-clock seconds from the
    same monotonic source (time.perf_counter()).
    """

    def __init__(self, sim_duration: float, state: Optional[PlaybackState] = None):
        if not sim_duration > 0:
            raise ValueError(f"sim_duration must be positive, got {sim_duration!r}")
        self.sim_duration = float(sim_duration)
        self.state = state if state is not None else PlaybackState()

    @property
    def is_idle(self) -> bool:
        return self.state.dataset is None

    def progress_at(self, now: float) -> float:
        """Loop progress in [0, 1) at wall-clock `now`, measured from the origin."""
        elapsed = now - self.state.origin
        return (elapsed / self.sim_duration) % 1.0

    def frame_progress(self) -> float:
        """
        Loop progress represented by the frozen frame: the middle of that frame's
        slot, so a resumed tick lands on the same frame despite float rounding.
        """
        dataset = self.state.dataset
        if dataset is None:
            return 0.0
        return (self.state.frame_index + 0.5) / dataset.frame_count

    def load(self, dataset: Optional[TrajectoryDataset], now: float) -> bool:
        """Start playing `dataset` from frame 0. A missing or empty dataset is ignored."""
        if dataset is None or dataset.frame_count == 0:
            logger.warning("Ignoring load of an empty dataset.")
            return False
        self.state.dataset = dataset
        self.state.frame_index = 0
        self.state.is_playing = True
        self.state.origin = now
        logger.info(
            "Loaded dataset: %d bodies, %d frames, limit %.3f",
            dataset.body_count, dataset.frame_count, dataset.spatial_limit,
        )
        return True

    def toggle_play_pause(self, now: float) -> bool:
        """Flip between playing and paused; returns the new is_playing."""
        if not self.state.is_playing:
            # Re-anchor the origin so the next tick resumes on the frozen frame.
            self.state.origin = now - self.frame_progress() * self.sim_duration
        self.state.is_playing = not self.state.is_playing
        return self.state.is_playing

    def reset(self, now: float) -> None:
        self.state.frame_index = 0
        if self.state.is_playing:
            self.state.origin = now

    def tick(self, now: float) -> int:
        """Recompute frame_index from `now` while playing; returns the current index."""
        dataset = self.state.dataset
        if not self.state.is_playing or dataset is None:
            return self.state.frame_index
        count = dataset.frame_count
        index = int(math.floor(self.progress_at(now) * count))
        # progress < 1, but rounding can still land exactly on count
        self.state.frame_index = min(max(index, 0), count - 1)
        return self.state.frame_index
