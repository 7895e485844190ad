#!/usr/bin/env python3
"""
Playback controller: the single owner of playback state, shared between the
Dear PyGui thread (user commands) and the pygame thread (scheduled passes).

Every public method takes the re-entrant lock for its whole body, so each
command or pass runs to completion before the next one sees the state.

Commands
- on_run_requested(params): start a simulation run on a worker thread.
- on_toggle_requested(): play/pause.
- on_reset_requested(): back to frame 0.
- on_resize_requested(width): resize both panels.
- advance(now): the scheduled pass (tick + draw while playing).

Run requests are rejected while one is still in flight. A failed run leaves
the previous dataset and playback position untouched; its message is kept in
last_error for the UI to pick up.
"""
import logging
import threading
import time
from typing import Callable, Optional

from .clock import PlaybackClock
from .client import parse_response
from .config import AppConfig
from .data_models import PlaybackState, SimulationParams, TrajectoryDataset
from .errors import SimulationError
from .surfaces import SurfaceManager

logger = logging.getLogger("npendulum.controller")


class PlaybackController:
    def __init__(self, config: AppConfig, backend, panel_size: int,
                 time_source: Callable[[], float] = time.perf_counter):
        self.lock = threading.RLock()
        self.config = config
        self.backend = backend
        self.time_source = time_source
        self.clock = PlaybackClock(config.render.sim_duration)
        self.surfaces = SurfaceManager(config.render, panel_size)

        self.run_pending = False
        self.last_error: Optional[str] = None
        self.last_status: Optional[str] = None
        self.last_params: Optional[SimulationParams] = None
        self._worker: Optional[threading.Thread] = None

    @property
    def state(self) -> PlaybackState:
        return self.clock.state

    @property
    def has_dataset(self) -> bool:
        with self.lock:
            return self.state.dataset is not None

    @property
    def is_playing(self) -> bool:
        with self.lock:
            return self.state.is_playing

    def snapshot(self):
        """(frame_index, frame_count, is_playing, run_pending) for status displays."""
        with self.lock:
            ds = self.state.dataset
            return (
                self.state.frame_index,
                ds.frame_count if ds is not None else 0,
                self.state.is_playing,
                self.run_pending,
            )

    # -----------------------
    # Simulation runs
    # -----------------------

    def on_run_requested(self, params: SimulationParams, background: bool = True) -> bool:
        """
        Start a run. Returns False (and does nothing) if a run is already pending.
        With background=False the run completes before this returns.
        """
        with self.lock:
            if self.run_pending:
                logger.warning("Run request ignored: a simulation is already in progress.")
                return False
            self.run_pending = True
            self.last_params = params

        if background:
            self._worker = threading.Thread(target=self._run, args=(params,), daemon=True)
            self._worker.start()
        else:
            self._run(params)
        return True

    def wait_for_run(self, timeout: Optional[float] = None) -> None:
        worker = self._worker
        if worker is not None:
            worker.join(timeout)

    def _run(self, params: SimulationParams) -> None:
        started = time.perf_counter()
        try:
            dataset = parse_response(self.backend.fetch(params.to_payload()))
        except SimulationError as exc:
            self._finish_run(None, str(exc))
            return
        except Exception as exc:
            logger.exception("Simulation run crashed")
            self._finish_run(None, f"Unexpected error: {exc}")
            return
        logger.info("Simulation finished in %.2f s", time.perf_counter() - started)
        self._finish_run(dataset, None)

    def _finish_run(self, dataset: Optional[TrajectoryDataset], error: Optional[str]) -> None:
        with self.lock:
            self.run_pending = False
            if error is not None:
                logger.warning("Simulation failed: %s", error)
                self.last_error = error
                return
            if self.clock.load(dataset, self.time_source()):
                self.surfaces.render(self.state)
                self.last_status = (
                    f"Loaded {dataset.body_count} pendulum(s), {dataset.frame_count} frames."
                )

    # -----------------------
    # Playback commands
    # -----------------------

    def on_toggle_requested(self) -> bool:
        """Play/pause. Returns the new is_playing; a no-op while idle."""
        with self.lock:
            if self.state.dataset is None:
                return False
            playing = self.clock.toggle_play_pause(self.time_source())
            logger.debug("Playback %s at frame %d", "resumed" if playing else "paused", self.state.frame_index)
            return playing

    def on_reset_requested(self) -> None:
        with self.lock:
            self.clock.reset(self.time_source())
            self.surfaces.render(self.state)

    def on_resize_requested(self, container_width: int) -> bool:
        with self.lock:
            return self.surfaces.on_resize(container_width, self.state)

    def advance(self, now: Optional[float] = None) -> bool:
        """
        Scheduled pass: while playing, move to the frame for `now` and redraw
        both panels. Returns True if anything was drawn.
        """
        with self.lock:
            if not self.state.is_playing or self.state.dataset is None:
                return False
            self.clock.tick(self.time_source() if now is None else now)
            return self.surfaces.render(self.state)

    def take_messages(self):
        """Pop (status, error) for the UI; each is None when there is nothing new."""
        with self.lock:
            status, error = self.last_status, self.last_error
            self.last_status = None
            self.last_error = None
            return status, error
