#!/usr/bin/env python3
"""
Exception types raised by the viewer core.

- DatasetError: a trajectory payload has the wrong shape (empty frame list,
  frame length mismatch, non-numeric values). Callers treat it as
  "no dataset loaded".
- SimulationError: the simulation request failed (transport problem,
  non-2xx response, or an explicit success=false payload). The message is
  meant to be shown to the user as-is.
"""


class PendulumViewerError(Exception):
    """Base class for viewer errors."""


class DatasetError(PendulumViewerError):
    pass


class SimulationError(PendulumViewerError):
    pass
