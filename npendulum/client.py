#!/usr/bin/env python3
"""
Simulation backends and response handling.

A backend takes a request payload (SimulationParams.to_payload()) and returns
the response payload as a dict:
    {"success": true,  "animation_data": {"n", "limit", "positions"}}
    {"success": false, "message": "..."}
Transport-level failures raise SimulationError instead.

- HttpSimulationClient posts to a simulation server with requests.
- LocalSimulationBackend answers in-process with npendulum.solver.

parse_response() folds every failure into a SimulationError carrying one
human-readable message.
"""
import logging
from typing import Any, Dict

import requests

from .constants import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT
from .data_models import TrajectoryDataset
from .errors import DatasetError, SimulationError
from . import solver

logger = logging.getLogger("npendulum.client")


class HttpSimulationClient:
    def __init__(self, endpoint: str = DEFAULT_ENDPOINT, timeout: float = DEFAULT_TIMEOUT,
                 session: requests.Session = None):
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        logger.info("POST %s (n=%s)", self.endpoint, payload.get("n"))
        try:
            response = self.session.post(self.endpoint, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise SimulationError(f"Could not reach simulation server: {exc}") from exc

        if not response.ok:
            detail = response.text.strip() or response.reason or "no details"
            raise SimulationError(f"Server returned {response.status_code}: {detail}")
        try:
            data = response.json()
        except ValueError as exc:
            raise SimulationError("Server returned a malformed response.") from exc
        if not isinstance(data, dict):
            raise SimulationError("Server returned a malformed response.")
        return data


class LocalSimulationBackend:
    def fetch(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        logger.info("Simulating locally (n=%s, samples=%s)", payload.get("n"), payload.get("n_points"))
        return solver.simulate(payload)


def make_backend(kind: str, endpoint: str = DEFAULT_ENDPOINT, timeout: float = DEFAULT_TIMEOUT):
    if kind == "http":
        return HttpSimulationClient(endpoint, timeout)
    if kind == "local":
        return LocalSimulationBackend()
    raise ValueError(f"Unknown simulation backend: {kind!r}")


def parse_response(data: Dict[str, Any]) -> TrajectoryDataset:
    """Dataset from a response payload, or SimulationError with a user-facing message."""
    if not data.get("success"):
        raise SimulationError(data.get("message") or "Unknown error")
    try:
        return TrajectoryDataset.from_payload(data.get("animation_data"))
    except DatasetError as exc:
        raise SimulationError(f"Invalid animation data: {exc}") from exc
