#!/usr/bin/env python3
"""
N-pendulum solver used by the in-process simulation backend.

Responsibilities
- Build the Lagrangian equations of motion M(theta) alpha = -(C + G) for a chain
  of point masses on massless rods hanging from a fixed pivot.
- Advance [theta, omega] with a fixed-step fourth-order Runge-Kutta integrator.
- Convert the angle history to interleaved (x, y) positions for the viewer.

Units and conventions
- Angles in radians internally (degrees on the wire), measured from straight down.
- Lengths in meters [m], masses in kilograms [kg], time in seconds [s].
- Pendulum i (0-based) hangs from pendulum i-1; pendulum 0 hangs from the pivot.

Equations (S(k) = sum of masses from k to the end of the chain)
    M[i, j] = S(max(i, j)) L_i L_j cos(theta_i - theta_j)
    C[i]    = sum_j S(max(i, j)) L_i L_j sin(theta_i - theta_j) omega_j^2
    G[i]    = S(i) g L_i sin(theta_i)

Numerical notes
- RK4 is not symplectic; energy drifts slowly over long runs. The viewer only
  needs a plausible motion, not a conserved one.
- Cost per step is one dense n x n solve (numpy.linalg.solve), four per RK4 step.
"""
import logging
from typing import Any, Dict, Tuple

import numpy as np

from .constants import GRAVITY
from .utils import parse_csv_floats, try_float, try_int

logger = logging.getLogger("npendulum.solver")


class NPendulumSolver:
    def __init__(self, masses, lengths, g: float = GRAVITY):
        self.masses = np.asarray(masses, dtype=float)
        self.lengths = np.asarray(lengths, dtype=float)
        self.n = len(self.masses)
        self.g = float(g)
        # S(max(i, j)) for every (i, j), fixed for a given chain
        tail = np.cumsum(self.masses[::-1])[::-1]
        idx = np.arange(self.n)
        self._tail = tail
        self._pair_mass = tail[np.maximum.outer(idx, idx)]
        self._ll = np.outer(self.lengths, self.lengths)

    def mass_matrix(self, theta: np.ndarray) -> np.ndarray:
        diff = theta[:, None] - theta[None, :]
        return self._pair_mass * self._ll * np.cos(diff)

    def centripetal(self, theta: np.ndarray, omega: np.ndarray) -> np.ndarray:
        diff = theta[:, None] - theta[None, :]
        return (self._pair_mass * self._ll * np.sin(diff)) @ (omega * omega)

    def gravity(self, theta: np.ndarray) -> np.ndarray:
        return self._tail * self.g * self.lengths * np.sin(theta)

    def accelerations(self, theta: np.ndarray, omega: np.ndarray) -> np.ndarray:
        """alpha = M^-1 (-C - G). Raises numpy.linalg.LinAlgError if M is singular."""
        rhs = -(self.centripetal(theta, omega) + self.gravity(theta))
        return np.linalg.solve(self.mass_matrix(theta), rhs)

    def deriv(self, y: np.ndarray) -> np.ndarray:
        """d/dt [theta, omega] = [omega, alpha]."""
        theta, omega = y[:self.n], y[self.n:]
        return np.concatenate([omega, self.accelerations(theta, omega)])

    def rk4_step(self, y: np.ndarray, dt: float) -> np.ndarray:
        k1 = self.deriv(y)
        k2 = self.deriv(y + k1 * (dt * 0.5))
        k3 = self.deriv(y + k2 * (dt * 0.5))
        k4 = self.deriv(y + k3 * dt)
        return y + (k1 + 2.0 * k2 + 2.0 * k3 + k4) * (dt / 6.0)

    def solve(self, initial_angles, t_max: float, n_points: int,
              initial_ang_vels=None) -> Tuple[np.ndarray, np.ndarray]:
        """
        Integrate from t = 0 to t_max, sampling n_points states (both ends included).

        Returns:
            (t, states) with t of shape (n_points,) and states of shape
            (n_points, 2 * n) holding [theta_0..theta_n-1, omega_0..omega_n-1].
        """
        if n_points < 2:
            raise ValueError("n_points must be at least 2")
        n = self.n
        dt = t_max / (n_points - 1)
        y = np.zeros(2 * n)
        y[:n] = initial_angles
        if initial_ang_vels is not None:
            y[n:] = initial_ang_vels

        t = np.linspace(0.0, t_max, n_points)
        states = np.empty((n_points, 2 * n))
        for i in range(n_points):
            states[i] = y
            y = self.rk4_step(y, dt)
        return t, states

    def positions(self, states: np.ndarray) -> np.ndarray:
        """Interleaved [x0, y0, x1, y1, ...] per sample from the angle history."""
        theta = states[:, :self.n]
        xs = np.cumsum(self.lengths * np.sin(theta), axis=1)
        ys = -np.cumsum(self.lengths * np.cos(theta), axis=1)
        out = np.empty((states.shape[0], 2 * self.n))
        out[:, 0::2] = xs
        out[:, 1::2] = ys
        return out


def _failure(message: str) -> Dict[str, Any]:
    return {"success": False, "message": message}


def simulate(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Answer one simulation request in the server's wire format.

    Input errors come back as {"success": False, "message": ...}; a successful
    run returns {"success": True, "animation_data": {"n", "limit", "positions"}}.
    """
    n = try_int(payload.get("n"))
    t_max = try_float(payload.get("t_max"))
    n_points = try_int(payload.get("n_points"))
    if n is None or n < 1:
        return _failure(f"Invalid pendulum count: {payload.get('n')!r}")
    if t_max is None or t_max <= 0:
        return _failure(f"Invalid duration: {payload.get('t_max')!r}")
    if n_points is None or n_points < 2:
        return _failure(f"Invalid number of samples: {payload.get('n_points')!r}")

    masses = parse_csv_floats(payload.get("masses", ""))
    lengths = parse_csv_floats(payload.get("lengths", ""))
    angles_deg = parse_csv_floats(payload.get("initial_angles", ""))
    if len(masses) != n or len(lengths) != n or len(angles_deg) != n:
        return _failure(
            f"Input length mismatch. Expected {n}, got "
            f"M:{len(masses)}, L:{len(lengths)}, A:{len(angles_deg)}"
        )

    solver = NPendulumSolver(masses, lengths)
    try:
        _, states = solver.solve(np.radians(angles_deg), t_max, n_points)
    except np.linalg.LinAlgError:
        return _failure("Linear system is singular; check masses and lengths.")

    logger.debug("Solved %d pendulums over %.1f s in %d samples", n, t_max, n_points)
    return {
        "success": True,
        "animation_data": {
            "n": n,
            "limit": float(sum(lengths)) + 0.5,
            "positions": solver.positions(states).tolist(),
        },
    }
