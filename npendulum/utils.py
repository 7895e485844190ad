#!/usr/bin/env python3
"""
General utilities for the N-Pendulum Viewer.
"""
from typing import List, Optional

from .constants import CONFIRM_BODIES, DEFAULT_BODIES, MAX_BODIES, MIN_BODIES


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def try_float(val) -> Optional[float]:
    try:
        return float(val)
    except (TypeError, ValueError, OverflowError):
        return None


def try_int(val) -> Optional[int]:
    try:
        return int(val)
    except (TypeError, ValueError, OverflowError):
        return None


def clamp_body_count(val) -> int:
    """Body count from form input, clamped to [MIN_BODIES, MAX_BODIES]."""
    n = try_int(val)
    if n is None:
        return DEFAULT_BODIES
    return int(clamp(n, MIN_BODIES, MAX_BODIES))


def needs_confirmation(body_count: int) -> bool:
    """Runs with more than CONFIRM_BODIES pendulums ask the user first."""
    return body_count > CONFIRM_BODIES


def parse_csv_floats(text: str) -> List[float]:
    """Parse "1, 2.5,x,3" into [1.0, 2.5, 3.0]; unparsable entries are dropped."""
    values = []
    for part in str(text).split(","):
        v = try_float(part.strip())
        if v is not None:
            values.append(v)
    return values
