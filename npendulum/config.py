#!/usr/bin/env python3
"""
Application configuration.

Defaults come from npendulum.constants. An optional JSON file can override any
subset of them, and command-line `--set section.key=value` pairs are applied
last.

Config JSON:
{
  "render": {"sim_duration": 60.0, "trace_length": 100, "palette": [[31, 119, 180], ...]},
  "simulation": {"backend": "local", "endpoint": "http://127.0.0.1:8080/simulate",
                 "timeout": 120.0, "n_points": 8000},
  "viewport": {"width": 1200, "height": 600, "fps": 60},
  "logging": {"level": "INFO", "format": "...", "file": null}
}
"""
import copy
import json
import math
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .constants import (
    DEFAULT_BACKEND,
    DEFAULT_ENDPOINT,
    DEFAULT_TIMEOUT,
    FPS,
    LOG_FORMAT,
    LOG_LEVEL,
    N_POINTS,
    PALETTE,
    SIM_DURATION,
    TRACE_LENGTH,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from .data_models import RenderConfig

DEFAULTS: Dict[str, Any] = {
    "render": {
        "sim_duration": SIM_DURATION,
        "trace_length": TRACE_LENGTH,
        "palette": [list(c) for c in PALETTE],
    },
    "simulation": {
        "backend": DEFAULT_BACKEND,
        "endpoint": DEFAULT_ENDPOINT,
        "timeout": DEFAULT_TIMEOUT,
        "n_points": N_POINTS,
    },
    "viewport": {
        "width": VIEW_WIDTH,
        "height": VIEW_HEIGHT,
        "fps": FPS,
    },
    "logging": {
        "level": LOG_LEVEL,
        "format": LOG_FORMAT,
        "file": None,
    },
}


def deep_update(dst: Dict[str, Any], src: Dict[str, Any]) -> Dict[str, Any]:
    for k, v in src.items():
        if isinstance(v, dict) and isinstance(dst.get(k), dict):
            deep_update(dst[k], v)
        else:
            dst[k] = v
    return dst


def set_by_dotted_key(cfg: Dict[str, Any], dotted: str, value: Any) -> None:
    keys = dotted.split(".")
    cur = cfg
    for k in keys[:-1]:
        if k not in cur or not isinstance(cur[k], dict):
            cur[k] = {}
        cur = cur[k]
    cur[keys[-1]] = value


def coerce_scalar(s: str) -> Any:
    """"true" -> True, "3" -> 3, "2.5" -> 2.5, anything else stays a string."""
    sl = str(s).lower()
    if sl in ("true", "false"):
        return sl == "true"
    if sl in ("none", "null"):
        return None
    try:
        if "." in sl or "e" in sl:
            return float(s)
        return int(s)
    except ValueError:
        return s


@dataclass
class AppConfig:
    render: RenderConfig = field(default_factory=RenderConfig)
    backend: str = DEFAULT_BACKEND
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT
    n_points: int = N_POINTS
    view_width: int = VIEW_WIDTH
    view_height: int = VIEW_HEIGHT
    fps: int = FPS
    log_level: str = LOG_LEVEL
    log_format: str = LOG_FORMAT
    log_file: Optional[str] = None

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "AppConfig":
        merged = deep_update(copy.deepcopy(DEFAULTS), cfg)
        render, sim = merged["render"], merged["simulation"]
        view, log = merged["viewport"], merged["logging"]

        backend = str(sim["backend"])
        if backend not in ("local", "http"):
            raise ValueError(f"simulation.backend must be 'local' or 'http', got {backend!r}")
        palette = tuple(tuple(int(v) for v in c[:3]) for c in render["palette"])
        if not palette:
            raise ValueError("render.palette must contain at least one color")
        sim_duration = float(render["sim_duration"])
        if not math.isfinite(sim_duration) or sim_duration <= 0:
            raise ValueError(
                f"render.sim_duration must be a positive number of seconds, got {render['sim_duration']!r}"
            )

        return cls(
            render=RenderConfig(
                sim_duration=sim_duration,
                trace_length=int(render["trace_length"]),
                palette=palette,
            ),
            backend=backend,
            endpoint=str(sim["endpoint"]),
            timeout=float(sim["timeout"]),
            n_points=int(sim["n_points"]),
            view_width=int(view["width"]),
            view_height=int(view["height"]),
            fps=int(view["fps"]),
            log_level=str(log["level"]).upper(),
            log_format=str(log["format"]),
            log_file=log["file"],
        )


def load_config(path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> AppConfig:
    """
    Build the AppConfig from defaults, an optional JSON file and dotted overrides.
    Raises FileNotFoundError if `path` is given but missing.
    """
    cfg: Dict[str, Any] = {}
    if path:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Config not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            cfg = json.load(f) or {}
    for k, v in (overrides or {}).items():
        set_by_dotted_key(cfg, k, v)
    return AppConfig.from_dict(cfg)
