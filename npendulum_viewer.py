#!/usr/bin/env python3
"""
N-Pendulum Viewer application entry point and UI/renderer coordination.

What this module does
- Starts two event loops: a Pygame rendering thread (viewport) and the Dear PyGui UI
  (running on the main thread).
- Shares one PlaybackController between them; every access goes through its
  re-entrant lock.
- The viewport shows two square panels side by side: the live pendulum chain with
  a short trace of the last bob (left) and the growing trajectory plot of every
  bob on graph paper (right).
- The Dear PyGui window collects the pendulum parameters and drives Run,
  Play/Pause and Reset.

Threading model
- PygameRenderer runs in a background thread: input handling for the viewport,
  one scheduled playback pass per display frame, blitting the panels.
- The UI class runs in the main thread via Dear PyGui and calls controller commands.
- Simulation runs execute on a short-lived worker thread started by the controller.

Running
1) Install dependencies: `pip install -e .`
2) Run this module: `python npendulum_viewer.py` (or `npendulum-viewer`)
   Use `--backend http --endpoint URL` to fetch runs from a simulation server.
"""

import argparse
import logging
import threading
from typing import Optional

# GUI and Rendering libs
import pygame
import dearpygui.dearpygui as dpg

from npendulum.client import make_backend
from npendulum.config import AppConfig, coerce_scalar, load_config
from npendulum.constants import (
    DEFAULT_BODIES,
    DEFAULT_LENGTH,
    DEFAULT_MASS,
    HUD_COLOR,
    HUD_HEIGHT,
    MAX_BODIES,
    MIN_BODIES,
)
from npendulum.controller import PlaybackController
from npendulum.camera import Camera2D
from npendulum.data_models import SimulationParams, default_angle
from npendulum.logger_setup import setup_logging
from npendulum.utils import clamp_body_count, needs_confirmation, try_float, try_int

logger = logging.getLogger("npendulum")

# ============================================================
# Pygame Renderer Thread
# ============================================================


class PygameRenderer(threading.Thread):
    """
    Pygame loop: runs the scheduled playback pass and shows both panels.
    Space toggles play/pause, R resets, the mouse over the plot reads off coordinates.
    """

    def __init__(self, controller: PlaybackController, config: AppConfig):
        super().__init__(daemon=True)
        self.controller = controller
        self.config = config
        self.surface = None
        self.clock = None
        self.running = True
        self.cursor_world = None

    def panel_width(self, window_width: int) -> int:
        return max(1, window_width // 2)

    def run(self):
        pygame.init()
        pygame.display.set_caption("N-Pendulum Viewer - Viewport")
        width = self.config.view_width
        panel = self.panel_width(width)
        self.surface = pygame.display.set_mode((width, panel + HUD_HEIGHT), pygame.RESIZABLE)
        self.controller.on_resize_requested(panel)
        self.clock = pygame.time.Clock()

        while self.running:
            self.handle_events()

            # Scheduled pass; the frame index only depends on wall-clock time.
            self.controller.advance()

            self.draw()

            # Limit FPS
            self.clock.tick(self.config.fps)

        pygame.quit()

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
                stop_ui()

            elif event.type == pygame.VIDEORESIZE:
                panel = self.panel_width(event.w)
                self.surface = pygame.display.set_mode((event.w, panel + HUD_HEIGHT), pygame.RESIZABLE)
                self.controller.on_resize_requested(panel)

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_SPACE:
                    self.controller.on_toggle_requested()
                elif event.key == pygame.K_r:
                    self.controller.on_reset_requested()

            elif event.type == pygame.MOUSEMOTION:
                self.cursor_world = self.plot_coordinates(event.pos)

    def plot_coordinates(self, mouse):
        """World coordinates under the mouse when it is over the trajectory plot."""
        with self.controller.lock:
            dataset = self.controller.state.dataset
            size = self.controller.surfaces.size
        if dataset is None or not (size <= mouse[0] < 2 * size and 0 <= mouse[1] < size):
            return None
        camera = Camera2D.fit(size, dataset.spatial_limit, (size, size))
        if camera is None:
            return None
        return camera.screen_to_world((mouse[0] - size, mouse[1]))

    def draw(self):
        surf = self.surface
        surf.fill((255, 255, 255))
        with self.controller.lock:
            surfaces = self.controller.surfaces
            surf.blit(surfaces.scene, (0, 0))
            surf.blit(surfaces.graph, (surfaces.size, 0))
            panel = surfaces.size
        frame, count, playing, pending = self.controller.snapshot()

        if pending:
            state = "Simulating..."
        elif count == 0:
            state = "No data: press Run"
        else:
            state = "Playing" if playing else "Paused"
        hud = f"Frame {frame + 1 if count else 0}/{count}  [{state}]  Space: Play/Pause | R: Reset"
        if self.cursor_world is not None:
            hud += f"  |  x={self.cursor_world[0]:+.2f} m  y={self.cursor_world[1]:+.2f} m"
        draw_text(surf, hud, 8, panel + 4, HUD_COLOR)

        pygame.display.flip()


_cached_font = None


def draw_text(surface, text, x, y, color):
    global _cached_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        _cached_font = pygame.font.SysFont("consolas", 16) or pygame.font.Font(None, 16)
    img = _cached_font.render(text, True, color)
    surface.blit(img, (x, y))


# ============================================================
# Dear PyGui UI
# ============================================================


def stop_ui():
    if dpg.is_dearpygui_running():
        dpg.stop_dearpygui()


class UI:
    """
    Dear PyGui interface: pendulum parameter form and playback controls.
    """

    def __init__(self, controller: PlaybackController, config: AppConfig):
        self.controller = controller
        self.config = config

        # IDs for widgets
        self.count_id = None
        self.fields_id = None
        self.run_button_id = None
        self.play_button_id = None
        self.loading_id = None
        self.status_msg_id = None
        self.confirm_id = None
        self.confirm_text_id = None

        self._field_count = 0

        self._build_ui()
        self._generate_fields()

        # Periodic UI sync via frame callbacks (approx ~10Hz)
        self._schedule_sync()

    def _schedule_sync(self):
        try:
            current = dpg.get_frame_count()
        except Exception:
            current = 0
        dpg.set_frame_callback(current + 6, self._sync_ui_with_controller)

    # -----------------------
    # UI Construction
    # -----------------------

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title="N-Pendulum Viewer - Controls", width=420, height=720)

        with dpg.window(label="Controls", width=400, height=700, pos=(10, 10), tag="main_window"):
            dpg.add_text("Pendulum Chain")
            self.count_id = dpg.add_input_int(label="Pendulums", default_value=DEFAULT_BODIES,
                                              width=120, callback=self._on_count_changed)
            dpg.add_separator()
            with dpg.child_window(height=420, width=-1) as self.fields_id:
                pass
            dpg.add_separator()

            dpg.add_text("Simulation Controls")
            with dpg.group(horizontal=True):
                self.run_button_id = dpg.add_button(label="Run", callback=self._on_run_clicked)
                self.play_button_id = dpg.add_button(label="Play", callback=self._on_play_clicked)
                dpg.add_button(label="Reset", callback=self._on_reset_clicked)
            self.loading_id = dpg.add_text("Simulating...", show=False, color=(120, 160, 255))
            self.status_msg_id = dpg.add_text("")

        with dpg.window(label="Confirm", modal=True, show=False, no_resize=True,
                        width=320, pos=(40, 200)) as self.confirm_id:
            self.confirm_text_id = dpg.add_text("")
            with dpg.group(horizontal=True):
                dpg.add_button(label="Continue", callback=self._on_confirm_run)
                dpg.add_button(label="Cancel", callback=lambda: dpg.configure_item(self.confirm_id, show=False))

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    def _generate_fields(self):
        n = clamp_body_count(dpg.get_value(self.count_id))
        if n == self._field_count:
            return
        dpg.delete_item(self.fields_id, children_only=True)
        for i in range(n):
            idx = i + 1
            with dpg.group(parent=self.fields_id):
                dpg.add_text(f"Pendulum {idx}")
                dpg.add_input_float(label="Mass (kg)", tag=f"m{idx}", default_value=DEFAULT_MASS,
                                    step=0.01, width=150)
                dpg.add_input_float(label="Length (m)", tag=f"L{idx}", default_value=DEFAULT_LENGTH,
                                    step=0.01, width=150)
                dpg.add_input_float(label="Initial angle (deg)", tag=f"th{idx}",
                                    default_value=default_angle(i), step=1.0, width=150)
        self._field_count = n

    # -----------------------
    # UI Callbacks
    # -----------------------

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        dpg.set_value(self.status_msg_id, f"Error: {msg}")
        dpg.configure_item(self.status_msg_id, color=(255, 120, 120))

    def _on_count_changed(self, sender, app_data, user_data=None):
        raw = try_int(app_data)
        n = clamp_body_count(app_data)
        if raw is not None and raw != n:
            dpg.set_value(self.count_id, n)
            if raw > MAX_BODIES:
                self._set_error(f"Maximum pendulums limited to {MAX_BODIES} for performance.")
            elif raw < MIN_BODIES:
                self._set_error(f"At least {MIN_BODIES} pendulum is required.")
        self._generate_fields()

    def _gather_params(self, n: int) -> Optional[SimulationParams]:
        masses, lengths, angles = [], [], []
        for idx in range(1, n + 1):
            m = try_float(dpg.get_value(f"m{idx}"))
            l = try_float(dpg.get_value(f"L{idx}"))
            th = try_float(dpg.get_value(f"th{idx}"))
            if None in (m, l, th):
                self._set_error(f"Invalid numeric input for pendulum {idx}.")
                return None
            masses.append(m)
            lengths.append(l)
            angles.append(th)
        return SimulationParams(
            body_count=n,
            masses=masses,
            lengths=lengths,
            initial_angles=angles,
            t_max=self.config.render.sim_duration,
            n_points=self.config.n_points,
        )

    def _on_run_clicked(self):
        n = clamp_body_count(dpg.get_value(self.count_id))
        if needs_confirmation(n):
            dpg.set_value(self.confirm_text_id, f"Simulating {n} pendulums may be slow. Continue?")
            dpg.configure_item(self.confirm_id, show=True)
            return
        self._start_run(n)

    def _on_confirm_run(self):
        dpg.configure_item(self.confirm_id, show=False)
        self._start_run(clamp_body_count(dpg.get_value(self.count_id)))

    def _start_run(self, n: int):
        self._generate_fields()
        params = self._gather_params(n)
        if params is None:
            return
        if not self.controller.on_run_requested(params):
            self._set_error("A simulation is already running.")
            return
        dpg.configure_item(self.loading_id, show=True)
        dpg.configure_item(self.run_button_id, enabled=False)
        self._set_status(f"Simulating {n} pendulum(s)...")

    def _on_play_clicked(self):
        if not self.controller.has_dataset:
            self._on_run_clicked()
            return
        playing = self.controller.on_toggle_requested()
        dpg.configure_item(self.play_button_id, label="Pause" if playing else "Play")
        self._set_status("Playing." if playing else "Paused.")

    def _on_reset_clicked(self):
        self.controller.on_reset_requested()
        self._set_status("Reset to frame 0.")

    def _sync_ui_with_controller(self):
        """
        Periodic update: loading indicator, button states and messages from finished runs.
        """
        _, _, playing, pending = self.controller.snapshot()
        dpg.configure_item(self.loading_id, show=pending)
        dpg.configure_item(self.run_button_id, enabled=not pending)
        dpg.configure_item(self.play_button_id, label="Pause" if playing else "Play")

        status, error = self.controller.take_messages()
        if error:
            self._set_error(error)
        elif status:
            self._set_status(status)

        self._schedule_sync()


# ============================================================
# Application Entry
# ============================================================


def parse_kv(pairs):
    out = {}
    for p in pairs or []:
        if "=" not in p:
            continue
        k, v = p.split("=", 1)
        out[k.strip()] = coerce_scalar(v.strip())
    return out


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="N-pendulum trajectory playback viewer")
    parser.add_argument("--config", type=str, default=None, help="JSON config file")
    parser.add_argument("--backend", type=str, choices=["local", "http"], default=None)
    parser.add_argument("--endpoint", type=str, default=None, help="Simulation server URL (http backend)")
    parser.add_argument("--log-level", type=str, default=None)
    parser.add_argument("--log-file", type=str, default=None)
    parser.add_argument(
        "--set",
        nargs="*",
        default=None,
        help="Override config keys: --set render.trace_length=200 viewport.fps=30",
    )
    return parser


def config_from_args(args) -> AppConfig:
    overrides = parse_kv(args.set)
    if args.backend is not None:
        overrides["simulation.backend"] = args.backend
    if args.endpoint is not None:
        overrides["simulation.endpoint"] = args.endpoint
    if args.log_level is not None:
        overrides["logging.level"] = args.log_level
    if args.log_file is not None:
        overrides["logging.file"] = args.log_file
    return load_config(args.config, overrides)


def main(argv=None):
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    try:
        config = config_from_args(args)
    except (OSError, ValueError) as exc:
        parser.error(str(exc))
    setup_logging(config.log_level, config.log_format, config.log_file)
    logger.info("Starting viewer (backend=%s)", config.backend)

    backend = make_backend(config.backend, config.endpoint, config.timeout)
    controller = PlaybackController(config, backend, panel_size=config.view_width // 2)

    renderer = PygameRenderer(controller, config)

    # Start Pygame renderer thread
    renderer.start()

    ui = UI(controller, config)

    # Keyboard shortcut in UI window to toggle play/pause (Space)
    with dpg.handler_registry():
        def key_down(sender, app_data):
            if app_data == dpg.mvKey_Spacebar:
                ui._on_play_clicked()
        dpg.add_key_press_handler(callback=key_down)

    # Run Dear PyGui event loop
    try:
        dpg.start_dearpygui()
    finally:
        renderer.running = False
        renderer.join(timeout=2.0)
        dpg.destroy_context()
        logger.info("Viewer shut down.")


if __name__ == "__main__":
    main()
