from npendulum.clock import PlaybackClock
from npendulum.constants import BACKGROUND_COLOR, BODY_COLOR
from npendulum.surfaces import SurfaceManager


def rgb(surf, pos):
    return tuple(surf.get_at(pos))[:3]


def paused_clock(dataset, frame_index):
    clock = PlaybackClock(60.0)
    clock.load(dataset, now=0.0)
    clock.toggle_play_pause(now=0.0)
    clock.state.frame_index = frame_index
    return clock


def test_surfaces_are_square(render_config):
    manager = SurfaceManager(render_config, 400)
    assert manager.scene.get_size() == (400, 400)
    assert manager.graph.get_size() == (400, 400)


def test_resize_while_paused_redraws_frozen_frame(render_config, small_dataset):
    manager = SurfaceManager(render_config, 400)
    clock = paused_clock(small_dataset, 2)
    manager.render(clock.state)
    assert rgb(manager.scene, (100, 200)) == BODY_COLOR

    assert manager.on_resize(800, clock.state) is True
    assert manager.dimensions == (800, 800)
    assert manager.scene.get_size() == (800, 800)
    assert manager.graph.get_size() == (800, 800)
    # (-1, 0) at scale 200 on the larger surface
    assert rgb(manager.scene, (200, 400)) == BODY_COLOR
    assert clock.state.frame_index == 2
    assert clock.state.is_playing is False


def test_resize_while_playing_waits_for_next_pass(render_config, small_dataset):
    manager = SurfaceManager(render_config, 400)
    clock = PlaybackClock(60.0)
    clock.load(small_dataset, now=0.0)
    assert manager.on_resize(800, clock.state) is False
    assert rgb(manager.scene, (200, 400)) == BACKGROUND_COLOR


def test_resize_without_dataset(render_config):
    manager = SurfaceManager(render_config, 400)
    clock = PlaybackClock(60.0)
    assert manager.on_resize(300, clock.state) is False
    assert manager.dimensions == (300, 300)


def test_same_size_is_noop(render_config, small_dataset):
    manager = SurfaceManager(render_config, 400)
    scene = manager.scene
    assert manager.on_resize(400, paused_clock(small_dataset, 1).state) is False
    assert manager.scene is scene
