"""
Frame driver: per-frame ordering, single stepping, cancellation, resize.
"""
import numpy as np
import pytest

from frame_driver import CancelToken, FrameDriver, create_driver, driver_params
from hud import HudCounter
from particle import ParticleField
from simulation import Simulation
from visualization import PygameCanvas


def _driver(canvas, field, counter=lambda: 0, **params):
    sim = Simulation(field, params)
    return FrameDriver(canvas, field, sim, counter, params, clock=lambda: 0.0)


def test_step_draw_order(canvas):
    field = ParticleField.from_arrays([[0.0, 100.0], [10.0, 100.0]], np.zeros((2, 2)), 300, 200)
    driver = _driver(canvas, field)
    driver.step()

    kinds = canvas.kinds()
    assert kinds[:2] == ["clear", "fill_rect"]
    assert kinds[-1] == "present"
    first_circle = kinds.index("circle")
    assert all(k != "line" for k in kinds[first_circle:])
    assert kinds.count("circle") == 2


def test_step_draws_link_with_expected_alpha(canvas):
    field = ParticleField.from_arrays([[0.0, 100.0], [10.0, 100.0]], np.zeros((2, 2)), 300, 200)
    driver = _driver(canvas, field)
    driver.step()

    (line,) = canvas.of("line")
    _, start, end, _, alpha, _ = line
    assert start == (0.0, 100.0)
    assert end == (10.0, 100.0)
    assert alpha == pytest.approx(0.311, abs=1e-3)
    assert driver.last_link_count == 1


def test_points_use_configured_radius(canvas):
    field = ParticleField.from_arrays([[5.0, 5.0]], [[0.0, 0.0]], 300, 200)
    _driver(canvas, field, point_radius=2.2).step()
    (circle,) = canvas.of("circle")
    assert circle[2] == 2.2


def test_background_covers_canvas(canvas, field):
    _driver(canvas, field).step()
    (_, color, rect) = canvas.of("fill_rect")[0]
    assert color == (7, 9, 9)
    assert rect == (0, 0, 300.0, 200.0)


def test_physics_runs_before_drawing(canvas):
    field = ParticleField.from_arrays([[299.9, 50.0]], [[1.0, 0.0]], 300, 200)
    _driver(canvas, field, damping=1.0).step()
    (circle,) = canvas.of("circle")
    # Drawn at the wrapped position, not the stale one.
    assert circle[1] == (0.0, 50.0)


def test_counter_drives_jitter(canvas, field):
    counter = HudCounter(40)
    driver = _driver(canvas, field, counter)
    driver.step()
    assert driver.last_jitter == pytest.approx(2.0)
    counter.update(1000)
    driver.step()
    assert driver.last_jitter == pytest.approx(6.0)


def test_run_single_steps_with_max_frames(canvas, field):
    driver = _driver(canvas, field)
    ticks = []
    assert driver.run(max_frames=5, scheduler=lambda: ticks.append(1)) == 5
    assert driver.frame == 5
    # No wait after the last frame.
    assert len(ticks) == 4


def test_stop_from_scheduler_ends_loop(canvas, field):
    driver = _driver(canvas, field)

    def scheduler():
        if driver.frame == 3:
            driver.stop()

    assert driver.run(scheduler=scheduler) == 3
    assert not driver.running


def test_no_surface_is_silent_noop(field):
    driver = _driver(None, field)
    assert driver.start() is False
    assert driver.run(max_frames=10) == 0
    driver.step()
    assert driver.frame == 0


def test_frames_generator_closes_driver(canvas, field):
    driver = _driver(canvas, field)
    released = []
    driver.bind_resize(lambda listener: (lambda: released.append(listener)))

    frames = driver.frames()
    next(frames)
    next(frames)
    assert driver.running
    frames.close()

    assert not driver.running
    assert released == [driver.resize]
    assert driver.frame == 2


def test_resize_rescales_canvas_and_field(canvas, field):
    driver = _driver(canvas, field)
    driver.resize(150)
    assert field.bounds == (150.0, 200.0)
    assert canvas.width == 150


def test_cancel_token_wait_returns_when_cancelled():
    token = CancelToken()
    assert token.wait(0) is False
    token.cancel()
    assert token.cancelled
    assert token.wait(5) is True


def test_driver_params_merges_sections():
    params = driver_params({
        "run_control": {"fps": 30},
        "visualization": {"particle_color": [1, 2, 3]},
        "particle_field": {"link_threshold": 50},
    })
    assert params == {"fps": 30, "particle_color": [1, 2, 3], "link_threshold": 50}


def test_create_driver_on_pygame_canvas():
    driver = create_driver({"particle_field": {"particle_count": 10}}, lambda: 0, 160, seed=11)
    assert isinstance(driver.canvas, PygameCanvas)
    assert driver.field.bounds == (160.0, 200.0)
    assert driver.run(max_frames=3) == 3
    png = driver.canvas.to_png_bytes()
    assert png.startswith(b"\x89PNG")


def test_field_bounds_follow_canvas_pixels():
    driver = create_driver({"particle_field": {"particle_count": 30, "initial_speed": 4.0}},
                           lambda: 0, 160.7, seed=5)
    assert driver.canvas.width == 160
    assert driver.field.bounds == (160.0, 200.0)
    driver.run(max_frames=50)
    assert driver.field.positions[:, 0].max() < driver.canvas.width

    driver.resize(120.5)
    assert driver.field.bounds == (120.0, 200.0)


def test_start_opens_fps_window():
    ticks = iter([0.0, 400.0, 1000.0])
    driver = create_driver({"particle_field": {"particle_count": 3}}, lambda: 0, 50,
                           seed=2, clock=lambda: next(ticks))
    assert driver.run(max_frames=2, scheduler=lambda: None) == 2
    assert driver.fps_counter.fps == 2
