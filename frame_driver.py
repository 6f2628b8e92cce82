# frame_driver.py
"""
The frame driver: one explicit scheduling loop per HUD widget.

Each frame clears the canvas, fills the background, advances the physics
with the jitter derived from the HUD counter, draws proximity links and
then the points. The loop is owned by a cancel token instead of an
ever-rescheduling callback, so a widget that goes away (window closed,
stream client disconnected) stops its loop and releases its listeners.
Tests single-step frames with step().
"""
import logging
import threading
import time
from typing import Any, Callable, Dict, Iterator, List, Optional

from constants import CANVAS_HEIGHT, FPS, POINT_RADIUS
from hud import FpsCounter
from particle import ParticleField
from simulation import (
    Simulation, DEFAULT_LINK_MAX_ALPHA, DEFAULT_LINK_THRESHOLD
)
from visualization import (
    PygameCanvas, background_color, draw_links, draw_points, particle_color
)

# --- Data Contracts ---
#
# class FrameDriver:
#   - __init__(self, canvas, field, simulation, counter, params=None, clock=None):
#     - Inputs:
#       - canvas: A Canvas, or None when no drawing surface was acquired.
#       - counter: Zero-argument callable returning the HUD counter value.
#       - params: Merged "particle_field" + "visualization" + "run_control"
#         settings (link_threshold, link_max_alpha, point_radius, fps, ...).
#       - clock: Zero-argument callable returning milliseconds.
#   - start(self) -> bool: False (and no loop) without a canvas.
#   - step(self) -> None: Exactly one frame; Physics Step runs before any
#     drawing.
#   - run(self, max_frames=None, scheduler=None) -> int: Frames rendered.
#   - stop(self) / close(self): Cancel the loop; close() also releases
#     resize listeners.


class CancelToken:
    """Cancellation handle for one run of a frame loop."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Sleeps up to `timeout` seconds; returns True if cancelled."""
        return self._event.wait(timeout)


def _now_ms() -> float:
    return time.perf_counter() * 1000.0


class FrameDriver:
    """
    Drives a ParticleField on a canvas, one frame at a time.
    """
    def __init__(
        self,
        canvas,
        field: ParticleField,
        simulation: Simulation,
        counter: Callable[[], int],
        params: Optional[Dict[str, Any]] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        params = params or {}
        self.canvas = canvas
        self.field = field
        self.simulation = simulation
        self.counter = counter
        self.link_threshold = float(params.get('link_threshold', DEFAULT_LINK_THRESHOLD))
        self.link_max_alpha = float(params.get('link_max_alpha', DEFAULT_LINK_MAX_ALPHA))
        self.point_radius = float(params.get('point_radius', POINT_RADIUS))
        self.fps = int(params.get('fps', FPS))
        self.log_throttle = int(params.get('log_throttle_steps', 600))
        self.background = background_color(params)
        self.color = particle_color(params)

        self.fps_counter = FpsCounter()
        self.frame = 0
        self.last_jitter = 0.0
        self.last_link_count = 0
        self._clock = clock or _now_ms
        self._token: Optional[CancelToken] = None
        self._releases: List[Callable[[], None]] = []

    @property
    def running(self) -> bool:
        return self._token is not None and not self._token.cancelled

    def start(self) -> bool:
        """
        Arms a fresh cancel token.

        Returns:
            bool: False when there is no drawing surface; the widget then
            simply never animates.
        """
        if self.canvas is None:
            logging.warning("No drawing surface acquired; particle field will not animate.")
            return False
        if not self.running:
            self._token = CancelToken()
            self.fps_counter.start(self._clock())
            logging.info(
                f"Frame driver started ({self.field.particle_count} particles, "
                f"{self.fps} fps target)."
            )
        return True

    def step(self) -> None:
        """Renders exactly one frame."""
        canvas = self.canvas
        if canvas is None:
            return
        width, height = self.field.bounds

        canvas.clear()
        canvas.fill_rect(self.background, (0, 0, width, height))

        self.last_jitter = self.simulation.jitter_for(self.counter())
        self.simulation.step(self.last_jitter)

        positions = self.field.positions
        self.last_link_count = draw_links(
            canvas, positions, self.link_threshold, self.link_max_alpha, self.color
        )
        draw_points(canvas, positions, self.point_radius, self.color)
        canvas.present()

        self.frame += 1
        report = self.fps_counter.tick(self._clock())
        if report is not None:
            logging.debug(f"Frame driver at {report} fps.")
        if self.frame % self.log_throttle == 0:
            logging.info(
                f"Frame {self.frame} | jitter {self.last_jitter:.2f} | "
                f"links {self.last_link_count}"
            )

    def run(self, max_frames: Optional[int] = None,
            scheduler: Optional[Callable[[], Any]] = None) -> int:
        """
        Runs the frame loop until stopped or `max_frames` frames were drawn.

        Args:
            max_frames (Optional[int]): Frame limit; None runs until stop().
            scheduler (Optional[Callable]): Waits for the next refresh. The
                default waits one frame interval on the cancel token.

        Returns:
            int: The number of frames rendered by this call.
        """
        if not self.start():
            return 0
        token = self._token
        interval = 1.0 / self.fps if self.fps > 0 else 0.0
        if scheduler is None:
            scheduler = lambda: token.wait(interval)

        rendered = 0
        while not token.cancelled:
            self.step()
            rendered += 1
            if max_frames is not None and rendered >= max_frames:
                break
            scheduler()
        logging.info(f"Frame loop finished after {rendered} frames.")
        return rendered

    def frames(self) -> Iterator[Any]:
        """
        Yields the canvas after each frame until stopped.

        Closing the generator (e.g. the consumer went away) closes the driver.
        """
        if not self.start():
            return
        token = self._token
        interval = 1.0 / self.fps if self.fps > 0 else 0.0
        try:
            while not token.cancelled:
                self.step()
                yield self.canvas
                token.wait(interval)
        finally:
            self.close()

    def resize(self, width: float, height: Optional[float] = None) -> None:
        """Rescales the canvas and the field bounds to the new container size."""
        if self.canvas is None:
            self.field.resize(width, height)
            return
        self.canvas.resize(width, height)
        # Field bounds follow the pixel size the canvas actually took.
        self.field.resize(self.canvas.width, self.canvas.height)

    def bind_resize(self, add_listener: Callable[[Callable], Callable[[], None]]) -> None:
        """Subscribes resize() to a host's resize events until close()."""
        self._releases.append(add_listener(self.resize))

    def stop(self) -> None:
        if self._token is not None and not self._token.cancelled:
            self._token.cancel()
            logging.info(f"Frame driver stopped at frame {self.frame}.")

    def close(self) -> None:
        """Stops the loop and releases every listener this driver holds."""
        self.stop()
        while self._releases:
            release = self._releases.pop()
            release()


def driver_params(config: Dict[str, Any]) -> Dict[str, Any]:
    """Flattens the config sections the frame driver reads."""
    params: Dict[str, Any] = {}
    params.update(config.get('run_control', {}))
    params.update(config.get('visualization', {}))
    params.update(config.get('particle_field', {}))
    return params


def create_driver(config: Dict[str, Any], counter: Callable[[], int], width: float,
                  canvas_factory: Optional[Callable[[float, float], Any]] = None,
                  seed: Any = None,
                  clock: Optional[Callable[[], float]] = None) -> FrameDriver:
    """
    Builds a field, its physics and a driver on a fresh canvas.

    Args:
        config (Dict[str, Any]): The full application config.
        counter (Callable[[], int]): Source of the HUD counter value.
        width (float): Measured canvas width.
        canvas_factory (Optional[Callable]): Returns a canvas for
            (width, height); defaults to an off-screen PygameCanvas.
        seed: Overrides the configured seed when not None.
        clock (Optional[Callable]): Millisecond clock for the FPS counter.
    """
    params = driver_params(config)
    if seed is not None:
        params['seed'] = seed
    height = float(params.get('height', CANVAS_HEIGHT))
    factory = canvas_factory or PygameCanvas
    canvas = factory(width, height)
    field = ParticleField(params, canvas.width, canvas.height)
    simulation = Simulation(field, params)
    return FrameDriver(canvas, field, simulation, counter, params, clock=clock)
