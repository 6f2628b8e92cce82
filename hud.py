# hud.py
"""
State behind the HUD widget: the tick counter and the FPS readout.

The counter is owned by the widget's click handlers (buttons in the pygame
window, form posts and the JSON API on the website); the frame driver only
reads it. The web server shares one counter between request threads.
"""
import logging
import threading
from typing import Callable, List, Optional

from constants import FPS_PLACEHOLDER, FPS_REPORT_INTERVAL_MS


class HudCounter:
    """A non-negative integer counter with change subscribers."""

    def __init__(self, count: int = 0):
        self._lock = threading.Lock()
        self._count = max(0, int(count))
        self._subscribers: List[Callable[[int], None]] = []

    @property
    def value(self) -> int:
        return self._count

    def __call__(self) -> int:
        return self._count

    def update(self, delta: int) -> int:
        """Adds `delta`, clamping at zero, and returns the new value."""
        with self._lock:
            self._count = max(0, self._count + int(delta))
            value = self._count
            subscribers = list(self._subscribers)
        logging.debug(f"HUD counter {delta:+d} -> {value}")
        for callback in subscribers:
            callback(value)
        return value

    def increment(self) -> int:
        return self.update(1)

    def decrement(self) -> int:
        return self.update(-1)

    def subscribe(self, callback: Callable[[int], None]) -> Callable[[], None]:
        """Registers a change callback and returns a function removing it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe


class FpsCounter:
    """
    Counts rendered frames and reports a rounded rate once per interval.
    """

    def __init__(self, interval_ms: float = FPS_REPORT_INTERVAL_MS):
        self.interval_ms = interval_ms
        self.frames = 0
        self.fps: Optional[int] = None
        self._last: Optional[float] = None

    def start(self, now_ms: float) -> None:
        """Starts a new measuring window at `now_ms` (the loop start)."""
        self.frames = 0
        self._last = now_ms

    def tick(self, now_ms: float) -> Optional[int]:
        """
        Records one frame at `now_ms`.

        Every frame counts, the first one included. Without start() the
        first frame's time becomes the window start.

        Returns the new rate when a report is due, otherwise None.
        """
        self.frames += 1
        if self._last is None:
            self._last = now_ms
            return None
        elapsed = now_ms - self._last
        if elapsed >= self.interval_ms:
            self.fps = round((self.frames * 1000) / elapsed)
            self.frames = 0
            self._last = now_ms
            return self.fps
        return None

    @property
    def label(self) -> str:
        return FPS_PLACEHOLDER if self.fps is None else f"{self.fps} fps"
