# visualization.py
"""
Handles drawing the HUD particle field using Pygame.

The drawing primitives the field needs (clear, fill-rect, translucent line,
filled circle) sit behind a small Canvas interface so the frame driver can
render onto an off-screen pygame surface for the website stream, onto the
desktop HUD window, or onto a recording stand-in under test.
"""
import io
import logging
import pygame
import numpy as np
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence, Tuple

from constants import (
    BACKGROUND_COLOR, BUTTON_COLOR, BUTTON_HOVER_COLOR, CANVAS_HEIGHT,
    HUD_BORDER_COLOR, HUD_BUTTON_HEIGHT, HUD_GAP, HUD_MUTED_COLOR,
    HUD_PADDING, HUD_PANEL_COLOR, HUD_TEXT_COLOR, HUD_WINDOW_WIDTH,
    LINK_WIDTH, NEON_GREEN, POINT_RADIUS
)
from simulation import proximity_links, DEFAULT_LINK_MAX_ALPHA, DEFAULT_LINK_THRESHOLD

if TYPE_CHECKING:
    from frame_driver import FrameDriver
    from hud import HudCounter


# --- Data Contracts ---
#
# Canvas (duck-typed):
#   - width, height: current drawing bounds.
#   - clear() -> None: wipes the previous frame.
#   - fill_rect(color, rect) -> None
#   - line(start, end, color, alpha, width=1) -> None: alpha in [0, 1].
#   - circle(center, radius, color) -> None
#   - present() -> None: composes the frame; called once per frame.
#
# draw_links(canvas, positions, threshold, max_alpha, color) -> int:
#   - Side Effects: One canvas.line call per linked pair.
#   - Outputs: The number of links drawn.
#
# class HudWindow:
#   - handle_events(self) -> bool: False once the user has quit.
#   - present_frame(self, driver) -> None: draws the widget around the
#     driver's canvas, flips the display and paces to the target FPS.

Color = Tuple[int, int, int]


class PygameCanvas:
    """
    Off-screen canvas backed by a pygame surface.

    Links are drawn onto a per-pixel-alpha overlay that is composed onto the
    opaque base surface in present(); points go onto the same overlay after
    the links, so they always sit on top.
    """
    def __init__(self, width: float, height: float = CANVAS_HEIGHT):
        self.width = 0
        self.height = 0
        self.surface: Optional[pygame.Surface] = None
        self.overlay: Optional[pygame.Surface] = None
        self.resize(width, height)

    def resize(self, width: float, height: Optional[float] = None) -> None:
        height = self.height if height is None else height
        self.width = max(1, int(width))
        self.height = max(1, int(height))
        self.surface = pygame.Surface((self.width, self.height))
        self.overlay = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
        logging.debug(f"Canvas surface resized to {self.width}x{self.height}.")

    def clear(self) -> None:
        self.surface.fill((0, 0, 0))
        self.overlay.fill((0, 0, 0, 0))

    def fill_rect(self, color: Color, rect: Optional[Sequence[float]] = None) -> None:
        self.surface.fill(color, rect)

    def line(self, start, end, color: Color, alpha: float, width: int = LINK_WIDTH) -> None:
        a = int(round(min(max(alpha, 0.0), 1.0) * 255))
        pygame.draw.line(self.overlay, (color[0], color[1], color[2], a), start, end, width)

    def circle(self, center, radius: float, color: Color) -> None:
        pygame.draw.circle(self.overlay, color, center, radius)

    def present(self) -> None:
        self.surface.blit(self.overlay, (0, 0))

    def to_png_bytes(self) -> bytes:
        """Encodes the last presented frame as PNG."""
        buffer = io.BytesIO()
        pygame.image.save(self.surface, buffer, "frame.png")
        return buffer.getvalue()


def draw_links(
    canvas,
    positions: np.ndarray,
    threshold: float = DEFAULT_LINK_THRESHOLD,
    max_alpha: float = DEFAULT_LINK_MAX_ALPHA,
    color: Color = NEON_GREEN,
    width: int = LINK_WIDTH,
) -> int:
    """Draws a fading line between every pair closer than `threshold`."""
    pairs, alphas = proximity_links(positions, threshold, max_alpha)
    for (i, j), alpha in zip(pairs, alphas):
        canvas.line(
            (float(positions[i, 0]), float(positions[i, 1])),
            (float(positions[j, 0]), float(positions[j, 1])),
            color, float(alpha), width
        )
    return len(pairs)


def draw_points(canvas, positions: np.ndarray, radius: float = POINT_RADIUS,
                color: Color = NEON_GREEN) -> None:
    """Draws a filled circle at every particle position."""
    for x, y in positions:
        canvas.circle((float(x), float(y)), radius, color)


class _Button:
    def __init__(self, label: str, delta: int):
        self.label = label
        self.delta = delta
        self.rect = pygame.Rect(0, 0, 0, 0)


class HudWindow:
    """
    Desktop host for the HUD widget: counter, tick buttons, particle canvas
    and FPS readout in one pygame window.
    """
    def __init__(self, counter: "HudCounter", fps: int, width: int = HUD_WINDOW_WIDTH):
        """
        Initializes Pygame and the display window.
        """
        pygame.init()
        pygame.font.init()

        self.counter = counter
        self.fps = fps
        self.height = CANVAS_HEIGHT + HUD_PADDING * 2
        self.screen = pygame.display.set_mode((width, self.height), pygame.RESIZABLE)
        pygame.display.set_caption("TX-2 // HUD")
        self.clock = pygame.time.Clock()

        self.font_label = pygame.font.SysFont(None, 20)
        self.font_value = pygame.font.SysFont(None, 40)

        self.buttons = [_Button("+ TICK", 1), _Button("- TICK", -1)]
        self._resize_listeners: List[Callable[[float], None]] = []
        self.closed = False
        self._layout(width)

        self.value_text = ""
        self._value_surface: Optional[pygame.Surface] = None
        self._on_count(counter.value)
        self._unsubscribe = counter.subscribe(self._on_count)

        logging.info(f"HudWindow initialized with Pygame display ({width}x{self.height}).")

    def _layout(self, width: int) -> None:
        self.width = width
        # Two columns: controls on the left, canvas on the right.
        column = (width - HUD_PADDING * 2 - HUD_GAP) // 2
        left = HUD_PADDING
        self.canvas_pos = (left + column + HUD_GAP, HUD_PADDING)
        self.canvas_width = max(1, column)
        button_y = HUD_PADDING + 80
        for button in self.buttons:
            button.rect = pygame.Rect(left, button_y, column, HUD_BUTTON_HEIGHT)
            button_y += HUD_BUTTON_HEIGHT + 8

    def add_resize_listener(self, listener: Callable[[float], None]) -> Callable[[], None]:
        """Registers `listener(canvas_width)`; returns a function removing it."""
        self._resize_listeners.append(listener)

        def remove() -> None:
            if listener in self._resize_listeners:
                self._resize_listeners.remove(listener)

        return remove

    def _on_count(self, value: int) -> None:
        """Re-renders the counter label; runs only when the count changes."""
        self.value_text = str(value)
        self._value_surface = self.font_value.render(self.value_text, True, HUD_TEXT_COLOR)

    def _on_resize(self, width: int) -> None:
        self.screen = pygame.display.set_mode((width, self.height), pygame.RESIZABLE)
        self._layout(width)
        for listener in list(self._resize_listeners):
            listener(self.canvas_width)
        logging.debug(f"HUD window resized; canvas width now {self.canvas_width}px.")

    def handle_events(self) -> bool:
        """
        Processes pending pygame events.

        Returns:
            bool: False if the widget should close, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Closing HUD window.")
                self.closed = True
                return False
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("ESC key pressed. Closing HUD window.")
                    self.closed = True
                    return False
                if event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
                    self.counter.increment()
                elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                    self.counter.decrement()
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                for button in self.buttons:
                    if button.rect.collidepoint(event.pos):
                        self.counter.update(button.delta)
            if event.type == pygame.VIDEORESIZE:
                self._on_resize(event.w)
        return True

    def _draw_controls(self, fps_label: str) -> None:
        mouse_pos = pygame.mouse.get_pos()
        left = HUD_PADDING

        title = self.font_label.render("Signal Demo // Counter", True, NEON_GREEN)
        self.screen.blit(title, (left, HUD_PADDING))
        self.screen.blit(self._value_surface, (left, HUD_PADDING + 28))

        for button in self.buttons:
            hovered = button.rect.collidepoint(mouse_pos)
            color = BUTTON_HOVER_COLOR if hovered else BUTTON_COLOR
            pygame.draw.rect(self.screen, color, button.rect, border_radius=4)
            pygame.draw.rect(self.screen, HUD_BORDER_COLOR, button.rect, 1, border_radius=4)
            text = self.font_label.render(button.label, True, HUD_TEXT_COLOR)
            self.screen.blit(text, text.get_rect(center=button.rect.center))

        fps_text = self.font_label.render(f"TICK / FPS  {fps_label}", True, HUD_MUTED_COLOR)
        self.screen.blit(fps_text, (left, self.height - HUD_PADDING - fps_text.get_height()))

    def present_frame(self, driver: "FrameDriver") -> None:
        """Scheduler for FrameDriver.run: draw, flip, pace, and watch for quit."""
        if not self.handle_events():
            driver.stop()
            return
        self.screen.fill(HUD_PANEL_COLOR)
        self._draw_controls(driver.fps_counter.label)
        if driver.canvas is not None:
            self.screen.blit(driver.canvas.surface, self.canvas_pos)
            border = pygame.Rect(self.canvas_pos, (driver.canvas.width, driver.canvas.height))
            pygame.draw.rect(self.screen, HUD_BORDER_COLOR, border, 1)
        pygame.display.flip()
        self.clock.tick(self.fps)

    def close(self) -> None:
        """Shuts down Pygame."""
        self._unsubscribe()
        self._resize_listeners.clear()
        pygame.font.quit()
        pygame.quit()


def background_color(params: dict) -> Color:
    return tuple(params.get('background_color', BACKGROUND_COLOR))


def particle_color(params: dict) -> Color:
    return tuple(params.get('particle_color', NEON_GREEN))
