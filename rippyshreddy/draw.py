# draw.py
# The drawing surface the game renders through.
#
# DrawContext is the small immediate-mode capability set every draw() method
# uses (paths, filled rects, translate/scale, opacity, save/restore).
# SurfaceContext implements it on top of a pygame.Surface.

from __future__ import annotations
import math
from typing import Protocol
import pygame

Colour = tuple[int, int, int]

# Segments used to approximate a circle in arc()
ARC_SEGMENTS = 16


class DrawContext(Protocol):
    alpha: float
    stroke_colour: Colour
    fill_colour: Colour
    line_width: float

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def save(self) -> None: ...
    def restore(self) -> None: ...
    def translate(self, dx: float, dy: float) -> None: ...
    def scale(self, sx: float, sy: float | None = None) -> None: ...
    def begin_path(self) -> None: ...
    def move_to(self, x: float, y: float) -> None: ...
    def line_to(self, x: float, y: float) -> None: ...
    def arc(self, cx: float, cy: float, radius: float) -> None: ...
    def stroke(self) -> None: ...
    def fill_rect(self, x: float, y: float, w: float, h: float) -> None: ...


class SurfaceContext:
    """
    DrawContext backed by a pygame.Surface.

    Transform is kept as screen = point * scale + offset. Opacity below 1
    draws into a small per-pixel-alpha layer which is then blitted, since
    pygame.draw does not blend on its own.
    """

    def __init__(self, surface: pygame.Surface):
        self.surface = surface

        self.alpha = 1.0
        self.stroke_colour: Colour = (255, 255, 255)
        self.fill_colour: Colour = (255, 255, 255)
        self.line_width = 1.0

        self._sx = 1.0
        self._sy = 1.0
        self._tx = 0.0
        self._ty = 0.0

        self._stack: list[tuple] = []
        self._path: list[list[tuple[float, float]]] = []

    @property
    def width(self) -> int:
        return self.surface.get_width()

    @property
    def height(self) -> int:
        return self.surface.get_height()

    # --------------------------
    # State
    # --------------------------

    def save(self) -> None:
        self._stack.append((
            self._sx, self._sy, self._tx, self._ty,
            self.alpha, self.stroke_colour, self.fill_colour, self.line_width,
        ))

    def restore(self) -> None:
        if not self._stack:
            raise ValueError("restore() without a matching save()")
        (
            self._sx, self._sy, self._tx, self._ty,
            self.alpha, self.stroke_colour, self.fill_colour, self.line_width,
        ) = self._stack.pop()

    def translate(self, dx: float, dy: float) -> None:
        self._tx += dx * self._sx
        self._ty += dy * self._sy

    def scale(self, sx: float, sy: float | None = None) -> None:
        self._sx *= sx
        self._sy *= sx if sy is None else sy

    def to_screen(self, x: float, y: float) -> tuple[float, float]:
        return (x * self._sx + self._tx, y * self._sy + self._ty)

    # --------------------------
    # Paths
    # --------------------------

    def begin_path(self) -> None:
        self._path = []

    def move_to(self, x: float, y: float) -> None:
        self._path.append([self.to_screen(x, y)])

    def line_to(self, x: float, y: float) -> None:
        if not self._path:
            self._path.append([])
        self._path[-1].append(self.to_screen(x, y))

    def arc(self, cx: float, cy: float, radius: float) -> None:
        points = []
        for i in range(ARC_SEGMENTS + 1):
            a = 2 * math.pi * i / ARC_SEGMENTS
            points.append(self.to_screen(cx + radius * math.cos(a), cy + radius * math.sin(a)))
        self._path.append(points)

    def stroke(self) -> None:
        width = max(1, round(self.line_width * abs(self._sx)))
        for points in self._path:
            if len(points) < 2:
                continue
            self._draw(
                points,
                lambda target, pts, colour: pygame.draw.lines(target, colour, False, pts, width),
                pad=width,
            )

    def fill_rect(self, x: float, y: float, w: float, h: float) -> None:
        x0, y0 = self.to_screen(x, y)
        x1, y1 = self.to_screen(x + w, y + h)
        corners = [(x0, y0), (x1, y0), (x1, y1), (x0, y1)]
        self._draw(
            corners,
            lambda target, pts, colour: pygame.draw.polygon(target, colour, pts),
            pad=1,
            colour=self.fill_colour,
        )

    # --------------------------
    # Internal
    # --------------------------

    def _draw(self, points, draw_fn, pad: int, colour: Colour | None = None) -> None:
        colour = self.stroke_colour if colour is None else colour
        if self.alpha <= 0:
            return

        if self.alpha >= 1:
            draw_fn(self.surface, points, colour)
            return

        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        left = math.floor(min(xs)) - pad
        top = math.floor(min(ys)) - pad
        w = math.ceil(max(xs)) - left + pad + 1
        h = math.ceil(max(ys)) - top + pad + 1

        # Clip the layer to the target so huge off-screen paths stay cheap
        bounds = pygame.Rect(left, top, w, h).clip(self.surface.get_rect())
        if bounds.width == 0 or bounds.height == 0:
            return

        layer = pygame.Surface(bounds.size, pygame.SRCALPHA)
        local = [(px - bounds.x, py - bounds.y) for px, py in points]
        draw_fn(layer, local, (*colour, round(255 * self.alpha)))
        self.surface.blit(layer, bounds.topleft)
