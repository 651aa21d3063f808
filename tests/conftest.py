from __future__ import annotations

import os

# Headless pygame for every test module
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame
import pytest

from rippyshreddy.level import TileMap


class RecordingContext:
    """DrawContext fake that keeps every call for assertions."""

    def __init__(self, width: int = 800, height: int = 600):
        self._width = width
        self._height = height
        self.alpha = 1.0
        self.stroke_colour = (255, 255, 255)
        self.fill_colour = (255, 255, 255)
        self.line_width = 1.0
        self.calls: list[tuple] = []
        self.depth = 0
        self._path: list[list[tuple[float, float]]] = []

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def save(self) -> None:
        self.depth += 1
        self.calls.append(("save",))

    def restore(self) -> None:
        self.depth -= 1
        self.calls.append(("restore",))

    def translate(self, dx: float, dy: float) -> None:
        self.calls.append(("translate", dx, dy))

    def scale(self, sx: float, sy: float | None = None) -> None:
        self.calls.append(("scale", sx, sx if sy is None else sy))

    def begin_path(self) -> None:
        self._path = []

    def move_to(self, x: float, y: float) -> None:
        self._path.append([(x, y)])

    def line_to(self, x: float, y: float) -> None:
        self._path[-1].append((x, y))

    def arc(self, cx: float, cy: float, radius: float) -> None:
        self._path.append([("arc", cx, cy, radius)])

    def stroke(self) -> None:
        self.calls.append(("stroke", self.alpha, [list(p) for p in self._path]))

    def fill_rect(self, x: float, y: float, w: float, h: float) -> None:
        self.calls.append(("fill_rect", x, y, w, h))

    def strokes(self) -> list[tuple]:
        return [c for c in self.calls if c[0] == "stroke"]


@pytest.fixture
def context() -> RecordingContext:
    return RecordingContext()


@pytest.fixture
def open_map() -> TileMap:
    """40 x 10 tiles of 40 units, floor only, spawns either side of x = 0."""
    tile_map = TileMap(40, 10, 40, origin=(-800.0, -360.0))
    tile_map.fill(0, 9, 40, 1)
    tile_map.spawn_points = [pygame.Vector2(-100.0, 0.0), pygame.Vector2(100.0, 0.0)]
    return tile_map


@pytest.fixture
def make_context():
    """Factory for fresh recording contexts within one test."""
    return RecordingContext
