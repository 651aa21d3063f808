# level.py
# Tile map: a fixed grid of byte tile IDs plus its placement in the scene.
#
# Tile IDs: 0 is empty, anything else is solid. The grid is authored in
# memory by filling rectangles (see build_two_fort_map) and does not change
# once the scene is running.

from __future__ import annotations
import math
import pygame
from . import settings
from .draw import DrawContext
from .geometry import ray_aabb


class TileMap:
    EMPTY = 0
    SOLID = 1

    def __init__(
        self,
        size_x: int,
        size_y: int,
        tile_size: float = settings.TILE_SIZE,
        origin: tuple[float, float] = (0.0, 0.0),
    ):
        if size_x <= 0 or size_y <= 0:
            raise ValueError(f"Map size must be positive, got {size_x}x{size_y}")

        self.size_x = size_x
        self.size_y = size_y
        self.tile_size = float(tile_size)
        self.origin = pygame.Vector2(origin)

        # Row-major: index = y * size_x + x
        self.tiles = bytearray(size_x * size_y)

        self.spawn_points: list[pygame.Vector2] = []

    # --------------------------
    # Tiles
    # --------------------------

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self.size_x and 0 <= y < self.size_y):
            raise IndexError(f"Tile ({x}, {y}) outside map of {self.size_x}x{self.size_y}")
        return y * self.size_x + x

    def get(self, x: int, y: int) -> int:
        return self.tiles[self._index(x, y)]

    def set(self, x: int, y: int, value: int) -> None:
        if not 0 <= value <= 255:
            raise ValueError(f"Tile value must fit in a byte, got {value}")
        self.tiles[self._index(x, y)] = value

    def fill(self, x: int, y: int, w: int, h: int, value: int = SOLID) -> None:
        """Fill the w x h rectangle whose top-left tile is (x, y)."""
        if w <= 0 or h <= 0:
            raise ValueError(f"Fill size must be positive, got {w}x{h}")
        # Check both corners up front so a bad fill leaves the map untouched
        self._index(x, y)
        self._index(x + w - 1, y + h - 1)

        for ty in range(y, y + h):
            for tx in range(x, x + w):
                self.set(tx, ty, value)

    def is_solid(self, x: int, y: int) -> bool:
        return self.get(x, y) != self.EMPTY

    # --------------------------
    # Scene placement
    # --------------------------

    @property
    def pixel_width(self) -> float:
        return self.size_x * self.tile_size

    @property
    def pixel_height(self) -> float:
        return self.size_y * self.tile_size

    @property
    def left(self) -> float:
        return self.origin.x

    @property
    def right(self) -> float:
        return self.origin.x + self.pixel_width

    def tile_rect(self, x: int, y: int) -> tuple[float, float, float, float]:
        return (
            self.origin.x + x * self.tile_size,
            self.origin.y + y * self.tile_size,
            self.tile_size,
            self.tile_size,
        )

    def tile_at(self, point: pygame.Vector2) -> tuple[int, int] | None:
        tx = math.floor((point.x - self.origin.x) / self.tile_size)
        ty = math.floor((point.y - self.origin.y) / self.tile_size)
        if 0 <= tx < self.size_x and 0 <= ty < self.size_y:
            return tx, ty
        return None

    # --------------------------
    # Raycast
    # --------------------------

    def raycast(self, start: pygame.Vector2, end: pygame.Vector2) -> float | None:
        """
        Distance from start to the first solid tile boundary on the segment.

        Grid traversal (DDA): clip the segment to the map, then step from
        cell to cell, always crossing whichever grid line is closer. A start
        point inside a solid tile hits at distance 0. None if the segment is
        clear.
        """
        start = pygame.Vector2(start)
        delta = pygame.Vector2(end) - start
        length = delta.length()
        if length == 0:
            return None
        direction = delta / length

        lo = self.origin
        hi = self.origin + pygame.Vector2(self.pixel_width, self.pixel_height)
        t = ray_aabb(start, direction, lo, hi)
        if t is None or t > length:
            return None

        size = self.tile_size
        entry = start + direction * t
        step_x = 1 if direction.x > 0 else -1
        step_y = 1 if direction.y > 0 else -1
        cx = _entry_cell((entry.x - lo.x) / size, direction.x, self.size_x)
        cy = _entry_cell((entry.y - lo.y) / size, direction.y, self.size_y)

        if direction.x != 0:
            boundary_x = lo.x + (cx + (1 if step_x > 0 else 0)) * size
            t_max_x = (boundary_x - start.x) / direction.x
            t_delta_x = size / abs(direction.x)
        else:
            t_max_x = t_delta_x = math.inf

        if direction.y != 0:
            boundary_y = lo.y + (cy + (1 if step_y > 0 else 0)) * size
            t_max_y = (boundary_y - start.y) / direction.y
            t_delta_y = size / abs(direction.y)
        else:
            t_max_y = t_delta_y = math.inf

        while 0 <= cx < self.size_x and 0 <= cy < self.size_y:
            if self.tiles[cy * self.size_x + cx] != self.EMPTY:
                return t

            if t_max_x < t_max_y:
                t = t_max_x
                cx += step_x
                t_max_x += t_delta_x
            else:
                t = t_max_y
                cy += step_y
                t_max_y += t_delta_y

            if t > length:
                return None

        return None

    # --------------------------
    # Draw
    # --------------------------

    def draw(self, context: DrawContext) -> None:
        context.save()
        context.fill_colour = settings.TILE_COLOUR
        for ty in range(self.size_y):
            row = ty * self.size_x
            for tx in range(self.size_x):
                if self.tiles[row + tx] != self.EMPTY:
                    context.fill_rect(*self.tile_rect(tx, ty))
        context.restore()


def _entry_cell(local: float, direction: float, count: int) -> int:
    """Cell a ray occupies at a grid coordinate, picking the cell it moves into on a grid line."""
    cell = math.floor(local)
    if direction < 0 and cell == local:
        cell -= 1
    return min(max(cell, 0), count - 1)


def build_two_fort_map() -> TileMap:
    """
    Two mirrored forts either side of a low wall.

    The bottom row is the floor; its top edge sits at GROUND_LEVEL so the
    stickmen's ground clamp lines up with it.
    """
    size_x, size_y = 80, 24
    size = settings.TILE_SIZE
    tile_map = TileMap(
        size_x,
        size_y,
        size,
        origin=(-size_x * size / 2, settings.GROUND_LEVEL - (size_y - 1) * size),
    )

    def both_sides(x: int, y: int, w: int, h: int) -> None:
        tile_map.fill(x, y, w, h)
        tile_map.fill(size_x - x - w, y, w, h)

    # Floor + outer walls
    tile_map.fill(0, size_y - 1, size_x, 1)
    both_sides(0, 0, 1, size_y - 1)

    # Forts: back wall, roof, front wall with a doorway, battlement on top
    both_sides(6, 14, 1, 9)
    both_sides(6, 13, 13, 1)
    both_sides(18, 14, 1, 4)
    both_sides(6, 10, 1, 3)
    both_sides(6, 9, 6, 1)
    both_sides(18, 11, 1, 2)

    # Cover in the middle, tall enough to hide a ducking stickman
    tile_map.fill(size_x // 2 - 1, size_y - 3, 2, 2)

    tile_map.spawn_points = [
        pygame.Vector2(tile_map.left + 12 * size, settings.GROUND_LEVEL),
        pygame.Vector2(tile_map.right - 12 * size, settings.GROUND_LEVEL),
    ]
    return tile_map
