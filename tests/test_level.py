from __future__ import annotations

import pygame
import pytest

from rippyshreddy import settings
from rippyshreddy.level import TileMap, build_two_fort_map


def _map_with_column(column: int) -> TileMap:
    """10 x 10 tiles of 10 units at the origin, one solid column."""
    tile_map = TileMap(10, 10, 10)
    tile_map.fill(column, 0, 1, 10)
    return tile_map


def test_fill_and_get_are_row_major() -> None:
    tile_map = TileMap(4, 3, 10)
    tile_map.fill(1, 1, 2, 2, 7)

    assert tile_map.get(1, 1) == 7
    assert tile_map.get(2, 2) == 7
    assert tile_map.get(0, 1) == 0
    assert tile_map.tiles[1 * 4 + 2] == 7
    assert tile_map.is_solid(2, 1)
    assert not tile_map.is_solid(3, 1)


def test_out_of_range_tiles_raise() -> None:
    tile_map = TileMap(4, 3, 10)

    with pytest.raises(IndexError):
        tile_map.get(4, 0)
    with pytest.raises(IndexError):
        tile_map.get(0, -1)


def test_fill_out_of_range_leaves_map_untouched() -> None:
    tile_map = TileMap(4, 3, 10)

    with pytest.raises(IndexError):
        tile_map.fill(2, 0, 5, 1)

    assert not any(tile_map.tiles)


def test_tile_values_must_fit_in_a_byte() -> None:
    with pytest.raises(ValueError):
        TileMap(2, 2).set(0, 0, 256)


def test_raycast_hits_near_face_of_column() -> None:
    tile_map = _map_with_column(5)

    assert tile_map.raycast(pygame.Vector2(15, 25), pygame.Vector2(95, 25)) == pytest.approx(35)
    assert tile_map.raycast(pygame.Vector2(95, 25), pygame.Vector2(15, 25)) == pytest.approx(35)


def test_raycast_clear_or_short_segment_returns_none() -> None:
    tile_map = _map_with_column(5)

    assert tile_map.raycast(pygame.Vector2(15, 25), pygame.Vector2(45, 25)) is None
    assert tile_map.raycast(pygame.Vector2(15, 5), pygame.Vector2(15, 95)) is None


def test_raycast_from_inside_solid_hits_immediately() -> None:
    tile_map = _map_with_column(5)

    assert tile_map.raycast(pygame.Vector2(55, 25), pygame.Vector2(95, 25)) == 0.0


def test_raycast_enters_from_outside_the_map() -> None:
    tile_map = _map_with_column(5)

    assert tile_map.raycast(pygame.Vector2(-20, 25), pygame.Vector2(100, 25)) == pytest.approx(70)
    assert tile_map.raycast(pygame.Vector2(-20, -20), pygame.Vector2(-20, 100)) is None


def test_raycast_diagonal() -> None:
    tile_map = TileMap(10, 10, 10)
    tile_map.set(5, 5, 1)

    hit = tile_map.raycast(pygame.Vector2(5, 5), pygame.Vector2(95, 95))

    # Enters the (50..60, 50..60) tile at its corner
    assert hit == pytest.approx(45 * 2 ** 0.5)


def test_raycast_from_a_grid_line_ignores_the_tile_behind() -> None:
    tile_map = TileMap(10, 10, 10)
    tile_map.fill(4, 0, 1, 10)  # behind the start, x 40..50
    tile_map.fill(2, 0, 1, 10)  # ahead, x 20..30

    assert tile_map.raycast(pygame.Vector2(40, 5), pygame.Vector2(0, 5)) == pytest.approx(10)


def test_tile_at_uses_origin() -> None:
    tile_map = TileMap(4, 4, 10, origin=(-20, -20))

    assert tile_map.tile_at(pygame.Vector2(-20, -20)) == (0, 0)
    assert tile_map.tile_at(pygame.Vector2(5, 15)) == (2, 3)
    assert tile_map.tile_at(pygame.Vector2(25, 0)) is None


def test_two_fort_floor_lines_up_with_ground() -> None:
    tile_map = build_two_fort_map()

    below = tile_map.tile_at(pygame.Vector2(-600, settings.GROUND_LEVEL + 1))
    above = tile_map.tile_at(pygame.Vector2(-600, settings.GROUND_LEVEL - 1))
    assert tile_map.is_solid(*below)
    assert not tile_map.is_solid(*above)

    assert len(tile_map.spawn_points) == 2
    for point in tile_map.spawn_points:
        assert point.y == settings.GROUND_LEVEL
        assert tile_map.left < point.x < tile_map.right


def test_two_fort_is_mirrored() -> None:
    tile_map = build_two_fort_map()

    for y in range(tile_map.size_y):
        for x in range(tile_map.size_x):
            assert tile_map.get(x, y) == tile_map.get(tile_map.size_x - 1 - x, y)


def test_draw_fills_one_rect_per_solid_tile(context) -> None:
    tile_map = TileMap(3, 2, 10)
    tile_map.fill(0, 1, 3, 1)

    tile_map.draw(context)

    rects = [c for c in context.calls if c[0] == "fill_rect"]
    assert rects == [("fill_rect", x * 10.0, 10.0, 10.0, 10.0) for x in range(3)]
    assert context.depth == 0
