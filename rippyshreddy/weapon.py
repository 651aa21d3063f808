# weapon.py
# Weapon cooldowns + the hit-scan engine.
#
# Note:
# - A Weapon decides *when* a slot may shoot (cooldown).
# - The WeaponEngine decides *what a shot hits*: it casts a straight ray,
#   shortens it to the nearest obstruction (map tile or stickman) and
#   leaves a fading trail along the resolved path.

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import logging
from typing import Iterable
import pygame
from . import settings
from .geometry import angle_to, direction_from_angle, ray_circle, ray_vertical_capsule
from .level import TileMap
from .stickman import Stickman
from .trails import TrailStore, TrailType

log = logging.getLogger(__name__)


class WeaponType(Enum):
    PISTOL = "pistol"
    RAILGUN = "railgun"


@dataclass(frozen=True)
class WeaponStats:
    cooldown: float
    damage: int
    trail: TrailType

    @classmethod
    def for_type(cls, weapon_type: WeaponType) -> WeaponStats:
        row = settings.WEAPONS[weapon_type.value]
        return cls(row["cooldown"], row["damage"], TrailType(row["trail"]))


class Weapon:
    """Semi-auto weapon: one shot, then wait out the cooldown."""
    def __init__(self, weapon_type: WeaponType = WeaponType.PISTOL):
        self.type = weapon_type
        self.stats = WeaponStats.for_type(weapon_type)
        self.time_since_shot = 999.0

    def update(self, dt: float) -> None:
        self.time_since_shot += dt

    def can_shoot(self) -> bool:
        return self.time_since_shot >= self.stats.cooldown

    def trigger(self) -> bool:
        """Consume the cooldown. False if the weapon isn't ready."""
        if not self.can_shoot():
            return False
        self.time_since_shot = 0.0
        return True


class HitKind(Enum):
    NONE = "none"
    MAP = "map"
    STICKMAN = "stickman"


@dataclass
class ShotResult:
    kind: HitKind
    start: pygame.Vector2
    end: pygame.Vector2
    distance: float
    target: Stickman | None = None


def order_by_distance(stickmen: Iterable[Stickman], point: pygame.Vector2) -> list[Stickman]:
    """Nearest centroid first. The sort is stable, so ties keep their input order."""
    point = pygame.Vector2(point)
    return sorted(stickmen, key=lambda s: point.distance_squared_to(s.centroid()))


def raycast_stickmen(
    stickmen: Iterable[Stickman],
    start: pygame.Vector2,
    direction: pygame.Vector2,
    max_distance: float,
) -> tuple[float, Stickman] | None:
    """
    First stickman hit within max_distance along a unit-direction ray.

    Stickmen are visited nearest-first. Each one's bounding circle gives a
    lower bound on where the ray could touch it; once even the largest body
    starts past the best hit so far, every later stickman is further still
    and the scan stops.
    """
    best: tuple[float, Stickman] | None = None
    limit = max_distance
    largest_bound = (settings.NECK_HEIGHT + 2 * settings.HEAD_RADIUS) / 2

    for stickman in order_by_distance(stickmen, start):
        bottom, top, radius = stickman.hitbox()
        centre = (bottom + top) * 0.5
        bound_radius = centre.distance_to(top) + radius
        centre_distance = start.distance_to(centre)

        if centre_distance - largest_bound > limit:
            break
        if centre_distance - bound_radius > limit:
            continue  # blocked by the map or a nearer stickman

        if ray_circle(start, direction, centre, bound_radius) is None:
            continue

        t = ray_vertical_capsule(start, direction, bottom, top, radius)
        if t is not None and t <= limit:
            best = (t, stickman)
            limit = t

    return best


class WeaponEngine:
    def __init__(self, tile_map: TileMap, trails: TrailStore, stickmen_source):
        """
        stickmen_source: callable returning the live stickmen at shot time
        (the scene passes its own accessor).
        """
        self.map = tile_map
        self.trails = trails
        self.stickmen_source = stickmen_source

    def shoot(
        self,
        weapon_type: WeaponType,
        origin: pygame.Vector2,
        angle: float,
        shooter: Stickman | None = None,
    ) -> ShotResult:
        origin = pygame.Vector2(origin)
        direction = direction_from_angle(angle)
        distance = settings.MAX_RANGE
        kind = HitKind.NONE
        target = None

        # Map first only to tighten the search range; a nearer stickman still wins
        map_hit = self.map.raycast(origin, origin + direction * distance)
        if map_hit is not None:
            distance = map_hit
            kind = HitKind.MAP

        candidates = [s for s in self.stickmen_source() if s is not shooter]
        hit = raycast_stickmen(candidates, origin, direction, distance)
        if hit is not None and (map_hit is None or hit[0] < map_hit):
            distance, target = hit
            kind = HitKind.STICKMAN

        end = origin + direction * distance
        stats = WeaponStats.for_type(weapon_type)
        self.trails.add_trail(stats.trail, origin, end)

        log.debug("%s shot from (%.0f, %.0f) hit %s at %.1f", weapon_type.value, origin.x, origin.y, kind.value, distance)
        return ShotResult(kind, origin, end, distance, target)

    def shoot_at(
        self,
        weapon_type: WeaponType,
        origin: pygame.Vector2,
        target: pygame.Vector2,
        shooter: Stickman | None = None,
    ) -> ShotResult:
        return self.shoot(weapon_type, origin, angle_to(origin, target), shooter)
