# geometry.py
# Vector helpers, the two-link joint solver and the ray tests used by the hit-scan.
#
# Angles follow the shot convention: direction = (sin(angle), cos(angle)),
# so angle 0 points straight down the screen and pi/2 points right.

from __future__ import annotations
import math
import pygame


def direction_from_angle(angle: float) -> pygame.Vector2:
    return pygame.Vector2(math.sin(angle), math.cos(angle))


def angle_to(origin: pygame.Vector2, target: pygame.Vector2) -> float:
    """Angle (in the shot convention) of the direction from origin to target."""
    delta = pygame.Vector2(target) - pygame.Vector2(origin)
    if delta.length_squared() == 0:
        raise ValueError(f"Cannot aim from {tuple(origin)} at itself.")
    return math.atan2(delta.x, delta.y)


def calculate_joint(
    p1: pygame.Vector2,
    p2: pygame.Vector2,
    bone_length: float,
    invert_sign: int,
) -> pygame.Vector2:
    """
    Analytic two-bone IK: place the joint between two fixed ends.

    Both bones are bone_length long. The joint sits on the perpendicular
    bisector of p1-p2, on the side picked by invert_sign (+1 or -1):
    +1 is the side of the left-hand normal (-dy, dx) of p1 -> p2.

    Ends further apart than 2 * bone_length cannot be reached; the square
    root takes the absolute value so the joint still lands near the midpoint
    instead of failing.
    """
    if invert_sign not in (-1, 1):
        raise ValueError(f"invert_sign must be +1 or -1, got {invert_sign!r}")

    p1 = pygame.Vector2(p1)
    p2 = pygame.Vector2(p2)
    delta = p2 - p1
    distance = delta.length()
    mid = (p1 + p2) * 0.5

    if distance == 0:
        # Folded completely: any direction works, pick +x / -x.
        return mid + pygame.Vector2(bone_length * invert_sign, 0.0)

    half = distance * 0.5
    offset = math.sqrt(abs(bone_length * bone_length - half * half))
    normal = pygame.Vector2(-delta.y, delta.x) / distance
    return mid + normal * (offset * invert_sign)


def ray_circle(
    origin: pygame.Vector2,
    direction: pygame.Vector2,
    centre: pygame.Vector2,
    radius: float,
) -> float | None:
    """Distance along a unit-direction ray to the first point inside a circle."""
    offset = pygame.Vector2(origin) - pygame.Vector2(centre)
    c = offset.length_squared() - radius * radius
    if c <= 0:
        return 0.0  # starts inside

    b = offset.dot(direction)
    if b > 0:
        return None  # pointing away

    disc = b * b - c
    if disc < 0:
        return None
    return -b - math.sqrt(disc)


def ray_aabb(
    origin: pygame.Vector2,
    direction: pygame.Vector2,
    lo: pygame.Vector2,
    hi: pygame.Vector2,
) -> float | None:
    """Slab test: distance along a unit-direction ray to an axis-aligned box."""
    t_min = 0.0
    t_max = math.inf

    for axis in (0, 1):
        o = origin[axis]
        d = direction[axis]
        if d == 0:
            if o < lo[axis] or o > hi[axis]:
                return None
            continue

        t1 = (lo[axis] - o) / d
        t2 = (hi[axis] - o) / d
        if t1 > t2:
            t1, t2 = t2, t1
        t_min = max(t_min, t1)
        t_max = min(t_max, t2)
        if t_min > t_max:
            return None

    return t_min


def ray_vertical_capsule(
    origin: pygame.Vector2,
    direction: pygame.Vector2,
    bottom: pygame.Vector2,
    top: pygame.Vector2,
    radius: float,
) -> float | None:
    """
    Distance to a capsule whose core segment runs vertically from bottom to top.

    The capsule is the union of a box and two end circles, so the entry
    distance is the smallest entry distance of the three pieces.
    """
    lo = pygame.Vector2(bottom.x - radius, min(bottom.y, top.y))
    hi = pygame.Vector2(bottom.x + radius, max(bottom.y, top.y))

    hits = [
        ray_aabb(origin, direction, lo, hi),
        ray_circle(origin, direction, bottom, radius),
        ray_circle(origin, direction, top, radius),
    ]
    hits = [t for t in hits if t is not None]
    return min(hits) if hits else None
