# trails.py
# Fading shot trails. Pure visuals: the gameplay never reads them back.
#
# A trail stores its start point, unit direction and length, so every
# fade / sweep calculation is a scalar function of its age.

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import pygame
from . import settings
from .draw import Colour, DrawContext


class TrailType(Enum):
    BULLET = "bullet"
    RAIL = "rail"


@dataclass(frozen=True)
class TrailStyle:
    fade: float          # seconds the trail stays visible
    colour: Colour
    line_width: float


STYLES: dict[TrailType, TrailStyle] = {
    TrailType.BULLET: TrailStyle(settings.BULLET_FADE, settings.BULLET_COLOUR, 2),
    TrailType.RAIL: TrailStyle(settings.RAIL_FADE, settings.RAIL_COLOUR, 3),
}

MAX_FADE = max(style.fade for style in STYLES.values())


@dataclass
class Trail:
    type: TrailType
    start: pygame.Vector2
    direction: pygame.Vector2
    distance: float
    age: float = 0.0

    def point_at(self, along: float) -> pygame.Vector2:
        return self.start + self.direction * along


def bullet_segment(trail: Trail, age: float) -> tuple[float, float, float] | None:
    """
    Tracer for a bullet trail at a given age: (alpha, from, to) along the path.

    The tracer leaves the muzzle at BULLET_TRACER_SPEED and fades with the
    distance it has covered. None once it has passed the end of the path or
    the fade window.
    """
    if age >= settings.BULLET_FADE:
        return None

    progress = age * settings.BULLET_TRACER_SPEED
    if progress >= trail.distance:
        return None

    end = min(progress + settings.BULLET_TRACER_LENGTH, trail.distance)
    alpha = settings.BULLET_ALPHA * (1 - progress / settings.BULLET_FADE_DISTANCE)
    return alpha, progress, end


def rail_segment(trail: Trail, age: float) -> tuple[float, float, float] | None:
    """The whole rail path, fading out linearly over RAIL_FADE."""
    if age >= settings.RAIL_FADE:
        return None
    alpha = settings.RAIL_ALPHA * (1 - age / settings.RAIL_FADE)
    return alpha, 0.0, trail.distance


SEGMENTS = {
    TrailType.BULLET: bullet_segment,
    TrailType.RAIL: rail_segment,
}


class TrailStore:
    def __init__(self):
        self.trails: list[Trail] = []

    def __len__(self) -> int:
        return len(self.trails)

    def add_trail(self, type: TrailType, start: pygame.Vector2, end: pygame.Vector2) -> Trail | None:
        start = pygame.Vector2(start)
        delta = pygame.Vector2(end) - start
        distance = delta.length()
        if distance == 0:
            return None  # nothing to draw

        trail = Trail(type, start, delta / distance, distance)
        self.trails.append(trail)
        return trail

    def tick(self, dt: float) -> None:
        # Prune before ageing so growth stays bounded by one fade window
        self.trails = [t for t in self.trails if t.age <= MAX_FADE]
        for trail in self.trails:
            trail.age += dt

    def draw(self, context: DrawContext, at: float) -> None:
        context.save()
        for trail in self.trails:
            segment = SEGMENTS[trail.type](trail, trail.age + at)
            if segment is None:
                continue

            alpha, start, end = segment
            style = STYLES[trail.type]
            p0 = trail.point_at(start)
            p1 = trail.point_at(end)

            context.alpha = alpha
            context.stroke_colour = style.colour
            context.line_width = style.line_width
            context.begin_path()
            context.move_to(p0.x, p0.y)
            context.line_to(p1.x, p1.y)
            context.stroke()
        context.restore()
