# camera.py
# Follow camera with a depth axis.
#
# update() runs on the fixed tick and only sets a proportional velocity
# toward the target; transform_context() runs every frame and extrapolates
# the position forward by `at` with that velocity, so the view moves
# smoothly even though the tick is coarse.

from __future__ import annotations
import pygame
from . import settings
from .draw import DrawContext


class Camera:
    def __init__(self, x: float = 0.0, y: float = 0.0, depth: float = settings.CAMERA_START_DEPTH):
        self.position = pygame.Vector3(x, y, depth)
        self.velocity = pygame.Vector3(0.0, 0.0, 0.0)
        self.target: pygame.Vector3 | None = None

    def move_to(self, x: float, y: float, depth: float) -> None:
        self.target = pygame.Vector3(x, y, depth)

    def clear_target(self) -> None:
        """Hold the current position."""
        self.target = None

    def update(self, dt: float) -> None:
        if self.target is not None:
            self.velocity = (self.target - self.position) * settings.CAMERA_GAIN
        else:
            self.velocity = pygame.Vector3(0.0, 0.0, 0.0)

        self.position += self.velocity * dt

    def render_position(self, at: float) -> pygame.Vector3:
        return self.position + self.velocity * at

    def zoom(self, at: float = 0.0) -> float:
        return settings.REFERENCE_DEPTH / self.render_position(at).z

    def transform_context(self, context: DrawContext, at: float) -> None:
        pos = self.render_position(at)
        context.translate(context.width / 2, context.height / 2)
        context.scale(self.zoom(at))
        context.translate(-pos.x, -pos.y)

    def screen_to_scene(self, width: int, height: int, sx: float, sy: float, at: float = 0.0) -> pygame.Vector2:
        """Inverse of transform_context, used to turn the mouse into an aim point."""
        pos = self.render_position(at)
        zoom = self.zoom(at)
        return pygame.Vector2(
            (sx - width / 2) / zoom + pos.x,
            (sy - height / 2) / zoom + pos.y,
        )
