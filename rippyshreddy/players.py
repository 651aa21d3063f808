# players.py
# Who controls a stickman, and the per-player bookkeeping the scene keeps.
#
# The scene only ever asks an identity for `name` and `get_input()`, so a
# keyboard player and a bot are interchangeable.

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol
import pygame
from . import settings
from .stickman import Input, Stickman
from .weapon import Weapon

if TYPE_CHECKING:
    from .scene import Scene


class PlayerIdentity(Protocol):
    name: str

    def get_input(self) -> Input: ...


class LocalPlayer:
    """Input pushed in by the host once per tick (keyboard + mouse)."""
    def __init__(self, name: str = "Player"):
        self.name = name
        self.input = Input()

    def set_input(self, input: Input) -> None:
        self.input = input

    def get_input(self) -> Input:
        return self.input

    def __repr__(self) -> str:
        return f"LocalPlayer({self.name!r})"


class AIPlayer:
    """
    Simple bot: walk toward the nearest enemy, stop inside engage range,
    aim at their chest and keep the trigger held while in range.
    """
    def __init__(self, scene: Scene, name: str = "Bot"):
        self.scene = scene
        self.name = name

    def get_input(self) -> Input:
        me = self.scene.get_character(self)
        if me is None:
            return Input()

        target = self.nearest_enemy(me)
        if target is None:
            return Input()

        dx = target.position.x - me.position.x
        in_range = abs(dx) <= settings.AI_ENGAGE_RANGE
        move = 0 if in_range else (1 if dx > 0 else -1)
        look_at = target.position - pygame.Vector2(0.0, settings.AI_AIM_HEIGHT)

        return Input(move=move, look_at=look_at, attack=in_range)

    def nearest_enemy(self, me: Stickman) -> Stickman | None:
        others = [s for s in self.scene.stickmen() if s is not me]
        if not others:
            return None
        return min(others, key=lambda s: me.position.distance_squared_to(s.position))

    def __repr__(self) -> str:
        return f"AIPlayer({self.name!r})"


@dataclass(eq=False)
class PlayerSlot:
    identity: PlayerIdentity
    kills: int = 0
    deaths: int = 0
    respawn_timer: float | None = None
    stickman: Stickman | None = None
    weapon: Weapon = field(default_factory=Weapon)

    def is_in_game(self) -> bool:
        return self.stickman is not None

    @property
    def name(self) -> str:
        return self.identity.name
