# scene.py
# The Scene owns the map, the players and their stickmen, the trails and
# the hit-scan engine. tick() is the only place simulation state changes;
# draw() only reads.

from __future__ import annotations
import logging
import math
import pygame
from . import settings
from .draw import DrawContext
from .level import TileMap
from .players import PlayerIdentity, PlayerSlot
from .stickman import Stickman, aim_direction, draw_stickman, muzzle_position, tick_stickman
from .trails import TrailStore
from .utils import clamp
from .weapon import ShotResult, WeaponEngine

log = logging.getLogger(__name__)


class Scene:
    def __init__(self, tile_map: TileMap):
        self.map = tile_map
        # Insertion ordered: this is also the draw and tie-break order
        self.players: dict[PlayerIdentity, PlayerSlot] = {}
        self.trails = TrailStore()
        self.weapons = WeaponEngine(tile_map, self.trails, self.stickmen)
        self._next_spawn = 0

    # --------------------------
    # Players
    # --------------------------

    def add_player(self, identity: PlayerIdentity) -> PlayerSlot:
        if identity in self.players:
            raise ValueError(f"{identity!r} is already in the scene")
        slot = PlayerSlot(identity)
        self.players[identity] = slot
        log.info("%s joined", identity.name)
        return slot

    def remove_player(self, identity: PlayerIdentity) -> None:
        slot = self.get_slot(identity)
        del self.players[identity]
        log.info("%s left (%d kills, %d deaths)", slot.name, slot.kills, slot.deaths)

    def get_slot(self, identity: PlayerIdentity) -> PlayerSlot:
        try:
            return self.players[identity]
        except KeyError:
            raise KeyError(f"{identity!r} was never added to the scene") from None

    def spawn_player(self, identity: PlayerIdentity, respawn_delay: float = 0.0) -> None:
        """Spawn now, or arm a countdown that spawns on the tick it reaches zero."""
        slot = self.get_slot(identity)
        if slot.is_in_game():
            raise ValueError(f"{identity!r} already has a stickman")

        if respawn_delay <= 0:
            self._spawn(slot)
        else:
            slot.respawn_timer = respawn_delay

    def get_character(self, identity: PlayerIdentity) -> Stickman | None:
        return self.get_slot(identity).stickman

    def get_character_position(self, identity: PlayerIdentity) -> pygame.Vector2 | None:
        stickman = self.get_character(identity)
        if stickman is None:
            return None
        return pygame.Vector2(stickman.position)

    def stickmen(self) -> list[Stickman]:
        return [slot.stickman for slot in self.players.values() if slot.stickman is not None]

    def scores(self) -> list[PlayerSlot]:
        return sorted(self.players.values(), key=lambda slot: (-slot.kills, slot.deaths))

    # --------------------------
    # Update
    # --------------------------

    def tick(self, dt: float) -> None:
        slots = list(self.players.values())

        for slot in slots:
            if slot.stickman is None:
                if slot.respawn_timer is not None:
                    slot.respawn_timer -= dt
                    if slot.respawn_timer <= 0:
                        self._spawn(slot)
                continue

            stickman = tick_stickman(slot.stickman, slot.identity.get_input(), dt)
            stickman.position.x = clamp(
                stickman.position.x,
                self.map.left + self.map.tile_size,
                self.map.right - self.map.tile_size,
            )
            slot.stickman = stickman

        # Shots resolve after everyone has moved so they hit current positions
        for slot in slots:
            slot.weapon.update(dt)
            stickman = slot.stickman
            if stickman is None or not stickman.input.attack:
                continue
            if slot.weapon.trigger():
                self.fire(slot)

        self.trails.tick(dt)

    def fire(self, slot: PlayerSlot) -> ShotResult:
        stickman = slot.stickman
        assert stickman is not None

        aim = aim_direction(stickman)
        result = self.weapons.shoot(
            slot.weapon.type,
            muzzle_position(stickman),
            math.atan2(aim.x, aim.y),
            shooter=stickman,
        )

        if result.target is not None:
            result.target.take_damage(slot.weapon.stats.damage)
            if result.target.is_dead():
                self._kill(self._slot_of(result.target), killer=slot)

        return result

    def _slot_of(self, stickman: Stickman) -> PlayerSlot:
        for slot in self.players.values():
            if slot.stickman is stickman:
                return slot
        raise LookupError("stickman is not owned by any player")

    def _spawn(self, slot: PlayerSlot) -> None:
        points = self.map.spawn_points
        if points:
            point = points[self._next_spawn % len(points)]
            self._next_spawn += 1
        else:
            point = pygame.Vector2(0.0, settings.GROUND_LEVEL)

        slot.stickman = Stickman(position=pygame.Vector2(point))
        slot.respawn_timer = None
        log.info("%s spawned at (%.0f, %.0f)", slot.name, point.x, point.y)

    def _kill(self, victim: PlayerSlot, killer: PlayerSlot) -> None:
        victim.deaths += 1
        if killer is not victim:
            killer.kills += 1
        victim.stickman = None
        victim.respawn_timer = settings.RESPAWN_DELAY
        log.info("%s killed %s, respawn in %.1fs", killer.name, victim.name, settings.RESPAWN_DELAY)

    # --------------------------
    # Draw
    # --------------------------

    def draw(self, context: DrawContext, at: float) -> None:
        self.map.draw(context)
        for stickman in self.stickmen():
            draw_stickman(context, stickman, at)
        self.trails.draw(context, at)
