# game.py
# The Game class owns the window, the main loop and the two high-level states:
# START -> PLAYING.
#
# Each pass through the loop feeds the real elapsed time to the scheduler,
# which runs the fixed simulation ticks that are due and then one frame.

from __future__ import annotations
import logging
import pygame

from . import settings
from .camera import Camera
from .draw import SurfaceContext
from .level import build_two_fort_map
from .loop import FixedStepScheduler
from .players import AIPlayer, LocalPlayer
from .scene import Scene
from .stickman import Input
from .weapon import Weapon, WeaponType

log = logging.getLogger(__name__)

# Camera aims a little above the feet so the stickman sits mid-screen
CAMERA_HEAD_ROOM = 60.0


class Game:
    def __init__(self, bots: int = 1):
        logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
        pygame.init()

        self.window = pygame.display.set_mode((settings.WINDOW_WIDTH, settings.WINDOW_HEIGHT))
        pygame.display.set_caption("Rippy Shreddy")

        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("consolas", 22)
        self.big_font = pygame.font.SysFont("consolas", 44, bold=True)

        # Game state
        self.state = "START"  # START, PLAYING
        self.running = True

        # World content
        self.scene = Scene(build_two_fort_map())
        self.camera = Camera()
        self.human = LocalPlayer("You")

        self.scene.add_player(self.human)
        self.scene.spawn_player(self.human)
        for i in range(bots):
            bot = AIPlayer(self.scene, f"Bot {i + 1}")
            self.scene.add_player(bot)
            self.scene.spawn_player(bot, respawn_delay=settings.RESPAWN_DELAY)

        self.scheduler = FixedStepScheduler(self.tick, self.draw)

    # ------------------ Main loop ------------------
    def run(self) -> None:
        log.info("starting, tick %.3fs", settings.TICK)
        while self.running:
            elapsed = self.clock.tick(settings.FPS) / 1000.0

            self.handle_events()
            if self.state == "START":
                self.draw_start()
            else:
                self.scheduler.advance(elapsed)

        pygame.quit()

    # ------------------ Events ------------------
    def handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False

                if self.state == "START" and event.key == pygame.K_RETURN:
                    self.state = "PLAYING"

                elif self.state == "PLAYING":
                    if event.key == pygame.K_1:
                        self.scene.get_slot(self.human).weapon = Weapon(WeaponType.PISTOL)
                    elif event.key == pygame.K_2:
                        self.scene.get_slot(self.human).weapon = Weapon(WeaponType.RAILGUN)

    def poll_input(self) -> Input:
        keys = pygame.key.get_pressed()

        move = 0
        if keys[pygame.K_a] or keys[pygame.K_LEFT]:
            move -= 1
        if keys[pygame.K_d] or keys[pygame.K_RIGHT]:
            move += 1

        mx, my = pygame.mouse.get_pos()
        look_at = self.camera.screen_to_scene(settings.WINDOW_WIDTH, settings.WINDOW_HEIGHT, mx, my)

        return Input(
            move=move,
            jump=bool(keys[pygame.K_w] or keys[pygame.K_UP] or keys[pygame.K_SPACE]),
            duck=bool(keys[pygame.K_s] or keys[pygame.K_DOWN]),
            look_at=look_at,
            attack=pygame.mouse.get_pressed()[0],
        )

    # ------------------ Update ------------------
    def tick(self, dt: float) -> None:
        position = self.scene.get_character_position(self.human)
        if position is not None:
            self.camera.move_to(position.x, position.y - CAMERA_HEAD_ROOM, settings.CAMERA_FOLLOW_DEPTH)
        self.camera.update(dt)

        self.human.set_input(self.poll_input())
        self.scene.tick(dt)

    # ------------------ Draw ------------------
    def draw(self, at: float) -> None:
        self.window.fill(settings.BACKGROUND_COLOUR)

        context = SurfaceContext(self.window)
        context.save()
        self.camera.transform_context(context, at)
        self.scene.draw(context, at)
        context.restore()

        self.draw_ui()
        pygame.display.flip()

    def draw_start(self) -> None:
        self.window.fill(settings.BACKGROUND_COLOUR)
        self.draw_center_text("RIPPY SHREDDY", y=170, big=True)
        self.draw_center_text("Press ENTER to start", y=260)
        self.draw_center_text("A/D move, W jump, S duck, mouse aim + shoot, 1/2 weapon", y=310)
        pygame.display.flip()

    # ------------------ UI helpers ------------------
    def draw_ui(self) -> None:
        y = 20
        for slot in self.scene.scores():
            line = f"{slot.name:<8} {slot.kills:>3} K {slot.deaths:>3} D"
            if slot.respawn_timer is not None:
                line += f"  respawn {max(0.0, slot.respawn_timer):.1f}s"
            txt = self.font.render(line, True, settings.HUD_COLOUR)
            self.window.blit(txt, (20, y))
            y += 24

        weapon = self.scene.get_slot(self.human).weapon
        txt = self.font.render(weapon.type.value.upper(), True, settings.HUD_COLOUR)
        self.window.blit(txt, (20, settings.WINDOW_HEIGHT - 40))

    def draw_center_text(self, text: str, y: int, big: bool = False) -> None:
        f = self.big_font if big else self.font
        surf = f.render(text, True, (240, 240, 240))
        rect = surf.get_rect(center=(settings.WINDOW_WIDTH // 2, y))
        self.window.blit(surf, rect)
