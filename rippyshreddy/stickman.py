# stickman.py
# Stickman state, the fixed-tick physics step and the procedural pose.
#
# Note:
# - tick_stickman() is the ONLY thing that advances a stickman. It returns a
#   new Stickman rather than changing the old one.
# - stickman_pose() is called while drawing. It reads state and `at` (time
#   since the last tick) and never writes anything back.
# - duck runs 0 (standing) -> 1 (fully ducked).

from __future__ import annotations
from dataclasses import dataclass, field, replace
import math
import pygame
from . import settings
from .draw import DrawContext
from .geometry import calculate_joint
from .utils import approach, clamp


@dataclass(frozen=True)
class Input:
    move: int = 0                           # -1 left, 0 none, 1 right
    jump: bool = False
    duck: bool = False
    look_at: pygame.Vector2 | None = None   # aim point in scene coordinates
    attack: bool = False


@dataclass
class Stickman:
    position: pygame.Vector2
    velocity: pygame.Vector2 = field(default_factory=pygame.Vector2)
    duck: float = 0.0
    move_phase: float = 0.0
    facing: int = 1
    health: int = settings.STICKMAN_HEALTH
    input: Input = field(default_factory=Input)

    def height(self) -> float:
        """Feet to top of head."""
        return _lerp(settings.NECK_HEIGHT, settings.NECK_HEIGHT_DUCKED, self.duck) + 2 * settings.HEAD_RADIUS

    def centroid(self) -> pygame.Vector2:
        return self.position - pygame.Vector2(0.0, self.height() / 2)

    def hitbox(self) -> tuple[pygame.Vector2, pygame.Vector2, float]:
        """Vertical capsule (bottom, top, radius) wrapping the body."""
        r = settings.HIT_RADIUS
        bottom = self.position - pygame.Vector2(0.0, r)
        top = self.position - pygame.Vector2(0.0, max(self.height() - r, r))
        return bottom, top, r

    def take_damage(self, amount: int) -> None:
        self.health = max(0, self.health - amount)

    def is_dead(self) -> bool:
        return self.health <= 0


def tick_stickman(
    state: Stickman,
    input: Input,
    dt: float,
    ground: float = settings.GROUND_LEVEL,
) -> Stickman:
    # Duck eases toward its target by a share of the remaining distance
    duck_target = 1.0 if input.duck else 0.0
    duck = clamp(approach(state.duck, duck_target, dt * settings.DUCK_RATE), 0.0, 1.0)

    velocity = pygame.Vector2(
        input.move * settings.RUN_SPEED / (1 + duck),
        state.velocity.y + dt * settings.GRAVITY,
    )
    position = state.position + velocity * dt

    # Ground clamp. Jump fires on every grounded tick while held (auto-repeat).
    if position.y > ground:
        position.y = ground
        if velocity.y > 0:
            velocity.y = 0.0
        if input.jump:
            velocity.y = -settings.JUMP_SPEED

    if input.move:
        move_phase = (state.move_phase + dt * settings.GAIT_RATE) % math.tau
        facing = 1 if input.move > 0 else -1
    else:
        move_phase = 0.0  # snaps the legs back to the standing pose
        facing = state.facing

    return replace(
        state,
        position=position,
        velocity=velocity,
        duck=duck,
        move_phase=move_phase,
        facing=facing,
        input=input,
    )


# --------------------------
# Pose
# --------------------------

@dataclass
class Pose:
    """Joint positions relative to the feet anchor (the stickman's position)."""
    hip: pygame.Vector2
    neck: pygame.Vector2
    head: pygame.Vector2
    knees: tuple[pygame.Vector2, pygame.Vector2]
    feet: tuple[pygame.Vector2, pygame.Vector2]
    shoulder: pygame.Vector2
    elbows: tuple[pygame.Vector2, pygame.Vector2]
    hands: tuple[pygame.Vector2, pygame.Vector2]
    muzzle: pygame.Vector2


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def shoulder_offset(duck: float) -> pygame.Vector2:
    neck = _lerp(settings.NECK_HEIGHT, settings.NECK_HEIGHT_DUCKED, duck)
    return pygame.Vector2(0.0, -neck + settings.SHOULDER_DROP)


def aim_direction(stickman: Stickman) -> pygame.Vector2:
    """Unit vector from the shoulder toward look_at, or straight ahead without one."""
    look_at = stickman.input.look_at
    if look_at is not None:
        delta = pygame.Vector2(look_at) - (stickman.position + shoulder_offset(stickman.duck))
        if delta.length_squared() > 0:
            return delta.normalize()
    return pygame.Vector2(stickman.facing, 0.0)


def muzzle_position(stickman: Stickman) -> pygame.Vector2:
    aim = aim_direction(stickman)
    reach = settings.ARM_REACH + settings.GUN_LENGTH
    return stickman.position + shoulder_offset(stickman.duck) + aim * reach


def stickman_pose(
    duck: float,
    move_phase: float,
    facing: int,
    at: float,
    moving: bool = False,
    aim: pygame.Vector2 | None = None,
) -> Pose:
    hip = pygame.Vector2(0.0, -_lerp(settings.HIP_HEIGHT, settings.HIP_HEIGHT_DUCKED, duck))
    neck = pygame.Vector2(0.0, -_lerp(settings.NECK_HEIGHT, settings.NECK_HEIGHT_DUCKED, duck))
    head = neck - pygame.Vector2(0.0, settings.HEAD_RADIUS)

    # Legs keep cycling between ticks while running
    phase = move_phase + at * settings.GAIT_RATE if moving else move_phase

    feet = []
    knees = []
    for leg in range(2):
        p = phase + leg * math.pi
        foot = pygame.Vector2(
            math.cos(p) * settings.STRIDE,
            min(0.0, math.sin(p)) * settings.FOOT_LIFT,
        )
        # Legs are solved facing right; -1 bends the knee forward
        knee = calculate_joint(hip, foot, settings.LEG_BONE, -1)
        if facing < 0:
            foot.x = -foot.x
            knee.x = -knee.x
        feet.append(foot)
        knees.append(knee)

    # Arms hold the gun along the aim line, elbows hanging below it
    if aim is None or aim.length_squared() == 0:
        aim = pygame.Vector2(facing, 0.0)
    else:
        aim = pygame.Vector2(aim).normalize()
    elbow_sign = 1 if aim.x >= 0 else -1

    shoulder = shoulder_offset(duck)
    front_hand = shoulder + aim * settings.ARM_REACH
    back_hand = front_hand + aim * (settings.GUN_LENGTH * 0.4)
    elbows = tuple(calculate_joint(shoulder, hand, settings.ARM_BONE, elbow_sign) for hand in (front_hand, back_hand))
    muzzle = front_hand + aim * settings.GUN_LENGTH

    return Pose(
        hip=hip,
        neck=neck,
        head=head,
        knees=(knees[0], knees[1]),
        feet=(feet[0], feet[1]),
        shoulder=shoulder,
        elbows=(elbows[0], elbows[1]),
        hands=(front_hand, back_hand),
        muzzle=muzzle,
    )


def render_position(stickman: Stickman, at: float, ground: float = settings.GROUND_LEVEL) -> pygame.Vector2:
    """Position extrapolated by `at`, never drawn below the ground."""
    pos = stickman.position + stickman.velocity * at
    pos.y = min(pos.y, ground)
    return pos


def draw_stickman(context: DrawContext, stickman: Stickman, at: float) -> None:
    pose = stickman_pose(
        stickman.duck,
        stickman.move_phase,
        stickman.facing,
        at,
        moving=stickman.input.move != 0,
        aim=aim_direction(stickman),
    )
    pos = render_position(stickman, at)

    def polyline(*points: pygame.Vector2) -> None:
        context.move_to(pos.x + points[0].x, pos.y + points[0].y)
        for p in points[1:]:
            context.line_to(pos.x + p.x, pos.y + p.y)

    context.save()
    context.stroke_colour = settings.STICKMAN_COLOUR
    context.line_width = settings.STICKMAN_LINE_WIDTH
    context.begin_path()

    polyline(pose.feet[0], pose.knees[0], pose.hip, pose.knees[1], pose.feet[1])
    polyline(pose.hip, pose.neck)
    polyline(pose.shoulder, pose.elbows[1], pose.hands[1])
    polyline(pose.shoulder, pose.elbows[0], pose.hands[0], pose.muzzle)
    context.arc(pos.x + pose.head.x, pos.y + pose.head.y, settings.HEAD_RADIUS)

    context.stroke()
    context.restore()
