from __future__ import annotations

import math

import pygame
import pytest

from rippyshreddy import settings
from rippyshreddy.stickman import (
    Input,
    Stickman,
    draw_stickman,
    muzzle_position,
    render_position,
    stickman_pose,
    tick_stickman,
)

DT = settings.TICK


def _grounded() -> Stickman:
    return Stickman(position=pygame.Vector2(0.0, settings.GROUND_LEVEL))


def test_duck_stays_in_range_and_eases_toward_target() -> None:
    state = _grounded()
    pattern = [True] * 12 + [False] * 5 + [True] * 3 + [False] * 20

    for ducking in pattern:
        before = state.duck
        state = tick_stickman(state, Input(duck=ducking), DT)
        target = 1.0 if ducking else 0.0

        assert 0.0 <= state.duck <= 1.0
        # Moves toward the target, never past it, by at most distance * dt * 10
        assert abs(target - state.duck) <= abs(target - before) + 1e-12
        assert abs(state.duck - before) <= abs(target - before) * DT * settings.DUCK_RATE + 1e-12


def test_resting_stickman_stays_pinned_to_the_ground() -> None:
    state = _grounded()

    for _ in range(100):
        state = tick_stickman(state, Input(), DT)
        assert state.position.y == settings.GROUND_LEVEL
        assert state.velocity.y == 0.0


def test_dropped_stickman_lands_on_the_ground() -> None:
    state = Stickman(position=pygame.Vector2(0.0, -300.0))

    for _ in range(100):
        state = tick_stickman(state, Input(), DT)
        assert state.position.y <= settings.GROUND_LEVEL

    assert state.position.y == settings.GROUND_LEVEL


def test_holding_jump_repeats_every_landing() -> None:
    state = _grounded()
    jumps = 0

    for _ in range(80):
        state = tick_stickman(state, Input(jump=True), DT)
        if state.velocity.y == -settings.JUMP_SPEED:
            jumps += 1

    # 0.7s airtime per hop, 2.4s held
    assert jumps >= 3


def test_jump_only_fires_on_the_ground() -> None:
    state = Stickman(position=pygame.Vector2(0.0, -200.0))

    state = tick_stickman(state, Input(jump=True), DT)

    assert state.velocity.y == pytest.approx(DT * settings.GRAVITY)


def test_ducking_halves_run_speed() -> None:
    standing = tick_stickman(_grounded(), Input(move=1), DT)
    assert standing.velocity.x == pytest.approx(settings.RUN_SPEED)

    ducked = Stickman(position=pygame.Vector2(0.0, 0.0), duck=1.0)
    ducked = tick_stickman(ducked, Input(move=-1, duck=True), DT)
    assert ducked.velocity.x == pytest.approx(-settings.RUN_SPEED / 2)


def test_move_phase_runs_while_moving_and_snaps_back() -> None:
    state = _grounded()
    for _ in range(3):
        state = tick_stickman(state, Input(move=-1), DT)

    assert state.move_phase == pytest.approx(3 * DT * settings.GAIT_RATE)
    assert state.facing == -1

    state = tick_stickman(state, Input(), DT)
    assert state.move_phase == 0.0
    assert state.facing == -1


def test_tick_returns_a_new_state() -> None:
    state = _grounded()
    moved = tick_stickman(state, Input(move=1, duck=True), DT)

    assert moved is not state
    assert state.position == (0.0, settings.GROUND_LEVEL)
    assert state.duck == 0.0
    assert moved.input == Input(move=1, duck=True)


def test_pose_legs_are_two_bones_long() -> None:
    pose = stickman_pose(0.0, 0.0, 1, 0.0)

    for knee, foot in zip(pose.knees, pose.feet):
        assert math.isclose(knee.distance_to(pose.hip), settings.LEG_BONE, abs_tol=1e-6)
        assert math.isclose(knee.distance_to(foot), settings.LEG_BONE, abs_tol=1e-6)
        # Knees bend forward
        assert knee.x > (pose.hip.x + foot.x) / 2


def test_pose_mirrors_legs_when_facing_left() -> None:
    right = stickman_pose(0.2, 1.3, 1, 0.01, moving=True)
    left = stickman_pose(0.2, 1.3, -1, 0.01, moving=True)

    for a, b in zip(right.knees + right.feet, left.knees + left.feet):
        assert b.x == pytest.approx(-a.x)
        assert b.y == pytest.approx(a.y)


def test_pose_lowers_hip_and_neck_when_ducked() -> None:
    standing = stickman_pose(0.0, 0.0, 1, 0.0)
    ducked = stickman_pose(1.0, 0.0, 1, 0.0)

    assert standing.hip.y == -settings.HIP_HEIGHT
    assert ducked.hip.y == -settings.HIP_HEIGHT_DUCKED
    assert ducked.neck.y > standing.neck.y


def test_pose_gait_extrapolates_only_while_moving() -> None:
    idle_now = stickman_pose(0.0, 0.0, 1, 0.0)
    idle_later = stickman_pose(0.0, 0.0, 1, 0.02)
    assert idle_now.feet == idle_later.feet

    run_now = stickman_pose(0.0, 1.0, 1, 0.0, moving=True)
    run_later = stickman_pose(0.0, 1.0, 1, 0.02, moving=True)
    assert run_now.feet != run_later.feet
    # Same as a tick further along the gait
    ahead = stickman_pose(0.0, 1.0 + 0.02 * settings.GAIT_RATE, 1, 0.0, moving=True)
    for a, b in zip(run_later.feet, ahead.feet):
        assert tuple(a) == pytest.approx(tuple(b))


def test_pose_holds_gun_along_aim() -> None:
    aim = pygame.Vector2(1, -1).normalize()
    pose = stickman_pose(0.0, 0.0, 1, 0.0, aim=aim)

    along = (pose.muzzle - pose.shoulder).normalize()
    assert tuple(along) == pytest.approx(tuple(aim))
    assert math.isclose(pose.elbows[0].distance_to(pose.shoulder), settings.ARM_BONE, abs_tol=1e-6)


def test_muzzle_follows_look_at() -> None:
    state = _grounded()
    state = tick_stickman(state, Input(look_at=pygame.Vector2(500, -60)), DT)

    muzzle = muzzle_position(state)

    assert muzzle.x > state.position.x + settings.ARM_REACH
    assert muzzle.y < state.position.y


def test_hitbox_shrinks_when_ducked() -> None:
    standing = _grounded()
    ducked = Stickman(position=pygame.Vector2(0, 0), duck=1.0)

    assert ducked.height() < standing.height()
    assert ducked.hitbox()[1].y > standing.hitbox()[1].y


def test_render_position_extrapolates_but_stays_above_ground() -> None:
    state = Stickman(position=pygame.Vector2(0, -5), velocity=pygame.Vector2(100, 400))

    pos = render_position(state, 0.02)

    assert pos.x == pytest.approx(2.0)
    assert pos.y == settings.GROUND_LEVEL
    assert state.position == (0, -5)


def test_draw_stickman_strokes_once(context) -> None:
    state = tick_stickman(_grounded(), Input(move=1), DT)

    draw_stickman(context, state, 0.01)

    strokes = context.strokes()
    assert len(strokes) == 1
    assert len(strokes[0][2]) == 5  # legs, body, two arms, head
    assert context.depth == 0
