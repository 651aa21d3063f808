# settings.py
# Central place for constants so the game feel can be tweaked in one spot.
# World units are "scene pixels": x grows right, y grows DOWN, ground is y = 0.

import logging

# Window / render
WINDOW_WIDTH = 960
WINDOW_HEIGHT = 540
FPS = 60
BACKGROUND_COLOUR = (20, 22, 30)
HUD_COLOUR = (230, 230, 230)

# Logging (configured by Game, library modules only create loggers)
LOG_LEVEL = logging.INFO

# Simulation clock
TICK = 0.03               # seconds per fixed simulation step (~33Hz)
MAX_CATCHUP_TICKS = 5     # drop backlog beyond this after a hitch

# Map
TILE_SIZE = 40
TILE_COLOUR = (90, 96, 120)
GROUND_LEVEL = 0.0

# Physics tuning
GRAVITY = 2000.0          # units per second^2
RUN_SPEED = 300.0         # units per second, halved at full duck
JUMP_SPEED = 700.0        # upward impulse, units per second
DUCK_RATE = 10.0          # exponential ease factor for the duck transition
GAIT_RATE = 12.0          # radians per second of move phase while running

# Stickman body (heights are measured up from the feet)
LEG_BONE = 21.0
ARM_BONE = 16.0
ARM_REACH = 26.0
GUN_LENGTH = 14.0
HIP_HEIGHT = 38.0
HIP_HEIGHT_DUCKED = 22.0
NECK_HEIGHT = 75.0
NECK_HEIGHT_DUCKED = 52.0
SHOULDER_DROP = 6.0
HEAD_RADIUS = 9.0
STRIDE = 14.0
FOOT_LIFT = 8.0
STICKMAN_COLOUR = (240, 240, 240)
STICKMAN_LINE_WIDTH = 3

# Combat
STICKMAN_HEALTH = 100
HIT_RADIUS = 12.0         # capsule radius used by the hit-scan
MAX_RANGE = 1000.0
RESPAWN_DELAY = 3.0

# Weapon table: cooldown (s), damage, trail type name
WEAPONS = {
    "pistol": {"cooldown": 0.15, "damage": 34, "trail": "bullet"},
    "railgun": {"cooldown": 1.2, "damage": 100, "trail": "rail"},
}

# Trail styles
BULLET_FADE = 0.1         # seconds a tracer is visible
BULLET_TRACER_SPEED = 10000.0
BULLET_TRACER_LENGTH = 500.0
BULLET_ALPHA = 0.5
BULLET_FADE_DISTANCE = 1000.0
BULLET_COLOUR = (255, 230, 120)

RAIL_FADE = 0.4
RAIL_ALPHA = 0.8
RAIL_COLOUR = (120, 200, 255)

# Camera
CAMERA_GAIN = 10.0
CAMERA_START_DEPTH = 2000.0
CAMERA_FOLLOW_DEPTH = 1200.0
REFERENCE_DEPTH = 1000.0

# AI
AI_ENGAGE_RANGE = 450.0
AI_AIM_HEIGHT = 50.0
