"""Shared game constants, states and object records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# Screen dimensions
SCREEN_WIDTH = 128
SCREEN_HEIGHT = 64

# Input
JOYSTICK_CENTER = 2048
JOYSTICK_DEAD_ZONE = 400
JOYSTICK_MAX_THROW = 2047

# Game tuning
SHIP_TURN_SPEED = 0.12
SHIP_THRUST = 0.20
SHIP_FRICTION = 0.97
BULLET_SPEED = 3.5
BULLET_LIFETIME = 40
MAX_BULLETS = 5
ASTEROID_SPEED_MIN = 0.5
ASTEROID_SPEED_MAX = 1.5
MAX_ASTEROIDS = 10
STARTING_ASTEROIDS = 3
SHIP_COLLISION_RADIUS = 4.0
BULLET_COLLISION_RADIUS = 1.0
ASTEROID_SIZE_LARGE = 10
ASTEROID_SIZE_MEDIUM = 6
ASTEROID_SIZE_SMALL = 3

# Timing, in milliseconds
INVINCIBILITY_DURATION = 2000
FIRE_DEBOUNCE_DELAY = 150
HYPERSPACE_COOLDOWN = 5000
HYPERSPACE_INVINCIBILITY = 750

# Audio frequencies (Hz) and durations (ms)
SND_SHOOT_FREQ = 2500
SND_EXPLODE_FREQ = 300
SND_THRUST_FREQ_LOW = 100
SND_THRUST_FREQ_HIGH = 250
SND_HYPERSPACE_FREQ = 4000
SND_SHORT_DURATION = 50
SND_HYPERSPACE_DURATION = 300


class GameState(Enum):
    """The screens the game moves between."""

    START = "start"
    GAME = "game"
    GAME_OVER = "game_over"


@dataclass
class Vector2D:
    """A mutable 2D vector."""

    x: float = 0.0
    y: float = 0.0


@dataclass
class GameObject:
    """A ship, bullet or asteroid on the playfield."""

    pos: Vector2D = field(default_factory=Vector2D)
    vel: Vector2D = field(default_factory=Vector2D)
    angle: float = 0.0
    radius: float = 0.0
    active: bool = False
    lifetime: int = 0
    size: int = 0

    def distance_squared(self, other: GameObject) -> float:
        """Squared distance between the centres of two objects."""
        dx = self.pos.x - other.pos.x
        dy = self.pos.y - other.pos.y
        return dx * dx + dy * dy

    def collides_with(self, other: GameObject) -> bool:
        """True when the collision circles of the two objects overlap."""
        radii = self.radius + other.radius
        return self.distance_squared(other) < radii * radii