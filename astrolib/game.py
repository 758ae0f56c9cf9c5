"""The game itself: state machine, physics, collisions and scoring."""

from __future__ import annotations

import logging
import math
import random
import time
from typing import Callable, Optional, Tuple

from astrolib.audio import AudioEngine, ToneOutput
from astrolib.display import FrameBuffer
from astrolib.gamedata import (
    ASTEROID_SIZE_LARGE,
    ASTEROID_SIZE_MEDIUM,
    ASTEROID_SIZE_SMALL,
    ASTEROID_SPEED_MAX,
    ASTEROID_SPEED_MIN,
    BULLET_COLLISION_RADIUS,
    BULLET_LIFETIME,
    BULLET_SPEED,
    FIRE_DEBOUNCE_DELAY,
    HYPERSPACE_COOLDOWN,
    HYPERSPACE_INVINCIBILITY,
    INVINCIBILITY_DURATION,
    JOYSTICK_CENTER,
    JOYSTICK_DEAD_ZONE,
    JOYSTICK_MAX_THROW,
    MAX_ASTEROIDS,
    MAX_BULLETS,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    SHIP_COLLISION_RADIUS,
    SHIP_FRICTION,
    SHIP_THRUST,
    SHIP_TURN_SPEED,
    STARTING_ASTEROIDS,
    GameObject,
    GameState,
)
from astrolib.render import (
    draw_asteroids,
    draw_bullets,
    draw_game_over,
    draw_ship,
    draw_start_menu,
    draw_ui,
    draw_wave_cleared,
)
from astrolib.storage import MemoryStore

logger = logging.getLogger(__name__)

ButtonReader = Callable[[], bool]

_TWO_PI = 2 * math.pi
_WAVE_PAUSE_SECONDS = 1.5
_POINTS = {ASTEROID_SIZE_LARGE: 20, ASTEROID_SIZE_MEDIUM: 50}
_SMALL_POINTS = 100
_FRAGMENT_SIZE = {ASTEROID_SIZE_LARGE: ASTEROID_SIZE_MEDIUM, ASTEROID_SIZE_MEDIUM: ASTEROID_SIZE_SMALL}


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


def _stick_scale(delta: int) -> float:
    scale = (abs(delta) - JOYSTICK_DEAD_ZONE) / (JOYSTICK_MAX_THROW - JOYSTICK_DEAD_ZONE)
    return max(0.0, min(1.0, scale))


class AstroLib:
    """An Asteroids game driven one frame at a time by joystick and button input."""

    def __init__(
        self,
        display: Optional[FrameBuffer] = None,
        store=None,
        clock: Optional[Callable[[], int]] = None,
        rng: Optional[random.Random] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.display = display if display is not None else FrameBuffer()
        self._store = store if store is not None else MemoryStore()
        self._clock = clock if clock is not None else _monotonic_ms
        self._rng = rng if rng is not None else random.Random()
        self._sleep = sleep if sleep is not None else time.sleep
        self.audio = AudioEngine(self._clock)

        self._fire_reader: Optional[ButtonReader] = None
        self._hyperspace_reader: Optional[ButtonReader] = None

        self._state = GameState.START
        self._ship = GameObject()
        self._bullets = [GameObject() for _ in range(MAX_BULLETS)]
        self._asteroids = [GameObject() for _ in range(MAX_ASTEROIDS)]
        self._score = 0
        self._lives = 3
        self._high_score = 0

        self._fire_last_frame = False
        self._hyperspace_last_frame = False
        self._last_fire_time = 0
        self._ship_spawn_time = 0
        self._last_hyperspace_time = 0
        self._thrusting = False

    # --- Configuration -------------------------------------------------

    def attach_fire_button(self, reader: Optional[ButtonReader]) -> None:
        """Use ``reader`` (true while pressed) as an extra fire button; None detaches."""
        self._fire_reader = reader

    def attach_hyperspace_button(self, reader: Optional[ButtonReader]) -> None:
        """Use ``reader`` (true while pressed) as the hyperspace button; None detaches."""
        self._hyperspace_reader = reader

    # --- Read-only state -----------------------------------------------

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def score(self) -> int:
        return self._score

    @property
    def high_score(self) -> int:
        return self._high_score

    @property
    def lives(self) -> int:
        return self._lives

    @property
    def ship(self) -> GameObject:
        return self._ship

    @property
    def bullets(self) -> Tuple[GameObject, ...]:
        return tuple(self._bullets)

    @property
    def asteroids(self) -> Tuple[GameObject, ...]:
        return tuple(self._asteroids)

    @property
    def is_thrusting(self) -> bool:
        return self._thrusting

    # --- Core ------------------------------------------------------------

    def begin(self, tone_output: Optional[ToneOutput] = None) -> None:
        """Load the stored high score, set up a fresh game and start the audio."""
        for obj in (*self._bullets, *self._asteroids):
            obj.active = False
        self._high_score = self._store.load()
        logger.debug("Loaded high score: %d", self._high_score)
        self._reset_game()
        self._state = GameState.START
        self.audio.begin(tone_output if tone_output is not None else ToneOutput())

    def reset_high_score(self) -> None:
        self._high_score = 0
        self._save_high_score()

    def update(self, joy_x: int, joy_y: int, joy_button_down: bool) -> None:
        """Advance the game by one frame."""
        fire_digital = self._fire_reader is not None and bool(self._fire_reader())
        hyperspace_down = self._hyperspace_reader is not None and bool(self._hyperspace_reader())
        fire_down = bool(joy_button_down) or fire_digital

        if self._state is GameState.START:
            if fire_down and not self._fire_last_frame:
                self._reset_game()
                self._state = GameState.GAME
                self._fire_last_frame = True
                self._hyperspace_last_frame = True
                return
        elif self._state is GameState.GAME:
            self._handle_input(joy_x, joy_y, fire_down, hyperspace_down)
            self._update_objects()
            self._handle_collisions()

            if self._lives <= 0 and not self._ship.active:
                self._state = GameState.GAME_OVER
                if self._score > self._high_score:
                    logger.info("New high score: %d", self._score)
                    self._high_score = self._score
                    self._save_high_score()
                self._fire_last_frame = True
                self._hyperspace_last_frame = True
                self.audio.stop_all_sounds()
                return
            if self._level_clear() and self._lives > 0:
                self._spawn_new_wave()
        elif self._state is GameState.GAME_OVER:
            if fire_down and not self._fire_last_frame:
                self._state = GameState.START
                self._fire_last_frame = True
                self._hyperspace_last_frame = True
                return

        self.audio.update()
        self._fire_last_frame = fire_down
        self._hyperspace_last_frame = hyperspace_down

    def draw(self) -> None:
        """Render the current screen and present it."""
        self.display.clear()
        if self._state is GameState.START:
            draw_start_menu(self.display)
        elif self._state is GameState.GAME:
            if self._ship.active:
                draw_ship(
                    self.display,
                    self._ship,
                    self._thrusting,
                    self._ship.lifetime > 0,
                    self._clock(),
                )
            draw_asteroids(self.display, self._asteroids, self._rng)
            draw_bullets(self.display, self._bullets)
            draw_ui(self.display, self._score, self._high_score, self._lives)
        else:
            draw_game_over(self.display, self._score, self._high_score)
        self.display.show()

    # --- Game logic ------------------------------------------------------

    def _place_ship_at_centre(self) -> None:
        ship = self._ship
        ship.pos.x = SCREEN_WIDTH / 2.0
        ship.pos.y = SCREEN_HEIGHT / 2.0
        ship.vel.x = 0.0
        ship.vel.y = 0.0
        ship.angle = -math.pi / 2.0

    def _random_point_clear_of_ship(self, min_distance: float) -> Tuple[float, float]:
        ship = self._ship
        while True:
            x = float(self._rng.randrange(0, SCREEN_WIDTH))
            y = float(self._rng.randrange(0, SCREEN_HEIGHT))
            if math.hypot(x - ship.pos.x, y - ship.pos.y) >= min_distance:
                return x, y

    def _reset_game(self) -> None:
        self._score = 0
        self._lives = 3
        self._place_ship_at_centre()
        self._ship.radius = SHIP_COLLISION_RADIUS
        self._ship.active = True
        self._ship_spawn_time = self._clock()
        self._ship.lifetime = INVINCIBILITY_DURATION
        for obj in (*self._bullets, *self._asteroids):
            obj.active = False
        for _ in range(STARTING_ASTEROIDS):
            x, y = self._random_point_clear_of_ship(ASTEROID_SIZE_LARGE * 2.5)
            self._spawn_asteroid(ASTEROID_SIZE_LARGE, x, y)
        self._fire_last_frame = True
        self._hyperspace_last_frame = True
        self._last_hyperspace_time = self._clock() - HYPERSPACE_COOLDOWN
        self._thrusting = False
        self.audio.stop_all_sounds()

    def _handle_input(self, joy_x: int, joy_y: int, fire_down: bool, hyperspace_down: bool) -> None:
        ship = self._ship
        if not ship.active:
            if self._thrusting:
                self.audio.stop_thrust_sound()
                self._thrusting = False
            return

        x_delta = joy_x - JOYSTICK_CENTER
        if abs(x_delta) > JOYSTICK_DEAD_ZONE:
            turn = SHIP_TURN_SPEED * _stick_scale(x_delta)
            ship.angle += turn if x_delta > 0 else -turn
            if ship.angle < 0:
                ship.angle += _TWO_PI
            if ship.angle >= _TWO_PI:
                ship.angle -= _TWO_PI

        y_delta = joy_y - JOYSTICK_CENTER
        wants_thrust = y_delta < -JOYSTICK_DEAD_ZONE
        thrust_scale = 0.0
        if wants_thrust:
            thrust_scale = _stick_scale(y_delta)
            ship.vel.x += math.cos(ship.angle) * SHIP_THRUST * thrust_scale
            ship.vel.y += math.sin(ship.angle) * SHIP_THRUST * thrust_scale
        if wants_thrust and not self._thrusting:
            self.audio.start_thrust_sound(thrust_scale)
        elif not wants_thrust and self._thrusting:
            self.audio.stop_thrust_sound()
        self._thrusting = wants_thrust

        now = self._clock()
        if fire_down and not self._fire_last_frame and now - self._last_fire_time > FIRE_DEBOUNCE_DELAY:
            bullet = next((b for b in self._bullets if not b.active), None)
            if bullet is not None:
                c, s = math.cos(ship.angle), math.sin(ship.angle)
                bullet.pos.x = ship.pos.x + c * (ship.radius + 2)
                bullet.pos.y = ship.pos.y + s * (ship.radius + 2)
                bullet.vel.x = c * BULLET_SPEED + ship.vel.x
                bullet.vel.y = s * BULLET_SPEED + ship.vel.y
                bullet.angle = 0.0
                bullet.radius = BULLET_COLLISION_RADIUS
                bullet.active = True
                bullet.lifetime = BULLET_LIFETIME
                bullet.size = 0
                self._last_fire_time = now
                self.audio.play_shoot_sound()

        if hyperspace_down and not self._hyperspace_last_frame:
            if now - self._last_hyperspace_time > HYPERSPACE_COOLDOWN:
                self._trigger_hyperspace()
                self._last_hyperspace_time = now

    def _trigger_hyperspace(self) -> None:
        ship = self._ship
        if not ship.active:
            return
        self.audio.play_hyperspace_sound()
        margin = ship.radius * 2
        ship.pos.x = float(self._rng.randrange(int(margin), int(SCREEN_WIDTH - margin)))
        ship.pos.y = float(self._rng.randrange(int(margin), int(SCREEN_HEIGHT - margin)))
        ship.vel.x = 0.0
        ship.vel.y = 0.0
        self._ship_spawn_time = self._clock()
        ship.lifetime = HYPERSPACE_INVINCIBILITY
        if self._thrusting:
            self.audio.stop_thrust_sound()
            self._thrusting = False

    def _save_high_score(self) -> None:
        self._store.save(self._high_score)
        logger.debug("Saved high score: %d", self._high_score)

    @staticmethod
    def _wrap(obj: GameObject) -> None:
        r = obj.radius
        if obj.pos.x < -r:
            obj.pos.x = SCREEN_WIDTH + r
        elif obj.pos.x > SCREEN_WIDTH + r:
            obj.pos.x = -r
        if obj.pos.y < -r:
            obj.pos.y = SCREEN_HEIGHT + r
        elif obj.pos.y > SCREEN_HEIGHT + r:
            obj.pos.y = -r

    def _update_objects(self) -> None:
        now = self._clock()
        ship = self._ship
        if ship.active:
            ship.vel.x *= SHIP_FRICTION
            ship.vel.y *= SHIP_FRICTION
            ship.pos.x += ship.vel.x
            ship.pos.y += ship.vel.y
            self._wrap(ship)
            elapsed = now - self._ship_spawn_time
            ship.lifetime = 0 if elapsed > INVINCIBILITY_DURATION else INVINCIBILITY_DURATION - elapsed

        for bullet in self._bullets:
            if bullet.active:
                bullet.pos.x += bullet.vel.x
                bullet.pos.y += bullet.vel.y
                bullet.lifetime -= 1
                self._wrap(bullet)
                if bullet.lifetime <= 0:
                    bullet.active = False

        for asteroid in self._asteroids:
            if asteroid.active:
                asteroid.pos.x += asteroid.vel.x
                asteroid.pos.y += asteroid.vel.y
                self._wrap(asteroid)

    def _handle_collisions(self) -> None:
        for bullet in self._bullets:
            if not bullet.active:
                continue
            for asteroid in self._asteroids:
                if not asteroid.active or not bullet.collides_with(asteroid):
                    continue
                bullet.active = False
                asteroid.active = False
                self.audio.play_explosion_sound()
                self._score += _POINTS.get(asteroid.size, _SMALL_POINTS)
                fragment = _FRAGMENT_SIZE.get(asteroid.size)
                if fragment is not None:
                    # The first fragment may reuse the parent's slot; the second
                    # then inherits from whatever that slot holds.
                    for _ in range(2):
                        self._spawn_asteroid(
                            fragment,
                            asteroid.pos.x,
                            asteroid.pos.y,
                            asteroid.vel.x,
                            asteroid.vel.y,
                        )
                break

        ship = self._ship
        if not ship.active or ship.lifetime > 0:
            return
        for asteroid in self._asteroids:
            if not asteroid.active or not ship.collides_with(asteroid):
                continue
            self._lives -= 1
            asteroid.active = False
            self.audio.play_explosion_sound()
            if self._lives > 0:
                self._place_ship_at_centre()
                self._ship_spawn_time = self._clock()
                ship.lifetime = INVINCIBILITY_DURATION
            else:
                ship.active = False
            break

    def _level_clear(self) -> bool:
        return not any(a.active for a in self._asteroids)

    def _spawn_new_wave(self) -> None:
        self.audio.stop_all_sounds()
        draw_wave_cleared(self.display)
        self._sleep(_WAVE_PAUSE_SECONDS)
        count = min(STARTING_ASTEROIDS + self._score // 500, MAX_ASTEROIDS)
        for _ in range(count):
            x, y = self._random_point_clear_of_ship(ASTEROID_SIZE_LARGE * 3.0)
            self._spawn_asteroid(ASTEROID_SIZE_LARGE, x, y)

    def _spawn_asteroid(
        self,
        size: int,
        x: float = -1,
        y: float = -1,
        initial_vx: float = 0.0,
        initial_vy: float = 0.0,
    ) -> None:
        asteroid = next((a for a in self._asteroids if not a.active), None)
        if asteroid is None:
            return
        rng = self._rng

        if x < 0 or y < 0:
            if rng.randrange(0, 2) == 0:
                asteroid.pos.x = float(rng.randrange(0, SCREEN_WIDTH))
                asteroid.pos.y = float(-size if rng.randrange(0, 2) == 0 else SCREEN_HEIGHT + size)
            else:
                asteroid.pos.x = float(-size if rng.randrange(0, 2) == 0 else SCREEN_WIDTH + size)
                asteroid.pos.y = float(rng.randrange(0, SCREEN_HEIGHT))
        else:
            asteroid.pos.x = x
            asteroid.pos.y = y

        if initial_vx == 0 and initial_vy == 0:
            speed = rng.randrange(int(ASTEROID_SPEED_MIN * 100), int(ASTEROID_SPEED_MAX * 100)) / 100.0
            angle = rng.randrange(0, int(200 * math.pi)) / 100.0
            asteroid.vel.x = math.cos(angle) * speed
            asteroid.vel.y = math.sin(angle) * speed
        else:
            speed_variation = rng.randrange(80, 120) / 100.0
            angle_variation = rng.randrange(-25, 26) / 100.0
            parent_angle = math.atan2(initial_vy, initial_vx)
            parent_speed = math.hypot(initial_vx, initial_vy)
            new_speed = max(parent_speed * speed_variation, ASTEROID_SPEED_MIN)
            asteroid.vel.x = math.cos(parent_angle + angle_variation) * new_speed
            asteroid.vel.y = math.sin(parent_angle + angle_variation) * new_speed

        asteroid.angle = 0.0
        asteroid.radius = float(size)
        asteroid.active = True
        asteroid.lifetime = 0
        asteroid.size = size