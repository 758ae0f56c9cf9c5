import math
import random

import pytest

from astrolib.audio import ToneOutput
from astrolib.display import FrameBuffer
from astrolib.game import AstroLib
from astrolib.gamedata import (
    ASTEROID_SIZE_LARGE,
    ASTEROID_SIZE_MEDIUM,
    ASTEROID_SIZE_SMALL,
    ASTEROID_SPEED_MIN,
    BULLET_SPEED,
    INVINCIBILITY_DURATION,
    JOYSTICK_CENTER,
    JOYSTICK_DEAD_ZONE,
    JOYSTICK_MAX_THROW,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    SHIP_COLLISION_RADIUS,
    SHIP_TURN_SPEED,
    SND_EXPLODE_FREQ,
    SND_HYPERSPACE_DURATION,
    SND_HYPERSPACE_FREQ,
    SND_SHOOT_FREQ,
    SND_SHORT_DURATION,
    SND_THRUST_FREQ_HIGH,
    STARTING_ASTEROIDS,
    GameState,
)
from astrolib.storage import HighScoreStore, MemoryStore

CENTRE_X = SCREEN_WIDTH / 2.0
CENTRE_Y = SCREEN_HEIGHT / 2.0


class FakeClock:
    def __init__(self, now=10_000):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


class Rig:
    def __init__(self, store=None, seed=1):
        self.clock = FakeClock()
        self.sleeps = []
        self.display = FrameBuffer()
        self.store = store if store is not None else MemoryStore()
        self.tone = ToneOutput()
        self.game = AstroLib(
            self.display, self.store, self.clock, random.Random(seed), self.sleeps.append
        )
        self.game.begin(self.tone)

    def step(self, joy_x=JOYSTICK_CENTER, joy_y=JOYSTICK_CENTER, fire=False, ms=20):
        self.clock.advance(ms)
        self.game.update(joy_x, joy_y, fire)

    def start(self):
        self.step()
        self.step(fire=True)


def place(asteroid, x, y, size):
    asteroid.active = True
    asteroid.pos.x, asteroid.pos.y = float(x), float(y)
    asteroid.vel.x, asteroid.vel.y = 0.0, 0.0
    asteroid.radius = float(size)
    asteroid.size = size


def clear_field(game):
    """Leave one motionless asteroid far from the ship so the wave never clears."""
    for asteroid in game.asteroids:
        asteroid.active = False
    place(game.asteroids[1], 110, 56, ASTEROID_SIZE_SMALL)


def texts(display):
    return [run.text for run in display.frame_texts]


def test_begin_loads_stored_high_score():
    rig = Rig(store=MemoryStore(1234))
    assert rig.game.high_score == 1234
    assert rig.game.state is GameState.START


def test_fire_starts_game_after_release():
    rig = Rig(store=MemoryStore())
    rig.step(fire=True)
    assert rig.game.state is GameState.START
    rig.step()
    rig.step(fire=True)
    assert rig.game.state is GameState.GAME


def test_digital_fire_button_starts_game():
    rig = Rig(store=MemoryStore())
    pressed = {"fire": False}
    rig.game.attach_fire_button(lambda: pressed["fire"])
    rig.step()
    pressed["fire"] = True
    rig.step()
    assert rig.game.state is GameState.GAME


def test_new_game_layout():
    rig = Rig(store=MemoryStore())
    rig.start()
    game = rig.game
    assert game.lives == 3
    assert game.score == 0
    active = [a for a in game.asteroids if a.active]
    assert len(active) == STARTING_ASTEROIDS
    assert all(a.size == ASTEROID_SIZE_LARGE for a in active)
    assert game.ship.active
    assert game.ship.radius == SHIP_COLLISION_RADIUS
    assert math.isclose(game.ship.angle, -math.pi / 2)


def test_fire_creates_bullet_from_nose():
    rig = Rig(store=MemoryStore())
    rig.start()
    clear_field(rig.game)
    rig.step()
    rig.step(fire=True)
    bullets = [b for b in rig.game.bullets if b.active]
    assert len(bullets) == 1
    assert math.isclose(bullets[0].vel.y, -BULLET_SPEED)
    assert abs(bullets[0].vel.x) < 1e-9
    assert bullets[0].pos.y < CENTRE_Y
    assert (SND_SHOOT_FREQ, SND_SHORT_DURATION) in rig.tone.events


def test_fire_needs_fresh_press_and_debounce():
    rig = Rig(store=MemoryStore())
    rig.start()
    clear_field(rig.game)
    rig.step()
    rig.step(fire=True)
    rig.step(fire=True)
    assert sum(b.active for b in rig.game.bullets) == 1
    rig.step()
    rig.step(fire=True)
    assert sum(b.active for b in rig.game.bullets) == 1
    rig.step(ms=200)
    rig.step(fire=True)
    assert sum(b.active for b in rig.game.bullets) == 2


def test_bullet_expires_after_lifetime():
    rig = Rig(store=MemoryStore())
    rig.start()
    clear_field(rig.game)
    rig.step()
    rig.step(fire=True)
    bullet = next(b for b in rig.game.bullets if b.active)
    for _ in range(38):
        rig.step()
    assert bullet.active
    rig.step()
    assert not bullet.active


@pytest.mark.parametrize(
    "size, points, fragment_size, fragments",
    [
        (ASTEROID_SIZE_LARGE, 20, ASTEROID_SIZE_MEDIUM, 2),
        (ASTEROID_SIZE_MEDIUM, 50, ASTEROID_SIZE_SMALL, 2),
        (ASTEROID_SIZE_SMALL, 100, None, 0),
    ],
)
def test_bullet_breaks_asteroid(size, points, fragment_size, fragments):
    rig = Rig(store=MemoryStore())
    rig.start()
    game = rig.game
    clear_field(game)
    place(game.asteroids[0], 20, 20, size)
    bullet = game.bullets[0]
    bullet.active = True
    bullet.pos.x, bullet.pos.y = 20.0, 20.0
    bullet.vel.x, bullet.vel.y = 0.0, 0.0
    bullet.radius = 1.0
    bullet.lifetime = 10
    rig.step()
    assert game.score == points
    assert not bullet.active
    pieces = [a for i, a in enumerate(game.asteroids) if a.active and i != 1]
    assert len(pieces) == fragments
    for piece in pieces:
        assert piece.size == fragment_size
        assert piece.radius == float(fragment_size)
        assert math.isclose(piece.pos.x, 20.0) and math.isclose(piece.pos.y, 20.0)
        assert math.hypot(piece.vel.x, piece.vel.y) >= ASTEROID_SPEED_MIN - 1e-9


def test_ship_hit_loses_life_and_respawns():
    rig = Rig(store=MemoryStore())
    rig.start()
    game = rig.game
    clear_field(game)
    game.ship.pos.x += 5
    place(game.asteroids[0], game.ship.pos.x, game.ship.pos.y, ASTEROID_SIZE_LARGE)
    rig.step(ms=INVINCIBILITY_DURATION + 1)
    assert game.lives == 2
    assert not game.asteroids[0].active
    assert (game.ship.pos.x, game.ship.pos.y) == (CENTRE_X, CENTRE_Y)
    assert game.ship.lifetime == INVINCIBILITY_DURATION
    assert (SND_EXPLODE_FREQ, SND_SHORT_DURATION * 2) in rig.tone.events


def test_invincible_ship_is_not_hit():
    rig = Rig(store=MemoryStore())
    rig.start()
    game = rig.game
    clear_field(game)
    place(game.asteroids[0], CENTRE_X, CENTRE_Y, ASTEROID_SIZE_LARGE)
    rig.step()
    assert game.lives == 3
    assert game.asteroids[0].active


def test_game_over_saves_high_score_and_restarts(tmp_path):
    path = tmp_path / "scores.json"
    rig = Rig(store=HighScoreStore(path))
    rig.start()
    game = rig.game
    clear_field(game)
    place(game.asteroids[0], 20, 20, ASTEROID_SIZE_SMALL)
    bullet = game.bullets[0]
    bullet.active = True
    bullet.pos.x, bullet.pos.y = 20.0, 20.0
    bullet.radius = 1.0
    bullet.lifetime = 10
    rig.step()
    earned = game.score
    assert earned > 0

    for _ in range(3):
        place(game.asteroids[0], game.ship.pos.x, game.ship.pos.y, ASTEROID_SIZE_LARGE)
        rig.step(ms=INVINCIBILITY_DURATION + 1)

    assert game.state is GameState.GAME_OVER
    assert not game.ship.active
    assert game.high_score == earned
    assert HighScoreStore(path).load() == earned
    assert rig.tone.frequency is None

    reloaded = Rig(store=HighScoreStore(path))
    assert reloaded.game.high_score == earned

    rig.step()
    rig.step(fire=True)
    assert game.state is GameState.START
    rig.start()
    assert game.state is GameState.GAME
    assert game.score == 0
    assert game.lives == 3


def test_cleared_wave_spawns_new_asteroids():
    rig = Rig(store=MemoryStore())
    rig.start()
    game = rig.game
    for asteroid in game.asteroids:
        asteroid.active = False
    rig.clock.advance(20)
    game.update(JOYSTICK_CENTER, JOYSTICK_CENTER, False)
    assert rig.sleeps == [1.5]
    assert "Wave Cleared!" in texts(rig.display)
    active = [a for a in game.asteroids if a.active]
    assert len(active) == STARTING_ASTEROIDS
    for asteroid in active:
        assert asteroid.size == ASTEROID_SIZE_LARGE
        distance = math.hypot(asteroid.pos.x - game.ship.pos.x, asteroid.pos.y - game.ship.pos.y)
        assert distance >= ASTEROID_SIZE_LARGE * 3.0


def test_hyperspace_jumps_and_respects_cooldown():
    rig = Rig(store=MemoryStore())
    game = rig.game
    pressed = {"jump": False}
    game.attach_hyperspace_button(lambda: pressed["jump"])
    rig.start()
    clear_field(game)
    rig.step()
    pressed["jump"] = True
    rig.clock.advance(20)
    game.update(JOYSTICK_CENTER, JOYSTICK_CENTER, False)
    margin = int(SHIP_COLLISION_RADIUS * 2)
    ship = game.ship
    assert margin <= ship.pos.x < SCREEN_WIDTH - margin
    assert margin <= ship.pos.y < SCREEN_HEIGHT - margin
    assert ship.pos.x.is_integer() and ship.pos.y.is_integer()
    assert (ship.vel.x, ship.vel.y) == (0.0, 0.0)
    jump = (SND_HYPERSPACE_FREQ, SND_HYPERSPACE_DURATION)
    assert rig.tone.events.count(jump) == 1

    where = (ship.pos.x, ship.pos.y)
    pressed["jump"] = False
    rig.step()
    pressed["jump"] = True
    rig.step()
    assert (ship.pos.x, ship.pos.y) == where
    assert rig.tone.events.count(jump) == 1


def test_full_right_stick_turns_ship():
    rig = Rig(store=MemoryStore())
    rig.start()
    clear_field(rig.game)
    rig.clock.advance(20)
    rig.game.update(JOYSTICK_CENTER + JOYSTICK_MAX_THROW, JOYSTICK_CENTER, False)
    expected = (-math.pi / 2 + SHIP_TURN_SPEED) % (2 * math.pi)
    assert math.isclose(rig.game.ship.angle, expected)


def test_stick_inside_dead_zone_does_not_turn():
    rig = Rig(store=MemoryStore())
    rig.start()
    clear_field(rig.game)
    rig.clock.advance(20)
    rig.game.update(JOYSTICK_CENTER + JOYSTICK_DEAD_ZONE, JOYSTICK_CENTER, False)
    assert rig.game.ship.angle == -math.pi / 2


def test_angle_stays_in_range_while_turning():
    rig = Rig(store=MemoryStore())
    rig.start()
    clear_field(rig.game)
    for _ in range(100):
        rig.clock.advance(20)
        rig.game.update(0, JOYSTICK_CENTER, False)
        assert 0 <= rig.game.ship.angle < 2 * math.pi


def test_thrust_moves_ship_and_plays_tone():
    rig = Rig(store=MemoryStore())
    rig.start()
    clear_field(rig.game)
    rig.clock.advance(20)
    rig.game.update(JOYSTICK_CENTER, 0, False)
    assert rig.game.is_thrusting
    assert rig.game.ship.vel.y < 0
    assert rig.tone.frequency == SND_THRUST_FREQ_HIGH
    rig.clock.advance(20)
    rig.game.update(JOYSTICK_CENTER, JOYSTICK_CENTER, False)
    assert not rig.game.is_thrusting
    assert rig.tone.frequency is None


def test_draw_start_screen():
    rig = Rig(store=MemoryStore())
    rig.game.draw()
    assert "ASTEROIDS" in texts(rig.display)
    assert rig.display.frames_shown == 1


def test_draw_game_screen_shows_scores():
    rig = Rig(store=MemoryStore(700))
    rig.start()
    rig.game.draw()
    shown = texts(rig.display)
    assert "0" in shown
    assert "HI:700" in shown
    assert rig.display.lit_pixel_count > 0


def test_reset_high_score_saves_zero():
    store = MemoryStore(500)
    rig = Rig(store=store)
    rig.game.reset_high_score()
    assert rig.game.high_score == 0
    assert store.load() == 0