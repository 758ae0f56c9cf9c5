"""Drawing of the ship, asteroids, bullets and the game's screens."""

from __future__ import annotations

import math
import random
from typing import Iterable, Tuple

from astrolib.display import FrameBuffer
from astrolib.gamedata import GameObject

BLINK_PERIOD_MS = 200


def _round(value: float) -> int:
    """Round half away from zero, as the display coordinates expect."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def rotate_point(cx: float, cy: float, angle: float, x: float, y: float) -> Tuple[float, float]:
    """Rotate ``(x, y)`` about ``(cx, cy)`` by ``angle`` radians."""
    dx = x - cx
    dy = y - cy
    c = math.cos(angle)
    s = math.sin(angle)
    return (dx * c - dy * s + cx, dx * s + dy * c + cy)


def _placed(ship: GameObject, x: float, y: float) -> Tuple[int, int]:
    rx, ry = rotate_point(0.0, 0.0, ship.angle, x, y)
    return (_round(ship.pos.x + rx), _round(ship.pos.y + ry))


def draw_ship(
    display: FrameBuffer,
    ship: GameObject,
    thrusting: bool,
    invincible: bool,
    now_ms: int,
) -> None:
    """Draw the ship as a triangle, with a flame when thrusting.

    While invincible the ship blinks, being hidden on every other 200 ms step.
    """
    if invincible and (now_ms // BLINK_PERIOD_MS) % 2:
        return

    r = ship.radius
    nose = _placed(ship, r + 2, 0.0)
    back_left = _placed(ship, -r, -r + 1)
    back_right = _placed(ship, -r, r - 1)
    display.draw_triangle(*nose, *back_left, *back_right)

    if thrusting:
        flame_a = _placed(ship, -r, -r / 2)
        flame_tip = _placed(ship, -r - 3, 0.0)
        flame_b = _placed(ship, -r, r / 2)
        display.draw_triangle(*flame_a, *flame_tip, *flame_b)


def draw_asteroids(
    display: FrameBuffer,
    asteroids: Iterable[GameObject],
    rng: random.Random,
) -> None:
    """Draw each active asteroid as a jagged closed polygon."""
    for asteroid in asteroids:
        if not asteroid.active:
            continue
        vertex_count = 5 + asteroid.size // 3
        step = 2 * math.pi / vertex_count
        points = []
        for v in range(vertex_count):
            angle = v * step
            reach = asteroid.radius * (rng.randrange(70, 131) / 100.0)
            points.append(
                (
                    asteroid.pos.x + math.cos(angle) * reach,
                    asteroid.pos.y + math.sin(angle) * reach,
                )
            )
        for (x0, y0), (x1, y1) in zip(points, points[1:] + points[:1]):
            display.draw_line(_round(x0), _round(y0), _round(x1), _round(y1))


def draw_bullets(display: FrameBuffer, bullets: Iterable[GameObject]) -> None:
    """Draw each active bullet as a single pixel."""
    for bullet in bullets:
        if bullet.active:
            display.draw_pixel(_round(bullet.pos.x), _round(bullet.pos.y))


def draw_ui(display: FrameBuffer, score: int, high_score: int, lives: int) -> None:
    """Draw the score, the right-aligned high score and the remaining lives."""
    display.set_text_size(1)
    display.set_cursor(1, 1)
    display.print(score)

    hs_text = f"HI:{high_score}"
    width, _ = display.text_bounds(hs_text)
    display.set_cursor(display.width - width - 1, 1)
    display.print(hs_text)

    icon_y = display.height - 6
    for i in range(lives):
        icon_x = 2 + i * 9
        display.draw_triangle(
            icon_x, icon_y - 3,
            icon_x - 3, icon_y + 2,
            icon_x + 3, icon_y + 2,
        )


def draw_start_menu(display: FrameBuffer) -> None:
    """Draw the title screen."""
    display.set_text_size(2)
    display.set_cursor(15, 10)
    display.print("ASTEROIDS")
    display.set_text_size(1)
    display.set_cursor(18, 40)
    display.print("Press Fire Button")
    display.set_cursor(35, 50)
    display.print("to Start")


def draw_game_over(display: FrameBuffer, score: int, high_score: int) -> None:
    """Draw the game-over screen with the final and best scores."""
    display.set_text_size(2)
    display.set_cursor(10, 10)
    display.print("GAME OVER")

    display.set_text_size(1)
    display.set_cursor(25, 35)
    display.print("Score: ")
    display.print(score)

    display.set_cursor(25, 45)
    display.print("High:  ")
    display.print(high_score)

    display.set_cursor(18, 55)
    display.print("Press Fire Button")


def draw_wave_cleared(display: FrameBuffer) -> None:
    """Clear the screen, show the wave-cleared banner and present the frame."""
    display.clear()
    display.set_text_size(1)
    display.set_cursor(30, display.height // 2 - 4)
    display.print("Wave Cleared!")
    display.show()