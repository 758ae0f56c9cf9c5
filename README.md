# astrolib

An Asteroids-style arcade game engine for a 128×64 monochrome display. It runs the game
logic: ship, bullets, asteroids, waves, lives and hyperspace. It also provides
single-voice buzzer sound effects, a persistent high score and drawing into an in-memory
frame buffer. Your program supplies the inputs, the clock and the outputs.

## Installation

```
pip install astrolib
```

Python 3.10 or later is required. The package has no runtime dependencies.

## Modules

- `astrolib.gamedata` holds the screen size (`SCREEN_WIDTH`, `SCREEN_HEIGHT`), the
  tuning and timing constants, and these types:
  - `GameState`, which is `START`, `GAME` or `GAME_OVER`.
  - `Vector2D`.
  - `GameObject`, with `distance_squared(other)` and `collides_with(other)`. Two
    objects collide when their collision circles overlap.
- `astrolib.audio` holds `AudioEngine`, which drives a `ToneOutput`.
  - An output is any object with `tone(freq, duration)` and `no_tone()`. A duration of
    0 means the tone plays until it is stopped.
  - `ToneOutput` is a silent output that records each request in `events` and the
    current pitch in `frequency`. Subclass it to drive a real speaker.
  - The engine plays shoot, explosion and hyperspace effects and a continuous thrust
    tone. Call `update()` once per frame so that finished effects expire and the thrust
    tone resumes.
- `astrolib.storage` holds the high-score stores.
  - `MemoryStore` keeps the high score in memory.
  - `HighScoreStore(path)` keeps it in a JSON file, under the key `highScore` in an
    `AstroLib` section. The file is replaced atomically on save. A missing or unreadable
    file loads as 0.
- `astrolib.display` holds `FrameBuffer(width, height)`, a 1-bit canvas.
  - Drawing: `draw_pixel`, `draw_line` and `draw_triangle`.
  - Text: `set_text_size`, `set_cursor`, `print` and `text_bounds`. Text is laid out in
    6×8 cells per size unit.
  - Reading back: `pixel(x, y)` and `lit_pixel_count`.
  - `clear()` empties the canvas.
  - `show()` latches the current pixels into `frame` as bytes, one per pixel, row by
    row. It latches the text runs into `frame_texts` and counts calls in
    `frames_shown`. It returns nothing.
- `astrolib.render` holds the drawing functions: `rotate_point`, `draw_ship`,
  `draw_asteroids`, `draw_bullets`, `draw_ui`, `draw_start_menu`, `draw_game_over` and
  `draw_wave_cleared`. While the ship is invincible it blinks in 200 ms steps.
- `astrolib.game` holds `AstroLib`, the game itself.

## Usage

```python
import random
import time

from astrolib.audio import ToneOutput
from astrolib.display import FrameBuffer
from astrolib.game import AstroLib
from astrolib.storage import HighScoreStore

display = FrameBuffer()
game = AstroLib(
    display,
    HighScoreStore("highscore.json"),
    lambda: int(time.monotonic() * 1000),  # clock in milliseconds
    random.Random(),
    time.sleep,                            # used for the pause between waves
)
game.attach_hyperspace_button(lambda: False)  # returns True while pressed
game.begin(ToneOutput())

while True:
    # Joystick axes run from 0 to 4095 and rest at 2048.
    # Pushing the stick up (a lower Y value) thrusts.
    game.update(2048, 2048, False)
    game.draw()
    frame = display.frame  # bytes, one per pixel, row by row
    time.sleep(1 / 60)
```

Every argument of `AstroLib` is optional. The defaults are:

- a fresh `FrameBuffer`,
- a `MemoryStore`,
- a monotonic millisecond clock,
- a new `random.Random`,
- `time.sleep`.

`begin()` without an argument uses a silent `ToneOutput`. `attach_fire_button(reader)`
adds a second fire button next to the joystick button. Passing `None` to either attach
method detaches the button.

### Game flow

The game starts on the start screen, and fire starts play. Scoring works like this:

- A large asteroid is worth 20 points and splits into two medium ones.
- A medium asteroid is worth 50 points and splits into two small ones.
- A small asteroid is worth 100 points.

When a wave is cleared the game does three things:

1. It shows "Wave Cleared!".
2. It pauses for 1.5 seconds through the sleep function.
3. It spawns `3 + score // 500` large asteroids, at most 10.

Hyperspace has a 5-second cooldown. When the last life is lost the game-over screen
appears, and fire returns to the start screen. A final score above the high score is
saved through the store. `reset_high_score()` sets it back to zero and saves it.

### Reading game state

`AstroLib` exposes these read-only properties:

- `state`, `score`, `high_score` and `lives`,
- `ship`, `bullets` and `asteroids`,
- `is_thrusting`,
- `display` and `audio`.

High-score loads and saves, and new high scores, are logged through the standard
`logging` module under `astrolib.game`.

## What it does not do

The package has no command and no main loop of its own. It opens no window and drives no
real screen. Text is kept as placed runs in `FrameBuffer.texts`; no glyphs are drawn into
pixels. It makes no sound of its own and reads no joystick or buttons. All of these come
from the program that uses it, through the display, tone output, button readers and
`update()` arguments.

## Tests

```
pip install astrolib[test]
pytest
```