"""A monochrome frame buffer with a small drawing and text API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from astrolib.gamedata import SCREEN_HEIGHT, SCREEN_WIDTH

GLYPH_WIDTH = 6
GLYPH_HEIGHT = 8


@dataclass(frozen=True)
class TextRun:
    """A run of text placed on one line at a pixel position."""

    x: int
    y: int
    size: int
    text: str


class FrameBuffer:
    """An off-screen one-bit display.

    Graphics are drawn as pixels; text is laid out in 6x8 cells per size
    unit and kept as a list of placed runs.
    """

    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("display dimensions must be positive")
        self.width = width
        self.height = height
        self.wrap = True
        self._pixels = bytearray(width * height)
        self.texts: list[TextRun] = []
        self._text_size = 1
        self._cursor = (0, 0)
        self.frame: Optional[bytes] = None
        self.frame_texts: tuple = ()
        self.frames_shown = 0

    @property
    def cursor(self) -> tuple:
        return self._cursor

    @property
    def text_size(self) -> int:
        return self._text_size

    @property
    def lit_pixel_count(self) -> int:
        return sum(self._pixels)

    def clear(self) -> None:
        self._pixels = bytearray(self.width * self.height)
        self.texts = []

    def pixel(self, x: int, y: int) -> bool:
        """Whether the pixel is lit; positions off the screen read as unlit."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return bool(self._pixels[y * self.width + x])
        return False

    def draw_pixel(self, x: int, y: int) -> None:
        x, y = int(x), int(y)
        if 0 <= x < self.width and 0 <= y < self.height:
            self._pixels[y * self.width + x] = 1

    def draw_line(self, x0: int, y0: int, x1: int, y1: int) -> None:
        x0, y0, x1, y1 = int(x0), int(y0), int(x1), int(y1)
        steep = abs(y1 - y0) > abs(x1 - x0)
        if steep:
            x0, y0 = y0, x0
            x1, y1 = y1, x1
        if x0 > x1:
            x0, x1 = x1, x0
            y0, y1 = y1, y0
        dx = x1 - x0
        dy = abs(y1 - y0)
        err = dx // 2
        ystep = 1 if y0 < y1 else -1
        y = y0
        for x in range(x0, x1 + 1):
            if steep:
                self.draw_pixel(y, x)
            else:
                self.draw_pixel(x, y)
            err -= dy
            if err < 0:
                y += ystep
                err += dx

    def draw_triangle(self, x0: int, y0: int, x1: int, y1: int, x2: int, y2: int) -> None:
        self.draw_line(x0, y0, x1, y1)
        self.draw_line(x1, y1, x2, y2)
        self.draw_line(x2, y2, x0, y0)

    def set_text_size(self, size: int) -> None:
        self._text_size = size if size > 0 else 1

    def set_cursor(self, x: int, y: int) -> None:
        self._cursor = (int(x), int(y))

    def print(self, text) -> None:
        """Lay out ``text`` at the cursor and advance the cursor past it."""
        text = str(text)
        step = GLYPH_WIDTH * self._text_size
        line = GLYPH_HEIGHT * self._text_size
        x, y = self._cursor
        start = (x, y)
        chars: list[str] = []

        def flush() -> None:
            if chars:
                self.texts.append(TextRun(start[0], start[1], self._text_size, "".join(chars)))
                chars.clear()

        for ch in text:
            if ch == "\n":
                flush()
                x, y = 0, y + line
                start = (x, y)
            elif ch == "\r":
                continue
            else:
                if self.wrap and x + step > self.width:
                    flush()
                    x, y = 0, y + line
                    start = (x, y)
                chars.append(ch)
                x += step
        flush()
        self._cursor = (x, y)

    def text_bounds(self, text) -> tuple:
        """Width and height in pixels that ``text`` takes when printed at the left edge."""
        step = GLYPH_WIDTH * self._text_size
        line = GLYPH_HEIGHT * self._text_size
        x = y = 0
        width = height = 0
        for ch in str(text):
            if ch == "\n":
                x, y = 0, y + line
            elif ch == "\r":
                continue
            else:
                if self.wrap and x + step > self.width:
                    x, y = 0, y + line
                x += step
                width = max(width, x)
                height = max(height, y + line)
        return (width, height)

    def show(self) -> None:
        """Latch the current buffer and text as the visible frame."""
        self.frame = bytes(self._pixels)
        self.frame_texts = tuple(self.texts)
        self.frames_shown += 1