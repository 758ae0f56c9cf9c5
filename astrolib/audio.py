"""Single-voice buzzer sound effects."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from astrolib.gamedata import (
    SND_EXPLODE_FREQ,
    SND_HYPERSPACE_DURATION,
    SND_HYPERSPACE_FREQ,
    SND_SHOOT_FREQ,
    SND_SHORT_DURATION,
    SND_THRUST_FREQ_HIGH,
    SND_THRUST_FREQ_LOW,
)


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


@dataclass
class ToneOutput:
    """A silent tone sink that records every request made of it.

    Subclass it to drive a real speaker; ``duration`` 0 means a continuous tone.
    """

    events: list = field(default_factory=list)
    frequency: Optional[int] = None

    def tone(self, freq: int, duration: int) -> None:
        self.events.append((freq, duration))
        self.frequency = freq

    def no_tone(self) -> None:
        self.events.append((0, 0))
        self.frequency = None


class AudioEngine:
    """Plays short effects and a continuous thrust tone on one output."""

    def __init__(self, clock: Optional[Callable[[], int]] = None) -> None:
        self._clock = clock or _monotonic_ms
        self._output: Optional[ToneOutput] = None
        self._initialized = False
        self._thrust_active = False
        self._continuous_freq = 0
        self._sound_end_time = 0

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def thrust_active(self) -> bool:
        return self._thrust_active

    @property
    def continuous_frequency(self) -> int:
        return self._continuous_freq

    @property
    def sound_end_time(self) -> int:
        return self._sound_end_time

    def begin(self, output: ToneOutput) -> None:
        self._output = output
        self._stop_tone()
        self._initialized = True

    def _thrust_playing(self) -> bool:
        return SND_THRUST_FREQ_LOW <= self._continuous_freq <= SND_THRUST_FREQ_HIGH

    def _play_tone(self, freq: int, duration: int = 0) -> None:
        if not self._initialized:
            return
        if freq <= 0:
            self._stop_tone()
            return
        self._output.tone(freq, duration)
        if duration > 0:
            self._sound_end_time = self._clock() + duration + 5
            self._continuous_freq = 0
        else:
            self._sound_end_time = 0
            self._continuous_freq = freq

    def _stop_tone(self) -> None:
        if not self._initialized:
            return
        self._output.no_tone()
        self._continuous_freq = 0
        self._sound_end_time = 0

    def play_shoot_sound(self) -> None:
        if not self._initialized:
            return
        if self._thrust_playing():
            self._stop_tone()
        self._play_tone(SND_SHOOT_FREQ, SND_SHORT_DURATION)

    def play_explosion_sound(self) -> None:
        if not self._initialized:
            return
        self._thrust_active = False
        if self._thrust_playing():
            self._stop_tone()
        self._play_tone(SND_EXPLODE_FREQ, SND_SHORT_DURATION * 2)

    def play_hyperspace_sound(self) -> None:
        if not self._initialized:
            return
        self._thrust_active = False
        if self._thrust_playing():
            self._stop_tone()
        self._play_tone(SND_HYPERSPACE_FREQ, SND_HYPERSPACE_DURATION)

    def start_thrust_sound(self, intensity: float = 1.0) -> None:
        """Start the thrust tone, pitched by ``intensity`` in [0, 1]."""
        if not self._initialized or self._thrust_active:
            return
        self._thrust_active = True
        intensity = max(0.0, min(1.0, intensity))
        freq = SND_THRUST_FREQ_LOW + int((SND_THRUST_FREQ_HIGH - SND_THRUST_FREQ_LOW) * intensity)
        if self._sound_end_time == 0 or self._clock() >= self._sound_end_time:
            self._play_tone(freq, 0)

    def stop_thrust_sound(self) -> None:
        if not self._initialized or not self._thrust_active:
            return
        self._thrust_active = False
        if self._thrust_playing():
            self._stop_tone()

    def stop_all_sounds(self) -> None:
        self._thrust_active = False
        self._stop_tone()

    def update(self) -> None:
        """Expire finished short sounds; call once per frame."""
        if not self._initialized:
            return
        now = self._clock()
        if self._sound_end_time > 0 and now >= self._sound_end_time:
            self._continuous_freq = 0
            self._sound_end_time = 0
            if self._thrust_active:
                self.start_thrust_sound(1.0)
        elif self._thrust_active and self._continuous_freq == 0 and self._sound_end_time == 0:
            self.start_thrust_sound(1.0)