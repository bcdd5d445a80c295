"""
Tone synthesis and playback for the roulette.

Tones are plain sine waves whose gain starts at 0.1 and ramps exponentially
down to 0.01 over the tone's duration. Samples are packed as signed 16-bit
stereo PCM that pygame.mixer.Sound accepts through the buffer protocol.

Sound design:
    slide:  400 + 50 Hz per slide index, 150 ms (navigation tick)
    spin:   600 700 800 900 1000 Hz, 200 ms each, every 500 ms
    finish: 1200 Hz, 500 ms, 2.8 s after the spin starts
"""

from __future__ import annotations

import math
import struct
from typing import Optional

import pygame
import structlog

logger = structlog.get_logger(__name__)

_SAMPLE_RATE = 22050
_MAX_AMP = 32767  # int16 max

START_GAIN = 0.1
END_GAIN = 0.01

SPIN_TONES = (600, 700, 800, 900, 1000)
SPIN_TONE_INTERVAL_MS = 500
SPIN_TONE_MS = 200
FINISH_TONE = 1200
FINISH_TONE_MS = 500
FINISH_DELAY_MS = 2800


def slide_frequency(index: int) -> float:
    """Frequency of the tick played when landing on a slide."""
    return 400.0 + index * 50.0


def sine_tone(frequency: float, duration_ms: int, sample_rate: int = _SAMPLE_RATE) -> list[float]:
    """Generate a sine tone with an exponential gain ramp.

    Args:
        frequency: Frequency in Hz.
        duration_ms: Duration in milliseconds.
        sample_rate: Samples per second.

    Returns:
        List of float samples in [-START_GAIN, START_GAIN].
    """
    n = int(sample_rate * duration_ms / 1000)
    if n <= 0:
        return []
    decay = math.log(END_GAIN / START_GAIN)
    samples = []
    for i in range(n):
        gain = START_GAIN * math.exp(decay * i / n)
        samples.append(gain * math.sin(2 * math.pi * frequency * i / sample_rate))
    return samples


def pack_pcm(samples: list[float]) -> bytes:
    """Pack float samples [-1.0, 1.0] into signed 16-bit stereo PCM bytes."""
    buf = []
    for s in samples:
        v = int(max(-1.0, min(1.0, s)) * _MAX_AMP)
        buf.append(struct.pack("<hh", v, v))  # L + R
    return b"".join(buf)


def spin_schedule() -> list[tuple[int, float, int]]:
    """Tones played during a spin as ``(delay_ms, frequency, duration_ms)``."""
    schedule = [
        (i * SPIN_TONE_INTERVAL_MS, float(freq), SPIN_TONE_MS)
        for i, freq in enumerate(SPIN_TONES)
    ]
    schedule.append((FINISH_DELAY_MS, float(FINISH_TONE), FINISH_TONE_MS))
    return schedule


class TonePlayer:
    """Plays synthesized tones through pygame.mixer.

    A silent no-op when disabled or when the mixer cannot be initialised.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._available = False
        self._cache: dict[tuple[float, int], "pygame.mixer.Sound"] = {}

    @property
    def available(self) -> bool:
        return self._available

    def init(self) -> None:
        """Initialise pygame.mixer. Safe to call multiple times."""
        if not self.enabled or self._available:
            return
        try:
            pygame.mixer.pre_init(_SAMPLE_RATE, -16, 2, 512)
            pygame.mixer.init()
            self._available = True
        except pygame.error as e:
            logger.debug("audio_unavailable", error=str(e))
            self._available = False

    def play(self, frequency: float, duration_ms: int = 100) -> None:
        """Play a tone. Silent no-op if audio is unavailable."""
        if not self._available:
            return
        key = (frequency, duration_ms)
        sound: Optional[pygame.mixer.Sound] = self._cache.get(key)
        if sound is None:
            sound = pygame.mixer.Sound(buffer=pack_pcm(sine_tone(frequency, duration_ms)))
            self._cache[key] = sound
        sound.play()

    def quit(self) -> None:
        """Shut down pygame.mixer."""
        if self._available:
            pygame.mixer.quit()
            self._available = False
            self._cache.clear()
