"""Decorative particle field drawn behind the roulette."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Optional

from rich.text import Text
from textual.widget import Widget

TICK_SECONDS = 0.1
AMBIENT_INITIAL = 20
AMBIENT_STAGGER_SECONDS = 0.2
AMBIENT_EVERY_SECONDS = 2.0


@dataclass
class Particle:
    """A particle in normalized coordinates (0..1 on both axes)."""

    x: float
    y: float
    lifetime: float
    vx: float = 0.0
    vy: float = 0.0
    age: float = 0.0
    burst: bool = False

    @property
    def alive(self) -> bool:
        return self.age < self.lifetime

    def step(self, dt: float) -> None:
        self.age += dt
        self.x += self.vx * dt
        self.y += self.vy * dt


def spawn_ambient(rng: random.Random) -> Particle:
    """A slow floating particle living 4 to 8 seconds."""
    return Particle(
        x=rng.random(),
        y=rng.random(),
        lifetime=4.0 + rng.random() * 4.0,
        vy=-0.02 - rng.random() * 0.03,
    )


def spawn_burst(count: int, rng: random.Random) -> list[Particle]:
    """Particles flying out of the center, evenly spread by angle, for one second."""
    particles = []
    for i in range(count):
        angle = (i / count) * math.pi * 2
        velocity = 0.25 + rng.random() * 0.25
        particles.append(
            Particle(
                x=0.5,
                y=0.5,
                lifetime=1.0,
                vx=math.cos(angle) * velocity,
                vy=math.sin(angle) * velocity,
                burst=True,
            )
        )
    return particles


class ParticleField(Widget):
    """Ambient floating particles plus bursts on spin events."""

    DEFAULT_CSS = """
    ParticleField {
        height: 5;
        width: 100%;
        color: $error;
    }
    """

    def __init__(self, rng: Optional[random.Random] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self._rng = rng or random.Random()
        self.particles: list[Particle] = []

    def on_mount(self) -> None:
        """Start the animation clock and seed the ambient particles."""
        for i in range(AMBIENT_INITIAL):
            self.set_timer(i * AMBIENT_STAGGER_SECONDS, self.add_ambient)
        self.set_interval(AMBIENT_EVERY_SECONDS, self.add_ambient)
        self.set_interval(TICK_SECONDS, self._tick)

    def add_ambient(self) -> None:
        self.particles.append(spawn_ambient(self._rng))

    def burst(self, count: int = 30) -> None:
        """Throw ``count`` particles out of the center."""
        self.particles.extend(spawn_burst(count, self._rng))
        self.refresh()

    def _tick(self) -> None:
        for particle in self.particles:
            particle.step(TICK_SECONDS)
        self.particles = [
            p for p in self.particles if p.alive and 0.0 <= p.x <= 1.0 and 0.0 <= p.y <= 1.0
        ]
        self.refresh()

    def render(self) -> Text:
        width = max(self.size.width, 1)
        height = max(self.size.height, 1)
        grid = [[" "] * width for _ in range(height)]
        for p in self.particles:
            col = min(int(p.x * width), width - 1)
            row = min(int(p.y * height), height - 1)
            grid[row][col] = "*" if p.burst else "·"
        return Text("\n".join("".join(row) for row in grid))
