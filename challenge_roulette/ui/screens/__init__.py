"""UI Screens."""

from .roulette import RouletteScreen

__all__ = ["RouletteScreen"]
